from __future__ import annotations

import unicodedata
from datetime import datetime, timezone
from typing import Iterable, List, Optional

import bcrypt

from scout_desk.core.logger import get_logger
from scout_desk.schemas.user import RegistrationRequest, User, UserPublic, UserRole, UserStatus
from scout_desk.services.repository import EntityRepository

logger = get_logger(__name__)


class RegistrationError(ValueError):
    pass


class AuthenticationError(ValueError):
    pass


class PendingApprovalError(AuthenticationError):
    pass


class UserNotFound(LookupError):
    pass


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        return False


def _slug(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return "".join(stripped.split()).lower()


def make_username(first_name: str, last_name: str) -> str:
    """``firstname.lastname`` in lower case, accents and spaces removed."""
    return f"{_slug(first_name)}.{_slug(last_name)}"


def build_new_user(request: RegistrationRequest, existing: Iterable[User], now: Optional[datetime] = None) -> User:
    """Validate a registration against the current users and build the record."""
    first = request.first_name.strip()
    last = request.last_name.strip()
    if not first or not last:
        raise RegistrationError("First and last name are required")
    if not request.password:
        raise RegistrationError("Password is required")
    if request.password != request.password_confirmation:
        raise RegistrationError("Passwords do not match")

    existing = list(existing)
    username = make_username(first, last)
    if any(u.username.lower() == username for u in existing):
        raise RegistrationError(f"Username '{username}' is already taken")

    # The very first account bootstraps the department as admin
    is_first = len(existing) == 0
    return User(
        first_name=first,
        last_name=last,
        username=username,
        name=f"{first} {last}",
        email=request.email or None,
        password_hash=hash_password(request.password),
        role=UserRole.ADMIN if is_first else UserRole.SCOUT,
        status=UserStatus.APPROVED if is_first else UserStatus.PENDING,
        created_at=now or datetime.now(timezone.utc),
    )


class UserService:
    def __init__(self, repo: EntityRepository[User]) -> None:
        self.repo = repo

    def register(self, request: RegistrationRequest) -> UserPublic:
        # A failed read must not make a newcomer look like the first account
        user = build_new_user(request, self.repo.list_strict())
        self.repo.upsert(user)
        logger.info("Registered user %s as %s/%s", user.username, user.role.value, user.status.value)
        return user.public()

    def authenticate(self, username: str, password: str) -> UserPublic:
        wanted = username.strip().lower()
        user = next((u for u in self.repo.list() if u.username.lower() == wanted), None)
        if user is None or not user.password_hash or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid username or password")
        if user.status == UserStatus.PENDING:
            raise PendingApprovalError("Access is pending approval by an administrator")
        return user.public()

    def pending(self) -> List[UserPublic]:
        return [u.public() for u in self.repo.list() if u.status == UserStatus.PENDING]

    def _get(self, user_id: str) -> User:
        user = next((u for u in self.repo.list() if u.id == user_id), None)
        if user is None:
            raise UserNotFound(f"User {user_id} not found")
        return user

    def approve(self, user_id: str) -> UserPublic:
        user = self._get(user_id).model_copy(update={"status": UserStatus.APPROVED})
        self.repo.upsert(user)
        return user.public()

    def reject(self, user_id: str) -> None:
        self._get(user_id)
        self.repo.delete(user_id)

    def update(self, user_id: str, first_name: Optional[str] = None, last_name: Optional[str] = None,
               email: Optional[str] = None, role: Optional[UserRole] = None) -> UserPublic:
        user = self._get(user_id)
        changes = {}
        if first_name:
            changes["first_name"] = first_name.strip()
        if last_name:
            changes["last_name"] = last_name.strip()
        if email is not None:
            changes["email"] = email or None
        if role is not None:
            changes["role"] = UserRole(role)
        updated = user.model_copy(update=changes)
        updated = updated.model_copy(update={"name": f"{updated.first_name} {updated.last_name}"})
        self.repo.upsert(updated)
        return updated.public()
