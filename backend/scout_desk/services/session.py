from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

import jwt
from pydantic import ValidationError

from scout_desk.core.logger import get_logger
from scout_desk.schemas.user import UserPublic
from scout_desk.services.kv_store import KeyValueStore

logger = get_logger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = 7


class SessionStore:
    """Signed bearer tokens, each backed by a cached copy of its viewer.

    The cached user is restored as-is: approval and role are not re-checked
    against the remote store, so a revoked account keeps working until its
    token is logged out or expires.
    """

    def __init__(
        self,
        store: KeyValueStore,
        secret: str,
        key: str = "pvfc_auth_session",
        expire_days: int = ACCESS_TOKEN_EXPIRE_DAYS,
    ) -> None:
        self.store = store
        self.secret = secret
        self.key = key
        self.expire_days = expire_days

    def _key(self, session_id: str) -> str:
        return f"{self.key}_{session_id}"

    def _claims(self, token: str) -> Optional[Dict[str, Any]]:
        try:
            claims = jwt.decode(token, self.secret, algorithms=[ALGORITHM])
        except jwt.PyJWTError:
            return None
        if not claims.get("sid") or not claims.get("sub"):
            return None
        return claims

    def open(self, user: UserPublic, now: Optional[datetime] = None) -> str:
        """Cache the user under a fresh session id and return its token."""
        now = now or datetime.now(timezone.utc)
        session_id = uuid4().hex
        self.store.set(self._key(session_id), user.model_dump(mode="json"))
        payload = {
            "sub": user.id,
            "sid": session_id,
            "role": user.role.value,
            "iat": now,
            "exp": now + timedelta(days=self.expire_days),
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def restore(self, token: str) -> Optional[UserPublic]:
        claims = self._claims(token)
        if claims is None:
            return None
        raw = self.store.get(self._key(claims["sid"]))
        if raw is None:
            return None
        try:
            user = UserPublic.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding unreadable cached session")
            self.store.delete(self._key(claims["sid"]))
            return None
        if user.id != claims["sub"]:
            return None
        logger.warning("Restored cached session for %s without re-validation", user.username)
        return user

    def save(self, token: str, user: UserPublic) -> None:
        """Replace the cached viewer behind an existing token."""
        claims = self._claims(token)
        if claims is not None:
            self.store.set(self._key(claims["sid"]), user.model_dump(mode="json"))

    def close(self, token: str) -> None:
        claims = self._claims(token)
        if claims is not None:
            self.store.delete(self._key(claims["sid"]))
