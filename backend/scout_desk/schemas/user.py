from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    ADMIN = "admin"
    SCOUT = "scout"


class UserStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"


class UserPublic(BaseModel):
    id: str
    first_name: str
    last_name: str
    username: str
    name: str
    email: Optional[str] = None
    role: UserRole = UserRole.SCOUT
    status: UserStatus = UserStatus.PENDING
    created_at: Optional[datetime] = None


class User(UserPublic):
    id: str = Field(default_factory=lambda: uuid4().hex)
    password_hash: Optional[str] = None

    def public(self) -> UserPublic:
        return UserPublic.model_validate(self.model_dump(exclude={"password_hash"}))


class RegistrationRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    password: str = ""
    password_confirmation: str = ""
    email: Optional[str] = None


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPublic
