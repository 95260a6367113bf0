from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


# Fields are optional so that missing credentials surface as the service's
# own 400 message instead of a schema error.
class RegisterRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class PublicUser(BaseModel):
    username: str
    email: str


class AuthResponse(BaseModel):
    message: str
    user: PublicUser
