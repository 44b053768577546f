from datetime import datetime

from pydantic import BaseModel


class LoginRequest(BaseModel):
    login: str
    password: str


class AccessToken(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenPayload(BaseModel):
    sub: str
    exp: int
    iat: int | None = None


class Identity(BaseModel):
    """Who the caller is, as asserted by a verified token."""

    login: str
    issued_at: datetime | None = None
    expires_at: datetime
