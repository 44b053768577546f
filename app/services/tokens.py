"""Issue and verify the signed, time-bound access tokens."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from jose.constants import ALGORITHMS
from pydantic import ValidationError

from app.config import settings
from app.schemas.auth import Identity, TokenPayload
from app.utils.exceptions import AuthenticationError, AuthenticationRequired, ConfigurationError

logger = logging.getLogger(__name__)

SECRET_KEY = settings.jwt_secret_key
ALGORITHM = settings.jwt_algorithm
TOKEN_TTL = timedelta(minutes=settings.jwt_expire_minutes)
TOKEN_PREFIX = "Bearer"
DEFAULT_SECRET_KEY = "change-me-in-production"


def check_security_config() -> None:
    """Fail fast on signing or hashing settings that cannot work."""
    if not SECRET_KEY:
        raise ConfigurationError("JWT_SECRET_KEY must not be empty")
    if SECRET_KEY == DEFAULT_SECRET_KEY:
        raise ConfigurationError("JWT_SECRET_KEY is still the built-in default; set a private key")
    if ALGORITHM not in ALGORITHMS.HMAC:
        raise ConfigurationError(f"Unsupported JWT algorithm: {ALGORITHM}")
    if TOKEN_TTL <= timedelta(0):
        raise ConfigurationError("JWT_EXPIRE_MINUTES must be positive")
    if not 4 <= settings.bcrypt_rounds <= 31:
        raise ConfigurationError("BCRYPT_ROUNDS must be between 4 and 31")


def issue_token(
    subject: str,
    *,
    expires_delta: timedelta | None = None,
    now: datetime | None = None,
) -> str:
    issued_at = int((now or datetime.now(timezone.utc)).timestamp())
    ttl = expires_delta if expires_delta is not None else TOKEN_TTL
    payload: dict[str, Any] = {
        "sub": subject,
        "iat": issued_at,
        "exp": issued_at + int(ttl.total_seconds()),
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Identity:
    """Verify signature and expiry and return the identity the token asserts.

    Raises AuthenticationError for anything that is not a currently valid
    token signed with our key.
    """
    try:
        decoded = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError as exc:
        raise AuthenticationError("Token has expired") from exc
    except JWTError as exc:
        logger.debug("Token rejected: %s", exc)
        raise AuthenticationError(details=str(exc)) from exc

    try:
        payload = TokenPayload(**decoded)
    except ValidationError as exc:
        raise AuthenticationError("Malformed token claims") from exc

    # valid only strictly before exp
    if payload.exp <= int(datetime.now(timezone.utc).timestamp()):
        raise AuthenticationError("Token has expired")

    return Identity(
        login=payload.sub,
        issued_at=datetime.fromtimestamp(payload.iat, tz=timezone.utc) if payload.iat is not None else None,
        expires_at=datetime.fromtimestamp(payload.exp, tz=timezone.utc),
    )


def extract_bearer(header: str | None) -> str:
    if not header:
        raise AuthenticationRequired()
    scheme, _, token = header.partition(" ")
    if scheme.lower() != TOKEN_PREFIX.lower() or not token.strip():
        raise AuthenticationRequired("Authorization header must use the Bearer scheme")
    return token.strip()
