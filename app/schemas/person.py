"""Request bodies, their validation rules, and the public account projection."""
from pydantic import BaseModel

from app.config import settings
from app.utils.exceptions import ValidationFailed

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class PersonRequest(BaseModel):
    login: str
    password: str


class PersonUpdateRequest(PersonRequest):
    id: int


class PersonResponse(BaseModel):
    id: int
    login: str


def to_public(account) -> PersonResponse:
    return PersonResponse(id=account.id, login=account.login)


def _utf8_length(value: str) -> int | None:
    try:
        return len(value.encode("utf-8"))
    except UnicodeEncodeError:
        return None


def _check_login(login: str, errors: dict[str, str]) -> None:
    if _utf8_length(login) is None:
        errors["login"] = "Login must be valid UTF-8"
    elif not login.strip():
        errors["login"] = f"Login must not be empty. Actual value: {login!r}"


def _check_password(password: str, errors: dict[str, str]) -> None:
    # the rejected value is never echoed back for passwords
    if not password:
        errors["password"] = "Password must not be empty"
    elif len(password) < settings.password_min_length:
        errors["password"] = f"Password must be at least {settings.password_min_length} characters long"
    elif _utf8_length(password) is None:
        errors["password"] = "Password must be valid UTF-8"
    elif _utf8_length(password) > MAX_PASSWORD_BYTES:
        errors["password"] = f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"


def validate_for_create(body: PersonRequest) -> None:
    errors: dict[str, str] = {}
    _check_login(body.login, errors)
    _check_password(body.password, errors)
    if errors:
        raise ValidationFailed(errors)


def validate_for_update(body: PersonUpdateRequest) -> None:
    errors: dict[str, str] = {}
    if body.id <= 0:
        errors["id"] = f"Id must be a positive number. Actual value: {body.id!r}"
    _check_login(body.login, errors)
    _check_password(body.password, errors)
    if errors:
        raise ValidationFailed(errors)


def validate_for_password_change(body: PersonRequest) -> None:
    errors: dict[str, str] = {}
    _check_login(body.login, errors)
    _check_password(body.password, errors)
    if errors:
        raise ValidationFailed(errors)


def validate_for_login(body) -> None:
    """Credentials only need to be encodable; policy rules apply when they are set."""
    errors: dict[str, str] = {}
    if _utf8_length(body.login) is None:
        errors["login"] = "Login must be valid UTF-8"
    if _utf8_length(body.password) is None:
        errors["password"] = "Password must be valid UTF-8"
    if errors:
        raise ValidationFailed(errors)
