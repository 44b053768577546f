"""One-way salted password hashing backed by bcrypt."""
import bcrypt

from app.config import settings


def hash_password(plaintext: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(plaintext.encode(), salt).decode()


def verify_password(plaintext: str, hashed: str) -> bool:
    """Check ``plaintext`` against a stored bcrypt hash.

    The salt is read back out of ``hashed``. A mismatch or an unreadable hash
    gives False rather than an exception.
    """
    try:
        return bcrypt.checkpw(plaintext.encode(), hashed.encode())
    except ValueError:
        return False
