import logging
from passlib.context import CryptContext

logging.getLogger("passlib.handlers.bcrypt").setLevel(logging.ERROR)

pwd_ctx = CryptContext(
    schemes=["bcrypt_sha256", "bcrypt"],
    deprecated="auto",
)


def hash_password(plain: str) -> str:
    """Return bcrypt_sha256 hash for plain password."""
    return pwd_ctx.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    """Verify plain password against hash."""
    if not plain or not hashed:
        return False
    try:
        return pwd_ctx.verify(plain, hashed)
    except ValueError:
        return False
