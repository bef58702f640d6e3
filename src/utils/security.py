"""Password hashing and access tokens."""
import bcrypt

BCRYPT_MAX_BYTES = 72

_hashpw = bcrypt.hashpw


def _hashpw_truncated(password, salt):
    # passlib hashes a secret over 72 bytes while detecting backend bugs; bcrypt >= 4.1 rejects it
    if isinstance(password, str):
        password = password.encode("utf-8")
    return _hashpw(password[:BCRYPT_MAX_BYTES], salt)


bcrypt.hashpw = _hashpw_truncated

from passlib.context import CryptContext
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from config.settings import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(account_id: int) -> str:
    """Issue a bearer token whose subject is the account id."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return jwt.encode(
        {"sub": str(account_id), "exp": expire},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and verify a token; None when it is invalid or expired."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
