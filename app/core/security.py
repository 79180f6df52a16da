"""Security utilities"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import jwt, JWTError
from passlib.context import CryptContext
from .config import settings
import hashlib
import secrets


# Password context, shared by passwords, inspector PINs and stored refresh tokens
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def get_password_hash(password: str) -> str:
    """Hash password"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify password"""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def hash_refresh_token(token: str) -> str:
    """Hash a refresh token for storage.

    The JWT is digested first since bcrypt only reads 72 bytes of input.
    """
    return pwd_context.hash(hashlib.sha256(token.encode("utf-8")).hexdigest())


def verify_refresh_token_hash(token: str, stored_hash: Optional[str]) -> bool:
    return verify_password(hashlib.sha256(token.encode("utf-8")).hexdigest(), stored_hash)


def create_access_token(subject: str, claims: Optional[Dict[str, Any]] = None) -> str:
    """Create access token carrying the user's public claims"""
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)

    to_encode = {k: v for k, v in (claims or {}).items() if v is not None}
    to_encode.update({"exp": expire, "sub": subject, "type": ACCESS_TOKEN_TYPE})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.ALGORITHM)


def create_refresh_token(subject: str) -> str:
    """Create refresh token"""
    expire = datetime.now(timezone.utc) + timedelta(days=settings.JWT_REFRESH_EXPIRATION_DAYS)

    # jti keeps two refresh tokens issued in the same second distinct
    to_encode = {"exp": expire, "sub": subject, "type": REFRESH_TOKEN_TYPE, "jti": secrets.token_hex(8)}
    return jwt.encode(to_encode, settings.JWT_REFRESH_SECRET, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode an access token, None when invalid or expired"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        return None
    return payload


def verify_refresh_token(token: str) -> Optional[str]:
    """Verify refresh token and return subject"""
    try:
        payload = jwt.decode(token, settings.JWT_REFRESH_SECRET, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != REFRESH_TOKEN_TYPE:
        return None
    return payload.get("sub")


def token_expiry(payload: Dict[str, Any]) -> datetime:
    """Expiry of a decoded token as naive UTC"""
    return datetime.fromtimestamp(payload["exp"], tz=timezone.utc).replace(tzinfo=None)


def generate_pin(length: int = 6) -> str:
    """Generate a random numeric PIN."""
    return "".join(secrets.choice("0123456789") for _ in range(length))
