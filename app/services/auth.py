"""Accounts: password hashing, JWT issue/verify, registration and login."""

import logging
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__default_ident="2b")

ALGORITHM = "HS256"
BCRYPT_MAX_BYTES = 72


class EmailTakenError(Exception):
    pass


def _truncate_password(password: str) -> str:
    raw = password.encode("utf-8")
    if len(raw) <= BCRYPT_MAX_BYTES:
        return password
    return raw[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")


def hash_password(password: str) -> str:
    return pwd_context.hash(_truncate_password(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_truncate_password(plain_password), hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Signed HS256 token; ``exp`` defaults to ACCESS_TOKEN_EXPIRE_MINUTES from now."""
    claims = {**data, "exp": datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))}
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=ALGORITHM)


def issue_token(user: User) -> str:
    """Access token carrying the user id as ``sub`` and the role."""
    return create_access_token(data={"sub": str(user.id), "role": user.role})


def decode_access_token(token: str) -> Optional[dict]:
    """Claims of a valid token, or None when the signature or expiry is bad."""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning("JWT decode error: %s", e)
        return None


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def register_user(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    role: str,
    phone: Optional[str] = None,
) -> User:
    """Create an account. The role is fixed from here on."""
    if await get_user_by_email(db, email):
        raise EmailTakenError(email)

    user = User(
        name=name,
        email=email,
        hashed_password=hash_password(password),
        role=role,
        phone=phone,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("User registered: %s (role: %s)", user.email, user.role)
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[User]:
    """User with matching credentials, or None."""
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user
