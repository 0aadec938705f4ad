"""Request dependencies: bearer-token authentication and role gates."""

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.user import User, UserRole
from app.services.auth import decode_access_token

# Missing credentials are reported as 401 below, not HTTPBearer's 403
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _subject(claims: dict) -> UUID:
    try:
        return UUID(str(claims.get("sub") or ""))
    except ValueError:
        raise _unauthorized("Invalid token payload")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Account behind the bearer token.

    401 for a bad token or unknown account, 403 for a disabled one.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    claims = decode_access_token(credentials.credentials)
    if not claims:
        raise _unauthorized("Could not validate credentials")

    user = await db.get(User, _subject(claims))
    if not user:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is disabled")
    return user


def require_role(*roles: UserRole):
    """Dependency that lets through only accounts with one of ``roles``."""
    allowed = {role.value for role in roles}

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {', '.join(sorted(allowed))}",
            )
        return current_user

    return role_checker


require_provider = require_role(UserRole.PROVIDER)
