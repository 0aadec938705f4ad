"""Registration, login and current-user endpoints."""

import logging
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_user
from app.models.user import User
from app.schemas.auth import UserRegister, UserLogin, Token, UserOut
from app.services.auth import EmailTakenError, authenticate_user, issue_token, register_user

router = APIRouter()
logger = logging.getLogger(__name__)


def _token_response(user: User) -> Token:
    return Token(access_token=issue_token(user), user=UserOut.model_validate(user))


@router.post("/register", response_model=Token, status_code=201)
async def register(user_data: UserRegister, db: AsyncSession = Depends(get_db)):
    """Create a user or provider account and log it in."""
    try:
        user = await register_user(
            db,
            name=user_data.name,
            email=user_data.email,
            password=user_data.password,
            role=user_data.role,
            phone=user_data.phone,
        )
    except EmailTakenError:
        raise HTTPException(status_code=409, detail="Email already registered")
    return _token_response(user)


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: AsyncSession = Depends(get_db)):
    user = await authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise HTTPException(status_code=401, detail="Incorrect email or password")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="User account is disabled")

    logger.info("User logged in: %s (role: %s)", user.email, user.role)
    return _token_response(user)


@router.get("/me", response_model=UserOut)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
