"""
Authentication endpoints: register and sign in.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from lodging.db.session import get_db
from lodging.schemas.user import UserCreate, UserResponse, UserLogin, SignInResponse
from lodging.services.auth_service import register_user, sign_in

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new user account."""
    user = await register_user(db, user_data)
    return user


@router.post("/sign-in", response_model=SignInResponse)
async def sign_in_endpoint(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Check credentials and open a session; the token authorizes later calls."""
    user, token = await sign_in(db, login_data)
    return SignInResponse(access_token=token, user=UserResponse.model_validate(user))
