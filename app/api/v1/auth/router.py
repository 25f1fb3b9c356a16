"""
Authentication API routes
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.middleware.rate_limit import auth_limiter
from app.models import User
from app.schemas.user import UserPublic
from .dependencies import get_current_user
from .schemas import AuthResponse, LoginRequest, RegisterRequest
from .services import AuthService

router = APIRouter()

@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create an account and return an access token"
)
@auth_limiter
async def register(
    request: Request,
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """Register new user"""
    service = AuthService(db)
    user = await service.register(payload)
    return service.issue_token(user, "User registered successfully")

@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Login user",
    description="Login with email and password"
)
@auth_limiter
async def login(
    request: Request,
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Login user"""
    service = AuthService(db)
    user = await service.login(payload)
    return service.issue_token(user, "Login successful")

@router.get(
    "/profile",
    response_model=UserPublic,
    status_code=status.HTTP_200_OK,
    summary="Get current user",
    description="Get currently authenticated user information"
)
async def get_profile(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return current_user
