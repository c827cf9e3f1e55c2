"""
User account API endpoints.

Signup, login, logout and profile management.
"""

from fastapi import APIRouter, Depends

from api.middleware.auth import get_current_user
from api.dependencies import get_auth_service
from shared.models import AuthenticatedUser, MessageResponse

from .interfaces import IAuthService
from .models import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UpdateProfileRequest,
    UserResponse,
)

router = APIRouter()


@router.post("/signup", response_model=UserResponse, status_code=201)
async def signup(
    request: RegisterRequest,
    service: IAuthService = Depends(get_auth_service),
) -> UserResponse:
    """
    Register a new account.

    Does not log the user in; the client calls /login afterwards.
    """
    user = await service.register(request.name, request.email, request.password)
    return UserResponse(
        message="User registered successfully. Please login to continue.",
        user=user,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    service: IAuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Exchange email and password for a bearer token valid for 7 days."""
    result = await service.authenticate(request.email, request.password)
    return LoginResponse(message="Login successful", token=result.token, user=result.user)


@router.post("/logout", response_model=MessageResponse)
async def logout() -> MessageResponse:
    """
    Acknowledge a logout.

    Tokens are not tracked server-side, so this only tells the client
    to discard its token.
    """
    return MessageResponse(message="Logged out successfully")


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> UserResponse:
    """Get the current user's profile."""
    profile = await service.get_profile(user.id)
    return UserResponse(message="Profile fetched successfully", user=profile)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    request: UpdateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> UserResponse:
    """
    Update the current user's name, email and optionally password.

    To change the password send both currentPassword and newPassword.
    """
    profile = await service.update_profile(user.id, request)
    return UserResponse(message="Profile updated successfully", user=profile)
