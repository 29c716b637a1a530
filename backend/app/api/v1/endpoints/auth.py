from fastapi import APIRouter, Depends, status, Request, Response

from app.core.config import settings
from app.schemas.auth import (
    SignupRequest,
    SignupResponse,
    LoginRequest,
    LoginResponse,
    UserResponse,
)
from app.schemas.common import MessageResponse
from app.modules.auth.dependencies import get_user_service
from app.services.user_service import SIGNUP_MESSAGE, UserService
from app.core.rate_limiter import login_rate_limit, signup_rate_limit


router = APIRouter()


def set_auth_cookie(response: Response, token: str) -> None:
    """HttpOnly session cookie, same lifetime as the token"""
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
@signup_rate_limit()
async def signup(
    request: Request,
    data: SignupRequest,
    service: UserService = Depends(get_user_service)
):
    """Create an account (rate limited)"""
    user = await service.signup(data)
    return SignupResponse(message=SIGNUP_MESSAGE, user=UserResponse.model_validate(user))


@router.post("/login", response_model=LoginResponse)
@login_rate_limit()
async def login(
    request: Request,
    response: Response,
    data: LoginRequest,
    service: UserService = Depends(get_user_service)
):
    """Check credentials and start a session (rate limited)"""
    user, token = await service.authenticate(data.roll_number, data.password)
    set_auth_cookie(response, token)
    return LoginResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME, path="/")
    return MessageResponse(message="Logged out successfully")
