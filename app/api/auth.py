"""
Account registration and login endpoints
"""

from fastapi import APIRouter, Depends

from app.core.errors import ErrorResponseModel
from app.dependencies.services import get_auth_service
from app.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from app.services.auth import AuthService

router = APIRouter()


@router.post(
    "/register",
    response_model=RegisterResponse,
    responses={400: {"model": ErrorResponseModel}},
)
async def register(
    data: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Create an account. A duplicate email is rejected with 400."""
    user = await service.register(data)
    return RegisterResponse(user=user)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={400: {"model": ErrorResponseModel}, 404: {"model": ErrorResponseModel}},
)
async def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Exchange credentials for a bearer token"""
    token, user = await service.login(data)
    return LoginResponse(token=token, user=user)
