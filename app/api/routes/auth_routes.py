"""
Authentication Routes

POST /auth/register - Register new administrator
POST /auth/login - Login and get JWT token
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from app.core.container import get_auth_service
from app.core.exceptions import InternalError
from app.schemas.schemas import ApiResponse, LoginRequest, LoginResponse, RegisterRequest
from app.services.admin_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=ApiResponse[None],
    status_code=201,
    responses={400: {"description": "Invalid request data"}, 409: {"description": "Username already exists"}},
)
def register(request: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    """
    Register a new administrator account.

    After registration, login to get an access token.
    """
    try:
        auth.register(request.username, request.password)
    except SQLAlchemyError as e:
        logger.exception("Registration of %r failed", request.username)
        raise InternalError("An error occurred during registration") from e

    return ApiResponse.ok(message="Admin registered successfully")


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    responses={401: {"description": "Invalid credentials"}},
)
def login(request: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    result = auth.login(request.username, request.password)
    return ApiResponse.ok(result, message="Login successful")
