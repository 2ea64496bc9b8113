"""Authentication routes for signup and password login."""

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from app.decorators import timed
from app.dependencies import AuthServiceDep
from app.managers import auth_limit, limiter
from app.schemas import AuthResponse, LoginRequest, SignupRequest, error_example

router = APIRouter(prefix="/api/auth", tags=["🔐 Auth"])

AUTH_EXAMPLE = {
    "success": True,
    "user": {
        "id": "123e4567-e89b-12d3-a456-426614174000",
        "name": "Jane Doe",
        "email": "jane@example.com",
        "role": "user",
    },
    "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
}

RATE_LIMITED = {429: error_example("Too many requests, please try again later", "RateLimitExceeded")}


@router.post(
    "/signup",
    response_class=ORJSONResponse,
    response_model=AuthResponse,
    status_code=HTTP_201_CREATED,
    summary="Register a new user",
    description="Create an account and receive a token. The first account ever created is an admin.",
    responses={
        201: {"content": {"application/json": {"example": AUTH_EXAMPLE}}},
        400: error_example("User already exists", "DuplicateEntryError"),
        **RATE_LIMITED,
    },
    operation_id="auth_signup",
)
@timed("/api/auth/signup")
@limiter.limit(auth_limit)
async def signup(
    request: Request,
    response: Response,
    data: SignupRequest,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """
    Register a new user.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    data : SignupRequest
        Name, email and password.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    AuthResponse
        The new user and an access token.

    Raises
    ------
    DuplicateEntryError
        If the email is already registered.
    """
    return await auth_service.signup(data)


@router.post(
    "/login",
    response_class=ORJSONResponse,
    response_model=AuthResponse,
    summary="Login with email and password",
    responses={
        200: {"content": {"application/json": {"example": AUTH_EXAMPLE}}},
        401: error_example("Invalid credentials", "InvalidCredentialsError"),
        **RATE_LIMITED,
    },
    operation_id="auth_login",
)
@timed("/api/auth/login")
@limiter.limit(auth_limit)
async def login(
    request: Request,
    response: Response,
    data: LoginRequest,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """
    Login with email and password.

    Parameters
    ----------
    data : LoginRequest
        Email and password.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    AuthResponse
        The user and a fresh access token.

    Raises
    ------
    InvalidCredentialsError
        If the email is unknown or the password is wrong.
    """
    return await auth_service.login(data)
