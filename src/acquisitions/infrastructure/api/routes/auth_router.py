"""Authentication API routes.

Provides endpoints for user sign-up, sign-in, sign-out and the current
session. This module is the one place where auth failure kinds are mapped to
HTTP status codes.
"""

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from acquisitions.core.logging import get_logger
from acquisitions.domain.entities import PublicUser
from acquisitions.domain.services import AuthFailure, AuthFailureKind
from acquisitions.infrastructure.api.dependencies import (
    AuthServiceDep,
    CookieManagerDep,
    CurrentUser,
    JWTServiceDep,
)
from acquisitions.infrastructure.api.schemas import (
    AuthResponse,
    ErrorResponse,
    MessageResponse,
    SessionResponse,
    SessionUser,
    SignInRequest,
    SignUpRequest,
    UserResponse,
    ValidationErrorResponse,
)
from acquisitions.infrastructure.api.validation import (
    ValidationFailure,
    read_json_body,
    validate_payload,
)
from acquisitions.infrastructure.auth import (
    SESSION_COOKIE_NAME,
    JWTService,
    SessionCookieManager,
    TokenClaims,
)

logger = get_logger(__name__)

router = APIRouter()

_FAILURE_RESPONSES: dict[AuthFailureKind, tuple[int, str]] = {
    AuthFailureKind.DUPLICATE_EMAIL: (status.HTTP_409_CONFLICT, "Email already exists"),
    AuthFailureKind.INVALID_CREDENTIALS: (
        status.HTTP_401_UNAUTHORIZED,
        "Invalid email or password",
    ),
}


def _validation_error(failure: ValidationFailure) -> JSONResponse:
    body = ValidationErrorResponse(error="Validation failed", details=failure.errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


def _failure_response(failure: AuthFailure) -> JSONResponse:
    status_code, message = _FAILURE_RESPONSES[failure.kind]
    body = ErrorResponse(error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _start_session(
    response: Response,
    user: PublicUser,
    jwt_service: JWTService,
    cookie_manager: SessionCookieManager,
) -> None:
    token = jwt_service.sign(TokenClaims(id=user.id, email=user.email, role=user.role))
    cookie_manager.set(response, SESSION_COOKIE_NAME, token)


@router.post(
    "/sign-up",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
    responses={
        400: {"model": ValidationErrorResponse, "description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Email already exists"},
    },
)
async def sign_up(
    request: Request,
    response: Response,
    auth_service: AuthServiceDep,
    jwt_service: JWTServiceDep,
    cookie_manager: CookieManagerDep,
) -> AuthResponse | JSONResponse:
    """Register a new user and start a session.

    Flow:
    1. Validate the request body
    2. Register the user (duplicate emails are rejected)
    3. Sign a token and set it as the session cookie
    4. Return the public user
    """
    validation = validate_payload(SignUpRequest, await read_json_body(request))
    if isinstance(validation, ValidationFailure):
        logger.info("Sign-up rejected: validation", error_count=len(validation.errors))
        return _validation_error(validation)

    body = validation.value
    result = await auth_service.register(
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
    )
    if isinstance(result, AuthFailure):
        logger.error("Sign-up error", kind=result.kind.value, email=body.email)
        return _failure_response(result)

    _start_session(response, result.user, jwt_service, cookie_manager)

    logger.info("User registered successfully", email=result.user.email)
    return AuthResponse(message="User registered", user=UserResponse.from_public_user(result.user))


@router.post(
    "/sign-in",
    status_code=status.HTTP_200_OK,
    response_model=AuthResponse,
    responses={
        400: {"model": ValidationErrorResponse, "description": "Validation error"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def sign_in(
    request: Request,
    response: Response,
    auth_service: AuthServiceDep,
    jwt_service: JWTServiceDep,
    cookie_manager: CookieManagerDep,
) -> AuthResponse | JSONResponse:
    """Authenticate a user and start a session.

    Unknown email and wrong password produce the same 401 body.
    """
    validation = validate_payload(SignInRequest, await read_json_body(request))
    if isinstance(validation, ValidationFailure):
        logger.info("Sign-in rejected: validation", error_count=len(validation.errors))
        return _validation_error(validation)

    body = validation.value
    result = await auth_service.authenticate(email=body.email, password=body.password)
    if isinstance(result, AuthFailure):
        logger.error("Sign-in error", kind=result.kind.value, email=body.email)
        return _failure_response(result)

    _start_session(response, result.user, jwt_service, cookie_manager)

    logger.info("User signed in successfully", email=result.user.email)
    return AuthResponse(message="User signed in", user=UserResponse.from_public_user(result.user))


@router.post("/sign-out", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def sign_out(response: Response, auth_service: AuthServiceDep) -> MessageResponse:
    """Clear the session cookie. Succeeds whether or not a session exists."""
    auth_service.terminate_session(response)

    logger.info("User signed out successfully")
    return MessageResponse(message="User signed out successfully")


@router.get(
    "/me",
    response_model=SessionResponse,
    responses={401: {"description": "Missing or invalid session"}},
)
async def me(current_user: CurrentUser) -> SessionResponse:
    """Return the claims of the current session token."""
    return SessionResponse(user=SessionUser.from_claims(current_user))
