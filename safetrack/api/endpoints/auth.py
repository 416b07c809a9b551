"""Authentication endpoints."""

from fastapi import APIRouter, status

from safetrack.dependencies import AuthServiceDep, CurrentClaims, DatabaseSession
from safetrack.schemas.auth import (
    CredentialsRequest,
    LoginResponse,
    ProfileResponse,
    RegisterResponse,
    UserPublic,
)

router = APIRouter(tags=["Authentication"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    request: CredentialsRequest,
    db: DatabaseSession,
    auth_service: AuthServiceDep,
) -> RegisterResponse:
    """
    Register a user with an email and password.

    Returns the new user's public fields. Responds 400 when a field is
    missing and 409 when the email is already registered.
    """
    user = await auth_service.register(db, request.email, request.password)

    return RegisterResponse(
        message="User registered successfully!",
        user=UserPublic.model_validate(user),
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Log in and obtain a bearer token",
)
async def login(
    request: CredentialsRequest,
    db: DatabaseSession,
    auth_service: AuthServiceDep,
) -> LoginResponse:
    """
    Exchange valid credentials for a one-hour access token.

    Unknown emails and wrong passwords both respond 401.
    """
    token = await auth_service.login(db, request.email, request.password)

    return LoginResponse(message="Logged in successfully!", token=token)


@router.get(
    "/profile",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Get the authenticated user's profile",
)
async def profile(
    claims: CurrentClaims,
    db: DatabaseSession,
    auth_service: AuthServiceDep,
) -> ProfileResponse:
    """Return the profile of the user identified by the bearer token."""
    user = await auth_service.get_profile(db, claims)

    return ProfileResponse(
        message="Welcome to the protected profile route!",
        user=UserPublic.model_validate(user),
    )
