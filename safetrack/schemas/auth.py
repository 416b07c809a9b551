"""Authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    """Email and password submitted to register or log in.

    Fields are optional here so that missing values reach the service layer,
    which reports them as invalid input.
    """

    email: str | None = Field(default=None, description="Account email, stored as given")
    password: str | None = Field(default=None, description="Plaintext password")


class UserPublic(BaseModel):
    """Public user fields; the password hash is never exposed."""

    id: int
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    """Registration response."""

    message: str
    user: UserPublic


class LoginResponse(BaseModel):
    """Login response carrying the bearer token."""

    message: str
    token: str
    token_type: str = "bearer"


class ProfileResponse(BaseModel):
    """Authenticated profile response."""

    message: str
    user: UserPublic
