"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        headers: dict[str, str] | None = None,
    ):
        """Initialize exception with message, status code and optional headers."""
        self.message = message
        self.status_code = status_code
        self.headers = headers
        super().__init__(self.message)


class InvalidInputException(AppException):
    """Client-supplied fields are missing or invalid."""

    def __init__(self, message: str = "Invalid input"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class InvalidCredentialsException(AppException):
    """Login attempt with an unknown email or a wrong password."""

    def __init__(self, message: str = "Invalid credentials."):
        """Initialize with 401 status code."""
        super().__init__(message, status_code=401, headers={"WWW-Authenticate": "Bearer"})


class UnauthenticatedException(AppException):
    """No bearer token was presented."""

    def __init__(self, message: str = "Authentication required"):
        """Initialize with 401 status code."""
        super().__init__(message, status_code=401, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenException(AppException):
    """Token is malformed, expired or carries a bad signature."""

    def __init__(self, message: str = "Forbidden"):
        """Initialize with 403 status code."""
        super().__init__(message, status_code=403)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class DuplicateIdentityException(AppException):
    """A unique identity (such as an email) already exists."""

    def __init__(self, message: str = "Email already exists."):
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409)


class ConfigurationError(RuntimeError):
    """Required configuration is missing or invalid at startup."""


class DatabaseUnavailableError(RuntimeError):
    """The database could not be reached within the startup retry budget."""
