"""Auth domain exceptions.

Authentication failures (401) and provider-side credential problems.
Authorization decisions on marketplace records are raised by
``autosphere.access`` instead.
"""

from autosphere.core.exceptions import AppException, ValidationFailed


# Authentication errors (401)
class AuthenticationError(AppException):
    """Base class for authentication failures."""

    status_code = 401
    error_type = "authentication_error"

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when email/password combination is invalid."""

    error_type = "invalid_credentials"

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised when authentication token is invalid or expired."""

    error_type = "invalid_token"

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message)


class SessionCookieError(AuthenticationError):
    error_type = "session_cookie_error"

    def __init__(self, message: str = "Session cookie error"):
        super().__init__(message)


# Account errors (403)
class UserDisabledError(AppException):
    """Raised when the account is disabled at the identity provider."""

    status_code = 403
    error_type = "user_disabled"

    def __init__(self, message: str = "User account is disabled"):
        super().__init__(message)


class AccountSuspendedError(UserDisabledError):
    """Raised at login when an admin has suspended the local account."""

    error_type = "account_suspended"

    def __init__(
        self,
        message: str = "This account has been suspended. Please contact support.",
    ):
        super().__init__(message)


# Password errors (400)
class WeakPasswordError(ValidationFailed):
    error_type = "weak_password"

    def __init__(self, message: str = "Password is too weak"):
        super().__init__(message)


class PasswordPolicyError(ValidationFailed):
    """Raised when a password misses provider policy requirements."""

    error_type = "password_policy_error"

    def __init__(
        self,
        message: str = "Password does not meet requirements",
        requirements: list[str] | None = None,
    ):
        self.requirements = requirements or []
        if self.requirements:
            message = f"{message}: {', '.join(self.requirements)}"
        super().__init__(message)
