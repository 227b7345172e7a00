# errors.py: exception hierarchy
#
# Auth failures share one user-facing message so the login form never
# reveals which check failed. Backend errors pass the service message on.

GENERIC_AUTH_MESSAGE = "Invalid credentials."
GENERIC_CONFIG_MESSAGE = "Login is not configured."


class MaterialsHubError(Exception):
    """Base class for every error the hub raises on purpose."""

    error_code = "UNKNOWN_ERROR"

    def __init__(self, message: str, error_code: str | None = None, **details):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details

    @property
    def user_message(self) -> str:
        return self.message


class ConfigurationError(MaterialsHubError):
    """Server-side settings are incomplete. Operator-fixable."""

    error_code = "CONFIG_ERROR"

    @property
    def user_message(self) -> str:
        return GENERIC_CONFIG_MESSAGE


class AuthError(MaterialsHubError):
    error_code = "AUTH_ERROR"

    @property
    def user_message(self) -> str:
        return GENERIC_AUTH_MESSAGE


class InvalidUsername(AuthError):
    error_code = "INVALID_USERNAME"


class InvalidCredentials(AuthError):
    error_code = "INVALID_CREDENTIALS"


class SessionExpired(AuthError):
    """Stored tokens were rejected and could not be refreshed."""

    error_code = "SESSION_EXPIRED"


class BackendError(MaterialsHubError):
    error_code = "BACKEND_ERROR"

    def __init__(self, message: str, status: int | None = None, **details):
        super().__init__(message, status=status, **details)
        self.status = status


class FetchError(BackendError):
    error_code = "FETCH_ERROR"


class WriteError(BackendError):
    error_code = "WRITE_ERROR"

    def __init__(self, message: str, status: int | None = None, failures=None, **details):
        super().__init__(message, status=status, **details)
        # [(material_id, message), ...] for batch writes
        self.failures = list(failures or [])
