class ApiError(Exception):
    """Base error translated to a JSON response by the app error handler."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None, **extra):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra

    def to_dict(self) -> dict:
        return dict(error=self.message, **self.extra)


class ValidationError(ApiError):
    status_code = 400


class AuthenticationError(ApiError):
    status_code = 401


class ForbiddenError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


class AccountLockedError(ApiError):
    status_code = 423


class RateLimitError(ApiError):
    status_code = 429


class UpstreamError(ApiError):
    """A third-party provider failed or answered with a non-2xx status."""

    status_code = 502

    def __init__(self, message: str, upstream_status: int = None):
        super().__init__(message)
        self.upstream_status = upstream_status
