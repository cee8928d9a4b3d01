"""Typed errors for the remote data-access layer, keyed by HTTP status."""

from __future__ import annotations

from collections.abc import Callable


class ApiError(Exception):
    """A remote call failed; ``status`` is the HTTP status (0 for transport failures)."""

    code = "api_error"
    default_message = "API error"
    default_status = 0

    def __init__(
        self,
        message: str | None = None,
        status: int | None = None,
        data: object = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.status = self.default_status if status is None else status
        self.data = data


class AuthenticationError(ApiError):
    code = "authentication_failed"
    default_message = "Session expired"
    default_status = 401


class ForbiddenError(ApiError):
    code = "forbidden"
    default_message = "Access denied"
    default_status = 403


class NotFoundError(ApiError):
    code = "not_found"
    default_message = "Resource not found"
    default_status = 404


class ApiValidationError(ApiError):
    code = "validation_failed"
    default_message = "Invalid data"
    default_status = 422


class ServerError(ApiError):
    code = "server_error"
    default_message = "Server error"
    default_status = 500


class NetworkError(ApiError):
    code = "network_error"
    default_message = "Network connection problem"
    default_status = 0


_ErrorFactory = Callable[[str | None, object], ApiError]

_UNAVAILABLE = "Service temporarily unavailable"

ERROR_FACTORIES: dict[int, _ErrorFactory] = {
    400: lambda message, data: ApiError(message or "Bad request", 400, data),
    401: lambda message, data: AuthenticationError(message, data=data),
    403: lambda message, data: ForbiddenError(message, data=data),
    404: lambda message, data: NotFoundError(message, data=data),
    422: lambda message, data: ApiValidationError(message, data=data),
    500: lambda message, data: ServerError(message, data=data),
    502: lambda message, data: ServerError(_UNAVAILABLE, 502, data),
    503: lambda message, data: ServerError(_UNAVAILABLE, 503, data),
    504: lambda message, data: ServerError("Gateway timeout", 504, data),
}


def error_for_status(status: int, message: str | None = None, data: object = None) -> ApiError:
    """Build the error class registered for ``status`` (plain ``ApiError`` otherwise)."""
    factory = ERROR_FACTORIES.get(status)
    if factory is None:
        return ApiError(message, status, data)
    return factory(message, data)
