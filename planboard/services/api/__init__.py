"""HTTP implementations of the remote data sources."""

from planboard.services.api.client import ApiClient
from planboard.services.api.errors import (
    ApiError,
    ApiValidationError,
    AuthenticationError,
    ForbiddenError,
    NetworkError,
    NotFoundError,
    ServerError,
)
from planboard.services.api.holidays import HolidayApi
from planboard.services.api.owners import OwnerApi
from planboard.services.api.statuses import StatusApi
from planboard.services.api.tasks import TaskApi
from planboard.services.api.teams import TeamApi

__all__ = [
    "ApiClient",
    "ApiError",
    "ApiValidationError",
    "AuthenticationError",
    "ForbiddenError",
    "HolidayApi",
    "NetworkError",
    "NotFoundError",
    "OwnerApi",
    "ServerError",
    "StatusApi",
    "TaskApi",
    "TeamApi",
]
