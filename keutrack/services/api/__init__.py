"""Backend API client package."""

from keutrack.services.api.client import ConnectionStatus, KeuTrackClient
from keutrack.services.api.interface import (
    ApiError,
    ApiUnavailableError,
    AuthenticationError,
    LedgerStorageInterface,
    NotFoundError,
    TransientApiError,
)

__all__ = [
    # Interface
    "LedgerStorageInterface",
    # Exceptions
    "ApiError",
    "ApiUnavailableError",
    "AuthenticationError",
    "NotFoundError",
    "TransientApiError",
    # HTTP implementation
    "ConnectionStatus",
    "KeuTrackClient",
]
