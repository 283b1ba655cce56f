"""Services package."""

from keutrack.services.api import (
    ApiError,
    ApiUnavailableError,
    AuthenticationError,
    ConnectionStatus,
    KeuTrackClient,
    LedgerStorageInterface,
    NotFoundError,
    TransientApiError,
)

__all__ = [
    "ApiError",
    "ApiUnavailableError",
    "AuthenticationError",
    "ConnectionStatus",
    "KeuTrackClient",
    "LedgerStorageInterface",
    "NotFoundError",
    "TransientApiError",
]
