"""Remote content API exports."""

from .management_client import ManagementApiClient, ManagementContentType, ManagementSpace
from .remote_contracts import (
    ActivationError,
    ContentApiClient,
    ContentTypeNotFoundError,
    RemoteApiError,
    RemoteContentType,
    RemoteSpace,
    SpaceNotFoundError,
    VersionConflictError,
)

__all__ = [
    "ActivationError",
    "ContentApiClient",
    "ContentTypeNotFoundError",
    "ManagementApiClient",
    "ManagementContentType",
    "ManagementSpace",
    "RemoteApiError",
    "RemoteContentType",
    "RemoteSpace",
    "SpaceNotFoundError",
    "VersionConflictError",
]
