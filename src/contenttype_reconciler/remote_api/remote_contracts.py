"""Remote content API contracts and error taxonomy."""

from __future__ import annotations

from typing import Protocol

from contenttype_reconciler.content_model.content_model_entities import Field


class RemoteApiError(Exception):
    """Raised when a remote content API call fails."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SpaceNotFoundError(RemoteApiError):
    """Raised when the declared space cannot be resolved."""


class ContentTypeNotFoundError(RemoteApiError):
    """Raised when a content type identity is stale or was deleted out-of-band."""


class VersionConflictError(RemoteApiError):
    """Raised when a save is submitted with a stale version."""


class ActivationError(RemoteApiError):
    """Raised when a saved content type could not be published."""


class RemoteContentType(Protocol):
    """Mutable remote content type handle.

    Scalar attributes and ``fields`` are edited locally and submitted on ``save``.
    ``content_type_id`` and ``version`` are owned by the remote system.
    """

    name: str
    description: str
    display_field: str
    fields: list[Field]

    @property
    def content_type_id(self) -> str | None: ...

    @property
    def version(self) -> int | None: ...

    def save(self) -> None: ...

    def activate(self) -> None: ...

    def deactivate(self) -> None: ...

    def delete(self) -> None: ...


class RemoteSpace(Protocol):
    """Space scoped access to content types."""

    @property
    def space_id(self) -> str: ...

    def new_content_type(self) -> RemoteContentType: ...

    def get_content_type(self, content_type_id: str) -> RemoteContentType: ...


class ContentApiClient(Protocol):
    """Entry point of the remote content API."""

    def get_space(self, space_id: str) -> RemoteSpace: ...

    def close(self) -> None: ...
