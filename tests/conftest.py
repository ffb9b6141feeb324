"""Shared test doubles for the remote content API."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from contenttype_reconciler.content_model.content_model_entities import Field
from contenttype_reconciler.remote_api.remote_contracts import (
    ContentTypeNotFoundError,
    SpaceNotFoundError,
    VersionConflictError,
)


@dataclass
class StoredContentType:
    name: str
    description: str
    display_field: str
    fields: tuple[Field, ...]
    version: int
    active: bool = False


@dataclass
class RecordingClient:
    """In-memory remote API that records every call in order."""

    spaces: set[str] = field(default_factory=lambda: {"space-1"})
    store: dict[tuple[str, str], StoredContentType] = field(default_factory=dict)
    calls: list[tuple] = field(default_factory=list)
    failures: dict[str, Exception] = field(default_factory=dict)
    closed: bool = False
    _next_id: int = 0

    def get_space(self, space_id: str) -> RecordingSpace:
        self.calls.append(("get_space", space_id))
        if space_id not in self.spaces:
            raise SpaceNotFoundError(f"space {space_id} not found", status_code=404)
        return RecordingSpace(client=self, space_id=space_id)

    def close(self) -> None:
        self.closed = True

    def operations(self) -> list[str]:
        return [call[0] for call in self.calls if call[0] != "get_space"]

    def saved_field_sets(self) -> list[tuple[Field, ...]]:
        return [call[2] for call in self.calls if call[0] == "save"]

    def new_id(self) -> str:
        self._next_id += 1
        return f"ct-{self._next_id}"

    def maybe_fail(self, operation: str) -> None:
        failure = self.failures.pop(operation, None)
        if failure is not None:
            raise failure


@dataclass
class RecordingSpace:
    client: RecordingClient
    space_id: str

    def new_content_type(self) -> RecordingContentType:
        return RecordingContentType(space=self)

    def get_content_type(self, content_type_id: str) -> RecordingContentType:
        self.client.calls.append(("get_content_type", content_type_id))
        stored = self.client.store.get((self.space_id, content_type_id))
        if stored is None:
            raise ContentTypeNotFoundError(
                f"content type {content_type_id} not found", status_code=404
            )
        content_type = RecordingContentType(space=self)
        content_type.content_type_id = content_type_id
        content_type.version = stored.version
        content_type.name = stored.name
        content_type.description = stored.description
        content_type.display_field = stored.display_field
        content_type.fields = list(stored.fields)
        return content_type


@dataclass
class RecordingContentType:  # pylint: disable=too-many-instance-attributes
    space: RecordingSpace
    name: str = ""
    description: str = ""
    display_field: str = ""
    fields: list[Field] = field(default_factory=list)
    content_type_id: str | None = None
    version: int | None = None

    @property
    def _client(self) -> RecordingClient:
        return self.space.client

    def _key(self) -> tuple[str, str]:
        assert self.content_type_id is not None
        return (self.space.space_id, self.content_type_id)

    def save(self) -> None:
        self._client.calls.append(("save", self.content_type_id, tuple(self.fields)))
        self._client.maybe_fail("save")
        if self.content_type_id is None:
            self.content_type_id = self._client.new_id()
            self.version = 1
        else:
            stored = self._client.store.get(self._key())
            if stored is None:
                raise ContentTypeNotFoundError("gone", status_code=404)
            if stored.version != self.version:
                raise VersionConflictError("version mismatch", status_code=409)
            self.version = stored.version + 1
        self._client.store[self._key()] = StoredContentType(
            name=self.name,
            description=self.description,
            display_field=self.display_field,
            fields=tuple(self.fields),
            version=self.version,
        )

    def activate(self) -> None:
        self._client.calls.append(("activate", self.content_type_id, self.version))
        self._client.maybe_fail("activate")
        stored = self._client.store[self._key()]
        stored.version += 1
        stored.active = True
        self.version = stored.version

    def deactivate(self) -> None:
        self._client.calls.append(("deactivate", self.content_type_id, self.version))
        self._client.maybe_fail("deactivate")
        stored = self._client.store[self._key()]
        stored.version += 1
        stored.active = False
        self.version = stored.version

    def delete(self) -> None:
        self._client.calls.append(("delete", self.content_type_id, self.version))
        self._client.maybe_fail("delete")
        del self._client.store[self._key()]


@pytest.fixture
def recording_client() -> RecordingClient:
    return RecordingClient()
