"""Content Management API client built on httpx."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from contenttype_reconciler.configuration.runtime_settings import ApiSettings
from contenttype_reconciler.content_model.content_model_entities import Field

from .remote_contracts import (
    ActivationError,
    ContentTypeNotFoundError,
    RemoteApiError,
    SpaceNotFoundError,
    VersionConflictError,
)

logger = logging.getLogger(__name__)

MANAGEMENT_MEDIA_TYPE = "application/vnd.contentful.management.v1+json"
VERSION_HEADER = "X-Contentful-Version"


class ManagementApiClient:
    """Remote content API client talking to the Content Management API.

    Example:
        with ManagementApiClient(settings) as client:
            space = client.get_space("abc123")
            content_type = space.get_content_type("blogPost")
    """

    def __init__(self, settings: ApiSettings, *, http_client: httpx.Client | None = None) -> None:
        self._settings = settings
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.Client(timeout=settings.timeout_seconds)

    def __enter__(self) -> ManagementApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http_client:
            self._http_client.close()

    def get_space(self, space_id: str) -> ManagementSpace:
        self.request("get", f"/spaces/{space_id}", not_found_error=SpaceNotFoundError)
        return ManagementSpace(client=self, space_id=space_id)

    def request(
        self,
        method: str,
        path: str,
        *,
        version: int | None = None,
        payload: Mapping[str, Any] | None = None,
        not_found_error: type[RemoteApiError] = ContentTypeNotFoundError,
        failure_error: type[RemoteApiError] = RemoteApiError,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON body.

        404 responses raise ``not_found_error``, 409 responses raise
        ``VersionConflictError`` and every other failure raises ``failure_error``.
        """
        url = f"{self._settings.base_url.rstrip('/')}{path}"
        headers = {
            "Authorization": f"Bearer {self._settings.access_token}",
            "Content-Type": MANAGEMENT_MEDIA_TYPE,
        }
        if version is not None:
            headers[VERSION_HEADER] = str(version)

        logger.debug("%s %s (version=%s)", method.upper(), path, version)
        try:
            response = self._http_client.request(method, url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise failure_error(f"{method.upper()} {path} failed: {exc}") from exc

        if response.status_code == 404:
            raise not_found_error(_format_error(response), status_code=404)
        if response.status_code == 409:
            raise VersionConflictError(_format_error(response), status_code=409)
        if response.is_error:
            raise failure_error(_format_error(response), status_code=response.status_code)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise failure_error(
                f"{method.upper()} {path} returned an undecodable body: {exc}",
                status_code=response.status_code,
            ) from exc


class ManagementSpace:
    """Space handle issuing content type requests."""

    def __init__(self, *, client: ManagementApiClient, space_id: str) -> None:
        self._client = client
        self._space_id = space_id

    @property
    def space_id(self) -> str:
        return self._space_id

    @property
    def client(self) -> ManagementApiClient:
        return self._client

    def new_content_type(self) -> ManagementContentType:
        return ManagementContentType(space=self)

    def get_content_type(self, content_type_id: str) -> ManagementContentType:
        body = self._client.request("get", self.content_type_path(content_type_id))
        content_type = ManagementContentType(space=self)
        content_type.load(body)
        return content_type

    def content_type_path(self, content_type_id: str | None = None) -> str:
        base = f"/spaces/{self._space_id}/content_types"
        return base if content_type_id is None else f"{base}/{content_type_id}"


class ManagementContentType:  # pylint: disable=too-many-instance-attributes
    """Locally editable content type bound to its space."""

    def __init__(self, *, space: ManagementSpace) -> None:
        self._space = space
        self._content_type_id: str | None = None
        self._version: int | None = None
        self.name = ""
        self.description = ""
        self.display_field = ""
        self.fields: list[Field] = []
        self._remote_fields: list[dict[str, Any]] = []
        self._loaded_fields: list[Field] = []

    @property
    def content_type_id(self) -> str | None:
        return self._content_type_id

    @property
    def version(self) -> int | None:
        return self._version

    def load(self, body: Mapping[str, Any]) -> None:
        """Refresh identity, version and attributes from a response body."""
        sys_section = body.get("sys") or {}
        self._content_type_id = sys_section.get("id", self._content_type_id)
        self._version = sys_section.get("version", self._version)
        self.name = body.get("name") or ""
        self.description = body.get("description") or ""
        self.display_field = body.get("displayField") or ""
        self._remote_fields = [dict(item) for item in body.get("fields") or ()]
        self._loaded_fields = [_decode_field(item) for item in self._remote_fields]
        self.fields = list(self._loaded_fields)

    def save(self) -> None:
        client = self._space.client
        if self._content_type_id is None:
            body = client.request(
                "post", self._space.content_type_path(), payload=self._payload()
            )
        else:
            body = client.request(
                "put",
                self._space.content_type_path(self._content_type_id),
                version=self._version,
                payload=self._payload(),
            )
        self.load(body)

    def activate(self) -> None:
        body = self._space.client.request(
            "put",
            f"{self._space.content_type_path(self._require_id())}/published",
            version=self._version,
            failure_error=ActivationError,
        )
        self._record_sys(body)

    def deactivate(self) -> None:
        body = self._space.client.request(
            "delete",
            f"{self._space.content_type_path(self._require_id())}/published",
        )
        self._record_sys(body)

    def delete(self) -> None:
        self._space.client.request(
            "delete",
            self._space.content_type_path(self._require_id()),
            version=self._version,
        )

    def _record_sys(self, body: Mapping[str, Any]) -> None:
        sys_section = body.get("sys") or {}
        self._version = sys_section.get("version", self._version)

    def _require_id(self) -> str:
        if self._content_type_id is None:
            raise RemoteApiError("Content type has not been saved yet.")
        return self._content_type_id

    def _payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "displayField": self.display_field,
            "fields": self._fields_payload(),
        }

    def _fields_payload(self) -> list[dict[str, Any]]:
        """Encode fields, keeping remote-only attributes such as linkType, items or validations.

        Unedited fields are sent back exactly as loaded. Edited fields are merged over
        the remote body with the same id unless their type changed.
        """
        if self.fields == self._loaded_fields:
            return [dict(item) for item in self._remote_fields]
        remote_by_id = {item.get("id"): item for item in self._remote_fields}
        payload: list[dict[str, Any]] = []
        for field in self.fields:
            remote = remote_by_id.get(field.id) or {}
            base = dict(remote) if remote.get("type") == field.type else {}
            base.update(_encode_field(field))
            payload.append(base)
        return payload


def _encode_field(field: Field) -> dict[str, Any]:
    return {
        "id": field.id,
        "name": field.name,
        "type": field.type,
        "required": field.required,
        "localized": field.localized,
        "disabled": field.disabled,
        "omitted": field.omitted,
    }


def _decode_field(payload: Mapping[str, Any]) -> Field:
    return Field(
        id=str(payload.get("id", "")),
        name=str(payload.get("name", "")),
        type=str(payload.get("type", "")),
        required=bool(payload.get("required", True)),
        localized=bool(payload.get("localized", False)),
        disabled=bool(payload.get("disabled", False)),
        omitted=bool(payload.get("omitted", False)),
    )


def _format_error(response: httpx.Response) -> str:
    """Format an API error response for human readability."""
    try:
        data = response.json()
        message = data.get("message") or response.text
    except (json.JSONDecodeError, ValueError, AttributeError):
        message = response.text
    return f"HTTP {response.status_code}: {message}"
