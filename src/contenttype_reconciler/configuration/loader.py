"""Configuration loader service."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from contenttype_reconciler.content_model.content_model_entities import (
    ContentTypeDeclaration,
    Field,
)

from .runtime_settings import (
    ACCESS_TOKEN_ENV_VAR,
    DEFAULT_BASE_URL,
    ApiSettings,
    Configuration,
)

DEFAULT_STATE_FILENAME = "contenttypes.state.json"

_FIELD_FLAG_DEFAULTS = {
    "required": True,
    "localized": False,
    "disabled": False,
    "omitted": False,
}


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(
    config_path: Path | str, *, environ: Mapping[str, str] | None = None
) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    api = _parse_api_section(parsed.get("api"), os.environ if environ is None else environ)
    state_path = _resolve_path(
        path.parent,
        _optional_string(parsed.get("state_path"), "state_path") or DEFAULT_STATE_FILENAME,
    )
    content_types = parse_content_type_declarations(parsed.get("content_types"))

    return Configuration(
        path=path,
        api=api,
        state_path=state_path,
        content_types=content_types,
    )


def parse_content_type_declarations(value: Any) -> dict[str, ContentTypeDeclaration]:
    """Decode the ``content_types`` mapping into typed declarations."""
    if value is None:
        return {}
    section = _require_mapping(value, "content_types")
    declarations: dict[str, ContentTypeDeclaration] = {}
    for resource_name, body in section.items():
        if not isinstance(resource_name, str) or not resource_name.strip():
            raise ConfigurationError("content_types keys must be non-empty strings.")
        declarations[resource_name] = decode_declaration(body, f"content_types.{resource_name}")
    return declarations


def decode_declaration(value: Any, label: str) -> ContentTypeDeclaration:
    """Decode one attribute bag into a content type declaration."""
    section = _require_mapping(value, label)
    raw_fields = section.get("field")
    if not isinstance(raw_fields, Sequence) or isinstance(raw_fields, str | bytes):
        raise ConfigurationError(f"{label}.field must be a list of field definitions.")
    if not raw_fields:
        raise ConfigurationError(f"{label}.field requires at least one field.")

    fields = tuple(
        decode_field(item, f"{label}.field[{index}]") for index, item in enumerate(raw_fields)
    )
    seen_ids: set[str] = set()
    for field in fields:
        if field.id in seen_ids:
            raise ConfigurationError(f"{label}.field contains duplicate id '{field.id}'.")
        seen_ids.add(field.id)

    return ContentTypeDeclaration(
        space_id=_require_non_empty_string(section.get("space_id"), f"{label}.space_id"),
        name=_require_non_empty_string(section.get("name"), f"{label}.name"),
        display_field=_require_non_empty_string(
            section.get("display_field"), f"{label}.display_field"
        ),
        description=_optional_string(section.get("description"), f"{label}.description") or "",
        fields=fields,
    )


def decode_field(value: Any, label: str) -> Field:
    """Decode one field attribute bag, applying documented defaults."""
    section = _require_mapping(value, label)
    flags = {
        flag: _optional_bool(section.get(flag), f"{label}.{flag}", default)
        for flag, default in _FIELD_FLAG_DEFAULTS.items()
    }
    return Field(
        id=_require_non_empty_string(section.get("id"), f"{label}.id"),
        name=_require_non_empty_string(section.get("name"), f"{label}.name"),
        type=_require_non_empty_string(section.get("type"), f"{label}.type"),
        **flags,
    )


def _parse_api_section(value: Any, environ: Mapping[str, str]) -> ApiSettings:
    section = _require_mapping(value, "api")
    access_token = _optional_string(section.get("access_token"), "api.access_token")
    if access_token is None:
        access_token = (environ.get(ACCESS_TOKEN_ENV_VAR) or "").strip() or None
    if access_token is None:
        raise ConfigurationError(
            f"api.access_token is required (or set {ACCESS_TOKEN_ENV_VAR})."
        )
    base_url = _optional_string(section.get("base_url"), "api.base_url") or DEFAULT_BASE_URL
    timeout_seconds = _require_positive_int(
        section.get("timeout_seconds", 30), "api.timeout_seconds"
    )
    deactivate_before_delete = _optional_bool(
        section.get("deactivate_before_delete"), "api.deactivate_before_delete", False
    )
    return ApiSettings(
        access_token=access_token,
        base_url=base_url,
        timeout_seconds=timeout_seconds,
        deactivate_before_delete=deactivate_before_delete,
    )


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _optional_bool(value: Any, field_name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
