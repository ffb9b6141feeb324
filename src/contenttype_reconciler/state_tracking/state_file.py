"""JSON state file persistence."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import asdict
from pathlib import Path
from typing import Any

from contenttype_reconciler.configuration.loader import ConfigurationError, decode_declaration
from contenttype_reconciler.content_model.content_model_entities import ContentTypeDeclaration

from .state_models import STATE_FORMAT_VERSION, StateDocument, TrackedResource


class StateError(Exception):
    """Raised when the state file cannot be read or written."""


def load_state(state_path: Path | str) -> StateDocument:
    """Load the state file; a missing file yields an empty state."""
    path = Path(state_path)
    if not path.exists():
        return StateDocument()
    try:
        parsed = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise StateError(f"Failed to read state file {path}: {exc}") from exc

    if not isinstance(parsed, Mapping):
        raise StateError(f"State file root must be an object: {path}")
    format_version = parsed.get("format_version")
    if format_version != STATE_FORMAT_VERSION:
        raise StateError(f"Unsupported state format version {format_version!r} in {path}")

    resources = parsed.get("resources") or {}
    if not isinstance(resources, Mapping):
        raise StateError(f"State file resources must be an object: {path}")
    return StateDocument(
        resources={
            name: _decode_tracked_resource(name, body) for name, body in resources.items()
        }
    )


def write_state(state_path: Path | str, state: StateDocument) -> Path:
    """Write the state file atomically and return its resolved path."""
    path = Path(state_path)
    document = {
        "format_version": STATE_FORMAT_VERSION,
        "resources": {
            name: _encode_tracked_resource(tracked)
            for name, tracked in sorted(state.resources.items())
        },
    }
    temporary_path = path.with_name(f"{path.name}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temporary_path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        temporary_path.replace(path)
    except OSError as exc:
        raise StateError(f"Failed to write state file {path}: {exc}") from exc
    return path.resolve()


def _encode_tracked_resource(tracked: TrackedResource) -> dict[str, Any]:
    return {
        "id": tracked.content_type_id,
        "version": tracked.version,
        "space_id": tracked.space_id,
        "declaration": _encode_declaration(tracked.declaration),
    }


def _encode_declaration(declaration: ContentTypeDeclaration) -> dict[str, Any]:
    return {
        "space_id": declaration.space_id,
        "name": declaration.name,
        "description": declaration.description,
        "display_field": declaration.display_field,
        "field": [asdict(field) for field in declaration.fields],
    }


def _decode_tracked_resource(name: str, body: Any) -> TrackedResource:
    if not isinstance(body, Mapping):
        raise StateError(f"State entry '{name}' must be an object.")
    content_type_id = body.get("id")
    version = body.get("version")
    space_id = body.get("space_id")
    if not isinstance(content_type_id, str) or not content_type_id:
        raise StateError(f"State entry '{name}' is missing its id.")
    if isinstance(version, bool) or not isinstance(version, int):
        raise StateError(f"State entry '{name}' has an invalid version.")
    if not isinstance(space_id, str) or not space_id:
        raise StateError(f"State entry '{name}' is missing its space_id.")
    try:
        declaration = decode_declaration(body.get("declaration"), f"state.{name}.declaration")
    except ConfigurationError as exc:
        raise StateError(str(exc)) from exc
    return TrackedResource(
        space_id=space_id,
        content_type_id=content_type_id,
        version=version,
        declaration=declaration,
    )
