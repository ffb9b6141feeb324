"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from contenttype_reconciler.content_model.content_model_entities import ContentTypeDeclaration

DEFAULT_BASE_URL = "https://api.contentful.com"
ACCESS_TOKEN_ENV_VAR = "CONTENTFUL_MANAGEMENT_TOKEN"


@dataclass(frozen=True)
class ApiSettings:
    """Remote content API connectivity configuration."""

    access_token: str
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: int = 30
    deactivate_before_delete: bool = False


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    api: ApiSettings
    state_path: Path
    content_types: Mapping[str, ContentTypeDeclaration]
