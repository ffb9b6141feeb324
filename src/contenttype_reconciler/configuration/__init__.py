"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import (
    ConfigurationError,
    decode_declaration,
    decode_field,
    load_configuration,
    parse_content_type_declarations,
)
from .runtime_settings import ApiSettings, Configuration

__all__ = [
    "ApiSettings",
    "Configuration",
    "ConfigurationError",
    "decode_declaration",
    "decode_field",
    "load_configuration",
    "parse_content_type_declarations",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
