"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "contenttypes.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Content type configuration template for contenttype-reconciler.
# Replace every <REQUIRED> placeholder before running plan or apply.
# Replace <OPTIONAL> placeholders only when your setup needs them.

api:
  # Leave access_token unset to read it from CONTENTFUL_MANAGEMENT_TOKEN.
  access_token: "<REQUIRED>"
  # base_url: "<OPTIONAL>"
  # timeout_seconds: "<OPTIONAL>"
  # Unpublish content types before deleting them.
  # deactivate_before_delete: "<OPTIONAL>"

# Path of the JSON state file, relative to this configuration file.
# state_path: "<OPTIONAL>"

content_types:
  # Each key is a local resource name tracked in the state file.
  example:
    # Changing space_id deletes and recreates the content type.
    space_id: "<REQUIRED>"
    name: "<REQUIRED>"
    # description: "<OPTIONAL>"
    # display_field must reference one of the field ids below.
    display_field: "<REQUIRED>"
    field:
      - id: "<REQUIRED>"
        name: "<REQUIRED>"
        type: "<REQUIRED>"
        # Defaults: required true, localized false, disabled false, omitted false.
        # required: "<OPTIONAL>"
        # localized: "<OPTIONAL>"
        # disabled: "<OPTIONAL>"
        # omitted: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
