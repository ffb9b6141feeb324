"""Content model entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Field:
    """One typed attribute definition of a content type."""

    id: str
    name: str
    type: str
    required: bool = True
    localized: bool = False
    disabled: bool = False
    omitted: bool = False


@dataclass(frozen=True)
class ContentTypeDeclaration:
    """Desired state of one content type."""

    space_id: str
    name: str
    display_field: str
    fields: tuple[Field, ...]
    description: str = ""

    @property
    def field_ids(self) -> tuple[str, ...]:
        return tuple(field.id for field in self.fields)
