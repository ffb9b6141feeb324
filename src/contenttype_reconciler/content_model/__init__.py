"""Content model exports."""

from .content_model_entities import ContentTypeDeclaration, Field
from .field_set_diff import FieldSetDiff, diff_field_sets

__all__ = [
    "ContentTypeDeclaration",
    "Field",
    "FieldSetDiff",
    "diff_field_sets",
]
