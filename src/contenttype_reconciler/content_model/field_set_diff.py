"""Field set differ for the soft-delete field lifecycle."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from .content_model_entities import Field


@dataclass(frozen=True)
class FieldSetDiff:
    """Outcome of comparing a recorded field list with a newly declared one.

    ``final_fields`` is the shape the content type converges to.
    ``transitional_extra`` holds removed fields marked as omitted; they must be
    published once before they can be dropped.
    """

    final_fields: tuple[Field, ...]
    transitional_extra: tuple[Field, ...]
    added_field_ids: tuple[str, ...] = ()

    @property
    def needs_transition(self) -> bool:
        return bool(self.transitional_extra)

    @property
    def removed_field_ids(self) -> tuple[str, ...]:
        return tuple(field.id for field in self.transitional_extra)

    @property
    def transitional_fields(self) -> tuple[Field, ...]:
        """Fields to publish in the first phase: final fields plus soft-deleted ones."""
        return self.final_fields + self.transitional_extra


def diff_field_sets(old: Sequence[Field], new: Sequence[Field]) -> FieldSetDiff:
    """Compare two field lists by id and mark removed fields for soft deletion."""
    new_ids = {field.id for field in new}
    old_ids = {field.id for field in old}

    transitional_extra = tuple(
        replace(field, omitted=True) for field in old if field.id not in new_ids
    )
    added_field_ids = tuple(field.id for field in new if field.id not in old_ids)
    return FieldSetDiff(
        final_fields=tuple(new),
        transitional_extra=transitional_extra,
        added_field_ids=added_field_ids,
    )
