"""Change planning between declarations and tracked state."""

from __future__ import annotations

from collections.abc import Mapping

from contenttype_reconciler.content_model.content_model_entities import ContentTypeDeclaration
from contenttype_reconciler.content_model.field_set_diff import diff_field_sets
from contenttype_reconciler.state_tracking.state_models import StateDocument

from .lifecycle_contracts import ChangeAction, PlannedChange

_ACTION_MARKERS = {
    ChangeAction.CREATE: "+",
    ChangeAction.UPDATE: "~",
    ChangeAction.REPLACE: "-/+",
    ChangeAction.DELETE: "-",
    ChangeAction.NOOP: "=",
}


def plan_changes(
    declarations: Mapping[str, ContentTypeDeclaration], state: StateDocument
) -> tuple[PlannedChange, ...]:
    """Return planned changes: declared resources first, then undeclared tracked ones."""
    changes: list[PlannedChange] = []
    for resource_name, declaration in declarations.items():
        tracked = state.resources.get(resource_name)
        if tracked is None:
            action = ChangeAction.CREATE
        elif tracked.space_id != declaration.space_id:
            action = ChangeAction.REPLACE
        elif tracked.declaration != declaration:
            action = ChangeAction.UPDATE
        else:
            action = ChangeAction.NOOP

        field_diff = None
        if (
            action == ChangeAction.UPDATE
            and tracked is not None
            and tracked.declaration.fields != declaration.fields
        ):
            field_diff = diff_field_sets(tracked.declaration.fields, declaration.fields)
        changes.append(
            PlannedChange(
                resource_name=resource_name,
                action=action,
                declaration=declaration,
                tracked=tracked,
                field_diff=field_diff,
            )
        )

    for resource_name, tracked in state.resources.items():
        if resource_name not in declarations:
            changes.append(
                PlannedChange(
                    resource_name=resource_name,
                    action=ChangeAction.DELETE,
                    declaration=None,
                    tracked=tracked,
                )
            )
    return tuple(changes)


def describe_change(change: PlannedChange) -> str:
    """Render one planned change as a single human readable line."""
    line = f"{_ACTION_MARKERS[change.action]} {change.resource_name}: {change.action.value}"
    details: list[str] = []
    if change.tracked is not None and change.action != ChangeAction.CREATE:
        details.append(f"id={change.tracked.content_type_id}")
    diff = change.field_diff
    if diff is not None:
        if diff.added_field_ids:
            details.append(f"add fields: {', '.join(diff.added_field_ids)}")
        if diff.needs_transition:
            details.append(f"soft-delete fields: {', '.join(diff.removed_field_ids)}")
    if details:
        line = f"{line} ({'; '.join(details)})"
    return line
