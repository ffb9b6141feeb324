"""Lifecycle execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from contenttype_reconciler.content_model.content_model_entities import ContentTypeDeclaration
from contenttype_reconciler.content_model.field_set_diff import FieldSetDiff
from contenttype_reconciler.reconciliation.reconcile_outcomes import ObservedState
from contenttype_reconciler.state_tracking.state_models import TrackedResource


class ChangeAction(str, Enum):
    """Action required to converge one resource."""

    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    DELETE = "delete"
    NOOP = "noop"


@dataclass(frozen=True)
class PlannedChange:
    """One resource's planned action."""

    resource_name: str
    action: ChangeAction
    declaration: ContentTypeDeclaration | None
    tracked: TrackedResource | None
    field_diff: FieldSetDiff | None = None


@dataclass(frozen=True)
class LifecycleRequest:
    """Input contract for one apply, refresh or destroy run."""

    config_path: str
    dry_run: bool = False


@dataclass(frozen=True)
class ResourceResult:
    """Outcome of converging one resource."""

    resource_name: str
    action: ChangeAction
    observed: ObservedState | None


@dataclass(frozen=True)
class LifecycleOutcome:
    """Output contract for one completed run."""

    state_path: Path
    results: tuple[ResourceResult, ...]
    dry_run: bool = False

    @property
    def changed(self) -> int:
        return sum(1 for result in self.results if result.action != ChangeAction.NOOP)
