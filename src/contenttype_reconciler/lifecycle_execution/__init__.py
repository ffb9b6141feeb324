"""Lifecycle execution domain exports."""

from .change_planner import describe_change, plan_changes
from .lifecycle_contracts import (
    ChangeAction,
    LifecycleOutcome,
    LifecycleRequest,
    PlannedChange,
    ResourceResult,
)
from .lifecycle_use_case import (
    LifecycleExecutionError,
    execute_apply,
    execute_destroy,
    execute_plan,
    execute_refresh,
)

__all__ = [
    "ChangeAction",
    "LifecycleOutcome",
    "LifecycleRequest",
    "PlannedChange",
    "ResourceResult",
    "LifecycleExecutionError",
    "describe_change",
    "execute_apply",
    "execute_destroy",
    "execute_plan",
    "execute_refresh",
]
