"""Apply, refresh and destroy use-case services."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from contenttype_reconciler.configuration import (
    ApiSettings,
    Configuration,
    ConfigurationError,
    load_configuration,
)
from contenttype_reconciler.content_model.content_model_entities import ContentTypeDeclaration
from contenttype_reconciler.reconciliation import ContentTypeReconciler, ObservedState
from contenttype_reconciler.remote_api.management_client import ManagementApiClient
from contenttype_reconciler.remote_api.remote_contracts import ContentApiClient, RemoteApiError
from contenttype_reconciler.state_tracking import (
    StateDocument,
    StateError,
    TrackedResource,
    load_state,
    write_state,
)

from .change_planner import plan_changes
from .lifecycle_contracts import (
    ChangeAction,
    LifecycleOutcome,
    LifecycleRequest,
    PlannedChange,
    ResourceResult,
)

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ApiSettings], ContentApiClient]


class LifecycleExecutionError(Exception):
    """Raised when an apply, refresh or destroy run cannot be completed."""


def execute_plan(request: LifecycleRequest) -> tuple[PlannedChange, ...]:
    """Load configuration and state and return the planned changes."""
    configuration, state = _load_inputs(request.config_path)
    return plan_changes(configuration.content_types, state)


def execute_apply(
    request: LifecycleRequest, *, client_factory: ClientFactory | None = None
) -> LifecycleOutcome:
    """Converge every declared content type and persist state after each success."""
    configuration, state = _load_inputs(request.config_path)
    changes = plan_changes(configuration.content_types, state)

    if request.dry_run:
        return LifecycleOutcome(
            state_path=configuration.state_path,
            results=tuple(
                ResourceResult(
                    resource_name=change.resource_name, action=change.action, observed=None
                )
                for change in changes
            ),
            dry_run=True,
        )

    results: list[ResourceResult] = []
    client = (client_factory or ManagementApiClient)(configuration.api)
    try:
        reconciler = ContentTypeReconciler(
            client, deactivate_before_delete=configuration.api.deactivate_before_delete
        )
        for change in changes:
            if change.action == ChangeAction.NOOP:
                results.append(_unchanged_result(change))
                continue
            try:
                state, observed = _apply_change(reconciler, change, state, configuration.state_path)
            except RemoteApiError as exc:
                raise LifecycleExecutionError(
                    f"{change.resource_name}: {change.action.value} failed: {exc}"
                ) from exc
            _write_state(configuration.state_path, state)
            results.append(
                ResourceResult(
                    resource_name=change.resource_name, action=change.action, observed=observed
                )
            )
    finally:
        client.close()

    return LifecycleOutcome(state_path=configuration.state_path, results=tuple(results))


def execute_refresh(
    request: LifecycleRequest, *, client_factory: ClientFactory | None = None
) -> LifecycleOutcome:
    """Confirm every tracked content type still exists and record its version.

    Content types that no longer exist are dropped from state.
    """
    configuration, state = _load_inputs(request.config_path)
    results: list[ResourceResult] = []
    client = (client_factory or ManagementApiClient)(configuration.api)
    try:
        reconciler = ContentTypeReconciler(client)
        for resource_name, tracked in state.resources.items():
            try:
                observed = reconciler.read(tracked.space_id, tracked.content_type_id)
            except RemoteApiError as exc:
                raise LifecycleExecutionError(f"{resource_name}: refresh failed: {exc}") from exc
            if observed is None:
                logger.warning(
                    "%s: content type %s disappeared remotely; dropping it from state",
                    resource_name,
                    tracked.content_type_id,
                )
                state = state.without_resource(resource_name)
                results.append(
                    ResourceResult(
                        resource_name=resource_name, action=ChangeAction.DELETE, observed=None
                    )
                )
                continue
            state = state.with_resource(resource_name, replace(tracked, version=observed.version))
            results.append(
                ResourceResult(
                    resource_name=resource_name, action=ChangeAction.NOOP, observed=observed
                )
            )
    finally:
        client.close()

    _write_state(configuration.state_path, state)
    return LifecycleOutcome(state_path=configuration.state_path, results=tuple(results))


def execute_destroy(
    request: LifecycleRequest, *, client_factory: ClientFactory | None = None
) -> LifecycleOutcome:
    """Delete every tracked content type, removing each from state as it goes."""
    configuration, state = _load_inputs(request.config_path)
    results: list[ResourceResult] = []
    client = (client_factory or ManagementApiClient)(configuration.api)
    try:
        reconciler = ContentTypeReconciler(
            client, deactivate_before_delete=configuration.api.deactivate_before_delete
        )
        for resource_name, tracked in list(state.resources.items()):
            try:
                reconciler.delete(tracked.space_id, tracked.content_type_id)
            except RemoteApiError as exc:
                raise LifecycleExecutionError(f"{resource_name}: delete failed: {exc}") from exc
            state = state.without_resource(resource_name)
            _write_state(configuration.state_path, state)
            results.append(
                ResourceResult(
                    resource_name=resource_name, action=ChangeAction.DELETE, observed=None
                )
            )
    finally:
        client.close()

    return LifecycleOutcome(state_path=configuration.state_path, results=tuple(results))


def _load_inputs(config_path: str) -> tuple[Configuration, StateDocument]:
    try:
        configuration = load_configuration(config_path)
        state = load_state(configuration.state_path)
    except (ConfigurationError, StateError, OSError) as exc:
        raise LifecycleExecutionError(str(exc)) from exc
    return configuration, state


def _write_state(state_path: Path, state: StateDocument) -> None:
    try:
        write_state(state_path, state)
    except StateError as exc:
        raise LifecycleExecutionError(str(exc)) from exc


def _apply_change(
    reconciler: ContentTypeReconciler,
    change: PlannedChange,
    state: StateDocument,
    state_path: Path,
) -> tuple[StateDocument, ObservedState | None]:
    name = change.resource_name
    tracked = change.tracked
    declaration = change.declaration

    if change.action == ChangeAction.DELETE:
        assert tracked is not None
        reconciler.delete(tracked.space_id, tracked.content_type_id)
        return state.without_resource(name), None

    assert declaration is not None
    if change.action == ChangeAction.UPDATE:
        assert tracked is not None
        observed = reconciler.update(tracked.content_type_id, tracked.declaration, declaration)
        return state.with_resource(name, _tracked(declaration, observed)), observed

    if change.action == ChangeAction.REPLACE:
        assert tracked is not None
        reconciler.delete(tracked.space_id, tracked.content_type_id)
        state = state.without_resource(name)
        _write_state(state_path, state)

    observed = reconciler.create(declaration)
    return state.with_resource(name, _tracked(declaration, observed)), observed


def _tracked(declaration: ContentTypeDeclaration, observed: ObservedState) -> TrackedResource:
    return TrackedResource(
        space_id=declaration.space_id,
        content_type_id=observed.content_type_id,
        version=observed.version,
        declaration=declaration,
    )


def _unchanged_result(change: PlannedChange) -> ResourceResult:
    observed = None
    if change.tracked is not None:
        observed = ObservedState(
            content_type_id=change.tracked.content_type_id, version=change.tracked.version
        )
    return ResourceResult(
        resource_name=change.resource_name, action=change.action, observed=observed
    )
