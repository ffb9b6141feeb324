"""Content type reconciliation driver."""

from __future__ import annotations

import logging

from contenttype_reconciler.content_model.content_model_entities import ContentTypeDeclaration
from contenttype_reconciler.content_model.field_set_diff import diff_field_sets
from contenttype_reconciler.remote_api.remote_contracts import (
    ContentApiClient,
    ContentTypeNotFoundError,
    RemoteApiError,
    RemoteContentType,
)

from .reconcile_outcomes import ObservedState

logger = logging.getLogger(__name__)


class ContentTypeReconciler:
    """Drive a remote content type into its declared state.

    Every operation re-fetches the remote object before mutating it and runs a
    strictly sequential chain of remote calls. Remote errors propagate unchanged;
    nothing is retried or compensated.
    """

    def __init__(self, client: ContentApiClient, *, deactivate_before_delete: bool = False) -> None:
        self._client = client
        self._deactivate_before_delete = deactivate_before_delete

    def create(self, declaration: ContentTypeDeclaration) -> ObservedState:
        """Create and activate a content type.

        An activation failure leaves the saved content type in place on the
        remote side; it is not deleted.
        """
        space = self._client.get_space(declaration.space_id)
        content_type = space.new_content_type()
        content_type.name = declaration.name
        content_type.display_field = declaration.display_field
        content_type.description = declaration.description
        content_type.fields = list(declaration.fields)

        content_type.save()
        try:
            content_type.activate()
        except RemoteApiError:
            logger.warning(
                "content type %s saved but not activated in space %s; left in place",
                content_type.content_type_id,
                declaration.space_id,
            )
            raise

        logger.info(
            "created content type %s (version %s)",
            content_type.content_type_id,
            content_type.version,
        )
        return _observe(content_type)

    def read(self, space_id: str, content_type_id: str) -> ObservedState | None:
        """Return the observed state, or None when the content type no longer exists."""
        space = self._client.get_space(space_id)
        try:
            content_type = space.get_content_type(content_type_id)
        except ContentTypeNotFoundError:
            logger.info("content type %s not found in space %s", content_type_id, space_id)
            return None
        return _observe(content_type)

    def update(
        self,
        content_type_id: str,
        previous: ContentTypeDeclaration,
        desired: ContentTypeDeclaration,
    ) -> ObservedState:
        """Apply scalar and field changes, soft-deleting removed fields first."""
        space = self._client.get_space(desired.space_id)
        content_type = space.get_content_type(content_type_id)

        content_type.name = desired.name
        content_type.display_field = desired.display_field
        content_type.description = desired.description

        field_diff = None
        if previous.fields != desired.fields:
            field_diff = diff_field_sets(previous.fields, desired.fields)
            content_type.fields = list(field_diff.transitional_fields)

        _save_and_activate(content_type)

        if field_diff is not None and field_diff.needs_transition:
            logger.info(
                "dropping omitted fields %s from content type %s",
                ", ".join(field_diff.removed_field_ids),
                content_type_id,
            )
            content_type.fields = list(field_diff.final_fields)
            _save_and_activate(content_type)

        return _observe(content_type)

    def delete(self, space_id: str, content_type_id: str) -> None:
        space = self._client.get_space(space_id)
        content_type = space.get_content_type(content_type_id)
        if self._deactivate_before_delete:
            content_type.deactivate()
        content_type.delete()
        logger.info("deleted content type %s from space %s", content_type_id, space_id)


def _save_and_activate(content_type: RemoteContentType) -> None:
    content_type.save()
    content_type.activate()
    logger.debug(
        "published content type %s at version %s",
        content_type.content_type_id,
        content_type.version,
    )


def _observe(content_type: RemoteContentType) -> ObservedState:
    if content_type.content_type_id is None or content_type.version is None:
        raise RemoteApiError("Remote content type is missing its id or version.")
    return ObservedState(
        content_type_id=content_type.content_type_id,
        version=content_type.version,
    )
