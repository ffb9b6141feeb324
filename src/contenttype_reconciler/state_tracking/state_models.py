"""State tracking entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from contenttype_reconciler.content_model.content_model_entities import ContentTypeDeclaration

STATE_FORMAT_VERSION = 1


@dataclass(frozen=True)
class TrackedResource:
    """Last successfully applied declaration and its observed remote attributes."""

    space_id: str
    content_type_id: str
    version: int
    declaration: ContentTypeDeclaration


@dataclass(frozen=True)
class StateDocument:
    """All tracked resources keyed by resource name."""

    resources: Mapping[str, TrackedResource] = field(default_factory=dict)

    def with_resource(self, resource_name: str, tracked: TrackedResource) -> StateDocument:
        resources = dict(self.resources)
        resources[resource_name] = tracked
        return replace(self, resources=resources)

    def without_resource(self, resource_name: str) -> StateDocument:
        resources = {name: item for name, item in self.resources.items() if name != resource_name}
        return replace(self, resources=resources)
