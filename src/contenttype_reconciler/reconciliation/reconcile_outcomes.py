"""Reconciliation domain entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ObservedState:
    """Remote identity and version recorded after a successful operation."""

    content_type_id: str
    version: int
