"""Reconciliation domain exports."""

from .content_type_reconciler import ContentTypeReconciler
from .reconcile_outcomes import ObservedState

__all__ = ["ContentTypeReconciler", "ObservedState"]
