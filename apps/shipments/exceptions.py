"""Lifecycle errors surfaced to API callers."""


class LifecycleError(Exception):
    """Base class for shipment/agent lifecycle failures."""


class MirrorSyncError(LifecycleError):
    """The primary write succeeded but the realtime mirror write failed."""


class InvalidTransition(LifecycleError):
    """A status change rejected by the active transition policy."""


class ImmutableFieldError(LifecycleError):
    """A patch tried to change a field that is fixed at creation."""
