"""Exception types raised by the rollup engine and its store adapter."""


class RollupError(Exception):
    """Base class for all engine errors."""


class ValidationError(RollupError, ValueError):
    """Caller-correctable input problem; nothing was computed or persisted."""


class PermissionDeniedError(RollupError, ValueError):
    """The acting role is not allowed to perform the write."""


class PersistenceError(RollupError, RuntimeError):
    """A write to the store failed and was rolled back."""
