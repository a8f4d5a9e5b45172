"""Exceptions raised by the checkpoint store and its storage tiers."""


class CheckpointError(Exception):
    """Base class for checkpoint store failures."""

    pass


class InvalidArgumentError(CheckpointError, ValueError):
    """Raised when a required key component or argument is missing or malformed."""

    pass


class PersistenceError(CheckpointError):
    """Raised when an underlying storage tier fails."""

    pass


class CacheTierError(PersistenceError):
    """Raised on cache tier I/O failures."""

    pass


class DurableTierError(PersistenceError):
    """Raised on durable tier I/O failures."""

    pass
