"""Exceptions raised by the piggybank boundary helpers.

The calculators themselves never raise for documented input; these are
used by the request builders and the snapshot loader.
"""


class PiggybankError(Exception):
    """Base class for all package errors."""


class InvalidMutationError(PiggybankError, ValueError):
    """Raised when a deposit or transfer request cannot be built."""


class SnapshotError(PiggybankError, ValueError):
    """Raised when a ledger snapshot file cannot be read or decoded."""
