"""Engine error types."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when a caller passes arguments the engine cannot act on."""
