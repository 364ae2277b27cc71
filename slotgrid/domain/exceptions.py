"""
Domain-specific exception hierarchy for the slot layout engine.
"""


class SlotGridError(Exception):
    """Base class for all application-level errors."""


class InvalidDayWindowError(SlotGridError, ValueError):
    """Raised when a day window cannot be laid out (bad hours or timezone)."""


class AvailabilityDataError(SlotGridError):
    """Raised when an availability source cannot be read or has the wrong shape."""
