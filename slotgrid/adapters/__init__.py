"""
Adapters layer - External availability sources.
"""

from .json_availability import JsonAvailabilityResolver

__all__ = ["JsonAvailabilityResolver"]
