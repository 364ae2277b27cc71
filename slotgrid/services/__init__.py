"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .layout_service import AvailabilityResolverProtocol, CalendarLayoutService

__all__ = ["AvailabilityResolverProtocol", "CalendarLayoutService"]
