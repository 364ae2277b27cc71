"""
Application services for laying out a visible range of calendar days.

The service coordinates fetching availability via a resolver adapter and
delegates the actual layout to the domain-level ``SlotLayoutEngine``. The
resolver is a simple protocol so tests can substitute a stub.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from pendulum import Date

from ..domain.layout_engine import SlotLayoutEngine, build_windows
from ..domain.models import PositionedSlot

logger = logging.getLogger(__name__)


class AvailabilityResolverProtocol(Protocol):
    """Protocol describing the availability source needed by the service."""

    async def get_availability(
        self,
        start_date: Date,
        end_date: Date,
        timezone: str,
    ) -> Dict[str, List[Any]]:
        """Return raw availability records keyed by YYYY-MM-DD."""


class CalendarLayoutService:
    """
    Orchestrates availability retrieval and slot layout.
    """

    def __init__(
        self,
        resolver: AvailabilityResolverProtocol,
        engine: SlotLayoutEngine,
    ) -> None:
        self._resolver = resolver
        self._engine = engine

    async def build_layout(
        self,
        *,
        start_date: Date,
        end_date: Date,
        timezone: str,
        start_hour: int,
        end_hour: int,
    ) -> Dict[str, List[PositionedSlot]]:
        """
        Retrieve availability and lay out every visible day.
        """
        # Validate the grid before asking the resolver for anything
        windows = build_windows(start_date, end_date, start_hour, end_hour, timezone)

        availability = await self._resolver.get_availability(
            start_date=start_date,
            end_date=end_date,
            timezone=timezone,
        )
        logger.debug("Resolved availability for %d date(s)", len(availability))

        return self._engine.layout_days(windows, self._only_requested_dates(windows, availability))

    def layout_availability(
        self,
        *,
        start_date: Date,
        end_date: Date,
        availability: Mapping[str, Optional[Sequence[Any]]],
        timezone: str,
        start_hour: int,
        end_hour: int,
    ) -> Dict[str, List[PositionedSlot]]:
        """Lay out availability that has already been resolved."""
        return self._engine.layout_range(
            start_date,
            end_date,
            availability,
            start_hour=start_hour,
            end_hour=end_hour,
            timezone=timezone,
        )

    @staticmethod
    def _only_requested_dates(windows, availability: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Drop dates the resolver returned outside the requested range.

        Resolvers may answer with a wider range than asked for; those dates
        would never be looked up, so they are discarded early.
        """
        requested = {window.date_key() for window in windows}
        extra = sorted(set(availability) - requested)
        if extra:
            logger.debug("Ignoring availability outside the visible range: %s", ", ".join(extra))
        return {key: value for key, value in availability.items() if key in requested}
