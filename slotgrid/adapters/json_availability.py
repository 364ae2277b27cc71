"""
Availability resolver backed by a JSON file, for offline use and tests.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pendulum import Date

from ..domain.exceptions import AvailabilityDataError

logger = logging.getLogger(__name__)


class JsonAvailabilityResolver:
    """
    Resolver that loads already-computed availability from a JSON file.

    The file holds a mapping of ``YYYY-MM-DD`` to a list of slot records,
    either at the root or below a ``"slots"`` key:

        {"slots": {"2024-11-25": [{"start": "...", "end": "..."}]}}
    """

    def __init__(self, data_file: Path):
        """
        Initialize the resolver.

        Args:
            data_file: Path to the availability JSON file

        Raises:
            FileNotFoundError: If the file doesn't exist
            AvailabilityDataError: If the file is not valid availability JSON
        """
        self.data_file = Path(data_file)
        self.availability = self._load_availability()

    def _load_availability(self) -> Dict[str, List[Any]]:
        if not self.data_file.exists():
            raise FileNotFoundError(f"Availability file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise AvailabilityDataError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        if isinstance(data, dict) and isinstance(data.get("slots"), dict):
            data = data["slots"]

        if not isinstance(data, dict):
            raise AvailabilityDataError("Availability file must contain a mapping of dates to slots.")

        for date_key, records in data.items():
            if not isinstance(records, list):
                raise AvailabilityDataError(f"Slots for {date_key} must be a list, got {type(records).__name__}")

        logger.debug("Loaded availability for %d date(s) from %s", len(data), self.data_file)
        return data

    async def get_availability(
        self,
        start_date: Date,
        end_date: Date,
        timezone: str = "Europe/Berlin"
    ) -> Dict[str, List[Any]]:
        """
        Return the availability of every date in the requested range.

        Args:
            start_date: First visible date
            end_date: Last visible date (inclusive)
            timezone: IANA timezone the date keys are expressed in

        Returns:
            Dictionary mapping YYYY-MM-DD -> list of raw slot records
        """
        first = start_date.to_date_string()
        last = end_date.to_date_string()

        return {
            date_key: list(records)
            for date_key, records in self.availability.items()
            if first <= date_key <= last
        }
