"""
Shared fixtures.
"""

import json

import pytest

AVAILABILITY = {
    "slots": {
        "2024-11-25": [
            {"start": "2024-11-25T10:00:00Z", "end": "2024-11-25T10:30:00Z"},
        ],
        "2024-11-26": [
            {
                "start": "2024-11-26T08:00:00Z",
                "end": "2024-11-26T09:00:00Z",
                "away": True,
                "fromUser": {"id": 1, "name": "Anna"},
                "toUser": {"id": 2, "name": "Max"},
                "reason": "Urlaub",
            },
            {
                "start": "2024-11-26T09:00:00Z",
                "end": "2024-11-26T10:00:00Z",
                "away": True,
                "fromUser": {"id": 1, "name": "Anna"},
                "toUser": {"id": 2, "name": "Max"},
                "reason": "Urlaub",
            },
        ],
        "2024-11-27": [
            {
                "start": "2024-11-27T08:00:00Z",
                "end": "2024-11-27T16:00:00Z",
                "away": True,
                "fromUser": {"id": 1, "name": "Anna"},
                "toUser": None,
            },
        ],
        "2024-12-24": [
            {"start": "2024-12-24T08:00:00Z", "end": "2024-12-24T09:00:00Z"},
        ],
    }
}


@pytest.fixture
def availability_file(tmp_path):
    """A JSON availability file covering a few days of November 2024."""
    path = tmp_path / "availability.json"
    path.write_text(json.dumps(AVAILABILITY), encoding="utf-8")
    return path
