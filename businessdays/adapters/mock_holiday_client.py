"""
Mock holiday source for running without network access.
"""

import json
from pathlib import Path
from typing import Any, Set

from .holiday_client import extract_holiday_dates


class MockHolidayClient:
    """
    Mock client that serves a bundled holiday document.

    Loads Colombian holidays from mock_holidays.json, or from ``data_file``
    when given, without touching the network.
    """

    def __init__(self, data_file: Path | None = None):
        self.data_file = data_file or Path(__file__).parent / "mock_holidays.json"
        self.url = str(self.data_file)
        self.fetch_count = 0
        self._load_payload()

    def _load_payload(self):
        """Load mock holiday data from JSON file."""
        if self.data_file.exists():
            with open(self.data_file, "r", encoding="utf-8") as f:
                self.payload = json.load(f)
        else:
            # Fallback to empty if file doesn't exist
            self.payload = []

    def fetch_payload(self) -> Any:
        self.fetch_count += 1
        return self.payload

    def fetch_holidays(self) -> Set[str]:
        return extract_holiday_dates(self.fetch_payload())
