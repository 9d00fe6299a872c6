"""
HTTP client for the remote holiday list.
"""

import logging
import re
from typing import Any, Iterable, Set

import requests

from ..domain.exceptions import CalendarSourceUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_HOLIDAYS_URL = "https://content.capta.co/Recruitment/WorkingDays.json"

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}")

# Keys tried, in order, on record-shaped entries
DATE_KEYS = ("date", "Date", "fecha")


def _iso_date(value: Any) -> str | None:
    """Return the leading ``YYYY-MM-DD`` of ``value`` if it has one."""
    if isinstance(value, str) and ISO_DATE_PATTERN.match(value):
        return value[:10]
    return None


def _date_from_record(record: dict) -> str | None:
    for key in DATE_KEYS:
        if key in record:
            found = _iso_date(str(record[key]))
            if found:
                return found

    # Fall back to the first date-shaped value anywhere in the record
    for value in record.values():
        found = _iso_date(value)
        if found:
            return found
    return None


def _dates_from_items(items: Iterable[Any]) -> Set[str]:
    dates: Set[str] = set()

    for item in items:
        if isinstance(item, dict):
            found = _date_from_record(item)
        else:
            found = _iso_date(item)
        if found:
            dates.add(found)

    return dates


def extract_holiday_dates(payload: Any) -> Set[str]:
    """
    Pull ISO holiday dates out of whatever shape the upstream returns.

    Supported shapes:
    - ``["2025-01-01", ...]``
    - ``[{"date": "2025-01-01", "name": "..."}, ...]`` (also ``Date``/``fecha``
      or any date-shaped value)
    - ``{"holidays": [...], "updated": "2025-01-01", ...}``: list values are
      scanned as above and date-shaped string values are taken directly

    Returns:
        Set of ``YYYY-MM-DD`` strings
    """
    if isinstance(payload, list):
        return _dates_from_items(payload)

    if isinstance(payload, dict):
        dates: Set[str] = set()
        for value in payload.values():
            if isinstance(value, list):
                dates |= _dates_from_items(value)
            else:
                found = _iso_date(value)
                if found:
                    dates.add(found)
        return dates

    return set()


class HolidayClient:
    """
    Client for the remote holiday JSON document.

    The document lists holidays for several years at once; callers filter
    by year (see ``HolidayCache``).
    """

    def __init__(self, url: str = DEFAULT_HOLIDAYS_URL, timeout: float = 5.0):
        """
        Initialize the holiday client.

        Args:
            url: Location of the holiday JSON document
            timeout: Request timeout in seconds
        """
        self.url = url
        self.timeout = timeout

    def fetch_payload(self) -> Any:
        """
        Download and decode the raw holiday document.

        Raises:
            CalendarSourceUnavailableError: If the request or JSON decoding fails
        """
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as e:
            raise CalendarSourceUnavailableError(
                f"Failed to fetch holidays from {self.url}: {e}"
            ) from e
        except ValueError as e:
            raise CalendarSourceUnavailableError(
                f"Holiday document at {self.url} is not valid JSON: {e}"
            ) from e

    def fetch_holidays(self) -> Set[str]:
        """Fetch the holiday document and extract its ISO dates."""
        dates = extract_holiday_dates(self.fetch_payload())
        logger.info("Fetched %d holiday date(s) from %s", len(dates), self.url)
        return dates
