"""
Query parameter parsing for the business date endpoint.
"""

from dataclasses import dataclass

import pendulum
from pendulum import DateTime

from ..domain.exceptions import InvalidInputError


@dataclass(frozen=True)
class BusinessDateRequest:
    """Validated query: whole days and hours plus an optional UTC start."""
    days: int
    hours: int
    start: DateTime | None = None


def _parse_count(name: str, raw: str) -> int:
    value = raw.strip()
    if not value.isdigit() or not value.isascii():
        raise InvalidInputError(f'"{name}" must be a non-negative integer.')
    return int(value)


def parse_utc_date(raw: str) -> DateTime:
    """
    Parse an ISO-8601 UTC timestamp such as ``2025-04-10T15:00:00.000Z``.

    Raises:
        InvalidInputError: If ``raw`` lacks the trailing ``Z`` or cannot be parsed
    """
    if not raw.endswith("Z"):
        raise InvalidInputError(
            '"date" must be in UTC ISO 8601 format and include a trailing Z.'
        )
    try:
        parsed = pendulum.parse(raw, tz="UTC")
    except Exception as exc:
        raise InvalidInputError('"date" is not a valid ISO 8601 UTC date.') from exc
    if not isinstance(parsed, DateTime):
        raise InvalidInputError('"date" is not a valid ISO 8601 UTC date.')
    return parsed.in_timezone("UTC")


def parse_query(
    days: str | None = None,
    hours: str | None = None,
    date: str | None = None,
) -> BusinessDateRequest:
    """
    Validate raw query strings.

    Raises:
        InvalidInputError: If neither days nor hours is given, a count is not
            a non-negative integer, or the date is not an ISO-8601 UTC string
            ending in ``Z``
    """
    if days is None and hours is None:
        raise InvalidInputError('At least one of "days" or "hours" must be provided.')

    days_value = _parse_count("days", days) if days is not None else 0
    hours_value = _parse_count("hours", hours) if hours is not None else 0

    start = parse_utc_date(date) if date is not None else None

    return BusinessDateRequest(days=days_value, hours=hours_value, start=start)
