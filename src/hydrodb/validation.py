"""
Argument validation shared by the archive and realtime front-ends.

All checks here run before any connection is opened or request is sent.
"""

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Union

from .exceptions import InvalidArgumentError
from .models import DateRange

logger = logging.getLogger(__name__)

ALL_SENTINEL = "ALL"

# Ceiling imposed by the web service on a single request.
MAX_WS_STATIONS = 300

DateLike = Union[str, date, datetime, None]


def as_list(value: Union[str, Iterable[str], None]) -> Optional[List[str]]:
    """Normalize a scalar or iterable argument to a list (None passes through)."""
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    return list(value)


def reject_all_sentinel(station_number: Union[str, Sequence[str], None]) -> None:
    """Refuse the deprecated ``station_number="ALL"`` calling convention."""
    stations = as_list(station_number)
    if stations and ALL_SENTINEL in stations:
        raise InvalidArgumentError(
            'Deprecated behaviour. Omit the station_number = "ALL" argument '
            "to select every station."
        )


def parse_date(value: DateLike, name: str = "date") -> Optional[date]:
    """Parse a YYYY-MM-DD string (or date) into a ``date``."""
    if value is None or (isinstance(value, str) and value.upper() == ALL_SENTINEL):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value), "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidArgumentError(
            f"Invalid {name} '{value}'. Dates need to be in YYYY-MM-DD format"
        ) from e


def validate_date_range(start_date: DateLike, end_date: DateLike) -> DateRange:
    """Parse both bounds and check that they are in order."""
    start = parse_date(start_date, "start_date")
    end = parse_date(end_date, "end_date")

    if start and end and start > end:
        raise InvalidArgumentError(
            "start_date is after end_date. Try swapping values."
        )

    date_range = DateRange(start=start, end=end)
    if date_range.is_open:
        logger.info(
            "No start and end dates specified. All dates available will be returned."
        )
    return date_range


def check_station_ceiling(
    station_number: Sequence[str], ceiling: int = MAX_WS_STATIONS
) -> None:
    if len(station_number) >= ceiling:
        raise InvalidArgumentError(
            f"Only {ceiling - 1} stations are supported for one request. "
            "Issue a separate request, with its own token, for the excess stations."
        )
