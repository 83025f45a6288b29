"""
Data models for hydrodb.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

# Columns of the tidy realtime output, in order.
REALTIME_COLUMNS = [
    "STATION_NUMBER",
    "PROV_TERR_STATE_LOC",
    "Date",
    "Parameter",
    "Value",
    "Grade",
    "Symbol",
    "Code",
]

# Columns of the web service output, in order.
WEBSERVICE_COLUMNS = [
    "STATION_NUMBER",
    "Date",
    "Name_En",
    "Value",
    "Unit",
    "Grade",
    "Symbol",
    "Approval",
    "Parameter",
    "Code",
]


@dataclass(frozen=True)
class Station:
    """A hydrometric station as listed in the archive or the datamart."""

    station_number: str
    station_name: str
    prov_terr_state_loc: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    hyd_status: Optional[str] = None
    real_time: bool = False

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Station":
        return cls(
            station_number=row["STATION_NUMBER"],
            station_name=row.get("STATION_NAME", ""),
            prov_terr_state_loc=row.get("PROV_TERR_STATE_LOC", ""),
            latitude=row.get("LATITUDE"),
            longitude=row.get("LONGITUDE"),
            hyd_status=row.get("HYD_STATUS"),
            real_time=bool(row.get("REAL_TIME", False)),
        )


@dataclass(frozen=True)
class ParameterInfo:
    """A web service parameter code and its names."""

    parameter: int
    code: str
    unit: str
    name_en: str
    name_fr: str


@dataclass(frozen=True)
class ColumnSpec:
    """Maps one wide source column to a (quantity, subfield) pair."""

    quantity: Union[str, int]
    subfield: str
    source: str


@dataclass(frozen=True)
class DateRange:
    """Inclusive date bounds. Either side may be open."""

    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None

    def year_bounds(self) -> Tuple[Optional[int], Optional[int]]:
        return (
            self.start.year if self.start else None,
            self.end.year if self.end else None,
        )


class CompletenessStatus(Enum):
    COMPLETE = "complete"
    PARTIAL_WITH_DETAIL = "partial_with_detail"
    PARTIAL_SUMMARY_ONLY = "partial_summary_only"


@dataclass
class CompletenessReport:
    """Outcome of comparing requested stations with stations returned."""

    status: CompletenessStatus
    n_requested: int
    n_missing: int
    missing: List[str] = field(default_factory=list)
    hint: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.status is CompletenessStatus.COMPLETE

    def __str__(self) -> str:
        if self.is_complete:
            return "All stations successfully retrieved"
        if self.status is CompletenessStatus.PARTIAL_WITH_DETAIL:
            return (
                "The following station(s) were not retrieved: "
                f"{' '.join(self.missing)}"
            )
        return (
            f"{self.n_missing} stations from the initial query were not returned."
        )
