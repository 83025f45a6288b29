"""
Tidy query functions over the HYDAT archive.

Every series function accepts the same filter surface::

    hy_daily_flows(station_number=["08MF005", "08MF040"], start_date="1990-01-01")
    hy_monthly_levels(prov_terr_state_loc="PE")

``station_number`` takes precedence over ``prov_terr_state_loc``; with neither
all stations in the archive are queried. Dates are inclusive and must be
YYYY-MM-DD. Arguments are validated before the archive is opened.
"""

import logging
from typing import List, Optional, Sequence, Tuple, Union

import pandas as pd

from ..completeness import attach_completeness
from ..exceptions import NotFoundError
from ..models import ColumnSpec, DateRange
from ..reshape import reshape_daily, reshape_summary, synthesize_date
from ..stations import requested_stations, resolve_stations
from ..validation import DateLike, reject_all_sentinel, validate_date_range
from .reader import HydatReader
from .tables import (
    MONTHLY_COLUMNS,
    MONTHLY_ID_COLUMNS,
    MONTHLY_RENAMES,
    MONTHLY_SUMMARY_SPECS,
    SED_MONTHLY_SUMMARY_SPECS,
    STATUS_CODES,
)

logger = logging.getLogger(__name__)

StationArg = Union[str, Sequence[str], None]


def _date_mask(dates: pd.Series, date_range: DateRange) -> pd.Series:
    mask = pd.Series(True, index=dates.index)
    if date_range.start is not None:
        mask &= dates >= pd.Timestamp(date_range.start)
    if date_range.end is not None:
        mask &= dates <= pd.Timestamp(date_range.end)
    return mask


def _scan_series(
    table: str,
    station_number: StationArg,
    hydat_path: Optional[str],
    prov_terr_state_loc: StationArg,
    date_range: DateRange,
) -> Tuple[pd.DataFrame, List[str]]:
    with HydatReader(hydat_path) as reader:
        stations = resolve_stations(reader.stations(), station_number, prov_terr_state_loc)
        wide = reader.scan(table, stations=stations, years=date_range.year_bounds())

    if wide.empty:
        raise NotFoundError(f"No {table} data in HYDAT for the requested station(s)")
    logger.info(f"Retrieved {len(wide)} {table} records for {len(stations)} stations")
    return wide, stations


def _daily_series(
    table: str,
    prefix: str,
    parameter: str,
    station_number: StationArg,
    hydat_path: Optional[str],
    prov_terr_state_loc: StationArg,
    start_date: DateLike,
    end_date: DateLike,
) -> pd.DataFrame:
    reject_all_sentinel(station_number)
    date_range = validate_date_range(start_date, end_date)

    wide, stations = _scan_series(
        table, station_number, hydat_path, prov_terr_state_loc, date_range
    )
    tidy = reshape_daily(wide, prefix, parameter)
    tidy = tidy[_date_mask(tidy["Date"], date_range)].reset_index(drop=True)

    attach_completeness(tidy, requested_stations(stations, station_number))
    return tidy


def _monthly_series(
    table: str,
    specs: Sequence[ColumnSpec],
    station_number: StationArg,
    hydat_path: Optional[str],
    prov_terr_state_loc: StationArg,
    start_date: DateLike,
    end_date: DateLike,
) -> pd.DataFrame:
    reject_all_sentinel(station_number)
    date_range = validate_date_range(start_date, end_date)

    wide, stations = _scan_series(
        table, station_number, hydat_path, prov_terr_state_loc, date_range
    )
    tidy = reshape_summary(wide, MONTHLY_ID_COLUMNS, specs)
    tidy["FULL_MONTH"] = tidy["FULL_MONTH"] == 1
    tidy = tidy.rename(columns=MONTHLY_RENAMES)

    # A month is kept when its first day lies within the (month-widened) range.
    month_start = synthesize_date(tidy["Year"], tidy["Month"], pd.Series(1, index=tidy.index))
    widened = DateRange(
        start=date_range.start.replace(day=1) if date_range.start else None,
        end=date_range.end,
    )
    tidy = tidy[_date_mask(month_start, widened)]

    tidy = tidy[MONTHLY_COLUMNS].sort_values(
        ["STATION_NUMBER", "Year", "Month"], kind="stable"
    )
    tidy = tidy.reset_index(drop=True)
    attach_completeness(tidy, requested_stations(stations, station_number))
    return tidy


def hy_stations(
    station_number: StationArg = None,
    hydat_path: Optional[str] = None,
    prov_terr_state_loc: StationArg = None,
) -> pd.DataFrame:
    """
    Station metadata from the STATIONS table.

    Returns:
        DataFrame with the archive's station columns; ``HYD_STATUS`` and
        ``SED_STATUS`` are spelled out, ``RHBN`` and ``REAL_TIME`` are booleans
    """
    reject_all_sentinel(station_number)

    with HydatReader(hydat_path) as reader:
        directory = reader.scan("STATIONS")

    stations = resolve_stations(directory, station_number, prov_terr_state_loc)
    result = directory[directory["STATION_NUMBER"].isin(stations)].copy()
    if result.empty:
        raise NotFoundError("No STATIONS data in HYDAT for the requested station(s)")

    for column in ("HYD_STATUS", "SED_STATUS"):
        if column in result.columns:
            result[column] = result[column].map(STATUS_CODES)
    for column in ("RHBN", "REAL_TIME"):
        if column in result.columns:
            result[column] = result[column] == 1

    result = result.reset_index(drop=True)
    attach_completeness(result, requested_stations(stations, station_number))
    return result


def hy_daily_flows(
    station_number: StationArg = None,
    hydat_path: Optional[str] = None,
    prov_terr_state_loc: StationArg = None,
    start_date: DateLike = None,
    end_date: DateLike = None,
) -> pd.DataFrame:
    """
    Daily discharge (m^3/s) from DLY_FLOWS.

    Returns:
        DataFrame with ``STATION_NUMBER, Date, Parameter ("Flow"), Value, Symbol``
    """
    return _daily_series(
        "DLY_FLOWS", "FLOW", "Flow",
        station_number, hydat_path, prov_terr_state_loc, start_date, end_date,
    )


def hy_daily_levels(
    station_number: StationArg = None,
    hydat_path: Optional[str] = None,
    prov_terr_state_loc: StationArg = None,
    start_date: DateLike = None,
    end_date: DateLike = None,
) -> pd.DataFrame:
    """Daily water level (m) from DLY_LEVELS; same layout as :func:`hy_daily_flows`."""
    return _daily_series(
        "DLY_LEVELS", "LEVEL", "Level",
        station_number, hydat_path, prov_terr_state_loc, start_date, end_date,
    )


def hy_sed_daily_suscon(
    station_number: StationArg = None,
    hydat_path: Optional[str] = None,
    prov_terr_state_loc: StationArg = None,
    start_date: DateLike = None,
    end_date: DateLike = None,
) -> pd.DataFrame:
    """Daily suspended sediment concentration (mg/l) from SED_DLY_SUSCON."""
    return _daily_series(
        "SED_DLY_SUSCON", "SUSCON", "Suscon",
        station_number, hydat_path, prov_terr_state_loc, start_date, end_date,
    )


def hy_monthly_flows(
    station_number: StationArg = None,
    hydat_path: Optional[str] = None,
    prov_terr_state_loc: StationArg = None,
    start_date: DateLike = None,
    end_date: DateLike = None,
) -> pd.DataFrame:
    """
    Monthly flow statistics from DLY_FLOWS.

    Returns:
        DataFrame with ``STATION_NUMBER, Year, Month, Full_Month, No_days,
        Sum_stat, Value, Date_occurred``. ``Sum_stat`` is one of MEAN, TOTAL,
        MIN, MAX; MEAN and TOTAL have no ``Date_occurred``.
    """
    return _monthly_series(
        "DLY_FLOWS", MONTHLY_SUMMARY_SPECS,
        station_number, hydat_path, prov_terr_state_loc, start_date, end_date,
    )


def hy_monthly_levels(
    station_number: StationArg = None,
    hydat_path: Optional[str] = None,
    prov_terr_state_loc: StationArg = None,
    start_date: DateLike = None,
    end_date: DateLike = None,
) -> pd.DataFrame:
    """Monthly level statistics from DLY_LEVELS; see :func:`hy_monthly_flows`."""
    return _monthly_series(
        "DLY_LEVELS", MONTHLY_SUMMARY_SPECS,
        station_number, hydat_path, prov_terr_state_loc, start_date, end_date,
    )


def hy_sed_monthly_suscon(
    station_number: StationArg = None,
    hydat_path: Optional[str] = None,
    prov_terr_state_loc: StationArg = None,
    start_date: DateLike = None,
    end_date: DateLike = None,
) -> pd.DataFrame:
    """
    Monthly suspended sediment concentration statistics (mg/l).

    ``Sum_stat`` is one of TOTAL, MIN, MAX. TOTAL is a summary over the
    month and has a null ``Date_occurred``.
    """
    return _monthly_series(
        "SED_DLY_SUSCON", SED_MONTHLY_SUMMARY_SPECS,
        station_number, hydat_path, prov_terr_state_loc, start_date, end_date,
    )


def hy_version(hydat_path: Optional[str] = None) -> pd.DataFrame:
    """Release information of the archive (``Version``, ``Date``)."""
    with HydatReader(hydat_path) as reader:
        version = reader.read_table("VERSION")
    if "Date" in version.columns:
        version["Date"] = pd.to_datetime(version["Date"], errors="coerce")
    return version


def hy_data_types(hydat_path: Optional[str] = None) -> pd.DataFrame:
    """The DATA_TYPES reference table."""
    with HydatReader(hydat_path) as reader:
        return reader.read_table("DATA_TYPES")


def hy_data_symbols(hydat_path: Optional[str] = None) -> pd.DataFrame:
    """The DATA_SYMBOLS reference table."""
    with HydatReader(hydat_path) as reader:
        return reader.read_table("DATA_SYMBOLS")
