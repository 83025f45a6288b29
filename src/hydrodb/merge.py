"""
Merging of a high-resolution and a low-resolution series for one station.
"""

import logging
from typing import Optional, Sequence

import pandas as pd

logger = logging.getLogger(__name__)


def usable_rows(
    series: Optional[pd.DataFrame],
    date_column: str = "Date",
    value_columns: Sequence[str] = ("Value",),
) -> pd.DataFrame:
    """Rows that carry a timestamp and at least one measured value."""
    if series is None or series.empty:
        return pd.DataFrame()
    mask = series[date_column].notna() & series[list(value_columns)].notna().any(axis=1)
    return series[mask]


def merge_time_series(
    high_res: Optional[pd.DataFrame],
    low_res: Optional[pd.DataFrame],
    station_number: Optional[str] = None,
    date_column: str = "Date",
    value_columns: Sequence[str] = ("Value",),
    columns: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """
    Combine two resolutions of the same series.

    The low-resolution series contributes only the rows strictly before the
    earliest usable high-resolution timestamp; from there on the
    high-resolution series is taken whole. The rule works on ranges, not on
    individual timestamps, so a sparse high-resolution stretch still wins
    over a denser low-resolution one inside the overlap.

    Args:
        high_res: e.g. the hourly feed
        low_res: e.g. the daily feed
        station_number: Station the series belongs to, used to tag an empty result
        date_column: Timestamp column
        value_columns: Columns that make a row usable when non-null
        columns: Columns of the empty result when neither input is usable

    Returns:
        Merged DataFrame. When neither side has usable rows it is empty and
        carries ``attrs["STATION_NUMBER"]``.
    """
    high_usable = usable_rows(high_res, date_column, value_columns)
    low_usable = usable_rows(low_res, date_column, value_columns)

    if high_usable.empty and low_usable.empty:
        logger.debug(f"No usable data on either resolution for {station_number}")
        if columns is None:
            template = high_res if high_res is not None else low_res
            columns = list(template.columns) if template is not None else []
        empty = pd.DataFrame(columns=list(columns))
        empty.attrs["STATION_NUMBER"] = station_number
        return empty

    if high_usable.empty:
        return low_res.reset_index(drop=True)

    if low_usable.empty:
        return high_res.reset_index(drop=True)

    cutoff = high_usable[date_column].min()
    earlier = low_res[low_res[date_column] < cutoff]
    logger.debug(
        f"Merging {len(earlier)} low-resolution rows before {cutoff} with {len(high_res)} high-resolution rows"
    )
    return pd.concat([earlier, high_res], ignore_index=True)
