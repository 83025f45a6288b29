"""
Station-set resolution over an already materialized station directory.
"""

import logging
from typing import List, Optional, Sequence, Union

import pandas as pd

from .models import Station
from .validation import as_list, reject_all_sentinel

logger = logging.getLogger(__name__)

DIRECTORY_COLUMNS = [
    "STATION_NUMBER",
    "STATION_NAME",
    "PROV_TERR_STATE_LOC",
    "LATITUDE",
    "LONGITUDE",
]


def resolve_stations(
    directory: pd.DataFrame,
    station_number: Union[str, Sequence[str], None] = None,
    prov_terr_state_loc: Union[str, Sequence[str], None] = None,
) -> List[str]:
    """
    Resolve user filters into the station numbers to query.

    An explicit ``station_number`` list takes precedence over
    ``prov_terr_state_loc``. Identifiers absent from ``directory`` are dropped
    here without complaint; the completeness report flags them afterwards.
    With neither filter every station in the directory is returned.

    Args:
        directory: Station table with ``STATION_NUMBER`` and
            ``PROV_TERR_STATE_LOC`` columns
        station_number: One or more station numbers
        prov_terr_state_loc: One or more jurisdiction codes (logical OR)

    Returns:
        Deduplicated station numbers in directory order

    Raises:
        InvalidArgumentError: If ``"ALL"`` is passed as a station number
    """
    reject_all_sentinel(station_number)

    stations = as_list(station_number)
    provinces = as_list(prov_terr_state_loc)

    if stations is not None:
        selected = directory[directory["STATION_NUMBER"].isin(stations)]
    elif provinces is not None:
        selected = directory[directory["PROV_TERR_STATE_LOC"].isin(provinces)]
    else:
        selected = directory

    resolved = list(dict.fromkeys(selected["STATION_NUMBER"].tolist()))
    logger.debug(f"Resolved {len(resolved)} stations from directory")
    return resolved


def requested_stations(
    resolved: Sequence[str],
    station_number: Union[str, Sequence[str], None] = None,
) -> List[str]:
    """
    Stations a result is expected to cover.

    When the caller named stations explicitly those names are the
    expectation, so unknown identifiers surface as missing.
    """
    stations = as_list(station_number)
    if stations is not None:
        return list(dict.fromkeys(stations))
    return list(resolved)


def combine_station_directories(*directories: Optional[pd.DataFrame]) -> pd.DataFrame:
    """Union of several station tables, first occurrence of a station wins."""
    frames = [
        df.reindex(columns=DIRECTORY_COLUMNS)
        for df in directories
        if df is not None and not df.empty
    ]
    if not frames:
        return pd.DataFrame(columns=DIRECTORY_COLUMNS)

    combined = pd.concat(frames, ignore_index=True)
    return combined.drop_duplicates(subset="STATION_NUMBER", keep="first").reset_index(
        drop=True
    )


def station_records(directory: pd.DataFrame) -> List[Station]:
    """One :class:`~hydrodb.models.Station` per directory row."""
    rows = directory.astype(object).where(directory.notna(), None)
    return [Station.from_row(row) for row in rows.to_dict("records")]
