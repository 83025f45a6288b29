"""
Tidy query functions over the remote hydrometric feeds.
"""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence, Union

import pandas as pd

from ..base_client import client_scope
from ..completeness import attach_completeness
from ..config import ClientConfig, WebServiceCredentials
from ..exceptions import InvalidArgumentError, NotFoundError, RemoteUnavailableError
from ..merge import merge_time_series
from ..models import REALTIME_COLUMNS, WEBSERVICE_COLUMNS
from ..parameters import DEFAULT_PARAMETERS, lookup_parameter, param_id
from ..reshape import build_column_specs, reshape_wide
from ..stations import combine_station_directories, requested_stations, resolve_stations
from ..validation import (
    DateLike,
    as_list,
    check_station_ceiling,
    reject_all_sentinel,
    validate_date_range,
)
from .client import DATAMART_COLUMNS, RESOLUTIONS, DatamartClient, WebServiceClient

logger = logging.getLogger(__name__)

TOKEN_LIFETIME_MINUTES = 10

DATAMART_ID_COLUMNS = ["STATION_NUMBER", "Date"]
DATAMART_SPECS = build_column_specs(DATAMART_COLUMNS, DATAMART_ID_COLUMNS)

StationArg = Union[str, Sequence[str], None]


def tidy_datamart(wide: Optional[pd.DataFrame], prov: str) -> pd.DataFrame:
    """Reshape one datamart file into the realtime output columns."""
    if wide is None or wide.empty:
        return pd.DataFrame(columns=REALTIME_COLUMNS)
    tidy = reshape_wide(wide, DATAMART_ID_COLUMNS, DATAMART_SPECS)
    tidy["PROV_TERR_STATE_LOC"] = prov
    tidy["Value"] = pd.to_numeric(tidy["Value"], errors="coerce")
    return tidy[REALTIME_COLUMNS]


def _realtime_station(client: DatamartClient, station: str, prov: str) -> pd.DataFrame:
    series = {}
    for resolution in RESOLUTIONS:
        try:
            wide = client.fetch_csv(prov, station, resolution)
        except RemoteUnavailableError as e:
            logger.info(f"No {resolution} data found for {station}: {e}")
            wide = None
        series[resolution] = tidy_datamart(wide, prov)

    return merge_time_series(
        series["hourly"], series["daily"], station_number=station, columns=REALTIME_COLUMNS
    )


def realtime_stations(
    prov_terr_state_loc: StationArg = None,
    config: Optional[ClientConfig] = None,
    client: Optional[DatamartClient] = None,
) -> pd.DataFrame:
    """
    Stations of the realtime network.

    Returns:
        DataFrame with ``STATION_NUMBER, STATION_NAME, LATITUDE, LONGITUDE,
        PROV_TERR_STATE_LOC, TIMEZONE``
    """
    with client_scope(client, lambda: DatamartClient(config)) as datamart:
        stations = datamart.get_station_list()

    provinces = as_list(prov_terr_state_loc)
    if provinces is None:
        return stations
    return stations[stations["PROV_TERR_STATE_LOC"].isin(provinces)].reset_index(drop=True)


def realtime_dd(
    station_number: StationArg = None,
    prov_terr_state_loc: StationArg = None,
    config: Optional[ClientConfig] = None,
    client: Optional[DatamartClient] = None,
) -> pd.DataFrame:
    """
    Realtime flow and level from the datamart, hourly where available.

    For each station the hourly and daily files are fetched; daily values
    fill only the period before the first hourly observation. A station whose
    files cannot be fetched contributes no rows and is listed in the
    completeness report (``result.attrs["completeness"]``) instead of failing
    the call.

    Args:
        station_number: One or more station numbers
        prov_terr_state_loc: One or more jurisdictions, used when
            ``station_number`` is omitted
        config: Client settings
        client: Existing datamart client

    Returns:
        DataFrame with ``STATION_NUMBER, PROV_TERR_STATE_LOC, Date (UTC),
        Parameter (FLOW|LEVEL), Value, Grade, Symbol, Code`` sorted by
        Parameter, STATION_NUMBER and Date

    Examples:
        >>> realtime_dd(station_number=["01CD005", "08MF005"])
        >>> realtime_dd(prov_terr_state_loc="PE")
    """
    reject_all_sentinel(station_number)

    with client_scope(client, lambda: DatamartClient(config)) as datamart:
        directory = datamart.get_station_list()
        stations = resolve_stations(directory, station_number, prov_terr_state_loc)
        provinces = (
            directory.drop_duplicates("STATION_NUMBER")
            .set_index("STATION_NUMBER")["PROV_TERR_STATE_LOC"]
        )
        if station_number is None and prov_terr_state_loc is None:
            logger.warning(
                f"No station or jurisdiction given; downloading all {len(stations)} realtime stations"
            )

        frames: List[pd.DataFrame] = []
        for station in stations:
            merged = _realtime_station(datamart, station, provinces[station])
            if not merged.empty:
                frames.append(merged)

    if frames:
        result = pd.concat(frames, ignore_index=True)
    else:
        result = pd.DataFrame(columns=REALTIME_COLUMNS)

    result = result.sort_values(
        ["Parameter", "STATION_NUMBER", "Date"], kind="stable"
    ).reset_index(drop=True)
    result.attrs = {}
    attach_completeness(result, requested_stations(stations, station_number))
    return result


def token_ws(
    credentials: Optional[WebServiceCredentials] = None,
    config: Optional[ClientConfig] = None,
    client: Optional[WebServiceClient] = None,
) -> str:
    """
    Request a web service token.

    A token expires after 10 minutes and at most 5 may be outstanding at
    once. With no ``credentials`` they are read from ``WS_USRNM`` and
    ``WS_PWD``.

    Raises:
        AuthFailureError: If the credentials are missing or rejected
    """
    credentials = credentials or WebServiceCredentials.from_env()

    with client_scope(client, lambda: WebServiceClient(config)) as ws:
        token = ws.issue_token(credentials)

    expiry = datetime.now() + timedelta(minutes=TOKEN_LIFETIME_MINUTES)
    logger.info(f"This token will expire at {expiry:%H:%M:%S}")
    return token


def realtime_ws(
    station_number: StationArg,
    parameters: Optional[Sequence[int]] = None,
    start_date: DateLike = None,
    end_date: DateLike = None,
    token: Optional[str] = None,
    config: Optional[ClientConfig] = None,
    client: Optional[WebServiceClient] = None,
) -> pd.DataFrame:
    """
    Realtime data from the ECCC web service.

    Args:
        station_number: Station numbers (fewer than 300 per request)
        parameters: Parameter codes, see :func:`hydrodb.parameters.param_id`
            (default: all of them)
        start_date: YYYY-MM-DD (default: 30 days ago)
        end_date: YYYY-MM-DD (default: today)
        token: Token from :func:`token_ws`

    Returns:
        DataFrame with ``STATION_NUMBER, Date (UTC), Name_En, Value, Unit,
        Grade, Symbol, Approval, Parameter, Code``

    Raises:
        InvalidArgumentError: Bad dates, parameters or too many stations
        AuthFailureError: Token missing or rejected
        NotFoundError: The query returned no rows
    """
    reject_all_sentinel(station_number)
    stations = as_list(station_number)
    if not stations:
        raise InvalidArgumentError("At least one station_number is required.")
    check_station_ceiling(stations)

    parameters = list(parameters) if parameters else list(DEFAULT_PARAMETERS)
    for parameter in parameters:
        lookup_parameter(parameter)

    today = date.today()
    date_range = validate_date_range(
        start_date if start_date is not None else today - timedelta(days=30),
        end_date if end_date is not None else today,
    )
    if date_range.start is None or date_range.end is None:
        raise InvalidArgumentError(
            "Invalid date format. Dates need to be in YYYY-MM-DD format"
        )

    if not token:
        raise InvalidArgumentError("A token from token_ws() is required.")

    with client_scope(client, lambda: WebServiceClient(config)) as ws:
        raw = ws.fetch_realtime(stations, parameters, date_range.start, date_range.end, token)

    if raw.empty:
        raise NotFoundError("No data exists for this station query")

    catalog = param_id().drop(columns="Name_Fr")
    catalog["Parameter"] = catalog["Parameter"].astype("Int64")
    result = raw.rename(columns={"ID": "STATION_NUMBER"}).merge(
        catalog, on="Parameter", how="left"
    )
    result = result[WEBSERVICE_COLUMNS]

    attach_completeness(result, stations)
    return result


def all_stations(
    hydat_path: Optional[str] = None,
    config: Optional[ClientConfig] = None,
    client: Optional[DatamartClient] = None,
) -> pd.DataFrame:
    """Realtime and archive stations combined, one row per station number."""
    from ..hydat import hy_stations

    realtime = realtime_stations(config=config, client=client)
    archive = hy_stations(hydat_path=hydat_path)
    return combine_station_directories(realtime, archive)
