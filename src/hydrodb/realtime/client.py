"""
Clients for the MSC datamart and the ECCC real-time web service.
"""

import io
import logging
from datetime import date
from typing import List, Sequence, Tuple

import httpx
import pandas as pd

from ..base_client import BaseDataAccessClient
from ..config import WebServiceCredentials
from ..exceptions import AuthFailureError, HydroDBError, RemoteUnavailableError

logger = logging.getLogger(__name__)

STATION_LIST_COLUMNS = [
    "STATION_NUMBER",
    "STATION_NAME",
    "LATITUDE",
    "LONGITUDE",
    "PROV_TERR_STATE_LOC",
    "TIMEZONE",
]

# Same names as the archive so both feed the same reshape.
DATAMART_COLUMNS = [
    "STATION_NUMBER",
    "Date",
    "LEVEL",
    "LEVEL_GRADE",
    "LEVEL_SYMBOL",
    "LEVEL_CODE",
    "FLOW",
    "FLOW_GRADE",
    "FLOW_SYMBOL",
    "FLOW_CODE",
]

RESOLUTIONS = ("hourly", "daily")


class DatamartClient(BaseDataAccessClient):
    """
    Client for the open hydrometric CSV files of the MSC datamart.

    Files are organized by jurisdiction and resolution::

        {base}/csv/BC/hourly/BC_08MF005_hourly_hydrometric.csv
    """

    def station_list_url(self) -> str:
        return f"{self.config.datamart_url}/doc/hydrometric_StationList.csv"

    def realtime_csv_url(self, prov: str, station_number: str, resolution: str) -> str:
        return (
            f"{self.config.datamart_url}/csv/{prov}/{resolution}/"
            f"{prov}_{station_number}_{resolution}_hydrometric.csv"
        )

    def get_station_list(self) -> pd.DataFrame:
        """All stations of the realtime network."""
        response = self._make_request("GET", self.station_list_url())
        return pd.read_csv(
            io.StringIO(response.text),
            skiprows=1,
            names=STATION_LIST_COLUMNS,
            dtype={"STATION_NUMBER": str, "PROV_TERR_STATE_LOC": str},
        )

    def fetch_csv(self, prov: str, station_number: str, resolution: str) -> pd.DataFrame:
        """
        One station's hourly or daily file in its wide layout.

        Raises:
            RemoteUnavailableError: If the file is missing or unreachable
        """
        if resolution not in RESOLUTIONS:
            raise ValueError(f"resolution must be one of {RESOLUTIONS}")

        response = self._make_request(
            "GET", self.realtime_csv_url(prov, station_number, resolution)
        )
        if not response.text.strip():
            return pd.DataFrame(columns=DATAMART_COLUMNS)
        wide = pd.read_csv(
            io.StringIO(response.text),
            skiprows=1,
            names=DATAMART_COLUMNS,
            dtype={
                "STATION_NUMBER": str,
                "LEVEL_GRADE": str,
                "LEVEL_SYMBOL": str,
                "FLOW_GRADE": str,
                "FLOW_SYMBOL": str,
            },
        )
        wide["Date"] = pd.to_datetime(wide["Date"], utc=True, errors="coerce")
        for column in ("LEVEL", "FLOW"):
            wide[column] = pd.to_numeric(wide[column], errors="coerce")
        for column in ("LEVEL_CODE", "FLOW_CODE"):
            wide[column] = pd.to_numeric(wide[column], errors="coerce").astype("Int64")
        logger.debug(f"{len(wide)} {resolution} rows for {station_number}")
        return wide


class WebServiceClient(BaseDataAccessClient):
    """Client for the token-gated ECCC real-time web service."""

    def _status_error(self, error: httpx.HTTPStatusError) -> HydroDBError:
        status = error.response.status_code
        if status == 422:
            return AuthFailureError(
                "422 Unprocessable Entity: Username and/or password are missing "
                "or are formatted incorrectly."
            )
        if status == 403:
            return AuthFailureError(
                "403 Forbidden: the web service is denying your request."
            )
        return super()._status_error(error)

    def issue_token(self, credentials: WebServiceCredentials) -> str:
        """Request a token; it expires after 10 minutes."""
        response = self._make_request(
            "POST", self.config.ws_auth_url, data=credentials.as_form()
        )
        token = response.text.strip()
        if not token:
            raise AuthFailureError("The web service returned an empty token.")
        return token

    def fetch_realtime(
        self,
        station_number: Sequence[str],
        parameters: Sequence[int],
        start_date: date,
        end_date: date,
        token: str,
    ) -> pd.DataFrame:
        """
        Raw inline CSV for the requested stations and parameters.

        Returns:
            DataFrame with ``ID, Date, Parameter, Value, Grade, Symbol, Approval``
        """
        params: List[Tuple[str, str]] = [("stations[]", s) for s in station_number]
        params += [("parameters[]", str(p)) for p in parameters]
        params += [
            ("start_date", f"{start_date:%Y-%m-%d} 00:00:00"),
            ("end_date", f"{end_date:%Y-%m-%d} 23:59:59"),
            ("token", token),
        ]

        response = self._make_request("GET", self.config.ws_data_url, params=params)

        content_type = response.headers.get("content-type", "")
        if not content_type.startswith("text/csv"):
            raise RemoteUnavailableError(
                f"GET response is not a csv file (content-type: {content_type!r})"
            )
        if not response.text.strip():
            return pd.DataFrame()

        raw = pd.read_csv(
            io.StringIO(response.text),
            skipinitialspace=True,
            dtype={"ID": str, "Grade": str, "Symbol": str},
        )
        raw.columns = raw.columns.str.strip()
        if raw.empty:
            return raw

        raw["Date"] = pd.to_datetime(raw["Date"], utc=True, errors="coerce")
        raw["Parameter"] = pd.to_numeric(raw["Parameter"], errors="coerce").astype("Int64")
        raw["Value"] = pd.to_numeric(raw["Value"], errors="coerce")
        raw["Approval"] = pd.to_numeric(raw["Approval"], errors="coerce").astype("Int64")
        return raw
