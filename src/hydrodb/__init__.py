"""
Python access to Canadian hydrometric data.

Query the HYDAT archive and the realtime feeds into tidy DataFrames.
"""

try:
    from importlib import metadata

    __version__ = metadata.version(__name__)
except Exception:
    __version__ = "unknown"

from .base_client import BaseDataAccessClient
from .completeness import attach_completeness, report_completeness
from .config import ClientConfig, WebServiceCredentials, default_hydat_path, hydat_dir
from .exceptions import (
    AuthFailureError,
    HydroDBError,
    InvalidArgumentError,
    NotFoundError,
    RemoteUnavailableError,
)
from .hydat import (
    HydatDownloadClient,
    HydatReader,
    download_hydat,
    hy_daily_flows,
    hy_daily_levels,
    hy_data_symbols,
    hy_data_types,
    hy_monthly_flows,
    hy_monthly_levels,
    hy_sed_daily_suscon,
    hy_sed_monthly_suscon,
    hy_stations,
    hy_version,
)
from .merge import merge_time_series
from .models import (
    ColumnSpec,
    CompletenessReport,
    CompletenessStatus,
    DateRange,
    ParameterInfo,
    Station,
)
from .parameters import param_id
from .realtime import (
    DatamartClient,
    WebServiceClient,
    all_stations,
    realtime_dd,
    realtime_stations,
    realtime_ws,
    token_ws,
)
from .reshape import build_column_specs, pivot_wide, reshape_wide, split_column_name
from .stations import combine_station_directories, resolve_stations, station_records

__all__ = [
    # Clients and configuration
    "BaseDataAccessClient",
    "ClientConfig",
    "WebServiceCredentials",
    "DatamartClient",
    "WebServiceClient",
    "HydatDownloadClient",
    "HydatReader",
    "default_hydat_path",
    "hydat_dir",
    # HYDAT archive
    "download_hydat",
    "hy_stations",
    "hy_daily_flows",
    "hy_daily_levels",
    "hy_monthly_flows",
    "hy_monthly_levels",
    "hy_sed_daily_suscon",
    "hy_sed_monthly_suscon",
    "hy_version",
    "hy_data_types",
    "hy_data_symbols",
    # Realtime feeds
    "realtime_stations",
    "realtime_dd",
    "token_ws",
    "realtime_ws",
    "all_stations",
    "param_id",
    # Tidying
    "build_column_specs",
    "split_column_name",
    "reshape_wide",
    "pivot_wide",
    "merge_time_series",
    "resolve_stations",
    "combine_station_directories",
    "station_records",
    "report_completeness",
    "attach_completeness",
    # Models
    "ColumnSpec",
    "CompletenessReport",
    "CompletenessStatus",
    "DateRange",
    "ParameterInfo",
    "Station",
    # Exceptions
    "HydroDBError",
    "InvalidArgumentError",
    "NotFoundError",
    "RemoteUnavailableError",
    "AuthFailureError",
]
