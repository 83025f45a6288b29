"""
Access to the HYDAT national hydrometric archive.
"""

from .download import HydatDownloadClient, download_hydat
from .queries import (
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
from .reader import HydatReader

__all__ = [
    "HydatReader",
    "HydatDownloadClient",
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
]
