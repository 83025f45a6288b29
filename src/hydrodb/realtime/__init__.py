"""
Realtime hydrometric data from the MSC datamart and the ECCC web service.

Datamart files are open and updated hourly; the web service requires
credentials and a short-lived token:

- Datamart: https://dd.weather.gc.ca/hydrometric/
- Web service: https://wateroffice.ec.gc.ca/services/
"""

from .client import DatamartClient, WebServiceClient
from .feeds import (
    all_stations,
    realtime_dd,
    realtime_stations,
    realtime_ws,
    tidy_datamart,
    token_ws,
)

__all__ = [
    "DatamartClient",
    "WebServiceClient",
    "all_stations",
    "realtime_dd",
    "realtime_stations",
    "realtime_ws",
    "tidy_datamart",
    "token_ws",
]
