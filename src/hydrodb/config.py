"""
Configuration objects for hydrodb clients and the local archive.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import AuthFailureError

HYDAT_FILENAME = "Hydat.sqlite3"


@dataclass
class ClientConfig:
    """Settings shared by the remote feed clients."""

    timeout: float = 60.0
    user_agent: str = "hydrodb/0.1.0"
    datamart_url: str = "https://dd.weather.gc.ca/hydrometric"
    ws_auth_url: str = "https://wateroffice.ec.gc.ca/services/auth"
    ws_data_url: str = (
        "https://wateroffice.ec.gc.ca/services/real_time_data/csv/inline"
    )
    hydat_url: str = "https://collaboration.cmc.ec.gc.ca/cmc/hydrometrics/www/"


@dataclass
class WebServiceCredentials:
    """
    Credentials for the ECCC real-time web service.

    Both ``username`` and ``password`` are required. Prefer
    :meth:`from_env` over literals in scripts; it reads ``WS_USRNM`` and
    ``WS_PWD``.
    """

    username: str
    password: str

    def __repr__(self) -> str:
        return f"WebServiceCredentials(username={self.username!r}, password='***')"

    @classmethod
    def from_env(cls) -> "WebServiceCredentials":
        username = os.environ.get("WS_USRNM", "")
        password = os.environ.get("WS_PWD", "")
        if not username or not password:
            raise AuthFailureError(
                "WS_USRNM and WS_PWD must both be set to request a token."
            )
        return cls(username=username, password=password)

    def as_form(self) -> dict:
        return {"username": self.username, "password": self.password}


def hydat_dir() -> Path:
    """Per-user directory where the HYDAT archive is stored by default."""
    base = os.environ.get("XDG_DATA_HOME")
    root = Path(base) if base else Path.home() / ".local" / "share"
    return root / "hydrodb"


def default_hydat_path(hydat_path: Optional[str] = None) -> Path:
    """
    Resolve the archive location.

    An explicit argument wins, then the ``HYDAT_PATH`` environment variable,
    then ``hydat_dir() / "Hydat.sqlite3"``.
    """
    if hydat_path:
        return Path(hydat_path)
    env_path = os.environ.get("HYDAT_PATH")
    if env_path:
        return Path(env_path)
    return hydat_dir() / HYDAT_FILENAME
