"""
Shared fixtures: a miniature HYDAT archive and canned datamart payloads.
"""

import calendar
import sqlite3

import httpx
import pandas as pd
import pytest

STATIONS = [
    {
        "STATION_NUMBER": "08MF005",
        "STATION_NAME": "FRASER RIVER AT HOPE",
        "PROV_TERR_STATE_LOC": "BC",
        "HYD_STATUS": "A",
        "SED_STATUS": "D",
        "LATITUDE": 49.38,
        "LONGITUDE": -121.45,
        "RHBN": 0,
        "REAL_TIME": 1,
    },
    {
        "STATION_NUMBER": "08MF040",
        "STATION_NAME": "FRASER RIVER ABOVE TEXAS CREEK",
        "PROV_TERR_STATE_LOC": "BC",
        "HYD_STATUS": "A",
        "SED_STATUS": None,
        "LATITUDE": 50.61,
        "LONGITUDE": -121.84,
        "RHBN": 0,
        "REAL_TIME": 1,
    },
    {
        "STATION_NUMBER": "01AA002",
        "STATION_NAME": "DAAQUAM (RIVIERE) EN AVAL DE LA RIVIERE SHIDGEL",
        "PROV_TERR_STATE_LOC": "NB",
        "HYD_STATUS": "D",
        "SED_STATUS": None,
        "LATITUDE": 46.56,
        "LONGITUDE": -70.08,
        "RHBN": 1,
        "REAL_TIME": 0,
    },
    {
        "STATION_NUMBER": "01AD001",
        "STATION_NAME": "ST. JOHN RIVER AT FORT KENT",
        "PROV_TERR_STATE_LOC": "NB",
        "HYD_STATUS": "A",
        "SED_STATUS": None,
        "LATITUDE": 47.26,
        "LONGITUDE": -68.59,
        "RHBN": 0,
        "REAL_TIME": 0,
    },
]


def daily_row(station, year, month, prefix, scale=1.0, symbols=None, with_mean=True):
    """One station-month of a per-day table; day ``d`` holds ``d * scale``."""
    days = calendar.monthrange(year, month)[1]
    values = [d * scale for d in range(1, days + 1)]
    row = {
        "STATION_NUMBER": station,
        "YEAR": year,
        "MONTH": month,
        "FULL_MONTH": 1,
        "NO_DAYS": days,
        "MONTHLY_TOTAL": sum(values),
        "FIRST_DAY_MIN": 1,
        "MIN": values[0],
        "FIRST_DAY_MAX": days,
        "MAX": values[-1],
    }
    if with_mean:
        row["MONTHLY_MEAN"] = sum(values) / days
    symbols = symbols or {}
    for day in range(1, 32):
        row[f"{prefix}{day}"] = day * scale if day <= days else None
        row[f"{prefix}_SYMBOL{day}"] = symbols.get(day)
    return row


def build_hydat(path):
    flows = [
        daily_row("08MF005", 2000, 1, "FLOW", symbols={1: "B"}),
        daily_row("08MF005", 2000, 2, "FLOW"),
        daily_row("08MF040", 2000, 1, "FLOW", scale=10.0),
        daily_row("01AA002", 2000, 1, "FLOW", scale=0.5),
    ]
    levels = [daily_row("08MF005", 2000, 1, "LEVEL", scale=0.01)]
    suscon = [daily_row("08MF005", 2000, 1, "SUSCON", scale=2.0, with_mean=False)]

    with sqlite3.connect(str(path)) as conn:
        pd.DataFrame(STATIONS).to_sql("STATIONS", conn, index=False)
        pd.DataFrame(flows).to_sql("DLY_FLOWS", conn, index=False)
        pd.DataFrame(levels).to_sql("DLY_LEVELS", conn, index=False)
        pd.DataFrame(suscon).to_sql("SED_DLY_SUSCON", conn, index=False)
        pd.DataFrame(
            [{"Version": "1.0", "Date": "2024-01-17 00:00:00"}]
        ).to_sql("VERSION", conn, index=False)
        pd.DataFrame(
            [
                {"DATA_TYPE": "Q", "DATA_TYPE_EN": "Flow", "DATA_TYPE_FR": "Débit"},
                {"DATA_TYPE": "H", "DATA_TYPE_EN": "Water Level", "DATA_TYPE_FR": "Niveau d'eau"},
            ]
        ).to_sql("DATA_TYPES", conn, index=False)
        pd.DataFrame(
            [
                {"SYMBOL_ID": "B", "SYMBOL_EN": "Ice Conditions", "SYMBOL_FR": "Conditions à glace"},
                {"SYMBOL_ID": "E", "SYMBOL_EN": "Estimated", "SYMBOL_FR": "Estimé"},
            ]
        ).to_sql("DATA_SYMBOLS", conn, index=False)
    return path


@pytest.fixture
def hydat_path(tmp_path):
    """Path (as str) to a freshly built miniature HYDAT archive."""
    return str(build_hydat(tmp_path / "Hydat.sqlite3"))


STATION_LIST_CSV = (
    "ID,Name / Nom,Latitude,Longitude,Prov/Terr,Timezone / Fuseau horaire\n"
    "08MF005,FRASER RIVER AT HOPE,49.38,-121.45,BC,UTC-08:00\n"
    "08MF040,FRASER RIVER ABOVE TEXAS CREEK,50.61,-121.84,BC,UTC-08:00\n"
    "01AP004,KENNEBECASIS RIVER NEAR APOHAQUI,45.70,-65.60,NB,UTC-04:00\n"
)

DATAMART_HEADER = (
    "ID,Date,Water Level / Niveau d'eau (m),Grade,Symbol / Symbole,QA/QC,"
    "Discharge / Débit (cms),Grade,Symbol / Symbole,QA/QC\n"
)

HOURLY_CSV = DATAMART_HEADER + (
    "08MF005,2024-01-02T00:00:00-08:00,3.20,,,1,1510,,,1\n"
    "08MF005,2024-01-02T01:00:00-08:00,3.21,,,1,1520,,,1\n"
)

DAILY_CSV = DATAMART_HEADER + (
    "08MF005,2024-01-01T00:00:00-08:00,3.10,,,1,1400,,B,1\n"
    "08MF005,2024-01-02T00:00:00-08:00,3.15,,,1,1450,,,1\n"
)


def make_response(url, status_code=200, text="", content_type="text/plain; charset=utf-8"):
    """A real httpx response bound to a request, so raise_for_status works."""
    return httpx.Response(
        status_code,
        content=text.encode("utf-8"),
        headers={"content-type": content_type},
        request=httpx.Request("GET", url),
    )


@pytest.fixture
def datamart_routes():
    """URL-suffix to CSV body map for a mocked datamart."""
    return {
        "hydrometric_StationList.csv": STATION_LIST_CSV,
        "BC_08MF005_hourly_hydrometric.csv": HOURLY_CSV,
        "BC_08MF005_daily_hydrometric.csv": DAILY_CSV,
    }


@pytest.fixture
def fake_datamart_get(datamart_routes):
    """A ``get`` side effect serving ``datamart_routes`` and 404 otherwise."""

    def fake_get(url, **kwargs):
        for suffix, body in datamart_routes.items():
            if str(url).endswith(suffix):
                return make_response(url, text=body)
        return make_response(url, status_code=404)

    return fake_get
