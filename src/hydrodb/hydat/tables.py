"""
Layouts of the HYDAT tables read by the query functions.
"""

from typing import List

from ..models import ColumnSpec

MONTHLY_ID_COLUMNS = ["STATION_NUMBER", "YEAR", "MONTH", "FULL_MONTH", "NO_DAYS"]

# DLY_FLOWS / DLY_LEVELS monthly summary columns.
MONTHLY_SUMMARY_SPECS: List[ColumnSpec] = [
    ColumnSpec("MEAN", "Value", "MONTHLY_MEAN"),
    ColumnSpec("TOTAL", "Value", "MONTHLY_TOTAL"),
    ColumnSpec("MIN", "Day", "FIRST_DAY_MIN"),
    ColumnSpec("MIN", "Value", "MIN"),
    ColumnSpec("MAX", "Day", "FIRST_DAY_MAX"),
    ColumnSpec("MAX", "Value", "MAX"),
]

# SED_DLY_SUSCON has no monthly mean.
SED_MONTHLY_SUMMARY_SPECS: List[ColumnSpec] = [
    spec for spec in MONTHLY_SUMMARY_SPECS if spec.quantity != "MEAN"
]

MONTHLY_RENAMES = {
    "YEAR": "Year",
    "MONTH": "Month",
    "FULL_MONTH": "Full_Month",
    "NO_DAYS": "No_days",
}

MONTHLY_COLUMNS = [
    "STATION_NUMBER",
    "Year",
    "Month",
    "Full_Month",
    "No_days",
    "Sum_stat",
    "Value",
    "Date_occurred",
]

# HYD_STATUS / SED_STATUS codes in STATIONS.
STATUS_CODES = {"A": "ACTIVE", "D": "DISCONTINUED"}
