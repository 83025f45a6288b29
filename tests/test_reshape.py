"""
Tests for wide-to-long reshaping.
"""

import pandas as pd
import pytest

from hydrodb.models import ColumnSpec
from hydrodb.realtime.client import DATAMART_COLUMNS
from hydrodb.reshape import (
    build_column_specs,
    daily_column_specs,
    pivot_wide,
    reshape_daily,
    reshape_summary,
    reshape_wide,
    split_column_name,
    synthesize_date,
)

ID_COLUMNS = ["STATION_NUMBER", "Date"]


@pytest.fixture
def datamart_wide():
    """Two rows of the datamart layout with sparse sub-fields."""
    return pd.DataFrame(
        {
            "STATION_NUMBER": ["08MF005", "08MF005"],
            "Date": pd.to_datetime(["2024-01-01T00:00Z", "2024-01-01T01:00Z"]),
            "LEVEL": [3.2, None],
            "LEVEL_GRADE": [None, None],
            "LEVEL_SYMBOL": [None, "B"],
            "LEVEL_CODE": [1, 1],
            "FLOW": [1500.0, 1510.0],
            "FLOW_GRADE": [None, None],
            "FLOW_SYMBOL": [None, None],
            "FLOW_CODE": [1, 1],
        }
    )


class TestColumnSplitter:
    """Test compound column-name splitting."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("LEVEL", ("LEVEL", "Value")),
            ("LEVEL_GRADE", ("LEVEL", "Grade")),
            ("FLOW_SYMBOL", ("FLOW", "Symbol")),
            ("FLOW_CODE", ("FLOW", "Code")),
        ],
    )
    def test_split(self, name, expected):
        assert split_column_name(name) == expected

    def test_build_specs_skips_id_columns(self):
        specs = build_column_specs(DATAMART_COLUMNS, ID_COLUMNS)
        assert len(specs) == 8
        assert ColumnSpec("LEVEL", "Grade", "LEVEL_GRADE") in specs
        assert all(spec.source not in ID_COLUMNS for spec in specs)

    def test_daily_specs(self):
        columns = ["STATION_NUMBER", "FLOW1", "FLOW_SYMBOL1", "FLOW31", "LEVEL1", "MONTHLY_MEAN"]
        specs = daily_column_specs(columns, "FLOW")
        assert specs == [
            ColumnSpec(1, "Value", "FLOW1"),
            ColumnSpec(1, "Symbol", "FLOW_SYMBOL1"),
            ColumnSpec(31, "Value", "FLOW31"),
        ]


class TestReshapeWide:
    """Test the generic reshape."""

    def test_one_row_per_input_row_and_quantity(self, datamart_wide):
        specs = build_column_specs(DATAMART_COLUMNS, ID_COLUMNS)
        long = reshape_wide(datamart_wide, ID_COLUMNS, specs)

        assert len(long) == 4
        assert list(long.columns) == ID_COLUMNS + ["Parameter", "Value", "Grade", "Symbol", "Code"]
        assert set(long["Parameter"]) == {"LEVEL", "FLOW"}

    def test_null_value_rows_are_kept(self, datamart_wide):
        specs = build_column_specs(DATAMART_COLUMNS, ID_COLUMNS)
        long = reshape_wide(datamart_wide, ID_COLUMNS, specs)

        level = long[long["Parameter"] == "LEVEL"]
        assert level["Value"].isna().sum() == 1
        assert level["Symbol"].tolist() == [None, "B"]

    def test_conserves_measured_values(self, datamart_wide):
        specs = build_column_specs(DATAMART_COLUMNS, ID_COLUMNS)
        long = reshape_wide(datamart_wide, ID_COLUMNS, specs)

        wide_count = datamart_wide[["LEVEL", "FLOW"]].notna().sum().sum()
        assert long["Value"].notna().sum() == wide_count
        assert long["Value"].sum() == pytest.approx(3.2 + 1500.0 + 1510.0)

    def test_missing_subfield_is_null(self):
        wide = pd.DataFrame({"STATION_NUMBER": ["A"], "Date": [1], "LEVEL": [1.0], "FLOW": [2.0], "FLOW_CODE": [3]})
        specs = build_column_specs(wide.columns, ID_COLUMNS)
        long = reshape_wide(wide, ID_COLUMNS, specs)

        level = long[long["Parameter"] == "LEVEL"].iloc[0]
        assert level["Code"] is None
        assert long[long["Parameter"] == "FLOW"]["Code"].iloc[0] == 3

    def test_no_specs_gives_empty_frame(self):
        wide = pd.DataFrame({"STATION_NUMBER": ["A"], "Date": [1]})
        long = reshape_wide(wide, ID_COLUMNS, [])
        assert long.empty
        assert list(long.columns) == ID_COLUMNS + ["Parameter", "Value"]

    def test_pivot_restores_wide_table(self, datamart_wide):
        specs = build_column_specs(DATAMART_COLUMNS, ID_COLUMNS)
        long = reshape_wide(datamart_wide, ID_COLUMNS, specs)
        wide = pivot_wide(long, ID_COLUMNS, specs)

        wide = wide[DATAMART_COLUMNS]
        pd.testing.assert_frame_equal(
            wide.astype(object).where(wide.notna(), None),
            datamart_wide.astype(object).where(datamart_wide.notna(), None),
        )


class TestDates:
    """Test date synthesis from components."""

    def test_impossible_dates_are_nat(self):
        dates = synthesize_date(
            pd.Series([2000, 2001, 2000, 2000]),
            pd.Series([2, 2, 4, 1]),
            pd.Series([29, 29, 31, None]),
        )
        assert dates.iloc[0] == pd.Timestamp("2000-02-29")
        assert dates.iloc[1:].isna().all()


class TestArchiveLayouts:
    """Test the per-day and summary reshapes."""

    def _daily_wide(self):
        row = {"STATION_NUMBER": "08MF005", "YEAR": 2001, "MONTH": 2}
        for day in range(1, 32):
            row[f"FLOW{day}"] = float(day) if day <= 28 else None
            row[f"FLOW_SYMBOL{day}"] = None
        row["FLOW_SYMBOL3"] = "E"
        return pd.DataFrame([row])

    def test_daily_drops_empty_impossible_days(self):
        tidy = reshape_daily(self._daily_wide(), "FLOW", "Flow")

        assert len(tidy) == 28
        assert tidy["Date"].notna().all()
        assert tidy.loc[tidy["Date"] == pd.Timestamp("2001-02-03"), "Symbol"].iloc[0] == "E"

    def test_daily_keeps_values_on_impossible_days(self):
        wide = self._daily_wide()
        wide["FLOW30"] = 99.0
        tidy = reshape_daily(wide, "FLOW", "Flow")

        assert len(tidy) == 29
        assert tidy["Value"].sum() == pytest.approx(sum(range(1, 29)) + 99.0)

    def test_summary_dates(self):
        wide = pd.DataFrame(
            [
                {
                    "STATION_NUMBER": "08MF005",
                    "YEAR": 2000,
                    "MONTH": 6,
                    "MONTHLY_MEAN": 5.0,
                    "FIRST_DAY_MAX": 12,
                    "MAX": 9.0,
                }
            ]
        )
        specs = [
            ColumnSpec("MEAN", "Value", "MONTHLY_MEAN"),
            ColumnSpec("MAX", "Day", "FIRST_DAY_MAX"),
            ColumnSpec("MAX", "Value", "MAX"),
        ]
        tidy = reshape_summary(wide, ["STATION_NUMBER", "YEAR", "MONTH"], specs).set_index("Sum_stat")

        assert "Day" not in tidy.columns
        assert pd.isna(tidy.loc["MEAN", "Date_occurred"])
        assert tidy.loc["MAX", "Date_occurred"] == pd.Timestamp("2000-06-12")
        assert tidy.loc["MAX", "Value"] == 9.0
