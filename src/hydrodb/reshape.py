"""
Wide-to-long reshaping of archive and feed tables.

Source tables encode two things in their column names: the measured
quantity and a sub-field of it. The datamart CSV has ``LEVEL``,
``LEVEL_GRADE``, ``LEVEL_SYMBOL``, ``LEVEL_CODE``; the archive's daily tables
have ``FLOW1`` .. ``FLOW31`` with ``FLOW_SYMBOL1`` .. ``FLOW_SYMBOL31``. Column
names are resolved once into a table of :class:`~hydrodb.models.ColumnSpec`
entries and the reshape is driven by that table alone.
"""

import logging
import re
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .models import ColumnSpec

logger = logging.getLogger(__name__)

# Canonical order of pivoted sub-field columns.
SUBFIELD_ORDER = ["Value", "Grade", "Symbol", "Code"]

_DAILY_COLUMN = re.compile(r"^(?P<prefix>[A-Z]+)(?:_(?P<subfield>[A-Z]+))?(?P<day>\d{1,2})$")


def normalize_subfield(subfield: Optional[str]) -> str:
    """``""`` and ``None`` mean Value; ``GRADE`` becomes ``Grade``."""
    if not subfield:
        return "Value"
    return subfield[:1].upper() + subfield[1:].lower()


def split_column_name(name: str, sep: str = "_") -> Tuple[str, str]:
    """
    Split a compound column name into ``(quantity, subfield)``.

    >>> split_column_name("LEVEL")
    ('LEVEL', 'Value')
    >>> split_column_name("LEVEL_GRADE")
    ('LEVEL', 'Grade')
    """
    quantity, _, subfield = name.partition(sep)
    return quantity, normalize_subfield(subfield)


def build_column_specs(
    columns: Iterable[str], id_columns: Sequence[str], sep: str = "_"
) -> List[ColumnSpec]:
    """Resolve every non-id column into a ColumnSpec."""
    specs = []
    for column in columns:
        if column in id_columns:
            continue
        quantity, subfield = split_column_name(column, sep)
        specs.append(ColumnSpec(quantity=quantity, subfield=subfield, source=column))
    return specs


def daily_column_specs(columns: Iterable[str], prefix: str) -> List[ColumnSpec]:
    """
    Specs for a per-day layout.

    ``FLOW12`` maps to ``(12, "Value")`` and ``FLOW_SYMBOL12`` to
    ``(12, "Symbol")`` for ``prefix="FLOW"``. Columns with another prefix
    are ignored.
    """
    specs = []
    for column in columns:
        match = _DAILY_COLUMN.match(str(column))
        if not match or match.group("prefix") != prefix:
            continue
        specs.append(
            ColumnSpec(
                quantity=int(match.group("day")),
                subfield=normalize_subfield(match.group("subfield")),
                source=column,
            )
        )
    return specs


def _ordered_subfields(specs: Sequence[ColumnSpec]) -> List[str]:
    present = list(dict.fromkeys(spec.subfield for spec in specs))
    ordered = [sub for sub in SUBFIELD_ORDER if sub in present or sub == "Value"]
    return ordered + [sub for sub in present if sub not in ordered]


def reshape_wide(
    wide: pd.DataFrame,
    id_columns: Sequence[str],
    specs: Sequence[ColumnSpec],
    quantity_column: str = "Parameter",
    subfields: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """
    Convert a wide table into one row per (input row, quantity).

    Each quantity produces exactly one row for every input row, whatever
    sub-field columns it has; sub-fields with no source column come out
    null. Rows are never dropped because their Value is null.

    Args:
        wide: Source table
        id_columns: Columns copied unchanged onto every output row
        specs: Column-spec table for the value columns
        quantity_column: Name of the output column holding the quantity
        subfields: Sub-field columns to emit (default: those in ``specs``,
            always including Value)

    Returns:
        Long DataFrame with ``id_columns``, ``quantity_column`` and one
        column per sub-field
    """
    id_columns = list(id_columns)
    subfields = list(subfields) if subfields else _ordered_subfields(specs)
    sources = {(spec.quantity, spec.subfield): spec.source for spec in specs}
    quantities = list(dict.fromkeys(spec.quantity for spec in specs))

    parts = []
    for quantity in quantities:
        part = wide[id_columns].copy()
        part[quantity_column] = quantity
        for subfield in subfields:
            source = sources.get((quantity, subfield))
            part[subfield] = wide[source] if source is not None else None
        parts.append(part)

    if not parts:
        return pd.DataFrame(columns=id_columns + [quantity_column] + subfields)

    return pd.concat(parts, ignore_index=True)


def pivot_wide(
    long: pd.DataFrame,
    id_columns: Sequence[str],
    specs: Sequence[ColumnSpec],
    quantity_column: str = "Parameter",
) -> pd.DataFrame:
    """Inverse of :func:`reshape_wide` for the same column-spec table."""
    indexed = long.set_index(list(id_columns))
    columns = {}
    for spec in specs:
        rows = indexed[indexed[quantity_column] == spec.quantity]
        columns[spec.source] = rows[spec.subfield]
    return pd.DataFrame(columns).reset_index()


def synthesize_date(
    year: pd.Series, month: pd.Series, day: pd.Series
) -> pd.Series:
    """
    Combine year, month and day columns into dates.

    Missing or impossible components (a MEAN statistic has no day, the 31st
    of a 30-day month) give NaT for that row instead of raising.
    """
    parts = pd.DataFrame(
        {
            "year": pd.to_numeric(year, errors="coerce"),
            "month": pd.to_numeric(month, errors="coerce"),
            "day": pd.to_numeric(day, errors="coerce"),
        }
    )
    valid = parts.notna().all(axis=1)
    ints = parts[valid].astype("int64")
    text = (
        ints["year"].astype(str).str.zfill(4)
        + "-"
        + ints["month"].astype(str).str.zfill(2)
        + "-"
        + ints["day"].astype(str).str.zfill(2)
    )
    dates = pd.to_datetime(text, format="%Y-%m-%d", errors="coerce")
    return dates.reindex(parts.index)


def reshape_daily(
    wide: pd.DataFrame,
    prefix: str,
    parameter: str,
    id_columns: Sequence[str] = ("STATION_NUMBER", "YEAR", "MONTH"),
) -> pd.DataFrame:
    """
    Tidy an archive per-day table (one row per station-month, one column per day).

    Returns ``STATION_NUMBER, Date, Parameter, Value, Symbol``. Days past the
    end of the month are dropped when they carry neither value nor symbol.
    """
    specs = daily_column_specs(wide.columns, prefix)
    long = reshape_wide(
        wide, id_columns, specs, quantity_column="DAY", subfields=["Value", "Symbol"]
    )
    long["Date"] = synthesize_date(long["YEAR"], long["MONTH"], long["DAY"])

    has_data = long["Value"].notna() | long["Symbol"].notna()
    orphaned = long["Date"].isna() & has_data
    if orphaned.any():
        logger.warning(
            f"{int(orphaned.sum())} {prefix} values fall on impossible dates and were kept with no Date"
        )
    long = long[long["Date"].notna() | has_data].copy()

    long["Parameter"] = parameter
    long["Value"] = pd.to_numeric(long["Value"], errors="coerce")
    long = long[["STATION_NUMBER", "Date", "Parameter", "Value", "Symbol"]]
    return long.sort_values(["STATION_NUMBER", "Date"]).reset_index(drop=True)


def reshape_summary(
    wide: pd.DataFrame,
    id_columns: Sequence[str],
    specs: Sequence[ColumnSpec],
    quantity_column: str = "Sum_stat",
    date_column: str = "Date_occurred",
) -> pd.DataFrame:
    """
    Tidy a monthly/annual summary table.

    Each statistic becomes a row with its ``Value``; the ``Day`` sub-field of
    the extremes is folded with ``YEAR`` and ``MONTH`` into ``date_column``.
    """
    long = reshape_wide(
        wide, id_columns, specs, quantity_column=quantity_column, subfields=["Value", "Day"]
    )
    long[date_column] = synthesize_date(long["YEAR"], long["MONTH"], long["Day"])
    long["Value"] = pd.to_numeric(long["Value"], errors="coerce")
    return long.drop(columns="Day")
