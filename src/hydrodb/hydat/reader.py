"""
Read access to the HYDAT SQLite archive.
"""

import logging
import re
import sqlite3
from typing import Any, List, Optional, Sequence, Tuple

import pandas as pd

from ..config import HYDAT_FILENAME, default_hydat_path
from ..exceptions import InvalidArgumentError, NotFoundError

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# SQLite caps the number of bound parameters per statement.
STATION_CHUNK_SIZE = 500


def validate_identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise InvalidArgumentError(f"Invalid table or column name: {name!r}")
    return name


class HydatReader:
    """
    Scoped connection to a HYDAT archive file.

    Use as a context manager so the connection is released on every exit
    path::

        with HydatReader() as reader:
            flows = reader.scan("DLY_FLOWS", stations=["08MF005"])
    """

    def __init__(self, hydat_path: Optional[str] = None):
        self.path = default_hydat_path(hydat_path)
        self._connection: Optional[sqlite3.Connection] = None

    def open(self) -> "HydatReader":
        if not self.path.is_file():
            raise NotFoundError(
                f"No {HYDAT_FILENAME} found at {self.path}. "
                "Run download_hydat() to download the database."
            )
        self._connection = sqlite3.connect(str(self.path))
        logger.debug(f"Opened HYDAT archive at {self.path}")
        return self

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def __enter__(self) -> "HydatReader":
        return self.open()

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @property
    def connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise RuntimeError("HydatReader is not open")
        return self._connection

    def read_table(self, table: str) -> pd.DataFrame:
        """Every row of a (small) reference table."""
        return pd.read_sql_query(
            f"SELECT * FROM {validate_identifier(table)}", self.connection
        )

    def stations(self) -> pd.DataFrame:
        """The station directory used for station resolution."""
        return self.scan("STATIONS", columns=["STATION_NUMBER", "PROV_TERR_STATE_LOC"])

    def scan(
        self,
        table: str,
        stations: Optional[Sequence[str]] = None,
        columns: Optional[Sequence[str]] = None,
        years: Tuple[Optional[int], Optional[int]] = (None, None),
    ) -> pd.DataFrame:
        """
        Filtered scan of an archive table.

        Args:
            table: HYDAT table name
            stations: Restrict to these station numbers (None for all)
            columns: Columns to select (None for all)
            years: Inclusive (first, last) bounds on the ``YEAR`` column

        Returns:
            The matching rows in the table's native (wide) layout
        """
        select = ", ".join(validate_identifier(c) for c in columns) if columns else "*"
        base_sql = f"SELECT {select} FROM {validate_identifier(table)}"

        clauses: List[str] = []
        params: List[Any] = []
        first_year, last_year = years
        if first_year is not None:
            clauses.append("YEAR >= ?")
            params.append(first_year)
        if last_year is not None:
            clauses.append("YEAR <= ?")
            params.append(last_year)

        if stations is None:
            return self._query(base_sql, clauses, params)

        stations = list(stations)
        if not stations:
            return self._query(base_sql, clauses + ["1 = 0"], params)

        chunks = [
            stations[i : i + STATION_CHUNK_SIZE]
            for i in range(0, len(stations), STATION_CHUNK_SIZE)
        ]
        frames = []
        for chunk in chunks:
            placeholders = ", ".join("?" for _ in chunk)
            frames.append(
                self._query(
                    base_sql,
                    clauses + [f"STATION_NUMBER IN ({placeholders})"],
                    params + chunk,
                )
            )
        if len(frames) == 1:
            return frames[0]
        return pd.concat(frames, ignore_index=True)

    def _query(self, base_sql: str, clauses: List[str], params: List[Any]) -> pd.DataFrame:
        sql = base_sql
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        logger.debug(f"HYDAT query: {sql} ({len(params)} parameters)")
        return pd.read_sql_query(sql, self.connection, params=params)
