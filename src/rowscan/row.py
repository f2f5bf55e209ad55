"""
Row sources over DB-API cursors and in-memory rows.
"""
import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any

from rowscan.convert import assign
from rowscan.exceptions import BindingError, NoRowsError
from rowscan.options import DEFAULT_OPTIONS, ScanOptions

logger = logging.getLogger(__name__)

__all__ = ['CursorRow', 'MappingRow', 'column_names', 'query_row']


def column_names(description: Sequence | None) -> list[str]:
    """Column names from a cursor description.

    psycopg describes columns with objects exposing ``name``; other DB-API
    drivers use tuples whose first item is the name.
    """
    return [getattr(d, 'name', None) or d[0] for d in (description or [])]


def fill_values(columns: Sequence[str], values: Sequence, dest: Sequence,
                coerce: bool = True) -> None:
    """Write row values into destinations.

    Values go positionally when there is one destination per column. With
    fewer destinations, each must carry the column it was resolved from
    (FieldRef) and values go by column name.
    """
    if len(dest) == len(columns):
        pairs = list(zip(dest, values))
    elif all(getattr(d, 'column', None) for d in dest):
        index: dict[str, int] = {}
        for i, name in enumerate(columns):
            index.setdefault(name, i)
        missing = [d.column for d in dest if d.column not in index]
        if missing:
            raise BindingError(f'columns not in row: {missing}')
        pairs = [(d, values[index[d.column]]) for d in dest]
    else:
        raise BindingError(
            f'number of destinations ({len(dest)}) does not match '
            f'number of columns ({len(columns)})')

    for d, value in pairs:
        assign(d, value, coerce)


def _row_values(row: Any, columns: Sequence[str]) -> list:
    if isinstance(row, Mapping):
        return [row[name] for name in columns]
    return list(row)


class CursorRow:
    """The first row of an executed DB-API cursor.

    Single-use: the first `fill` fetches the row and closes the cursor, any
    later `fill` fails.
    """

    def __init__(self, cursor: Any, options: ScanOptions | None = None) -> None:
        self.cursor = cursor
        self.options = options or DEFAULT_OPTIONS
        self._columns = column_names(cursor.description)
        self._consumed = False

    def columns(self) -> list[str]:
        return list(self._columns)

    def fill(self, *dest: Any) -> None:
        if self._consumed:
            raise BindingError('row already consumed')
        self._consumed = True
        try:
            row = self.cursor.fetchone()
        finally:
            self.close()
        if row is None:
            raise NoRowsError('no rows in result set')
        fill_values(self._columns, _row_values(row, self._columns), dest,
                    self.options.coerce)

    def close(self) -> None:
        self.cursor.close()

    def __enter__(self) -> 'CursorRow':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if not self._consumed:
            self._consumed = True
            self.close()

    def __repr__(self) -> str:
        return f'CursorRow(columns={self._columns!r}, consumed={self._consumed})'


class MappingRow:
    """A row already in memory.

    Accepts anything exposing ``keys()`` and item access by key: dict,
    sqlite3.Row, SQLAlchemy Row (through its ``_mapping``), pandas Series.
    Reusable: every `fill` writes the same values.
    """

    def __init__(self, row: Any, options: ScanOptions | None = None) -> None:
        mapping = getattr(row, '_mapping', row)
        keys = list(mapping.keys())
        self._columns = [str(k) for k in keys]
        self._values = [mapping[k] for k in keys]
        self.options = options or DEFAULT_OPTIONS

    def columns(self) -> list[str]:
        return list(self._columns)

    def fill(self, *dest: Any) -> None:
        fill_values(self._columns, self._values, dest, self.options.coerce)

    def __repr__(self) -> str:
        return f'MappingRow(columns={self._columns!r})'


def query_row(cn: Any, sql: str, *args: Any,
              options: ScanOptions | None = None) -> CursorRow:
    """Execute a query on a DB-API connection and return its first row.

    Placeholders are passed to the driver as written (``?`` for sqlite3,
    ``%s`` for psycopg). Driver errors propagate unchanged.
    """
    start = time.time()
    logger.debug(f'SQL:\n{sql}\nargs: {args}')
    cursor = cn.cursor()
    try:
        if args:
            cursor.execute(sql, args)
        else:
            cursor.execute(sql)
    except Exception:
        cursor.close()
        raise
    finally:
        logger.debug(f'Query time: {time.time() - start:.4f}s')
    return CursorRow(cursor, options)
