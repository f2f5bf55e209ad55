"""
Scan a single database result row into Python destinations.

Destinations are either builtins bound positionally:

    count = Ref(int)
    rowscan.scan(query_row(cn, 'SELECT COUNT(*) FROM test'), count)

or one record whose fields are matched to columns by tag or name:

    user = User()
    rowscan.scan(query_row(cn, 'SELECT * FROM users WHERE id = ?', 1), user)
"""
__version__ = '0.1.0'

from typing import Any

from rowscan.exceptions import BindingError, ConfigurationError, NoRowsError
from rowscan.exceptions import RowSourceError, ScanError, TypeConversionError
from rowscan.options import ScanOptions
from rowscan.record import FillFunc, column, embed, resolve_fields, scan_struct
from rowscan.row import CursorRow, MappingRow, query_row
from rowscan.scanner import RowSource, Scanner, new_scanner
from rowscan.target import FieldRef, Ref
from rowscan.types import is_builtin, is_record, is_variadic


def scan(row: RowSource, *dst: Any, options: ScanOptions | None = None) -> None:
    """Scan a row source into destinations.
    """
    Scanner(row, options).scan(*dst)


__all__ = [
    'scan',
    'Scanner',
    'new_scanner',
    'RowSource',
    'FillFunc',
    'scan_struct',
    'resolve_fields',
    'column',
    'embed',
    'Ref',
    'FieldRef',
    'CursorRow',
    'MappingRow',
    'query_row',
    'ScanOptions',
    'is_builtin',
    'is_variadic',
    'is_record',
    'ScanError',
    'ConfigurationError',
    'BindingError',
    'NoRowsError',
    'TypeConversionError',
    'RowSourceError',
]
