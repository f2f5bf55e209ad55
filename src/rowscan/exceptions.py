"""
Scan-specific exception classes.
"""
import sqlite3

import psycopg


class ScanError(Exception):
    """Base class for all rowscan errors.
    """


class ConfigurationError(ScanError):
    """Caller misuse detected before any row access.
    """


class BindingError(ScanError):
    """Error writing a row value into a destination.
    """


class NoRowsError(BindingError):
    """The query produced no row to scan.
    """


class TypeConversionError(BindingError):
    """Error converting a row value to the destination's declared type.
    """


RowSourceError = (
    psycopg.Error,
    sqlite3.Error,
    BindingError,
    )
