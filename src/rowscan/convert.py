"""
Writing row values into destinations.

Row sources call `assign` once per destination. Values are converted to the
destination's declared type by `coerce_value`:

- numpy and pandas scalars become Python scalars, NaN/NaT become None
- ISO strings become datetime, date or time (via dateutil)
- numeric and text values convert between int, float, Decimal, complex, bool
- ``list[T]`` and ``tuple[T, ...]`` convert element-wise
"""
import datetime
import decimal
import typing
from collections.abc import Sequence
from typing import Any

import dateutil.parser
import numpy as np
import pandas as pd

from rowscan.exceptions import BindingError, TypeConversionError
from rowscan.target import FieldRef, Ref, type_name
from rowscan.types import SEQUENCE_ORIGINS, sequence_item_type
from rowscan.types import unwrap_optional

__all__ = ['assign', 'coerce_value', 'to_python']

TRUE_STRINGS = {'t', 'true', 'y', 'yes', 'on', '1'}
FALSE_STRINGS = {'f', 'false', 'n', 'no', 'off', '0'}

_isoparser = dateutil.parser.isoparser()


def to_python(value: Any) -> Any:
    """Convert numpy and pandas scalars to Python types."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            return None
        return pd.Timestamp(value).to_pydatetime()
    if isinstance(value, np.floating) and np.isnan(value):
        return None
    if isinstance(value, np.generic):
        return value.item()
    return value


def _text(value: Any) -> str:
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value).decode()
    if isinstance(value, str):
        return value
    raise TypeError(f'expected text, got {type(value).__name__}')


def _to_datetime(value: Any) -> datetime.datetime:
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    return dateutil.parser.isoparse(_text(value))


def _to_date(value: Any) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    return dateutil.parser.isoparse(_text(value)).date()


def _to_time(value: Any) -> datetime.time:
    if isinstance(value, datetime.datetime):
        return value.timetz()
    return _isoparser.parse_isotime(_text(value))


def _to_bool(value: Any) -> bool:
    if isinstance(value, int | float | decimal.Decimal) and value in {0, 1}:
        return bool(value)
    text = _text(value).strip().lower()
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    raise ValueError(f'not a boolean: {value!r}')


def _to_int(value: Any) -> int:
    if isinstance(value, float | decimal.Decimal) and value != int(value):
        raise ValueError(f'{value!r} has a fractional part')
    if isinstance(value, bytes | bytearray):
        value = _text(value)
    return int(value)


def _to_decimal(value: Any) -> decimal.Decimal:
    if isinstance(value, float):
        return decimal.Decimal(str(value))
    if isinstance(value, bytes | bytearray):
        value = _text(value)
    return decimal.Decimal(value)


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return value.encode()
    return bytes(value)


def _is_exact(value: Any, tp: type) -> bool:
    if not isinstance(value, tp):
        return False
    if isinstance(value, bool) and tp is not bool and issubclass(tp, int):
        return False
    if isinstance(value, datetime.datetime) and not issubclass(tp, datetime.datetime) \
            and issubclass(tp, datetime.date):
        return False
    return True


def _convert_scalar(value: Any, tp: type) -> Any:
    if issubclass(tp, np.generic):
        return tp(value)
    if issubclass(tp, datetime.datetime):
        return _to_datetime(value)
    if issubclass(tp, datetime.date):
        return _to_date(value)
    if issubclass(tp, datetime.time):
        return _to_time(value)
    if issubclass(tp, bool):
        return _to_bool(value)
    if issubclass(tp, int):
        return tp(_to_int(value))
    if issubclass(tp, decimal.Decimal):
        return _to_decimal(value)
    if issubclass(tp, float | complex):
        if isinstance(value, bytes | bytearray):
            value = _text(value)
        return tp(value)
    if issubclass(tp, str):
        return tp(_text(value))
    if issubclass(tp, bytes | bytearray):
        return tp(_to_bytes(value))
    raise TypeError(f'no conversion to {tp.__name__}')


def _coerce_sequence(value: Any, tp: Any, origin: Any) -> list | tuple:
    if isinstance(value, str | bytes | bytearray) \
            or not isinstance(value, Sequence | np.ndarray | pd.Series):
        raise TypeConversionError(
            f'cannot convert {type(value).__name__} to {type_name(tp)}')
    item_type = sequence_item_type(tp)
    if item_type is None:
        item_type = Any
    items = [coerce_value(v, item_type) for v in value]
    return tuple(items) if origin is tuple else items


def coerce_value(value: Any, tp: Any) -> Any:
    """Convert a row value to a declared destination type.

    Undeclared types (``Any``), unions and forward references pass the value
    through unchanged.
    """
    tp, nullable = unwrap_optional(tp)
    value = to_python(value)
    if value is None:
        if nullable:
            return None
        raise BindingError(f'cannot assign NULL to non-nullable {type_name(tp)}')
    if tp is Any:
        return value
    origin = typing.get_origin(tp)
    if origin in SEQUENCE_ORIGINS:
        return _coerce_sequence(value, tp, origin)
    if origin is not None or not isinstance(tp, type):
        return value
    if _is_exact(value, tp):
        return value
    try:
        return _convert_scalar(value, tp)
    except (ValueError, TypeError, ArithmeticError) as exc:
        raise TypeConversionError(
            f'cannot convert {value!r} ({type(value).__name__}) to {type_name(tp)}') from exc


def assign(dest: Any, value: Any, coerce: bool = True) -> None:
    """Write one value into a destination.

    Ref and FieldRef are set (after coercion), a list has its contents
    replaced in place. Anything else is not settable.
    """
    if isinstance(dest, Ref | FieldRef):
        if coerce:
            value = coerce_value(value, dest.type)
        try:
            dest.set(value)
        except AttributeError as exc:
            raise BindingError(f'cannot write {dest!r}: {exc}') from exc
        return
    if isinstance(dest, list):
        value = to_python(value)
        if value is None or isinstance(value, str | bytes | bytearray) \
                or not isinstance(value, Sequence | np.ndarray | pd.Series):
            raise BindingError(f'cannot assign {type(value).__name__} to a list destination')
        dest[:] = [to_python(v) for v in value]
        return
    raise BindingError(f'destination of type {type(dest).__name__} is not settable')
