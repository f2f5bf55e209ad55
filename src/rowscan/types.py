"""
Destination classification.

This module decides, without descending into record fields, whether a
destination can be handed straight to a row source:

- is_builtin: scalar, collection of one scalar type, or a slot declared as one
- is_variadic: every destination is builtin
- is_record: a composite value bound field by field
"""
import datetime
import logging
import types
import typing
from collections.abc import Mapping, MutableSequence, Sequence
from dataclasses import is_dataclass
from numbers import Number
from typing import Any

import numpy as np
import pandas as pd

from rowscan.target import FieldRef, Ref

logger = logging.getLogger(__name__)

__all__ = [
    'is_builtin',
    'is_builtin_type',
    'is_variadic',
    'is_record',
    'field_types',
    'unwrap_optional',
    'sequence_item_type',
]

TEXT_TYPES: tuple[type, ...] = (str, bytes, bytearray, np.str_, np.bytes_)

TIMESTAMP_TYPES: tuple[type, ...] = (
    datetime.datetime, datetime.date, datetime.time, datetime.timedelta,
    np.datetime64, np.timedelta64,
)

# Number covers bool, int, float, complex, Decimal, Fraction and numpy numerics
SCALAR_TYPES: tuple[type, ...] = (Number, np.bool_, *TEXT_TYPES, *TIMESTAMP_TYPES)

# numpy dtype kinds with a statically known scalar element type
ARRAY_KINDS = frozenset('biufcmMUS')

SEQUENCE_ORIGINS = (list, tuple, Sequence, MutableSequence)

NoneType = type(None)


def unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Strip ``Annotated`` and ``Optional`` from an annotation.

    Unresolved string or forward-reference annotations are undeclared.

    Returns
        (inner type, whether None is acceptable)
    """
    if isinstance(tp, str | typing.ForwardRef):
        return Any, True
    if typing.get_origin(tp) is typing.Annotated:
        tp = typing.get_args(tp)[0]
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        args = typing.get_args(tp)
        rest = [a for a in args if a is not NoneType]
        nullable = len(rest) < len(args)
        if len(rest) == 1:
            return rest[0], nullable
        return tp, nullable
    return tp, tp is Any


def sequence_item_type(tp: Any) -> Any | None:
    """Element type of ``list[T]``, ``tuple[T, ...]`` or ``Sequence[T]``.

    Returns None when the element type is absent or not uniform.
    """
    args = [a for a in typing.get_args(tp) if a is not Ellipsis]
    if not args:
        return None
    first = args[0]
    if any(a != first for a in args[1:]):
        return None
    return first


def _is_scalar_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, SCALAR_TYPES)


def _is_scalar(v: Any) -> bool:
    return isinstance(v, SCALAR_TYPES)


def is_builtin_type(tp: Any) -> bool:
    """Whether a declared type is directly bindable.

    Scalars in the allow-list, and sequences annotated with one of them as
    element type. Bare ``list`` or ``list[Any]`` are rejected since their
    element type is not known.
    """
    tp, _ = unwrap_optional(tp)
    origin = typing.get_origin(tp)
    if origin in SEQUENCE_ORIGINS:
        item = sequence_item_type(tp)
        return item is not None and _is_scalar_type(unwrap_optional(item)[0])
    if origin is not None:
        return False
    return _is_scalar_type(tp)


def _is_homogeneous(seq: Sequence) -> bool:
    if not seq:
        return False
    kinds = {type(v) for v in seq}
    return len(kinds) == 1 and _is_scalar(seq[0])


def is_builtin(v: Any) -> bool:
    """Whether a destination is directly bindable by a row source.

    Slots are judged by their declared type. Untyped lists and tuples are
    judged by their contents: non-empty and all of one scalar type.
    """
    if isinstance(v, Ref | FieldRef):
        return is_builtin_type(v.type)
    if v is None or isinstance(v, type):
        return False
    if _is_scalar(v):
        return True
    if isinstance(v, np.ndarray | pd.Series):
        return v.dtype.kind in ARRAY_KINDS
    if isinstance(v, list | tuple):
        return _is_homogeneous(v)
    return False


def is_variadic(*vs: Any) -> bool:
    """Whether every destination can be bound positionally.

    All or nothing: one record among builtins makes the set structured.
    """
    return all(is_builtin(v) for v in vs)


def field_types(cls: type) -> dict[str, Any]:
    """Public annotated attributes of a class, resolved where possible.
    """
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        logger.debug(f'Could not resolve annotations of {cls.__name__}, using raw annotations')
        hints = {}
        for klass in reversed(cls.__mro__):
            hints.update(getattr(klass, '__annotations__', {}))
    return {
        name: tp for name, tp in hints.items()
        if not name.startswith('_')
        and tp is not typing.ClassVar
        and typing.get_origin(tp) is not typing.ClassVar
    }


def is_record(v: Any) -> bool:
    """Whether a destination is a record to bind by field name.
    """
    if v is None or isinstance(v, type | Ref | FieldRef):
        return False
    if _is_scalar(v) or isinstance(v, Mapping | Sequence | np.ndarray | pd.Series):
        return False
    if is_dataclass(v):
        return True
    return bool(field_types(type(v)))
