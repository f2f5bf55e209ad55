"""
Settable destinations.

Python has no addressable variables, so a destination is a slot that a row
source can write through:

- Ref: a typed cell standing in for a variable (``Ref(int)``,
  ``Ref(list[str])``, ``Ref(int | None)``)
- FieldRef: one attribute of a record, produced by struct binding
"""
from typing import Any

__all__ = ['Ref', 'FieldRef', 'type_name']


def type_name(tp: Any) -> str:
    """Readable name of a type annotation."""
    if isinstance(tp, type) and not getattr(tp, '__args__', None):
        return tp.__name__
    return repr(tp).replace('typing.', '')


class Ref:
    """Typed, settable cell.

    Example:
        count = Ref(int)
        new_scanner(row).scan(count)
        count.value  # -> 2
    """

    __slots__ = ('type', 'value')

    def __init__(self, type_: Any = Any, value: Any = None) -> None:
        self.type = type_
        self.value = value

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f'Ref({type_name(self.type)}, {self.value!r})'


class FieldRef:
    """Address of one attribute of a record.

    Args:
        obj: Record owning the attribute
        name: Attribute name
        type_: Declared type of the attribute (``Any`` when undeclared)
        column: Result column this slot was resolved from
    """

    __slots__ = ('obj', 'name', 'type', 'column')

    def __init__(self, obj: Any, name: str, type_: Any = Any,
                 column: str | None = None) -> None:
        self.obj = obj
        self.name = name
        self.type = type_
        self.column = column

    @property
    def value(self) -> Any:
        return getattr(self.obj, self.name, None)

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        setattr(self.obj, self.name, value)

    def __repr__(self) -> str:
        return (f'FieldRef({type(self.obj).__name__}.{self.name}, '
                f'type={type_name(self.type)}, column={self.column!r})')
