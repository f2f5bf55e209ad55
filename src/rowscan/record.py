"""
Record binding: resolve result columns to record fields.

A column matches a field when it equals the field's tag exactly (dataclass
field metadata, ``column('user_name')``), or, for untagged fields, the field
name compared case-insensitively. Columns without a field are skipped so
that ``SELECT *`` can feed records that only declare some columns.
"""
import dataclasses
import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any

from rowscan.exceptions import ConfigurationError
from rowscan.options import DEFAULT_OPTIONS, ScanOptions
from rowscan.target import FieldRef
from rowscan.types import field_types, is_record

logger = logging.getLogger(__name__)

__all__ = [
    'FillFunc',
    'FieldLookup',
    'column',
    'embed',
    'resolve_fields',
    'scan_struct',
]

FillFunc = Callable[..., Any]

SKIP_TAG = '-'


def column(name: str, *, tag: str = DEFAULT_OPTIONS.tag, **kw: Any) -> Any:
    """Declare a dataclass field bound to column ``name``.

    Pass ``'-'`` to keep the field out of binding altogether.
    """
    metadata = dict(kw.pop('metadata', None) or {})
    metadata[tag] = name
    return dataclasses.field(metadata=metadata, **kw)


def embed(factory: Callable[[], Any], *, key: str = DEFAULT_OPTIONS.embed_key,
          **kw: Any) -> Any:
    """Declare a dataclass field holding a record whose fields are bound
    as if declared on the outer record.
    """
    metadata = dict(kw.pop('metadata', None) or {})
    metadata[key] = True
    return dataclasses.field(default_factory=factory, metadata=metadata, **kw)


def _declared_fields(dst: Any, options: ScanOptions) -> Iterator[tuple[str, str | None, Any, bool]]:
    """Yield (attribute, tag, declared type, embedded) for each field."""
    hints = field_types(type(dst))
    if dataclasses.is_dataclass(dst):
        for f in dataclasses.fields(dst):
            yield (f.name, f.metadata.get(options.tag), hints.get(f.name, f.type),
                   bool(f.metadata.get(options.embed_key)))
        return
    for name, tp in hints.items():
        yield name, None, tp, False


class FieldLookup:
    """Column name to field resolution for one record.

    Tags match verbatim, untagged fields by lower-cased name. The first
    field registered for a key wins.
    """

    def __init__(self) -> None:
        self.tagged: dict[str, tuple[Any, str, Any]] = {}
        self.named: dict[str, tuple[Any, str, Any]] = {}

    def add(self, obj: Any, name: str, tag: str | None, tp: Any) -> None:
        if tag == SKIP_TAG:
            return
        if tag:
            self.tagged.setdefault(tag, (obj, name, tp))
        else:
            self.named.setdefault(name.lower(), (obj, name, tp))

    def get(self, column: str) -> FieldRef | None:
        """FieldRef for ``column``, or None when no field matches."""
        found = self.tagged.get(column) or self.named.get(column.lower())
        if found is None:
            return None
        obj, name, tp = found
        return FieldRef(obj, name, tp, column=column)

    def __contains__(self, column: str) -> bool:
        return column in self.tagged or column.lower() in self.named

    def __len__(self) -> int:
        return len(self.tagged) + len(self.named)


def resolve_fields(dst: Any, options: ScanOptions | None = None) -> FieldLookup:
    """Build the field lookup for a record.

    Fields of records declared with `embed` are added after the outer
    record's own fields, so outer fields shadow them. Embedding is one
    level deep: embed declarations inside an embedded record are ignored.
    """
    options = options or DEFAULT_OPTIONS
    lookup = FieldLookup()
    embedded = []
    for name, tag, tp, is_embedded in _declared_fields(dst, options):
        if is_embedded:
            inner = getattr(dst, name, None)
            if is_record(inner):
                embedded.append(inner)
            continue
        lookup.add(dst, name, tag, tp)
    for inner in embedded:
        for name, tag, tp, is_embedded in _declared_fields(inner, options):
            if not is_embedded:
                lookup.add(inner, name, tag, tp)
    return lookup


def scan_struct(fill: FillFunc, dst: Any, columns: Sequence[str] | None,
                options: ScanOptions | None = None) -> None:
    """Scan one row into the fields of a record.

    Resolves each column to a field of ``dst`` and calls ``fill`` once with
    the resolved FieldRefs, in column order. Exceptions raised by ``fill``
    propagate unchanged.

    Args:
        fill: Callable writing row values positionally into its arguments
        dst: Record to populate
        columns: Result column names, in row order
        options: Scan options (tag and embed metadata keys)

    Raises
        ConfigurationError: ``columns`` is empty or ``dst`` is not a record
    """
    if not columns:
        raise ConfigurationError('no columns provided')
    if not is_record(dst):
        raise ConfigurationError(
            f'destination of type {type(dst).__name__} is not a structured record')

    lookup = resolve_fields(dst, options)
    refs = []
    for name in columns:
        ref = lookup.get(name)
        if ref is None:
            logger.debug(f'No field of {type(dst).__name__} for column {name!r}, skipping')
            continue
        refs.append(ref)

    fill(*refs)
