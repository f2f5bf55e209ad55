"""
Scanner: route destinations to positional or record binding.
"""
import logging
from typing import Any, Protocol, runtime_checkable

from rowscan.exceptions import ConfigurationError
from rowscan.options import DEFAULT_OPTIONS, ScanOptions
from rowscan.record import scan_struct
from rowscan.types import is_variadic

logger = logging.getLogger(__name__)

__all__ = ['RowSource', 'Scanner', 'new_scanner']


@runtime_checkable
class RowSource(Protocol):
    """One result row: its column names and a way to write its values."""

    def columns(self) -> list[str]:
        ...

    def fill(self, *dest: Any) -> None:
        ...


class Scanner:
    """Scan a row source into destinations.

    Each call to `scan` is independent; the scanner holds no state besides
    the row source and options.
    """

    def __init__(self, row: RowSource, options: ScanOptions | None = None) -> None:
        self.row = row
        self.options = options or DEFAULT_OPTIONS

    def scan(self, *dst: Any) -> None:
        """Write the row into ``dst``.

        Builtin destinations (scalars, Refs, typed collections) are handed to
        the row source positionally. A single record is bound by field name.

        Raises
            ConfigurationError: no destination, or a record mixed with
                other destinations
        """
        if not dst:
            raise ConfigurationError('no destination provided')

        if is_variadic(*dst):
            logger.debug(f'Scanning into {len(dst)} positional destination(s)')
            self.row.fill(*dst)
            return

        if len(dst) > 1:
            raise ConfigurationError('mixed structured and multiple destinations unsupported')

        logger.debug(f'Scanning into record {type(dst[0]).__name__}')
        scan_struct(self.row.fill, dst[0], self.row.columns(), self.options)

    def __repr__(self) -> str:
        return f'Scanner(row={self.row!r})'


def new_scanner(row: RowSource, options: ScanOptions | None = None) -> Scanner:
    """Create a Scanner over a row source. No row access is performed.
    """
    return Scanner(row, options)
