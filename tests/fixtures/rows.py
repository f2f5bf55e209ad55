"""
In-memory row source fixtures.

Usage:
    def test_routing(create_fake_row):
        row = create_fake_row({'id': 1, 'name': 'Alice'})
        new_scanner(row).scan(Ref(int), Ref(str))
        assert row.fill_calls == 1
"""
import pytest
from rowscan.row import fill_values


class FakeRow:
    """Row source that counts calls and records the destinations it fills."""

    def __init__(self, data: dict, error: Exception | None = None) -> None:
        self.data = data
        self.error = error
        self.fill_calls = 0
        self.columns_calls = 0
        self.destinations: tuple = ()

    def columns(self) -> list[str]:
        self.columns_calls += 1
        return list(self.data)

    def fill(self, *dest) -> None:
        self.fill_calls += 1
        self.destinations = dest
        if self.error is not None:
            raise self.error
        fill_values(list(self.data), list(self.data.values()), dest)


class FakeCursor:
    """Minimal DB-API cursor over a fixed result."""

    def __init__(self, description, rows) -> None:
        self.description = description
        self.rows = list(rows)
        self.closed = False

    def fetchone(self):
        if self.closed:
            raise RuntimeError('cursor closed')
        return self.rows.pop(0) if self.rows else None

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def create_fake_row():
    """Factory for FakeRow instances."""
    def factory(data, error=None):
        return FakeRow(data, error)

    return factory


@pytest.fixture
def create_fake_cursor():
    """Factory for FakeCursor instances taking column names and row tuples."""
    def factory(names, rows):
        description = [(name, None, None, None, None, None, None) for name in names]
        return FakeCursor(description, rows)

    return factory
