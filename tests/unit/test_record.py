"""
Tests for binding result columns to record fields.
"""
import dataclasses
import datetime

import pytest
from rowscan import ConfigurationError, ScanOptions, column, resolve_fields
from rowscan import scan_struct

from tests.fixtures.records import PERSON_COLS, Account, Person, Plain


def test_scan_struct(recording_fill):
    """Full, partial and missing column lists"""
    dst = Person()
    fill = recording_fill()

    scan_struct(fill, dst, PERSON_COLS)
    scan_struct(fill, dst, ['id'])
    assert len(fill.calls) == 2

    with pytest.raises(ConfigurationError, match='no columns provided'):
        scan_struct(fill, dst, None)
    with pytest.raises(ConfigurationError, match='no columns provided'):
        scan_struct(fill, dst, [])
    assert len(fill.calls) == 2


def test_scan_struct_populates_matched_fields(recording_fill):
    """Matched fields receive the exact values written by fill"""
    created = datetime.datetime(2023, 5, 15, 14, 30, 45)
    tags = ['a', 'b']
    fill = recording_fill({
        'id': 7,
        'name': 'Alice',
        'email_address': 'alice@example.com',
        'created_at': created,
        'tags': tags,
    })
    dst = Person()

    scan_struct(fill, dst, PERSON_COLS)

    assert dst.id == 7
    assert dst.name == 'Alice'
    assert dst.email == 'alice@example.com'
    assert dst.created_at is created
    assert dst.tags is tags
    assert dst.secret == 'hidden'


def test_scan_struct_leaves_unmatched_fields(recording_fill):
    """Fields without a column keep their prior value"""
    dst = Person(id=1, name='before', email='keep@example.com')
    fill = recording_fill({'name': 'after'})

    scan_struct(fill, dst, ['name'])

    assert dst.name == 'after'
    assert dst.id == 1
    assert dst.email == 'keep@example.com'


def test_scan_struct_no_columns_leaves_record_unchanged(recording_fill):
    dst = Person(id=3, name='Carol')
    before = dataclasses.replace(dst)
    fill = recording_fill({'id': 99})

    with pytest.raises(ConfigurationError):
        scan_struct(fill, dst, [])

    assert dst == before
    assert fill.calls == []


def test_scan_struct_follows_column_order(recording_fill):
    """Slots follow the column list, not field declaration order"""
    fill = recording_fill()

    scan_struct(fill, Account(), ['id', 'name'])

    (refs,) = fill.calls
    assert len(refs) == 2
    assert [r.name for r in refs] == ['id', 'name']
    assert [r.column for r in refs] == ['id', 'name']
    assert [r.type for r in refs] == [int, str]


def test_scan_struct_skips_unknown_columns(recording_fill):
    """Superset result sets bind only the columns the record declares"""
    fill = recording_fill()

    scan_struct(fill, Person(), ['id', 'not_a_field', 'name', 'secret'])

    (refs,) = fill.calls
    assert [r.column for r in refs] == ['id', 'name']


def test_scan_struct_name_matching_is_case_insensitive(recording_fill):
    """Untagged fields match any case, tags match exactly"""
    fill = recording_fill({'ID': 4, 'Name': 'Dan', 'EMAIL_ADDRESS': 'x', 'email': 'y'})
    dst = Person()

    scan_struct(fill, dst, ['ID', 'Name', 'EMAIL_ADDRESS', 'email'])

    (refs,) = fill.calls
    assert [r.column for r in refs] == ['ID', 'Name']
    assert dst.id == 4
    assert dst.name == 'Dan'
    assert dst.email is None


def test_scan_struct_embedded_record(recording_fill):
    """Embedded record fields bind one level deep, outer fields win"""
    fill = recording_fill({'id': 10, 'name': 'acct', 'created_by': 'admin'})
    dst = Account()

    scan_struct(fill, dst, ['id', 'name', 'created_by'])

    assert dst.id == 10
    assert dst.name == 'acct'
    assert dst.audit.created_by == 'admin'
    assert dst.audit.id == -1


def test_scan_struct_plain_class(recording_fill):
    """Annotated classes bind like dataclasses"""
    fill = recording_fill({'id': 1, 'label': 'x', 'kind': 'ignored', '_hidden': 'no'})
    dst = Plain()

    scan_struct(fill, dst, ['id', 'label', 'kind', '_hidden'])

    assert dst.id == 1
    assert dst.label == 'x'
    assert Plain.kind == 'plain'
    assert dst._hidden == 'private'


@pytest.mark.parametrize('dst', [None, 5, 'string', [Person()], {'id': 1}, Person])
def test_scan_struct_rejects_non_records(recording_fill, dst):
    fill = recording_fill()
    with pytest.raises(ConfigurationError, match='not a structured record'):
        scan_struct(fill, dst, ['id'])
    assert fill.calls == []


def test_scan_struct_propagates_fill_errors():
    """Errors from the fill function reach the caller unchanged"""
    error = RuntimeError('closed row')

    def fill(*dest):
        raise error

    with pytest.raises(RuntimeError) as excinfo:
        scan_struct(fill, Person(), ['id'])
    assert excinfo.value is error


def test_scan_struct_custom_tag(recording_fill):
    """Options select the metadata key holding column names"""
    @dataclasses.dataclass
    class Tagged:
        user_id: int = column('uid', tag='col', default=0)

    fill = recording_fill({'uid': 5})
    dst = Tagged()

    scan_struct(fill, dst, ['uid'], ScanOptions(tag='col'))
    assert dst.user_id == 5

    scan_struct(fill, Tagged(), ['uid'])
    assert fill.calls[-1] == ()


def test_resolve_fields():
    lookup = resolve_fields(Account())

    assert 'id' in lookup
    assert 'NAME' in lookup
    assert 'created_by' in lookup
    assert 'audit' not in lookup
    assert len(lookup) == 3

    ref = lookup.get('Created_By')
    assert ref.name == 'created_by'
    assert ref.column == 'Created_By'
    assert lookup.get('missing') is None


def test_resolve_fields_excludes_skip_tag():
    lookup = resolve_fields(Person())

    assert 'secret' not in lookup
    assert 'email_address' in lookup
    assert 'email' not in lookup


if __name__ == '__main__':
    __import__('pytest').main([__file__])
