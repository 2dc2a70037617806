"""Unit tests for record field resolution."""

import pytest
from decimal import Decimal

from csv_serialization.core.exceptions import InvalidCsvFormatError
from csv_serialization.core.models import FieldKind
from csv_serialization.serializer.fields import field_defaults, record_factory, resolve_fields
from tests.records import (
    DuplicateTitles, FrozenPoint, Fruit, Invoice, Measurement, NotADataclass, NumberCollision,
    OnlyReferences, Person, SnakeCollision, Status
)


class TestResolveFields:
    """Test cases for building the active field set."""

    def test_plain_record_sorted_by_name(self):
        """Fields without column markers are sorted by name with order 0."""
        descriptors, explicit = resolve_fields(Fruit)

        assert explicit is False
        assert [d.name for d in descriptors] == ['name', 'quantity']
        assert [d.title for d in descriptors] == ['name', 'quantity']
        assert all(d.order == 0 for d in descriptors)

    def test_ignored_and_reference_fields_excluded(self):
        """csv_ignore fields, reference types and ClassVars never become columns."""
        descriptors, _ = resolve_fields(Person)

        assert [d.name for d in descriptors] == ['active', 'age', 'height', 'name', 'notes']

    def test_reference_fields_kept_when_configured(self):
        """Reference type fields are included when the filter is switched off."""
        descriptors, _ = resolve_fields(Person, ignore_reference_types=False)

        names = [d.name for d in descriptors]
        assert 'tags' in names
        assert 'nickname' not in names
        tags = next(d for d in descriptors if d.name == 'tags')
        assert tags.kind is FieldKind.OBJECT

    def test_explicit_ordering_uses_marked_fields_only(self):
        """With column markers present only marked fields are kept, in declared order."""
        descriptors, explicit = resolve_fields(Invoice)

        assert explicit is True
        assert [d.name for d in descriptors] == [
            'invoice_number', 'customer', 'amount', 'issued', 'status', 'description'
        ]
        assert [d.title for d in descriptors] == [
            'Invoice #', 'Customer', 'Amount', 'Issued', 'Status', 'Description'
        ]
        assert [d.order for d in descriptors] == [1, 2, 3, 4, 5, 6]

    def test_field_kinds(self):
        """Kinds are resolved from annotations, unwrapping Optional."""
        descriptors, _ = resolve_fields(Invoice)
        kinds = {d.name: d.kind for d in descriptors}

        assert kinds['amount'] is FieldKind.DECIMAL
        assert kinds['issued'] is FieldKind.DATE
        assert kinds['status'] is FieldKind.ENUM
        assert kinds['customer'] is FieldKind.STRING

    def test_no_eligible_fields(self):
        """A record with only reference fields cannot be serialized."""
        with pytest.raises(InvalidCsvFormatError) as exc_info:
            resolve_fields(OnlyReferences)

        assert "no fields" in str(exc_info.value)

    def test_not_a_dataclass(self):
        """Only dataclass types are accepted."""
        with pytest.raises(InvalidCsvFormatError):
            resolve_fields(NotADataclass)

    def test_frozen_dataclass(self):
        """Decoding assigns fields, so frozen records are rejected up front."""
        with pytest.raises(InvalidCsvFormatError) as exc_info:
            resolve_fields(FrozenPoint)

        assert "frozen" in str(exc_info.value)

    def test_duplicate_titles(self):
        """Titles that differ only in case are duplicates."""
        with pytest.raises(InvalidCsvFormatError) as exc_info:
            resolve_fields(DuplicateTitles)

        assert "Duplicate column title" in str(exc_info.value)

    def test_names_differing_by_underscore(self):
        """a_b and ab share a lookup key and would decode into one field."""
        with pytest.raises(InvalidCsvFormatError) as exc_info:
            resolve_fields(SnakeCollision)

        assert "Duplicate column title" in str(exc_info.value)

    def test_hash_and_number_titles(self):
        """'Invoice #' and 'Invoice Number' share a lookup key."""
        with pytest.raises(InvalidCsvFormatError) as exc_info:
            resolve_fields(NumberCollision)

        assert "Invoice Number" in str(exc_info.value)


class TestRecordConstruction:
    """Test cases for creating empty records."""

    def test_record_factory_supplies_zero_values(self):
        """Fields without defaults get their kind's zero value."""
        descriptors, _ = resolve_fields(Measurement)
        create = record_factory(Measurement, descriptors)

        assert create() == Measurement(sensor='', reading=0.0, count=0)

    def test_record_factory_returns_new_instances(self):
        descriptors, _ = resolve_fields(Fruit)
        create = record_factory(Fruit, descriptors)

        assert create() is not create()

    def test_field_defaults(self):
        """Declared defaults win over zero values."""
        descriptors, _ = resolve_fields(Invoice)
        defaults = field_defaults(Invoice, descriptors)

        assert defaults['amount']() == Decimal(0)
        assert defaults['status']() is Status.OPEN
        assert defaults['issued']() is None

    def test_field_defaults_without_declared_default(self):
        descriptors, _ = resolve_fields(Measurement)
        defaults = field_defaults(Measurement, descriptors)

        assert defaults['count']() == 0
        assert defaults['sensor']() == ''
