"""Declarative column markers for record dataclasses."""

from dataclasses import dataclass, field
from typing import Any


COLUMN_KEY = 'csv_column'
IGNORE_KEY = 'csv_ignore'


@dataclass(frozen=True)
class CsvColumn:
    """Explicit column title and serialization order for a field."""
    title: str
    order: int


@dataclass(frozen=True)
class CsvIgnore:
    """Marks a field as excluded from CSV mapping."""
    ignore: bool = True


def csv_column(title: str, order: int, **kwargs: Any) -> Any:
    """Declare a dataclass field with an explicit column title and order.

    Args:
        title: Column title used in the header
        order: Position of the column when serialized
        **kwargs: Passed through to ``dataclasses.field``

    Returns:
        A dataclass field carrying a ``CsvColumn`` marker
    """
    metadata = dict(kwargs.pop('metadata', None) or {})
    metadata[COLUMN_KEY] = CsvColumn(title=title, order=order)
    return field(metadata=metadata, **kwargs)


def csv_ignore(**kwargs: Any) -> Any:
    """Declare a dataclass field that is never read from or written to CSV."""
    metadata = dict(kwargs.pop('metadata', None) or {})
    metadata[IGNORE_KEY] = CsvIgnore()
    return field(metadata=metadata, **kwargs)
