"""Record types shared by the test suites."""

import io
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import ClassVar, List, Optional

from csv_serialization.core.attributes import csv_column, csv_ignore


class Status(Enum):
    OPEN = 'open'
    PAID = 'paid'


@dataclass
class Fruit:
    """Plain record: columns sorted by field name."""
    name: str = ''
    quantity: int = 0


@dataclass
class Person:
    name: str = ''
    age: int = 0
    height: float = 0.0
    active: bool = False
    notes: Optional[str] = None
    nickname: str = csv_ignore(default='')
    tags: List[str] = field(default_factory=list)
    kind: ClassVar[str] = 'person'


@dataclass
class Invoice:
    """Record with explicit column titles and order."""
    invoice_number: str = csv_column('Invoice #', 1, default='')
    customer: str = csv_column('Customer', 2, default='')
    amount: Decimal = csv_column('Amount', 3, default=Decimal(0))
    issued: Optional[date] = csv_column('Issued', 4, default=None)
    status: Status = csv_column('Status', 5, default=Status.OPEN)
    description: str = csv_column('Description', 6, default='')
    internal_ref: str = ''


@dataclass
class Measurement:
    """Record whose fields have no defaults."""
    sensor: str
    reading: float
    count: int


@dataclass
class Numbered:
    """Record declaring its own row number field."""
    RowNumber: int = 0
    label: str = ''


@dataclass
class OnlyReferences:
    tags: List[str] = field(default_factory=list)


@dataclass
class DuplicateTitles:
    first: str = csv_column('Name', 1, default='')
    second: str = csv_column('name', 2, default='')


@dataclass
class SnakeCollision:
    """Field names that differ only by an underscore."""
    a_b: str = ''
    ab: str = ''


@dataclass
class NumberCollision:
    first: str = csv_column('Invoice #', 1, default='')
    second: str = csv_column('Invoice Number', 2, default='')


@dataclass(frozen=True)
class FrozenPoint:
    x: int = 0
    y: int = 0


class NotADataclass:
    name = ''


class ForwardOnlyStream(io.StringIO):
    """Text stream that reports it cannot seek, like a pipe."""

    def seekable(self):
        return False
