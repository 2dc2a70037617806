"""Data models for the CSV serialization library."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional


DEFAULT_NEWLINE_REPLACEMENT = chr(0x254)
DEFAULT_SEPARATOR_REPLACEMENT = chr(0x255)
EOF_LITERAL = 'EOF'


class FieldKind(Enum):
    """Closed set of value kinds a record field can be mapped as."""
    STRING = 'string'
    INTEGER = 'integer'
    FLOAT = 'float'
    DECIMAL = 'decimal'
    BOOLEAN = 'boolean'
    DATE = 'date'
    DATETIME = 'datetime'
    ENUM = 'enum'
    OBJECT = 'object'

    @property
    def is_reference(self) -> bool:
        """Whether the kind is neither a value type nor text."""
        return self is FieldKind.OBJECT


@dataclass(frozen=True)
class FieldDescriptor:
    """One record field selected for CSV mapping."""
    order: int
    name: str
    title: str
    kind: FieldKind
    field_type: Any
    explicit: bool = False
    parse: Optional[Callable[[str], Any]] = field(default=None, compare=False, repr=False)
    format: Optional[Callable[[Any], str]] = field(default=None, compare=False, repr=False)

    def get_value(self, record: Any) -> Any:
        return getattr(record, self.name)

    def set_value(self, record: Any, value: Any) -> None:
        setattr(record, self.name, value)


@dataclass
class CsvOptions:
    """Mutable configuration of a ``CsvSerializer`` instance."""
    ignore_empty_lines: bool = True
    ignore_reference_types_except_string: bool = True
    newline_replacement: str = DEFAULT_NEWLINE_REPLACEMENT
    separator_replacement: str = DEFAULT_SEPARATOR_REPLACEMENT
    row_number_column_title: str = 'RowNumber'
    separator: str = ','
    use_eof_literal: bool = False
    use_line_numbers: bool = True
    expected_headers: Optional[str] = None
    file_headers: Optional[str] = None
    force_sequential: bool = False
    max_workers: Optional[int] = None
    encoding: str = 'utf-8'

    @property
    def first_column_index(self) -> int:
        """Index of the first data column in a split line."""
        return 1 if self.use_line_numbers else 0


@dataclass
class HeaderDiff:
    """Result of comparing a file header against the expected header."""
    expected: List[str]
    actual: List[str]
    missing: List[str]

    @property
    def matches(self) -> bool:
        return not self.missing
