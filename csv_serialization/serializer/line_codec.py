"""Conversion between single CSV lines and record instances."""

import logging
from typing import Any, Callable, Dict, List, Optional

from csv_serialization.core.exceptions import CsvConversionError, InvalidCsvFormatError
from csv_serialization.core.models import EOF_LITERAL, CsvOptions, FieldDescriptor


logger = logging.getLogger(__name__)


def normalize_column(column: str) -> str:
    """Canonical lookup key for a column name or field title.

    Spaces and underscores are removed, ``#`` is read as ``Number`` and the
    result is case-folded, so ``Invoice #``, ``Invoice#``, ``InvoiceNumber``
    and ``invoice_number`` share one key.
    """
    key = ''.join(column.split()).replace('#', 'Number').replace('_', '')
    return key.casefold()


class LineCodec:
    """Parses raw lines into records and renders records into raw lines."""

    def __init__(self, descriptors: List[FieldDescriptor], explicit_order: bool, options: CsvOptions,
                 create_record: Callable[[], Any], defaults: Dict[str, Callable[[], Any]]):
        self.descriptors = descriptors
        self.explicit_order = explicit_order
        self.options = options
        self.create_record = create_record
        self.defaults = defaults

        # Title keys with explicit ordering, field-name keys without
        self._lookup: Dict[str, FieldDescriptor] = {}
        for descriptor in descriptors:
            key = normalize_column(descriptor.title if explicit_order else descriptor.name)
            if key in self._lookup:
                raise InvalidCsvFormatError(
                    f"Columns '{self._lookup[key].title}' and '{descriptor.title}' map to the same field key."
                )
            self._lookup[key] = descriptor

        row_number_key = normalize_column(options.row_number_column_title)
        self._row_number_key = row_number_key
        self._row_number_is_field = any(normalize_column(d.name) == row_number_key for d in descriptors)

    def resolve(self, column: str) -> Optional[FieldDescriptor]:
        """Find the field mapped to a file column, or None if unknown."""
        return self._lookup.get(normalize_column(column))

    def unescape(self, value: str) -> str:
        return (value
                .replace(self.options.separator_replacement, self.options.separator)
                .replace(self.options.newline_replacement, '\n'))

    def escape(self, value: str) -> str:
        value = value.replace(self.options.separator, self.options.separator_replacement)
        for line_break in ('\r\n', '\n', '\r'):
            value = value.replace(line_break, self.options.newline_replacement)
        return value

    def is_eof_marker(self, parts: List[str]) -> bool:
        minimal = self.options.first_column_index + 1
        return len(parts) == minimal and parts[minimal - 1] == EOF_LITERAL

    def decode(self, line: str, file_columns: List[str], line_index: int = 0) -> Optional[Any]:
        """Parse one raw line into a record.

        Args:
            line: Raw text line without its line break
            file_columns: Case-normalized columns of the file header
            line_index: Zero-based position of the line, for diagnostics

        Returns:
            The populated record, or None for skipped blank lines and the EOF marker

        Raises:
            CsvConversionError: If a value cannot be converted to its field type
        """
        if self.options.ignore_empty_lines and not line.strip():
            return None

        separator = self.options.separator
        parts = line.split(separator)
        if self.is_eof_marker(parts):
            logger.debug(f"Line {line_index}: end-of-file marker, skipping")
            return None

        if len(parts) < len(file_columns):
            logger.debug(
                f"Line {line_index}: {len(parts)} columns found, header has {len(file_columns)}; "
                f"unmatched fields keep their defaults"
            )

        record = self.create_record()
        last = len(file_columns) - 1
        for i in range(self.options.first_column_index, min(len(file_columns), len(parts))):
            value = parts[i]
            if i == last and len(parts) > len(file_columns):
                # Unescaped separators in the final free-text column
                value = separator.join(parts[i:])

            column = file_columns[i]
            if normalize_column(column) == self._row_number_key and not self._row_number_is_field:
                continue

            descriptor = self.resolve(column)
            if descriptor is None:
                continue

            text = self.unescape(value).strip()
            if text:
                try:
                    converted = descriptor.parse(text)
                except (ValueError, TypeError, ArithmeticError) as e:
                    raise CsvConversionError(line_index, column, text, str(e), descriptor.field_type) from e
                descriptor.set_value(record, converted)
            else:
                descriptor.set_value(record, self.defaults[descriptor.name]())

        return record

    def encode(self, record: Any, row_number: Optional[int] = None) -> str:
        """Render one record into a raw line without a trailing line break.

        Args:
            record: Record instance to render
            row_number: Leading row number, written when line numbering is enabled

        Returns:
            Separator-joined line with embedded separators and line breaks escaped
        """
        values = []
        if self.options.use_line_numbers:
            values.append('' if row_number is None else str(row_number))

        for descriptor in self.descriptors:
            values.append(self.escape(descriptor.format(descriptor.get_value(record))))

        return self.options.separator.join(values)

    def encode_eof(self, row_number: Optional[int] = None) -> str:
        """Render the end-of-file sentinel line."""
        values = []
        if self.options.use_line_numbers:
            values.append('' if row_number is None else str(row_number))
        values.append(EOF_LITERAL)
        return self.options.separator.join(values)
