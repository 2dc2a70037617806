"""Header rendering and validation."""

import logging
from typing import List, Optional

from csv_serialization.core.models import CsvOptions, FieldDescriptor, HeaderDiff


logger = logging.getLogger(__name__)


class HeaderCodec:
    """Builds the canonical header for a field set and validates file headers.

    Two comparison modes exist. Without explicit column ordering the match is
    order-insensitive: both sides are upper-cased and sorted, and spaces are
    removed from the actual columns. With explicit ordering the match is
    positional: both sides are upper-cased and trimmed per column only.
    """

    def __init__(self, descriptors: List[FieldDescriptor], explicit_order: bool, options: CsvOptions):
        self.descriptors = descriptors
        self.explicit_order = explicit_order
        self.options = options

    @property
    def titles(self) -> List[str]:
        return [d.title for d in self.descriptors]

    def render(self) -> str:
        """Join the effective titles with the separator.

        Returns:
            Header line without a trailing line break
        """
        columns = self.titles
        if self.options.use_line_numbers:
            columns = [self.options.row_number_column_title] + columns
        return self.options.separator.join(columns)

    def expected_header(self) -> str:
        """The caller's expected header override, else the rendered header."""
        if self.options.expected_headers is not None:
            return self.options.expected_headers
        return self.render()

    def file_columns(self, header_line: str) -> List[str]:
        """Split a header line into the case-normalized columns used for decoding."""
        columns = header_line.rstrip('\r\n').split(self.options.separator)
        if self.explicit_order:
            return [c.strip().upper() for c in columns]
        return [''.join(c.split()).upper() for c in columns]

    def compare(self, actual_header_line: str, expected_header_line: Optional[str] = None) -> HeaderDiff:
        """Compare an actual header line against the expected header.

        Args:
            actual_header_line: First line of the file (or the caller's file header)
            expected_header_line: Header to validate against; defaults to
                ``expected_header()``

        Returns:
            HeaderDiff listing expected columns missing from the actual header
        """
        if expected_header_line is None:
            expected_header_line = self.expected_header()

        separator = self.options.separator
        actual = self.file_columns(actual_header_line)

        if self.explicit_order:
            expected = [c.strip().upper() for c in expected_header_line.split(separator)]
            if actual == expected:
                return HeaderDiff(expected=expected, actual=actual, missing=[])
            missing = [
                column for position, column in enumerate(expected)
                if position >= len(actual) or actual[position] != column
            ]
        else:
            actual = sorted(actual)
            expected = sorted(c.upper() for c in expected_header_line.split(separator))
            if separator.join(actual) == separator.join(expected):
                return HeaderDiff(expected=expected, actual=actual, missing=[])
            present = set(actual)
            missing = [column for column in expected if column not in present]

        return HeaderDiff(expected=expected, actual=actual, missing=list(dict.fromkeys(missing)))

    def diff(self, actual_header_line: str, expected_header_line: Optional[str] = None) -> str:
        """Expected columns absent from the actual header, joined by the separator.

        An empty string means the headers match.
        """
        result = self.compare(actual_header_line, expected_header_line)
        if result.missing:
            logger.debug(f"Header mismatch, missing columns: {result.missing}")
        return self.options.separator.join(result.missing)
