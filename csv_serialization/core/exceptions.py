"""
Custom exceptions for the CSV serialization library.
"""


class CsvSerializationError(Exception):
    """Base exception for all CSV serialization errors."""
    pass


class ConfigurationError(CsvSerializationError):
    """Raised when there's an error in configuration loading or validation."""
    pass


class InvalidCsvFormatError(CsvSerializationError):
    """Raised when a record type or a CSV file cannot be processed at all."""
    pass


class CsvConversionError(InvalidCsvFormatError):
    """Raised when a field value cannot be converted to its declared type."""

    def __init__(self, line_index: int, column: str, value: str, reason: str, field_type=None):
        target = f" to {getattr(field_type, '__name__', field_type)}" if field_type is not None else ""
        super().__init__(
            f"Line {line_index}: cannot convert {value!r}{target} for column {column!r}: {reason}"
        )
        self.line_index = line_index
        self.column = column
        self.value = value
        self.reason = reason
        self.field_type = field_type


class UnsupportedCsvError(CsvSerializationError):
    """Raised when an unsupported source is passed in for parsing."""
    pass
