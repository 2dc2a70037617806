"""Serialize and deserialize lists of dataclass records to CSV."""

import dataclasses
import logging
import os
from typing import Any, Generic, Iterable, List, Optional, Sequence, Type, TypeVar, Union

import pandas as pd

from csv_serialization.core.exceptions import InvalidCsvFormatError
from csv_serialization.core.models import CsvOptions
from csv_serialization.serializer.fields import field_defaults, record_factory, resolve_fields
from csv_serialization.serializer.header import HeaderCodec
from csv_serialization.serializer.line_codec import LineCodec
from csv_serialization.serializer.reader import CsvReader, Source, check_source
from csv_serialization.serializer.writer import CsvWriter


logger = logging.getLogger(__name__)

T = TypeVar('T')


class CsvSerializer(Generic[T]):
    """CSV serializer for one record type.

    The active field set is resolved once, when the serializer is created.
    Every other option in ``options`` may be changed between calls.

    Example:
        >>> serializer = CsvSerializer(Invoice, use_line_numbers=False)
        >>> serializer.serialize('invoices.csv', invoices)
        >>> serializer.deserialize('invoices.csv', keywords=['ACME'])
    """

    def __init__(self, record_type: Type[T], options: Optional[CsvOptions] = None, **overrides: Any):
        """Initialize the serializer.

        Args:
            record_type: Dataclass type to be de/serialized
            options: Serializer options; defaults are used when omitted
            **overrides: Individual ``CsvOptions`` attributes to set

        Raises:
            InvalidCsvFormatError: If the record type has no fields to serialize
        """
        self.record_type = record_type
        self.options = dataclasses.replace(options) if options is not None else CsvOptions()
        for name, value in overrides.items():
            if not hasattr(self.options, name):
                raise TypeError(f"Unknown serializer option: {name}")
            setattr(self.options, name, value)

        self.descriptors, self.explicit_order = resolve_fields(
            record_type, self.options.ignore_reference_types_except_string
        )
        self._create_record = record_factory(record_type, self.descriptors)
        self._defaults = field_defaults(record_type, self.descriptors)

    @property
    def headers(self) -> List[str]:
        """Column titles of the active field set, in serialization order."""
        return [d.title for d in self.descriptors]

    @property
    def header_codec(self) -> HeaderCodec:
        return HeaderCodec(self.descriptors, self.explicit_order, self.options)

    @property
    def line_codec(self) -> LineCodec:
        return LineCodec(self.descriptors, self.explicit_order, self.options,
                         self._create_record, self._defaults)

    def _reader(self) -> CsvReader:
        return CsvReader(self.header_codec, self.line_codec, self.options)

    def _writer(self) -> CsvWriter:
        return CsvWriter(self.header_codec, self.line_codec, self.options)

    def get_type_header(self) -> str:
        """Header line rendered from the record type."""
        return self.header_codec.render()

    def get_file_header_diff(self, source: Source) -> str:
        """Expected columns missing from a file's header.

        Args:
            source: File path or open stream; a seekable stream is rewound

        Returns:
            Missing columns joined by the separator; empty when the header matches
        """
        return self._reader().header_diff(source)

    def check_file_header(self, source: Source) -> bool:
        """Check ahead of time whether a file's header matches.

        Streams must be seekable; the header line is read and the stream
        rewound, so it can still be passed to ``deserialize``.

        Raises:
            UnsupportedCsvError: If the stream cannot seek
        """
        return self.get_file_header_diff(source) == ''

    def deserialize(self, source: Source, keywords: Optional[Iterable[str]] = None) -> List[T]:
        """Read records from a CSV file path or stream.

        Args:
            source: File path or open text/binary stream
            keywords: Only lines containing one of these markers are read

        Returns:
            Records in file order

        Raises:
            InvalidCsvFormatError: If the file header does not match
            FileNotFoundError: If the file path does not exist
        """
        check_source(source)
        return self._reader().read(source, keywords)

    def deserialize_text(self, content: str, keywords: Optional[Iterable[str]] = None) -> List[T]:
        """Read records from CSV text held in memory."""
        if content is None:
            raise ValueError("CSV content is required")
        return self._reader().read_text(content, keywords)

    def serialize(self, output_path: Union[str, os.PathLike], records: Sequence[T]) -> None:
        """Write records to a CSV file, replacing any existing file."""
        self._writer().write(output_path, records)

    def serialize_to_string(self, records: Sequence[T]) -> str:
        """Render records as CSV text."""
        return self._writer().write_string(records)

    def to_dataframe(self, records: Sequence[T]) -> pd.DataFrame:
        """Tabulate records with one column per active field, titled by header.

        Args:
            records: Records to tabulate

        Returns:
            DataFrame in serialization column order
        """
        rows = [[d.get_value(record) for d in self.descriptors] for record in records]
        return pd.DataFrame(rows, columns=self.headers)

    def __repr__(self) -> str:
        return f"CsvSerializer({self.record_type.__name__}, columns={self.headers})"


def serializer_for(record_type: Type[T], options: Optional[CsvOptions] = None, **overrides: Any) -> CsvSerializer[T]:
    """Create a serializer, logging the resolved columns."""
    try:
        serializer = CsvSerializer(record_type, options, **overrides)
    except InvalidCsvFormatError as e:
        logger.error(f"Cannot serialize {getattr(record_type, '__name__', record_type)}: {e}")
        raise
    logger.info(f"Serializer for {record_type.__name__}: {serializer.get_type_header()}")
    return serializer
