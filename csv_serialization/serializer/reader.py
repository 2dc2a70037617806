"""CSV reader: header validation, keyword filtering and concurrent line decoding."""

import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from csv_serialization.core.exceptions import InvalidCsvFormatError, UnsupportedCsvError
from csv_serialization.core.models import CsvOptions
from csv_serialization.serializer.header import HeaderCodec
from csv_serialization.serializer.line_codec import LineCodec


logger = logging.getLogger(__name__)

Source = Union[str, os.PathLike, Any]

_LINE_BREAK = re.compile(r'\r\n|\n')


def _is_path(source: Source) -> bool:
    return isinstance(source, (str, os.PathLike))


def check_source(source: Source) -> None:
    """Validate a path or stream before reading from it.

    Raises:
        ValueError: If the source is None
        FileNotFoundError: If a path does not exist
        UnsupportedCsvError: If the source is neither a path nor a readable stream
    """
    if source is None:
        raise ValueError("A file path or stream is required")
    if _is_path(source):
        if not Path(source).is_file():
            raise FileNotFoundError(f"CSV file not found: {source}")
    elif not hasattr(source, 'read'):
        raise UnsupportedCsvError(f"Cannot read CSV from {type(source).__name__}")


def _as_text(data: Union[str, bytes], encoding: str) -> str:
    if isinstance(data, bytes):
        data = data.decode(encoding)
    return data.lstrip('\ufeff')


def read_first_line(source: Source, encoding: str = 'utf-8') -> str:
    """Read the header line of a path or stream.

    A stream is rewound to where it was, so a following read sees the header
    again.

    Raises:
        UnsupportedCsvError: If the stream cannot seek back over the header
    """
    check_source(source)
    if _is_path(source):
        with open(source, 'r', encoding=encoding, newline='') as handle:
            line = handle.readline()
    else:
        seekable = getattr(source, 'seekable', None)
        if not (seekable and seekable()):
            raise UnsupportedCsvError(
                f"Cannot check the header of a non-seekable {type(source).__name__} without consuming it"
            )
        position = source.tell()
        line = source.readline()
        source.seek(position)
    return _as_text(line, encoding).rstrip('\r\n')


def read_content(source: Source, encoding: str = 'utf-8') -> str:
    """Read the remaining content of a path or stream as text."""
    check_source(source)
    if _is_path(source):
        with open(source, 'r', encoding=encoding, newline='') as handle:
            return _as_text(handle.read(), encoding)
    return _as_text(source.read(), encoding)


def split_lines(content: str) -> List[str]:
    return _LINE_BREAK.split(content)


def filter_lines(lines: List[str], keywords: Optional[Iterable[str]]) -> List[str]:
    """Keep lines containing at least one keyword (case-insensitive).

    Args:
        lines: Data lines in file order
        keywords: Markers for lines to include; None or empty keeps every line

    Returns:
        Matching lines, de-duplicated, in order of first occurrence
    """
    markers = [k.upper() for k in (keywords or []) if k]
    if not markers:
        return lines

    matched = [line for line in lines if any(marker in line.upper() for marker in markers)]
    return list(dict.fromkeys(matched))


class CsvReader:
    """Reads records of one type from CSV text."""

    def __init__(self, header_codec: HeaderCodec, line_codec: LineCodec, options: CsvOptions):
        self.header_codec = header_codec
        self.line_codec = line_codec
        self.options = options

    def header_line(self, source: Source) -> str:
        """The caller's file header when set, else the first line of the source."""
        if self.options.file_headers is not None:
            return self.options.file_headers
        return read_first_line(source, self.options.encoding)

    def header_diff(self, source: Source) -> str:
        return self.header_codec.diff(self.header_line(source))

    def read(self, source: Source, keywords: Optional[Iterable[str]] = None) -> List[Any]:
        """Read all records from a path or stream.

        Args:
            source: File path or open text/binary stream
            keywords: Optional markers restricting which lines are decoded

        Returns:
            Records in file order

        Raises:
            InvalidCsvFormatError: If the header does not match the expected header
        """
        name = source if _is_path(source) else type(source).__name__
        logger.info(f"Reading records from CSV: {name}")

        return self.read_text(read_content(source, self.options.encoding), keywords)

    def read_text(self, content: str, keywords: Optional[Iterable[str]] = None) -> List[Any]:
        """Validate the header of CSV text and decode its data lines.

        The first line is the header and is dropped, unless the header comes
        from ``file_headers``, in which case every line is data.
        """
        lines = split_lines(content)
        if self.options.file_headers is not None:
            header = self.options.file_headers
        else:
            header, lines = (lines[0], lines[1:]) if lines else ('', [])

        missing = self.header_codec.diff(header)
        if missing:
            logger.error(f"Invalid CSV header, missing columns: {missing}")
            raise InvalidCsvFormatError(f"Invalid CSV found. Missing columns: {missing}")

        rows = filter_lines(lines, keywords)
        if keywords:
            logger.info(f"Keyword filter kept {len(rows)} of {len(lines)} lines")

        file_columns = self.header_codec.file_columns(header)
        records = self.decode_lines(rows, file_columns)

        if not records:
            logger.warning("CSV file contains no data rows")
        logger.info(f"Successfully read {len(records)} records")
        return records

    def decode_lines(self, lines: List[str], file_columns: List[str]) -> List[Any]:
        """Decode lines concurrently and reassemble them in original order.

        Each worker result is stored into its own slot, so no two writes share
        an index. Skipped lines leave their slot empty and are dropped.
        """
        slots: List[Optional[Any]] = [None] * len(lines)

        if self.options.force_sequential or len(lines) < 2:
            for index, line in enumerate(lines):
                slots[index] = self.line_codec.decode(line, file_columns, index)
        else:
            with ThreadPoolExecutor(max_workers=self.options.max_workers) as executor:
                futures = {
                    executor.submit(self.line_codec.decode, line, file_columns, index): index
                    for index, line in enumerate(lines)
                }
                for future in as_completed(futures):
                    slots[futures[future]] = future.result()

        return [record for record in slots if record is not None]
