"""CSV writer for record collections."""

import io
import logging
import os
from pathlib import Path
from typing import Any, List, Sequence, TextIO, Union

from csv_serialization.core.models import CsvOptions
from csv_serialization.serializer.header import HeaderCodec
from csv_serialization.serializer.line_codec import LineCodec


logger = logging.getLogger(__name__)


def flush_interval(record_count: int) -> int:
    """Number of records buffered between writes: 10% of the total, at least one."""
    return int(record_count * 0.1) or max(record_count, 1)


class CsvWriter:
    """Writes records of one type as CSV text."""

    def __init__(self, header_codec: HeaderCodec, line_codec: LineCodec, options: CsvOptions):
        self.header_codec = header_codec
        self.line_codec = line_codec
        self.options = options

    def write(self, output_path: Union[str, os.PathLike], records: Sequence[Any]) -> None:
        """Write records to a CSV file, replacing any existing file.

        Args:
            output_path: Path to the output CSV file
            records: Records to write, in order
        """
        if output_path is None:
            raise ValueError("An output path is required")

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.exists():
            logger.info(f"Overwriting existing CSV file: {path}")

        records = list(records)
        logger.info(f"Writing {len(records)} records to {path}")

        try:
            with open(path, 'w', encoding=self.options.encoding) as handle:
                self._write(handle, records)
        except OSError as e:
            logger.error(f"Error writing records to CSV: {e}")
            raise

        logger.info(f"Successfully wrote {len(records)} rows to {path}")

    def write_string(self, records: Sequence[Any]) -> str:
        """Render records as CSV text."""
        buffer = io.StringIO()
        self._write(buffer, list(records))
        return buffer.getvalue()

    def _write(self, handle: TextIO, records: List[Any]) -> None:
        handle.write(self.header_codec.render())
        handle.write('\n')

        interval = flush_interval(len(records))
        pending: List[str] = []
        for row, record in enumerate(records, 1):
            pending.append(self.line_codec.encode(record, row))
            pending.append('\n')
            if row % interval == 0:
                handle.write(''.join(pending))
                handle.flush()
                pending.clear()

        if self.options.use_eof_literal:
            pending.append(self.line_codec.encode_eof(len(records) + 1))
            pending.append('\n')

        if pending:
            handle.write(''.join(pending))
        handle.flush()
