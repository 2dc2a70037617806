"""CSV serializer package for typed dataclass records."""

from .reader import CsvReader
from .serializer import CsvSerializer, serializer_for
from .writer import CsvWriter

__all__ = ['CsvReader', 'CsvSerializer', 'CsvWriter', 'serializer_for']
