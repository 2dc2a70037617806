"""CSV Serialization

Map CSV text to collections of typed dataclass records and back, with custom
column naming and ordering, row numbering, header validation and escaping of
separator and newline characters embedded in field values.
"""

__version__ = "0.1.0"
__description__ = "Typed record serialization to and from CSV"
