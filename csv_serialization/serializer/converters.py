"""Typed parse/format functions for record field kinds."""

import types
import typing
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Tuple

from csv_serialization.core.models import FieldKind


_TRUE_VALUES = ('true', 't', 'yes', 'y', '1')
_FALSE_VALUES = ('false', 'f', 'no', 'n', '0')

_ZERO_VALUES: Dict[FieldKind, Any] = {
    FieldKind.STRING: '',
    FieldKind.INTEGER: 0,
    FieldKind.FLOAT: 0.0,
    FieldKind.DECIMAL: Decimal(0),
    FieldKind.BOOLEAN: False,
}


def unwrap_optional(annotation: Any) -> Any:
    """Return ``X`` for ``Optional[X]``; any other annotation unchanged."""
    origin = typing.get_origin(annotation)
    if origin is None:
        return annotation
    if origin is typing.Union or origin is getattr(types, 'UnionType', None):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def kind_of(annotation: Any) -> FieldKind:
    """Resolve the field kind for a type annotation.

    Args:
        annotation: Resolved type hint of a dataclass field

    Returns:
        The matching ``FieldKind``; ``OBJECT`` for anything not value-like
    """
    field_type = unwrap_optional(annotation)
    if not isinstance(field_type, type):
        return FieldKind.OBJECT

    # bool before int, datetime before date: subclass relationships
    if issubclass(field_type, bool):
        return FieldKind.BOOLEAN
    if issubclass(field_type, Enum):
        return FieldKind.ENUM
    if issubclass(field_type, str):
        return FieldKind.STRING
    if issubclass(field_type, int):
        return FieldKind.INTEGER
    if issubclass(field_type, float):
        return FieldKind.FLOAT
    if issubclass(field_type, Decimal):
        return FieldKind.DECIMAL
    if issubclass(field_type, datetime):
        return FieldKind.DATETIME
    if issubclass(field_type, date):
        return FieldKind.DATE
    return FieldKind.OBJECT


def zero_value(kind: FieldKind) -> Any:
    """Zero value of a kind, used for fields declared without a default."""
    return _ZERO_VALUES.get(kind)


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {text!r}")


def _parse_decimal(text: str) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation:
        raise ValueError(f"not a decimal: {text!r}")


def _enum_parser(enum_type: Any) -> Callable[[str], Any]:
    def parse(text: str) -> Any:
        for member in enum_type:
            if member.name.lower() == text.lower():
                return member
        for member in enum_type:
            if str(member.value) == text:
                return member
        raise ValueError(f"not a member of {enum_type.__name__}: {text!r}")
    return parse


def _format_value(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def converters_for(kind: FieldKind, annotation: Any) -> Tuple[Callable[[str], Any], Callable[[Any], str]]:
    """Select the parse and format functions for a field.

    Args:
        kind: Field kind resolved by ``kind_of``
        annotation: The field's type annotation

    Returns:
        Tuple of (parse, format) callables
    """
    field_type = unwrap_optional(annotation)
    parsers: Dict[FieldKind, Callable[[str], Any]] = {
        FieldKind.STRING: str,
        FieldKind.INTEGER: int,
        FieldKind.FLOAT: float,
        FieldKind.DECIMAL: _parse_decimal,
        FieldKind.BOOLEAN: _parse_bool,
        FieldKind.DATE: date.fromisoformat,
        FieldKind.DATETIME: datetime.fromisoformat,
    }
    if kind is FieldKind.ENUM:
        parse = _enum_parser(field_type)
    elif kind is FieldKind.OBJECT:
        parse = field_type if callable(field_type) else str
    else:
        parse = parsers[kind]
    return parse, _format_value
