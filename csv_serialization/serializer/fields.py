"""Field resolution for record dataclasses."""

import dataclasses
import logging
import typing
from typing import Any, Callable, Dict, List, Tuple

from csv_serialization.core.attributes import COLUMN_KEY, IGNORE_KEY
from csv_serialization.core.exceptions import InvalidCsvFormatError
from csv_serialization.core.models import FieldDescriptor
from csv_serialization.serializer.converters import converters_for, kind_of, zero_value
from csv_serialization.serializer.line_codec import normalize_column


logger = logging.getLogger(__name__)


def _type_hints(record_type: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(record_type)
    except (NameError, TypeError) as e:
        # Unresolvable forward references fall back to the raw annotations
        logger.debug(f"Could not resolve type hints for {record_type.__name__}: {e}")
        return {f.name: f.type for f in dataclasses.fields(record_type)}


def resolve_fields(record_type: type, ignore_reference_types: bool = True) -> Tuple[List[FieldDescriptor], bool]:
    """Build the active field set for a record type.

    Args:
        record_type: Dataclass type to be de/serialized
        ignore_reference_types: Exclude fields that are neither value types nor text

    Returns:
        Tuple of (ordered field descriptors, whether explicit ordering is in effect)

    Raises:
        InvalidCsvFormatError: If the type has no eligible fields, or two fields
            share the same title once normalized for lookup, or the type is frozen
    """
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise InvalidCsvFormatError(f"{record_type!r} is not a dataclass type and cannot be serialized.")
    if record_type.__dataclass_params__.frozen:
        raise InvalidCsvFormatError(f"{record_type.__name__} is frozen; decoded values cannot be assigned.")

    hints = _type_hints(record_type)
    candidates = [f for f in dataclasses.fields(record_type) if not f.name.startswith('_')]
    if not candidates:
        raise InvalidCsvFormatError(f"There are no fields in {record_type.__name__} to serialize.")

    descriptors = []
    for f in sorted(candidates, key=lambda c: c.name):
        if f.metadata.get(IGNORE_KEY) is not None:
            continue

        annotation = hints.get(f.name, f.type)
        kind = kind_of(annotation)
        if ignore_reference_types and kind.is_reference:
            logger.debug(f"{record_type.__name__}.{f.name}: skipping reference type field")
            continue

        column = f.metadata.get(COLUMN_KEY)
        parse, fmt = converters_for(kind, annotation)
        descriptors.append(FieldDescriptor(
            order=column.order if column else 0,
            name=f.name,
            title=column.title if column else f.name,
            kind=kind,
            field_type=annotation,
            explicit=column is not None,
            parse=parse,
            format=fmt,
        ))

    explicit_order = any(d.explicit for d in descriptors)
    if explicit_order:
        descriptors = sorted((d for d in descriptors if d.explicit), key=lambda d: d.order)

    if not descriptors:
        raise InvalidCsvFormatError(f"There are no fields in {record_type.__name__} to serialize.")

    # Same key the line decoder looks columns up by
    seen = set()
    for descriptor in descriptors:
        key = normalize_column(descriptor.title)
        if key in seen:
            raise InvalidCsvFormatError(
                f"Duplicate column title '{descriptor.title}' in {record_type.__name__}."
            )
        seen.add(key)

    logger.debug(
        f"Resolved {len(descriptors)} fields for {record_type.__name__} "
        f"(explicit ordering: {explicit_order})"
    )
    return descriptors, explicit_order


def record_factory(record_type: type, descriptors: List[FieldDescriptor]) -> Callable[[], Any]:
    """Build a no-argument constructor for a record type.

    Fields declared without a default are supplied their kind's zero value.
    """
    kinds = {d.name: d.kind for d in descriptors}
    hints = _type_hints(record_type)
    required = {}
    for f in dataclasses.fields(record_type):
        if not f.init:
            continue
        if f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
            continue
        kind = kinds.get(f.name) or kind_of(hints.get(f.name, f.type))
        required[f.name] = zero_value(kind)

    def create() -> Any:
        return record_type(**required)

    return create


def field_defaults(record_type: type, descriptors: List[FieldDescriptor]) -> Dict[str, Callable[[], Any]]:
    """Map each field name to a callable returning its empty-value default."""
    declared = {f.name: f for f in dataclasses.fields(record_type)}
    defaults = {}
    for descriptor in descriptors:
        f = declared[descriptor.name]
        if f.default is not dataclasses.MISSING:
            defaults[descriptor.name] = (lambda value=f.default: value)
        elif f.default_factory is not dataclasses.MISSING:
            defaults[descriptor.name] = f.default_factory
        else:
            defaults[descriptor.name] = (lambda value=zero_value(descriptor.kind): value)
    return defaults
