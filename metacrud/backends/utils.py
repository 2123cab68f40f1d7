##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Utility functions shared by the bundled repositories.

These utilities convert records into primitive values a storage engine can
hold and back again, driven by the record type's field descriptors, and
implement the in-process sorting, searching, and paging used by repositories
whose engine can't do it for them.
"""

import base64
import dataclasses
import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type

from metacrud.backends.repository import Page
from metacrud.metadata.field_metadata import FieldDescriptor, FieldKind
from metacrud.metadata.markers import get_field_spec
from metacrud.metadata.types import Long


LOG = logging.getLogger(__name__)

INTEGER_ID_TYPES = (int, Long)


@dataclass(frozen=True)
class UnloadedReference:
    """
    Placeholder for a lazily loaded to-one association.

    Attributes:
        model_name: The name of the associated model.
        identifier: The identifier of the associated record.
    """

    model_name: str
    identifier: Any

    def __str__(self) -> str:
        return f"{self.model_name}#{self.identifier}"


def identifier_name(descriptors: Iterable[FieldDescriptor]) -> str:
    """
    Get the name of the identifier field.

    Args:
        descriptors: The field descriptors of a record type.

    Returns:
        The identifier field's name, "id" if no field is marked as the identifier.
    """
    return next((desc.name for desc in descriptors if desc.is_identifier), "id")


def record_identifier(record: Any) -> Any:
    """
    Get the identifier of a record or reference without a descriptor lookup.

    Args:
        record: A dataclass record, an `UnloadedReference`, or None.

    Returns:
        The identifier, or None if there isn't one.
    """
    if record is None:
        return None
    if isinstance(record, UnloadedReference):
        return record.identifier
    if dataclasses.is_dataclass(record):
        for dc_field in dataclasses.fields(record):
            if get_field_spec(dc_field).identifier:
                return getattr(record, dc_field.name)
    return getattr(record, "id", None)


def generate_identifier(id_type: Type, last_value: int = 0) -> Any:
    """
    Generate a new identifier.

    Args:
        id_type: The identifier type of the model.
        last_value: The highest integer identifier handed out so far.

    Returns:
        `last_value + 1` for integer identifiers, a random UUID (or its text) otherwise.

    Raises:
        ValueError: If identifiers of `id_type` can't be generated.
    """
    if id_type in INTEGER_ID_TYPES:
        return last_value + 1
    if id_type is uuid.UUID:
        return uuid.uuid4()
    if id_type is str:
        return str(uuid.uuid4())
    raise ValueError(f"Cannot generate identifiers of type {getattr(id_type, '__name__', id_type)}")


def coerce_identifier(value: Any, id_type: Type) -> Any:
    """
    Turn a stored identifier back into the model's identifier type.

    Args:
        value: The raw stored identifier.
        id_type: The identifier type of the model.

    Returns:
        The identifier as `id_type`.
    """
    if value is None:
        return None
    if id_type in INTEGER_ID_TYPES:
        return int(value)
    if id_type is uuid.UUID and not isinstance(value, uuid.UUID):
        return uuid.UUID(str(value))
    if id_type is str:
        return str(value)
    return value


def stored_columns(descriptors: Iterable[FieldDescriptor]) -> List[FieldDescriptor]:
    """
    Get the descriptors of the fields a repository persists.

    Transient fields and to-many associations are not stored.

    Args:
        descriptors: The field descriptors of a record type.

    Returns:
        The persisted field descriptors.
    """
    return [desc for desc in descriptors if not desc.is_transient and not desc.is_to_many]


def encode_value(descriptor: FieldDescriptor, value: Any, binary_as_text: bool = False) -> Any:
    """
    Convert a field value into a primitive a storage engine can hold.

    Args:
        descriptor: The field's descriptor.
        value: The field value.
        binary_as_text: Encode bytes as base64 text instead of leaving them as bytes.

    Returns:
        None, a bool, an int, a float, a str, or bytes.
    """
    if value is None:
        return None
    if descriptor.is_to_one:
        value = record_identifier(value)
        return str(value) if isinstance(value, uuid.UUID) else value
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii") if binary_as_text else bytes(value)
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    if isinstance(value, (Decimal, uuid.UUID)):
        return str(value)
    return value


def decode_value(descriptor: FieldDescriptor, raw: Any, binary_as_text: bool = False) -> Any:
    """
    Convert a stored primitive back into a field value. To-one associations are
    returned as their raw identifier.

    Args:
        descriptor: The field's descriptor.
        raw: The stored value.
        binary_as_text: Stored bytes were encoded as base64 text.

    Returns:
        The field value.
    """
    if raw is None:
        return None

    kind = descriptor.kind
    declared = descriptor.declared_type
    if kind in (FieldKind.INTEGER, FieldKind.LONG):
        return int(raw)
    if kind == FieldKind.DOUBLE:
        return Decimal(str(raw)) if declared is Decimal else float(raw)
    if kind == FieldKind.FLOAT:
        return float(raw)
    if kind == FieldKind.BOOLEAN:
        return raw in ("1", "true", "True") if isinstance(raw, str) else bool(raw)
    if kind == FieldKind.STRING:
        return str(raw)
    if kind == FieldKind.ENUM:
        return declared[raw]
    if kind == FieldKind.DATE:
        return date.fromisoformat(raw)
    if kind == FieldKind.TIMESTAMP:
        return time.fromisoformat(raw) if declared is time else datetime.fromisoformat(raw)
    if kind == FieldKind.BINARY:
        return base64.b64decode(raw) if binary_as_text else bytes(raw)
    if declared is uuid.UUID:
        return uuid.UUID(str(raw))
    return raw


def build_record(record_type: Type, values: Dict[str, Any]) -> Any:
    """
    Create a record from decoded field values.

    Fields without `init` are set after construction.

    Args:
        record_type: The dataclass type to create.
        values: Decoded values by field name. Missing fields keep their defaults.

    Returns:
        The new record.
    """
    init_fields = {dc_field.name for dc_field in dataclasses.fields(record_type) if dc_field.init}
    record = record_type(**{name: value for name, value in values.items() if name in init_fields})
    for name, value in values.items():
        if name not in init_fields:
            setattr(record, name, value)
    return record


def sort_value(value: Any) -> Any:
    """
    Normalize a field value so values of one field can be ordered against each other.

    Enums sort by name, associated records by identifier, and bytes by length.
    """
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (bytes, bytearray)):
        return len(value)
    if isinstance(value, UnloadedReference) or dataclasses.is_dataclass(value):
        return sort_value(record_identifier(value))
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


def matches_search(record: Any, descriptors: Sequence[FieldDescriptor], search: Optional[str]) -> bool:
    """
    Check if any string field of a record contains the search text, ignoring case.

    Args:
        record: The record to check.
        descriptors: The field descriptors of the record type.
        search: The search text. Blank text matches every record.

    Returns:
        True if the record matches.
    """
    if search is None or not search.strip():
        return True
    needle = search.strip().lower()
    for desc in descriptors:
        if desc.kind == FieldKind.STRING and not desc.is_transient:
            value = getattr(record, desc.name, None)
            if isinstance(value, str) and needle in value.lower():
                return True
    return False


def paginate(
    records: List[Any],
    descriptors: Sequence[FieldDescriptor],
    page_index: int,
    page_size: int,
    sort_field: str,
    ascending: bool = True,
    search: str = None,
) -> Page:
    """
    Search, sort, and slice a list of records in process.

    Args:
        records: Every record of a model.
        descriptors: The field descriptors of the record type.
        page_index: The zero-based page to return.
        page_size: The maximum number of records per page.
        sort_field: The name of the field to sort by.
        ascending: Sort ascending if True, descending otherwise.
        search: Optional text that string fields must contain.

    Returns:
        The requested page.

    Raises:
        ValueError: If `sort_field` is not a field of the record type.
    """
    if sort_field not in {desc.name for desc in descriptors}:
        raise ValueError(f"Cannot sort by unknown field '{sort_field}'")

    matching = [record for record in records if matches_search(record, descriptors, search)]

    keyed = [(sort_value(getattr(record, sort_field, None)), record) for record in matching]
    present = [pair for pair in keyed if pair[0] is not None]
    present.sort(key=lambda pair: pair[0], reverse=not ascending)

    # Records without a value come last whichever way the rest are sorted
    ordered = [record for _, record in present] + [record for value, record in keyed if value is None]
    start = max(page_index, 0) * page_size
    return Page(
        records=ordered[start : start + page_size],
        total_count=len(matching),
        page_index=page_index,
        page_size=page_size,
    )

