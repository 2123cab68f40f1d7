##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Field helpers used to declare persistence and display metadata on dataclass records.

Each helper wraps `dataclasses.field` and stores a [`FieldSpec`][metadata.markers.FieldSpec]
under the `METADATA_KEY` entry of the field's metadata, where the
[`IntrospectionService`][metadata.introspection.IntrospectionService] picks it up.
Every helper supplies a default so that records can be default-constructed by the
form binder.

Example:
    ```python
    @dataclass
    class Employee:
        id: Optional[Long] = identifier()
        first_name: Optional[str] = column(constraints=[NotBlank(), Size(min=2, max=50)])
        department: Optional["Department"] = many_to_one(constraints=[NotNull()])
        profile_picture: Optional[bytes] = binary()
        projects: List["Project"] = many_to_many()
    ```
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Tuple, Type, Union

from metacrud.metadata.constraints import Constraint
from metacrud.metadata.field_metadata import FetchType, RelationshipType


METADATA_KEY = "metacrud"

_MISSING = dataclasses.MISSING


@dataclass(frozen=True)
class RelationshipSpec:
    """
    Declared association details for a relationship field.

    Attributes:
        relationship_type: The cardinality of the association.
        target: The associated record type, its name, or None to infer it from the annotation.
        mapped_by: Name of the owning field on the target type, for the non-owning side.
        fetch: The loading hint. None means the default for the cardinality.
    """

    relationship_type: RelationshipType
    target: Union[Type, str, None] = None
    mapped_by: Optional[str] = None
    fetch: Optional[FetchType] = None


@dataclass(frozen=True)
class FieldSpec:
    """
    Everything declared about a field through the helpers in this module.
    """

    identifier: bool = False
    transient: bool = False
    hidden: bool = False
    read_only: bool = False
    binary: bool = False
    label: Optional[str] = None
    order: Optional[int] = None
    relationship: Optional[RelationshipSpec] = None
    constraints: Tuple[Constraint, ...] = ()


def get_field_spec(dc_field: dataclasses.Field) -> FieldSpec:
    """
    Get the declared metadata of a dataclass field.

    Args:
        dc_field: A field from `dataclasses.fields`.

    Returns:
        The declared `FieldSpec`, or an empty one for plain fields.
    """
    spec = dc_field.metadata.get(METADATA_KEY)
    return spec if isinstance(spec, FieldSpec) else FieldSpec()


def _build_field(
    spec: FieldSpec,
    default: Any = _MISSING,
    default_factory: Callable[[], Any] = _MISSING,
    **field_kwargs,
) -> Any:
    if default is _MISSING and default_factory is _MISSING:
        default = None
    if default is not _MISSING and default_factory is not _MISSING:
        raise ValueError("Cannot specify both default and default_factory")
    kwargs = dict(field_kwargs, metadata={METADATA_KEY: spec})
    if default_factory is not _MISSING:
        return dataclasses.field(default_factory=default_factory, **kwargs)
    return dataclasses.field(default=default, **kwargs)


def column(
    default: Any = _MISSING,
    *,
    default_factory: Callable[[], Any] = _MISSING,
    label: str = None,
    order: int = None,
    hidden: bool = False,
    read_only: bool = False,
    constraints: Iterable[Constraint] = (),
) -> Any:
    """
    Declare a regular persisted field.

    Args:
        default: The default value. None when neither this nor `default_factory` is given.
        default_factory: A zero-argument callable producing the default value.
        label: An explicit display label.
        order: The display order. Unordered fields come after ordered ones.
        hidden: Never show or bind this field.
        read_only: Show this field but never bind it.
        constraints: Validation constraints for the field.

    Returns:
        A dataclass field.
    """
    spec = FieldSpec(hidden=hidden, read_only=read_only, label=label, order=order, constraints=tuple(constraints))
    return _build_field(spec, default, default_factory)


def identifier(default: Any = None, *, label: str = None, order: int = None) -> Any:
    """
    Declare the identifier field of a record. Identifiers are generated by the storage layer.

    Args:
        default: The default value, None unless the caller assigns identifiers.
        label: An explicit display label.
        order: The display order.

    Returns:
        A dataclass field.
    """
    return _build_field(FieldSpec(identifier=True, label=label, order=order), default)


def transient(default: Any = _MISSING, *, default_factory: Callable[[], Any] = _MISSING) -> Any:
    """
    Declare a field that is never persisted, shown, or bound.

    Returns:
        A dataclass field.
    """
    return _build_field(FieldSpec(transient=True), default, default_factory, compare=False)


def binary(*, label: str = None, order: int = None, constraints: Iterable[Constraint] = ()) -> Any:
    """
    Declare a field holding raw bytes, such as an uploaded file.

    Args:
        label: An explicit display label.
        order: The display order.
        constraints: Validation constraints for the field.

    Returns:
        A dataclass field that is left out of the record's repr.
    """
    spec = FieldSpec(binary=True, label=label, order=order, constraints=tuple(constraints))
    return _build_field(spec, None, repr=False)


def _relationship(
    relationship_type: RelationshipType,
    target: Union[Type, str, None],
    mapped_by: Optional[str],
    fetch: Optional[FetchType],
    label: Optional[str],
    order: Optional[int],
    hidden: bool,
    read_only: bool,
    constraints: Iterable[Constraint],
) -> Any:
    spec = FieldSpec(
        hidden=hidden,
        read_only=read_only,
        label=label,
        order=order,
        relationship=RelationshipSpec(relationship_type, target, mapped_by, fetch),
        constraints=tuple(constraints),
    )
    if relationship_type.is_to_many:
        # Collections of records are not part of equality to avoid walking back-references
        return _build_field(spec, default_factory=list, compare=False, repr=False)
    return _build_field(spec, None)


def many_to_one(
    target: Union[Type, str] = None,
    *,
    fetch: FetchType = None,
    label: str = None,
    order: int = None,
    hidden: bool = False,
    read_only: bool = False,
    constraints: Iterable[Constraint] = (),
) -> Any:
    """
    Declare a reference to a single record of another model. Eager unless `fetch` is LAZY.

    Args:
        target: The referenced record type or its name. Inferred from the annotation when omitted.
        fetch: The loading hint.
        label: An explicit display label.
        order: The display order.
        hidden: Never show or bind this field.
        read_only: Show this field but never bind it.
        constraints: Validation constraints for the field.

    Returns:
        A dataclass field.
    """
    return _relationship(
        RelationshipType.MANY_TO_ONE, target, None, fetch, label, order, hidden, read_only, constraints
    )


def one_to_one(
    target: Union[Type, str] = None,
    *,
    mapped_by: str = None,
    fetch: FetchType = None,
    label: str = None,
    order: int = None,
    hidden: bool = False,
    read_only: bool = False,
    constraints: Iterable[Constraint] = (),
) -> Any:
    """
    Declare a one-to-one association. Eager unless `fetch` is LAZY.

    Args:
        target: The associated record type or its name. Inferred from the annotation when omitted.
        mapped_by: The owning field on the target type, when this is the inverse side.
        fetch: The loading hint.
        label: An explicit display label.
        order: The display order.
        hidden: Never show or bind this field.
        read_only: Show this field but never bind it.
        constraints: Validation constraints for the field.

    Returns:
        A dataclass field.
    """
    return _relationship(
        RelationshipType.ONE_TO_ONE, target, mapped_by, fetch, label, order, hidden, read_only, constraints
    )


def one_to_many(
    target: Union[Type, str] = None,
    *,
    mapped_by: str = None,
    fetch: FetchType = None,
    label: str = None,
    order: int = None,
    hidden: bool = False,
) -> Any:
    """
    Declare a collection of records of another model. Lazy unless `fetch` is EAGER.

    To-many associations are displayed but never bound from form input.

    Args:
        target: The element record type or its name. Inferred from the annotation when omitted.
        mapped_by: The owning field on the target type.
        fetch: The loading hint.
        label: An explicit display label.
        order: The display order.
        hidden: Never show this field.

    Returns:
        A dataclass field defaulting to an empty list.
    """
    return _relationship(RelationshipType.ONE_TO_MANY, target, mapped_by, fetch, label, order, hidden, False, ())


def many_to_many(
    target: Union[Type, str] = None,
    *,
    mapped_by: str = None,
    fetch: FetchType = None,
    label: str = None,
    order: int = None,
    hidden: bool = False,
) -> Any:
    """
    Declare a many-to-many association. Lazy unless `fetch` is EAGER.

    To-many associations are displayed but never bound from form input.

    Args:
        target: The element record type or its name. Inferred from the annotation when omitted.
        mapped_by: The owning field on the target type, when this is the inverse side.
        fetch: The loading hint.
        label: An explicit display label.
        order: The display order.
        hidden: Never show this field.

    Returns:
        A dataclass field defaulting to an empty list.
    """
    return _relationship(RelationshipType.MANY_TO_MANY, target, mapped_by, fetch, label, order, hidden, False, ())
