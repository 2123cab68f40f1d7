##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Passive data structures describing the fields of a record type.

Instances of these classes are produced by the
[`IntrospectionService`][metadata.introspection.IntrospectionService] and
consumed by the form binder, the CRUD controller, and the storage backends.
They are immutable and safe to share between threads.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Type

from metacrud.metadata.constraints import Constraint
from metacrud.utils import humanize_name


class FieldKind(Enum):
    """
    The semantic category a field is classified into for rendering and conversion.
    """

    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    ENUM = "enum"
    DATE = "date"
    TIMESTAMP = "timestamp"
    BINARY = "binary"
    MANY_TO_ONE = "many_to_one"
    ONE_TO_ONE = "one_to_one"
    ONE_TO_MANY = "one_to_many"
    MANY_TO_MANY = "many_to_many"
    UNKNOWN = "unknown"

    @property
    def is_relationship(self) -> bool:
        """True if this kind describes an association to another model."""
        return self in RELATIONSHIP_KINDS


class RelationshipType(Enum):
    """Cardinality of an association between two models."""

    MANY_TO_ONE = "many_to_one"
    ONE_TO_MANY = "one_to_many"
    MANY_TO_MANY = "many_to_many"
    ONE_TO_ONE = "one_to_one"

    @property
    def is_to_many(self) -> bool:
        """True if the associated side holds a collection of records."""
        return self in (RelationshipType.ONE_TO_MANY, RelationshipType.MANY_TO_MANY)

    @property
    def field_kind(self) -> FieldKind:
        """The field kind a relationship of this type is classified as."""
        return FieldKind[self.name]


class FetchType(Enum):
    """Loading hint for an association."""

    EAGER = "eager"
    LAZY = "lazy"


RELATIONSHIP_KINDS = frozenset(
    {FieldKind.MANY_TO_ONE, FieldKind.ONE_TO_ONE, FieldKind.ONE_TO_MANY, FieldKind.MANY_TO_MANY}
)


@dataclass(frozen=True)
class RelationshipDescriptor:
    """
    Describes the association a relationship field holds.

    Attributes:
        relationship_type: The cardinality of the association.
        target_type: The associated record type, or None if it could not be resolved.
        target_model: Simple name of the associated record type, "Unknown" if unresolvable.
        mapped_by: Name of the owning field on the target type. None means this side owns
            the association.
        is_lazy: Whether the storage layer may leave the association unloaded.
    """

    relationship_type: RelationshipType
    target_type: Optional[Type]
    target_model: str
    mapped_by: Optional[str] = None
    is_lazy: bool = False

    @property
    def is_to_many(self) -> bool:
        """True for one-to-many and many-to-many associations."""
        return self.relationship_type.is_to_many

    @property
    def is_to_one(self) -> bool:
        """True for many-to-one and one-to-one associations."""
        return not self.relationship_type.is_to_many

    @property
    def is_owning_side(self) -> bool:
        """True if this side of the association is the one that stores it."""
        return self.mapped_by is None


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Derived metadata for a single field of a record type.

    Attributes:
        name: The attribute name on the record.
        declared_type: The annotated type with `Optional`/`Annotated` wrappers removed.
        kind: The semantic kind of the field.
        is_identifier: True for the field holding the record's identifier.
        is_transient: True for fields that are never persisted.
        is_hidden: True for fields never shown or bound.
        is_read_only: True for fields shown but never bound.
        is_binary: True for fields holding raw bytes.
        label: An explicit display label, if one was declared.
        order: Optional display order. Unset values sort after every set value.
        relationship: Association details. Present iff `kind` is a relationship kind.
        constraints: Validation constraints keyed by constraint name.
    """

    name: str
    declared_type: Any
    kind: FieldKind
    is_identifier: bool = False
    is_transient: bool = False
    is_hidden: bool = False
    is_read_only: bool = False
    is_binary: bool = False
    label: Optional[str] = None
    order: Optional[int] = None
    relationship: Optional[RelationshipDescriptor] = None
    constraints: Mapping[str, Constraint] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Freeze the constraint mapping so descriptors can be shared between requests
        object.__setattr__(self, "constraints", MappingProxyType(dict(self.constraints)))
        if self.kind.is_relationship != (self.relationship is not None):
            raise ValueError(f"Field '{self.name}' of kind {self.kind.name} has an inconsistent relationship descriptor.")

    @property
    def display_label(self) -> str:
        """The explicit label, or the humanized field name."""
        return self.label or humanize_name(self.name)

    @property
    def is_relationship(self) -> bool:
        """True if this field holds an association to another model."""
        return self.relationship is not None

    @property
    def is_to_one(self) -> bool:
        """True if this field holds a single associated record."""
        return self.relationship is not None and self.relationship.is_to_one

    @property
    def is_to_many(self) -> bool:
        """True if this field holds a collection of associated records."""
        return self.relationship is not None and self.relationship.is_to_many

    @property
    def is_visible(self) -> bool:
        """True if the field may be shown to a user."""
        return not self.is_transient and not self.is_hidden

    @property
    def is_editable(self) -> bool:
        """True if the field may be changed through a form."""
        return not (self.is_identifier or self.is_transient or self.is_hidden or self.is_read_only)

    def has_constraint(self, name: str) -> bool:
        """
        Check if a constraint is attached to this field.

        Args:
            name: The constraint name, e.g. "NotNull" or "Size".

        Returns:
            True if the constraint is present.
        """
        return name in self.constraints

    def get_constraint(self, name: str) -> Optional[Constraint]:
        """
        Get a constraint attached to this field.

        Args:
            name: The constraint name, e.g. "NotNull" or "Size".

        Returns:
            The constraint descriptor, or None if it is not present.
        """
        return self.constraints.get(name)
