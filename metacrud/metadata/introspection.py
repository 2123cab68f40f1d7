##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Derives ordered field metadata from dataclass record types.

The [`IntrospectionService`][metadata.introspection.IntrospectionService] walks
a record type's class hierarchy once, classifies every field into a
[`FieldKind`][metadata.field_metadata.FieldKind], resolves relationship targets,
collects validation constraints, and caches the resulting tuple of
[`FieldDescriptor`][metadata.field_metadata.FieldDescriptor] objects.
"""

import builtins
import dataclasses
import logging
import re
import sys
import threading
import typing
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, ForwardRef, List, Optional, Tuple, Type

from metacrud.metadata.constraints import CONSTRAINT_TYPES, Constraint
from metacrud.metadata.field_metadata import (
    FetchType,
    FieldDescriptor,
    FieldKind,
    RelationshipDescriptor,
    RelationshipType,
)
from metacrud.metadata.markers import FieldSpec, RelationshipSpec, get_field_spec
from metacrud.metadata.types import Float32, Long, collection_element_type, type_name, unwrap_optional


LOG = logging.getLogger(__name__)

UNKNOWN_MODEL = "Unknown"

# Checked in order, first match wins
EXACT_TYPE_KINDS: Tuple[Tuple[Any, FieldKind], ...] = (
    (str, FieldKind.STRING),
    (int, FieldKind.INTEGER),
    (Long, FieldKind.LONG),
    (float, FieldKind.DOUBLE),
    (Float32, FieldKind.FLOAT),
    (bool, FieldKind.BOOLEAN),
)

_TYPING_WORDS = frozenset(
    {"Optional", "Union", "List", "Set", "FrozenSet", "Tuple", "Sequence", "Iterable", "Collection", "None", "typing"}
    | {"list", "set", "frozenset", "tuple", "Annotated"}
)
_IDENTIFIER_REGEX = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")


def _name_from_annotation_text(text: str) -> Optional[str]:
    """
    Pull the record type name out of an unevaluated annotation such as `'Optional["Department"]'`.

    Returns:
        The simple name of the innermost non-typing identifier, or None if there is none.
    """
    names = [type_name(word) for word in _IDENTIFIER_REGEX.findall(text)]
    names = [name for name in names if name not in _TYPING_WORDS]
    return names[-1] if names else None


class IntrospectionService:
    """
    Builds and caches field descriptors for record types.

    Record types must be dataclasses. Field names referenced as strings (forward
    references) are resolved against the defining module and against every type
    made known through `register_type`.

    Attributes:
        _cache (Dict[Type, Tuple[FieldDescriptor, ...]]): Descriptors per inspected record type.
        _known_types (Dict[str, Type]): Record types by simple name, used to resolve forward references.

    Methods:
        inspect: Get the ordered field descriptors of a record type.
        get_field: Get the descriptor of a single named field.
        identifier_field: Get the descriptor of a record type's identifier.
        register_type: Make a record type resolvable by name.
        clear_cache: Forget every cached descriptor.
    """

    def __init__(self):
        self._cache: Dict[Type, Tuple[FieldDescriptor, ...]] = {}
        self._known_types: Dict[str, Type] = {}
        self._lock = threading.Lock()

    def register_type(self, record_type: Type):
        """
        Make a record type resolvable by its simple name when it appears in forward references.

        Args:
            record_type: The record type to add.
        """
        self._known_types[record_type.__name__] = record_type

    def clear_cache(self):
        """Forget every cached descriptor."""
        with self._lock:
            self._cache.clear()

    def inspect(self, record_type: Type) -> Tuple[FieldDescriptor, ...]:
        """
        Get the field descriptors of a record type.

        Fields are discovered from the most-derived class up through each ancestor,
        then stably sorted by display order with unset orders last.

        Args:
            record_type: A dataclass type.

        Returns:
            The ordered field descriptors.

        Raises:
            TypeError: If `record_type` is not a dataclass type.
        """
        if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
            raise TypeError(f"{record_type!r} is not a dataclass type.")

        cached = self._cache.get(record_type)
        if cached is not None:
            return cached

        descriptors = self._build_descriptors(record_type)
        with self._lock:
            return self._cache.setdefault(record_type, descriptors)

    def get_field(self, record_type: Type, field_name: str) -> Optional[FieldDescriptor]:
        """
        Get the descriptor of a single field.

        Args:
            record_type: A dataclass type.
            field_name: The name of the field.

        Returns:
            The matching descriptor, or None if the type has no such field.
        """
        return next((desc for desc in self.inspect(record_type) if desc.name == field_name), None)

    def identifier_field(self, record_type: Type) -> Optional[FieldDescriptor]:
        """
        Get the descriptor of the field holding a record's identifier.

        Args:
            record_type: A dataclass type.

        Returns:
            The identifier descriptor, or None if the type declares none.
        """
        return next((desc for desc in self.inspect(record_type) if desc.is_identifier), None)

    def _discover_fields(self, record_type: Type) -> List[dataclasses.Field]:
        """
        Collect the dataclass fields of a record type, most-derived class first.

        A field re-declared in a subclass is reported once, at the subclass position.
        """
        all_fields = {dc_field.name: dc_field for dc_field in dataclasses.fields(record_type)}
        discovered: List[dataclasses.Field] = []
        seen = set()
        for klass in record_type.__mro__:
            if klass is object:
                break
            for name in klass.__dict__.get("__annotations__", {}):
                if name in all_fields and name not in seen:
                    seen.add(name)
                    discovered.append(all_fields[name])
        return discovered

    def _resolve_hints(self, record_type: Type) -> Dict[str, Any]:
        """
        Evaluate the annotations of a record type, keeping `Annotated` extras.

        Returns:
            Evaluated annotations by field name, or an empty dictionary if some
                annotation can't be evaluated yet.
        """
        try:
            return typing.get_type_hints(record_type, localns=dict(self._known_types), include_extras=True)
        except (NameError, TypeError) as exc:
            LOG.debug(f"Could not evaluate every annotation of {record_type.__name__}: {exc}")
            return {}

    def _build_descriptors(self, record_type: Type) -> Tuple[FieldDescriptor, ...]:
        LOG.debug(f"Inspecting fields of {record_type.__name__}...")
        hints = self._resolve_hints(record_type)
        descriptors = [
            self._describe(dc_field, hints.get(dc_field.name, dc_field.type), record_type)
            for dc_field in self._discover_fields(record_type)
        ]

        # `sorted` is stable so ties keep their discovery order
        descriptors = sorted(descriptors, key=lambda desc: (desc.order is None, desc.order or 0))

        if not any(desc.is_identifier for desc in descriptors):
            descriptors = [
                dataclasses.replace(desc, is_identifier=True) if desc.name == "id" else desc for desc in descriptors
            ]

        LOG.debug(f"Found {len(descriptors)} fields on {record_type.__name__}.")
        return tuple(descriptors)

    def _describe(self, dc_field: dataclasses.Field, hint: Any, owner: Type) -> FieldDescriptor:
        spec: FieldSpec = get_field_spec(dc_field)
        if isinstance(hint, str) and spec.relationship is None:
            hint = self._lookup_annotation_text(hint, owner)
        declared_type = unwrap_optional(hint)

        relationship = None
        if spec.relationship is not None:
            kind, relationship = self._describe_relationship(spec.relationship, hint, owner)
        elif spec.binary:
            kind = FieldKind.BINARY
        else:
            kind = self.classify(declared_type)

        return FieldDescriptor(
            name=dc_field.name,
            declared_type=declared_type,
            kind=kind,
            is_identifier=spec.identifier,
            is_transient=spec.transient,
            is_hidden=spec.hidden,
            is_read_only=spec.read_only,
            is_binary=spec.binary,
            label=spec.label,
            order=spec.order,
            relationship=relationship,
            constraints=self._collect_constraints(spec, hint),
        )

    def _lookup_annotation_text(self, text: str, owner: Type) -> Any:
        """
        Best-effort lookup of a simple unevaluated annotation such as `"Optional[date]"`.

        Collection annotations are left as text.

        Returns:
            The named type, or `text` itself if it can't be found.
        """
        if "[" in text.replace("Optional[", ""):
            return text
        name = _name_from_annotation_text(text)
        if name is None:
            return text
        namespaces = (self._known_types, vars(sys.modules.get(owner.__module__, typing)), vars(builtins))
        for namespace in namespaces:
            if name in namespace:
                return namespace[name]
        return text

    @staticmethod
    def classify(declared_type: Any) -> FieldKind:
        """
        Classify a non-relationship, non-binary type into a field kind.

        Args:
            declared_type: The field's type with `Optional` removed.

        Returns:
            The semantic kind of the type.
        """
        for exact_type, kind in EXACT_TYPE_KINDS:
            if declared_type is exact_type:
                return kind

        if not isinstance(declared_type, type):
            return FieldKind.UNKNOWN
        if issubclass(declared_type, Enum):
            return FieldKind.ENUM
        if declared_type is date:
            return FieldKind.DATE
        if issubclass(declared_type, (datetime, time, date)):
            return FieldKind.TIMESTAMP
        if issubclass(declared_type, Decimal):
            return FieldKind.DOUBLE
        return FieldKind.UNKNOWN

    def _describe_relationship(
        self, rel_spec: RelationshipSpec, hint: Any, owner: Type
    ) -> Tuple[FieldKind, RelationshipDescriptor]:
        rel_type = rel_spec.relationship_type

        if rel_spec.target is not None:
            target_hint = rel_spec.target
        elif isinstance(hint, str):
            target_hint = _name_from_annotation_text(hint)
        elif rel_type.is_to_many:
            target_hint = collection_element_type(hint)
        else:
            target_hint = unwrap_optional(hint)

        target_type, target_model = self._resolve_target(target_hint, owner)

        if rel_type.is_to_many:
            is_lazy = rel_spec.fetch is not FetchType.EAGER
        else:
            is_lazy = rel_spec.fetch is FetchType.LAZY

        mapped_by = None if rel_type is RelationshipType.MANY_TO_ONE else rel_spec.mapped_by

        return rel_type.field_kind, RelationshipDescriptor(
            relationship_type=rel_type,
            target_type=target_type,
            target_model=target_model,
            mapped_by=mapped_by,
            is_lazy=is_lazy,
        )

    def _resolve_target(self, target_hint: Any, owner: Type) -> Tuple[Optional[Type], str]:
        """
        Resolve the associated record type of a relationship.

        Returns:
            A tuple of the target type (None if unresolvable) and its simple name
                ("Unknown" if there is nothing to name).
        """
        if target_hint is None:
            return None, UNKNOWN_MODEL

        if isinstance(target_hint, (str, ForwardRef)):
            name = type_name(target_hint)
            candidate = self._known_types.get(name, getattr(sys.modules.get(owner.__module__), name, None))
            return (candidate if isinstance(candidate, type) else None), name

        if isinstance(target_hint, type):
            return target_hint, target_hint.__name__

        return None, UNKNOWN_MODEL

    @staticmethod
    def _collect_constraints(spec: FieldSpec, hint: Any) -> Dict[str, Constraint]:
        candidates = list(spec.constraints)
        if typing.get_origin(hint) is typing.Annotated:
            candidates.extend(typing.get_args(hint)[1:])

        constraints: Dict[str, Constraint] = {}
        for candidate in candidates:
            if isinstance(candidate, CONSTRAINT_TYPES):
                constraints[candidate.name] = candidate
            else:
                LOG.debug(f"Ignoring unrecognized constraint {candidate!r}.")
        return constraints
