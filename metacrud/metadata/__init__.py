##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
The `metadata` package derives per-field metadata from record types.

Modules:
    constraints: The closed set of validation constraint descriptors.
    field_metadata: `FieldDescriptor`, `RelationshipDescriptor`, and the field kind enums.
    introspection: `IntrospectionService`, which builds and caches field descriptors.
    markers: Field helpers used to declare metadata on dataclass records.
    model_entry: `ModelEntry`, one registered record type with its repository.
    types: The `Long` and `Float32` aliases and typing helpers.
"""

from metacrud.metadata.constraints import (
    Email,
    Future,
    FutureOrPresent,
    Max,
    Min,
    Negative,
    NegativeOrZero,
    NotBlank,
    NotEmpty,
    NotNull,
    Past,
    PastOrPresent,
    Pattern,
    Positive,
    PositiveOrZero,
    Size,
)
from metacrud.metadata.field_metadata import (
    FetchType,
    FieldDescriptor,
    FieldKind,
    RelationshipDescriptor,
    RelationshipType,
)
from metacrud.metadata.introspection import IntrospectionService
from metacrud.metadata.markers import (
    binary,
    column,
    identifier,
    many_to_many,
    many_to_one,
    one_to_many,
    one_to_one,
    transient,
)
from metacrud.metadata.model_entry import ModelEntry
from metacrud.metadata.types import Float32, Long


__all__ = [
    "Email",
    "FetchType",
    "FieldDescriptor",
    "FieldKind",
    "Float32",
    "Future",
    "FutureOrPresent",
    "IntrospectionService",
    "Long",
    "Max",
    "Min",
    "ModelEntry",
    "Negative",
    "NegativeOrZero",
    "NotBlank",
    "NotEmpty",
    "NotNull",
    "Past",
    "PastOrPresent",
    "Pattern",
    "Positive",
    "PositiveOrZero",
    "RelationshipDescriptor",
    "RelationshipType",
    "Size",
    "binary",
    "column",
    "identifier",
    "many_to_many",
    "many_to_one",
    "one_to_many",
    "one_to_one",
    "transient",
]
