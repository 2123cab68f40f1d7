##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""Registry entry pairing a record type with its repository."""

from dataclasses import dataclass
from typing import Any, Type


@dataclass(frozen=True)
class ModelEntry:
    """
    One registered model.

    Attributes:
        name: The unique lookup key, the record type's simple name unless registered otherwise.
        record_type: The dataclass type of the model's records.
        id_type: The type of the model's identifiers.
        repository: The [`Repository`][backends.repository.Repository] storing the records.
    """

    name: str
    record_type: Type
    id_type: Type
    repository: Any

    def __str__(self) -> str:
        id_name = getattr(self.id_type, "__name__", str(self.id_type))
        return f"{self.name}({self.record_type.__module__}.{self.record_type.__qualname__}, id={id_name})"
