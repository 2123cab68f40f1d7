##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
The `registry` package inventories the models the CRUD engine can operate on.

Modules:
    model_registry: Contains `ModelRegistryBuilder` and the immutable `ModelRegistry`.
"""

from metacrud.registry.model_registry import ModelRegistry, ModelRegistryBuilder, resolve_repository_types


__all__ = ["ModelRegistry", "ModelRegistryBuilder", "resolve_repository_types"]
