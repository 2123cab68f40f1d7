##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Storage layer for Metacrud records.

The `backends` package defines the abstract `Repository` interface that every
model's storage must implement, along with bundled implementations that keep
records in memory, in SQLite, or in Redis, and a factory to choose between them.

Subpackages:
    memory: Thread-safe in-process repository.
    redis: Redis-based repository implementation.
    sqlite: SQLite-based repository implementation.

Modules:
    backend_factory: Contains `RepositoryFactory`, used to select and instantiate a repository by name.
    relation_support_mixin: Loads stored to-one associations for repositories that store identifiers.
    repository: Defines the abstract `Repository` class and the `Page` result type.
    utils: Value encoding, decoding, and in-process paging shared by the repositories.
"""
