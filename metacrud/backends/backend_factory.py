##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Factory for selecting and instantiating repository implementations.

This module defines the `RepositoryFactory` class, which lets an application
pick a storage engine by name (usually the `backend.name` configuration value)
rather than importing a repository class directly. Third-party repositories can
be added through the `metacrud.backends` entry point group.
"""

from typing import Any, Type

from metacrud.abstracts import BaseFactory
from metacrud.backends.memory.memory_repository import InMemoryRepository
from metacrud.backends.redis.redis_repository import RedisRepository
from metacrud.backends.repository import Repository
from metacrud.backends.sqlite.sqlite_repository import SQLiteRepository
from metacrud.exceptions import RepositoryNotSupportedError


class RepositoryFactory(BaseFactory):
    """
    Factory class for managing and instantiating supported repositories.

    Attributes:
        _registry (Dict[str, Repository]): Maps canonical backend names to repository classes.
        _aliases (Dict[str, str]): Maps alternate names to canonical backend names.

    Methods:
        register: Register a new repository class and optional aliases.
        list_available: Return a list of supported backend names.
        create: Instantiate a repository class by name or alias.
        get_component_info: Return metadata about a registered repository.
    """

    def _register_builtins(self):
        self.register("memory", InMemoryRepository, aliases=["in-memory"])
        self.register("sqlite", SQLiteRepository)
        self.register("redis", RedisRepository, aliases=["rediss"])

    def _validate_component(self, component_class: Any):
        """
        Ensure registered component is a subclass of Repository.

        Args:
            component_class: The class to validate.

        Raises:
            TypeError: If the component does not subclass Repository.
        """
        if not isinstance(component_class, type) or not issubclass(component_class, Repository):
            raise TypeError(f"{component_class} must inherit from Repository")

    def _entry_point_group(self) -> str:
        return "metacrud.backends"

    def _raise_component_error_class(self, msg: str) -> Type[Exception]:
        raise RepositoryNotSupportedError(msg)


repository_factory = RepositoryFactory()
