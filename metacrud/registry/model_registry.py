##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Inventory of the record types available to the CRUD engine.

Registration happens once, at startup, through a
[`ModelRegistryBuilder`][registry.model_registry.ModelRegistryBuilder]. Calling
`build` produces a [`ModelRegistry`][registry.model_registry.ModelRegistry]: an
immutable snapshot that the controller and the form binder share without any
locking.

Models can be registered explicitly, with the record type and identifier type
spelled out, or inferred from a repository's generic parameters:

```python
builder = ModelRegistryBuilder()
builder.register(Department, Long, department_repo)
builder.register_repository(EmployeeRepository())  # a Repository[Employee, Long] subclass
registry = builder.build()
```
"""

import dataclasses
import logging
from importlib.metadata import entry_points
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Type, TypeVar, get_args, get_origin

from metacrud.exceptions import DuplicateModelError, ModelNotFoundError
from metacrud.metadata.introspection import IntrospectionService
from metacrud.metadata.model_entry import ModelEntry


LOG = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "metacrud.repositories"


class ModelRegistry:
    """
    Immutable snapshot of every registered model, keyed by name in registration order.

    Attributes:
        introspection (IntrospectionService): The service whose cache holds the
            descriptors of every registered record type.

    Methods:
        get: Look up a model by name.
        require: Look up a model by name, raising if it is missing.
        all: Get a read-only mapping of every model.
        contains: Check whether a model is registered.
        count: Get the number of registered models.
    """

    def __init__(self, entries: Mapping[str, ModelEntry], introspection: IntrospectionService):
        self._entries: Mapping[str, ModelEntry] = MappingProxyType(dict(entries))
        self.introspection: IntrospectionService = introspection

    def get(self, name: str) -> Optional[ModelEntry]:
        """
        Look up a model by name.

        Args:
            name: The model name.

        Returns:
            The model's entry, or None if no model has that name.
        """
        return self._entries.get(name)

    def require(self, name: str) -> ModelEntry:
        """
        Look up a model by name.

        Args:
            name: The model name.

        Returns:
            The model's entry.

        Raises:
            ModelNotFoundError: If no model has that name.
        """
        entry = self._entries.get(name)
        if entry is None:
            raise ModelNotFoundError(name)
        return entry

    def all(self) -> Mapping[str, ModelEntry]:
        """
        Get every registered model.

        Returns:
            A read-only mapping of model names to entries, in registration order.
        """
        return self._entries

    def contains(self, name: str) -> bool:
        """
        Check whether a model is registered.

        Args:
            name: The model name.

        Returns:
            True if a model with that name exists.
        """
        return name in self._entries

    def count(self) -> int:
        """
        Get the number of registered models.

        Returns:
            The number of models.
        """
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"ModelRegistry({', '.join(self._entries)})"


def _resolvable(param: Any) -> bool:
    """A generic argument is resolvable when it names a concrete type rather than a TypeVar."""
    return param is not None and not isinstance(param, TypeVar)


def resolve_repository_types(repository: Any) -> Optional[Tuple[Type, Type]]:
    """
    Work out the record type and identifier type a repository handles.

    The lookup order is: explicit `record_type` and `id_type` attributes, the
    parameters of an instance created as `Repository[Record, Id](...)`, then the
    parameterized generic bases of the repository's class hierarchy.

    Args:
        repository: A repository instance.

    Returns:
        A `(record_type, id_type)` tuple, or None if exactly two resolvable
            parameters can't be found.
    """
    record_type = getattr(repository, "record_type", None)
    id_type = getattr(repository, "id_type", None)
    if _resolvable(record_type) and _resolvable(id_type):
        return record_type, id_type

    candidates = []
    orig_class = getattr(repository, "__orig_class__", None)
    if orig_class is not None:
        candidates.append(orig_class)
    for klass in type(repository).__mro__:
        candidates.extend(klass.__dict__.get("__orig_bases__", ()))

    for candidate in candidates:
        if get_origin(candidate) is None:
            continue
        params = get_args(candidate)
        if len(params) == 2 and all(_resolvable(param) for param in params):
            return params[0], params[1]

    return None


class ModelRegistryBuilder:
    """
    Collects model registrations and produces an immutable
    [`ModelRegistry`][registry.model_registry.ModelRegistry].

    Name collisions either replace the earlier entry, keeping its position, with a
    warning, or raise [`DuplicateModelError`][exceptions.DuplicateModelError] when
    the builder is strict.

    Attributes:
        strict (bool): Raise on duplicate model names instead of overwriting.
        introspection (IntrospectionService): The service used to warm descriptors at build time.

    Methods:
        register: Register a record type, identifier type, and repository explicitly.
        register_repository: Register a repository, inferring its types.
        discover: Register every repository in an iterable, skipping failures.
        discover_entry_points: Register repositories exposed by installed plugins.
        build: Produce the immutable registry.
    """

    def __init__(self, strict: bool = False, introspection: IntrospectionService = None):
        self.strict: bool = strict
        self.introspection: IntrospectionService = introspection or IntrospectionService()
        self._entries: Dict[str, ModelEntry] = {}

    def register(self, record_type: Type, id_type: Type, repository: Any, name: str = None) -> ModelEntry:
        """
        Register a model explicitly.

        Args:
            record_type: The dataclass type of the model's records.
            id_type: The type of the model's identifiers.
            repository: The repository storing the records.
            name: The lookup key. Defaults to the record type's simple name.

        Returns:
            The new entry.

        Raises:
            TypeError: If `record_type` is not a dataclass type.
            DuplicateModelError: If the name is taken and the builder is strict.
        """
        if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
            raise TypeError(f"Record type {record_type!r} must be a dataclass type.")

        name = name or record_type.__name__
        entry = ModelEntry(name=name, record_type=record_type, id_type=id_type, repository=repository)

        if name in self._entries:
            if self.strict:
                raise DuplicateModelError(name)
            LOG.warning(f"Model '{name}' is already registered. Replacing {self._entries[name]} with {entry}.")

        self._entries[name] = entry
        self.introspection.register_type(record_type)
        LOG.debug(f"Registered model {entry}.")
        return entry

    def register_repository(self, repository: Any, name: str = None) -> bool:
        """
        Register a repository, inferring the record and identifier types from it.

        Args:
            repository: A repository instance.
            name: The lookup key. Defaults to the record type's simple name.

        Returns:
            True if the repository was registered, False if it was skipped because
                its types could not be resolved.
        """
        resolved = resolve_repository_types(repository)
        if resolved is None:
            LOG.warning(
                f"Skipping repository {type(repository).__name__}: could not resolve exactly two type parameters."
            )
            return False

        record_type, id_type = resolved
        self.register(record_type, id_type, repository, name=name)
        return True

    def discover(self, repositories: Iterable[Any]) -> int:
        """
        Register every repository in an iterable.

        A repository that fails to register is logged and skipped, except for
        duplicate names under strict registration.

        Args:
            repositories: The repositories to register.

        Returns:
            The number of repositories registered.
        """
        registered = 0
        for repository in repositories:
            try:
                if self.register_repository(repository):
                    registered += 1
            except DuplicateModelError:
                raise
            except Exception as exc:  # pylint: disable=broad-except
                LOG.warning(f"Failed to register repository {type(repository).__name__}: {exc}")
        return registered

    def discover_entry_points(self, group: str = ENTRY_POINT_GROUP) -> int:
        """
        Register repositories exposed by installed plugins.

        Each entry point in `group` must load a callable that returns an iterable of repositories.

        Args:
            group: The entry point group to scan.

        Returns:
            The number of repositories registered.
        """
        registered = 0
        for entry_point in entry_points(group=group):
            try:
                provider = entry_point.load()
                repositories = list(provider())
            except Exception as exc:  # pylint: disable=broad-except
                LOG.warning(f"Failed to load repositories from entry point '{entry_point.name}': {exc}")
                continue
            LOG.info(f"Loaded {len(repositories)} repositories via entry point: {entry_point.name}")
            registered += self.discover(repositories)
        return registered

    def build(self) -> ModelRegistry:
        """
        Produce the immutable registry and warm the descriptor cache of every model.

        Returns:
            The registry snapshot.
        """
        for entry in self._entries.values():
            self.introspection.inspect(entry.record_type)
        registry = ModelRegistry(self._entries, self.introspection)
        LOG.info(f"Registered {registry.count()} models: {', '.join(registry)}")
        return registry
