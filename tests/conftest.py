##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
This module contains pytest fixtures to be used throughout the entire test suite.
"""
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from redis import Redis

from metacrud.backends.memory.memory_repository import InMemoryRepository
from metacrud.config import configfile
from metacrud.controller import GenericCrudController
from metacrud.examples.demo_app import build_demo_registry
from metacrud.metadata import IntrospectionService, Long
from metacrud.registry import ModelRegistryBuilder
from tests.fixture_data_classes import Member, Team
from tests.fixture_types import (
    FixtureController,
    FixtureModification,
    FixtureRegistry,
    FixtureRepository,
    FixtureStr,
)


# pylint: disable=redefined-outer-name


@pytest.fixture(autouse=True)
def reset_config(monkeypatch: pytest.MonkeyPatch) -> FixtureModification:
    """
    Reset the module-level configuration state before every test so that
    local mode or a loaded configuration never leaks between tests.

    Args:
        monkeypatch: PyTest monkeypatch fixture.
    """
    monkeypatch.setattr(configfile, "CONFIG", None)
    monkeypatch.setattr(configfile, "IS_LOCAL_MODE", False)
    monkeypatch.delenv("METACRUD_DEBUG", raising=False)


@pytest.fixture
def introspection() -> IntrospectionService:
    """
    A fresh introspection service with an empty descriptor cache.

    Returns:
        An `IntrospectionService` instance.
    """
    return IntrospectionService()


@pytest.fixture
def team_repository(introspection: IntrospectionService) -> FixtureRepository:
    """
    An empty in-memory repository of `Team` records.

    Args:
        introspection: The shared introspection service.

    Returns:
        An `InMemoryRepository` storing teams.
    """
    return InMemoryRepository(Team, Long, introspection)


@pytest.fixture
def member_repository(introspection: IntrospectionService) -> FixtureRepository:
    """
    An empty in-memory repository of `Member` records.

    Args:
        introspection: The shared introspection service.

    Returns:
        An `InMemoryRepository` storing members.
    """
    return InMemoryRepository(Member, Long, introspection)


@pytest.fixture
def registry(
    introspection: IntrospectionService,
    team_repository: FixtureRepository,
    member_repository: FixtureRepository,
) -> FixtureRegistry:
    """
    A registry holding the `Team` and `Member` models, in that order.

    Args:
        introspection: The shared introspection service.
        team_repository: The repository storing teams.
        member_repository: The repository storing members.

    Returns:
        The built `ModelRegistry`.
    """
    builder = ModelRegistryBuilder(introspection=introspection)
    builder.register(Team, Long, team_repository)
    builder.register(Member, Long, member_repository)
    return builder.build()


@pytest.fixture
def controller(registry: FixtureRegistry) -> FixtureController:
    """
    A controller over the `Team` and `Member` models with a page size of 3.

    Args:
        registry: The registry holding the test models.

    Returns:
        A `GenericCrudController` instance.
    """
    return GenericCrudController(registry, SimpleNamespace(page_size=3, base_path="/admin", app_title="Test Admin"))


@pytest.fixture
def demo_registry() -> FixtureRegistry:
    """
    The seeded demo application, stored in memory.

    Returns:
        A registry holding Department, Employee, Category, and Product.
    """
    return build_demo_registry()


@pytest.fixture
def demo_controller(demo_registry: FixtureRegistry) -> FixtureController:
    """
    A controller over the seeded demo application with the default settings.

    Args:
        demo_registry: The demo registry.

    Returns:
        A `GenericCrudController` instance.
    """
    return GenericCrudController(demo_registry)


@pytest.fixture
def sqlite_db_path(tmp_path) -> FixtureStr:
    """
    A path to a database file that doesn't exist yet.

    Args:
        tmp_path: PyTest temporary directory fixture.

    Returns:
        The path to the database file.
    """
    return str(tmp_path / "db" / "metacrud.db")


@pytest.fixture
def mock_redis() -> MagicMock:
    """
    A mocked Redis client.

    Returns:
        A `MagicMock` with the `Redis` interface.
    """
    return MagicMock(spec=Redis)
