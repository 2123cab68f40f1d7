##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Tests for the `relation_support_mixin.py` module.
"""

import dataclasses
import logging
from unittest.mock import MagicMock

import pytest

from metacrud.backends.relation_support_mixin import RelationSupportMixin
from metacrud.backends.utils import UnloadedReference
from metacrud.metadata import FieldDescriptor, IntrospectionService, Long
from tests.fixture_data_classes import Member, Team


class DummyRelationRepository(RelationSupportMixin):
    """A minimal class using the mixin."""

    def __init__(self):
        self.related = {}


class TestRelationSupportMixin:
    """
    Tests for the `RelationSupportMixin` class.
    """

    @pytest.fixture
    def team_field(self, introspection: IntrospectionService) -> FieldDescriptor:
        """
        The descriptor of the `Member.team` association.

        Args:
            introspection: A fresh introspection service.

        Returns:
            The descriptor of the `team` field.
        """
        return introspection.get_field(Member, "team")

    @pytest.fixture
    def team_repository(self) -> MagicMock:
        """
        A mocked repository of `Team` records with `Long` identifiers.

        Returns:
            A mocked repository.
        """
        repository = MagicMock()
        repository.id_type = Long
        return repository

    def test_link(self, team_repository: MagicMock):
        """
        Test that `link` stores the repository under the model name.

        Args:
            team_repository: A mocked repository of `Team` records.
        """
        mixin = DummyRelationRepository()
        mixin.link("Team", team_repository)
        assert mixin.related == {"Team": team_repository}

    def test_nothing_stored(self, team_field: FieldDescriptor):
        """
        Test that a missing identifier resolves to None.

        Args:
            team_field: The descriptor of the `team` field.
        """
        assert DummyRelationRepository()._resolve_reference(team_field, None) is None

    def test_unlinked(self, team_field: FieldDescriptor):
        """
        Test that an identifier without a linked repository resolves to a placeholder.

        Args:
            team_field: The descriptor of the `team` field.
        """
        assert DummyRelationRepository()._resolve_reference(team_field, 4) == UnloadedReference("Team", 4)

    def test_eager_load(self, team_field: FieldDescriptor, team_repository: MagicMock):
        """
        Test that the stored identifier is coerced and looked up in the linked repository.

        Args:
            team_field: The descriptor of the `team` field.
            team_repository: A mocked repository of `Team` records.
        """
        team = Team(id=4, name="Red")
        team_repository.find_by_id.return_value = team
        mixin = DummyRelationRepository()
        mixin.link("Team", team_repository)

        assert mixin._resolve_reference(team_field, "4") is team
        team_repository.find_by_id.assert_called_once_with(4)

    def test_lazy(self, team_field: FieldDescriptor, team_repository: MagicMock):
        """
        Test that lazy associations are not loaded even when a repository is linked.

        Args:
            team_field: The descriptor of the `team` field.
            team_repository: A mocked repository of `Team` records.
        """
        lazy_field = dataclasses.replace(
            team_field, relationship=dataclasses.replace(team_field.relationship, is_lazy=True)
        )
        mixin = DummyRelationRepository()
        mixin.link("Team", team_repository)

        assert mixin._resolve_reference(lazy_field, "4") == UnloadedReference("Team", 4)
        team_repository.find_by_id.assert_not_called()

    def test_dangling(
        self, team_field: FieldDescriptor, team_repository: MagicMock, caplog: pytest.LogCaptureFixture
    ):
        """
        Test that an identifier of a record that no longer exists resolves to None with a warning.

        Args:
            team_field: The descriptor of the `team` field.
            team_repository: A mocked repository of `Team` records.
            caplog: A built-in fixture from the pytest library to capture logs.
        """
        caplog.set_level(logging.WARNING)
        team_repository.find_by_id.return_value = None
        mixin = DummyRelationRepository()
        mixin.link("Team", team_repository)

        assert mixin._resolve_reference(team_field, 4) is None
        assert "Team with id '4' referenced by field 'team' no longer exists." in caplog.text
