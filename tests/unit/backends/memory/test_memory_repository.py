##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Tests for the `memory_repository.py` module.
"""

import logging
import threading
import uuid

import pytest

from metacrud.backends.memory.memory_repository import InMemoryRepository
from metacrud.metadata import Long
from tests.fixture_data_classes import Member, Tag, Team, Token
from tests.fixture_types import FixtureRepository


class TestInMemoryRepository:
    """
    Tests for the `InMemoryRepository` class.
    """

    def test_save_assigns_sequential_ids(self, team_repository: FixtureRepository):
        """
        Test that new records get increasing integer identifiers, set on the record passed in.

        Args:
            team_repository: An empty in-memory repository of `Team` records.
        """
        first, second = Team(name="Red"), Team(name="Blue")
        team_repository.save(first)
        saved = team_repository.save(second)

        assert first.id == 1
        assert second.id == saved.id == 2
        assert team_repository.count() == 2

    def test_explicit_ids_advance_the_sequence(self, team_repository: FixtureRepository):
        """
        Test that saving a record with a larger explicit id moves the sequence past it.

        Args:
            team_repository: An empty in-memory repository of `Team` records.
        """
        team_repository.save(Team(id=10, name="Explicit"))
        assert team_repository.save(Team(name="Next")).id == 11

    @pytest.mark.parametrize("record_type, id_type", [(Tag, str), (Token, uuid.UUID)])
    def test_non_integer_ids(self, record_type, id_type):
        """
        Test that string and UUID identifiers are generated.

        Args:
            record_type: The record type to store.
            id_type: Its identifier type.
        """
        repository = InMemoryRepository(record_type, id_type)
        saved = repository.save(record_type())
        assert isinstance(saved.id, id_type)
        assert repository.find_by_id(saved.id) == saved

    def test_update_replaces_record(self, team_repository: FixtureRepository):
        """
        Test that saving a record with an existing id replaces the stored record.

        Args:
            team_repository: An empty in-memory repository of `Team` records.
        """
        team = team_repository.save(Team(name="Red"))
        team.name = "Crimson"
        team_repository.save(team)

        assert team_repository.find_by_id(team.id).name == "Crimson"
        assert team_repository.count() == 1

    def test_records_are_copied(self, team_repository: FixtureRepository):
        """
        Test that changing a record outside the repository doesn't change stored state.

        Args:
            team_repository: An empty in-memory repository of `Team` records.
        """
        team = Team(name="Red")
        team_repository.save(team)
        team.name = "Changed after save"

        found = team_repository.find_by_id(team.id)
        found.name = "Changed after find"

        assert team_repository.find_by_id(team.id).name == "Red"
        assert team_repository.find_all()[0].name == "Red"

    def test_collections_are_copied(self, team_repository: FixtureRepository):
        """
        Test that changing a collection of a found or saved record doesn't leak into stored state.

        Args:
            team_repository: An empty in-memory repository of `Team` records.
        """
        saved = team_repository.save(Team(name="Red", members=[]))
        saved.members.append(Member(name="From save"))

        found = team_repository.find_by_id(saved.id)
        found.members.append(Member(name="From find"))
        team_repository.find_all()[0].members.append(Member(name="From find_all"))

        assert team_repository.find_by_id(saved.id).members == []

    def test_find_by_id_missing(self, team_repository: FixtureRepository):
        """
        Test that looking up an unknown id returns None.

        Args:
            team_repository: An empty in-memory repository of `Team` records.
        """
        assert team_repository.find_by_id(99) is None

    def test_find_all_keeps_insertion_order(self, team_repository: FixtureRepository):
        """
        Test that `find_all` returns records in the order they were first saved.

        Args:
            team_repository: An empty in-memory repository of `Team` records.
        """
        for name in ("C", "A", "B"):
            team_repository.save(Team(name=name))
        assert [team.name for team in team_repository.find_all()] == ["C", "A", "B"]

    def test_find_all_paginated(self, team_repository: FixtureRepository):
        """
        Test sorting, searching, and paging through stored records.

        Args:
            team_repository: An empty in-memory repository of `Team` records.
        """
        for name in ("Delta", "alpha", "Charlie", "Bravo", "Echo"):
            team_repository.save(Team(name=name, motto=f"{name} motto"))

        page = team_repository.find_all_paginated(0, 2, "name", ascending=False)
        assert [team.name for team in page.records] == ["alpha", "Echo"]
        assert page.total_count == 5
        assert page.total_pages == 3

        searched = team_repository.find_all_paginated(0, 10, "id", search="CHAR")
        assert [team.name for team in searched.records] == ["Charlie"]
        assert searched.total_count == 1

    def test_find_all_paginated_unknown_field(self, team_repository: FixtureRepository):
        """
        Test that sorting by an unknown field raises a ValueError.

        Args:
            team_repository: An empty in-memory repository of `Team` records.
        """
        with pytest.raises(ValueError, match="unknown field"):
            team_repository.find_all_paginated(0, 10, "colour")

    def test_delete_by_id(self, team_repository: FixtureRepository, caplog: pytest.LogCaptureFixture):
        """
        Test deleting existing and missing records.

        Args:
            team_repository: An empty in-memory repository of `Team` records.
            caplog: A built-in fixture from the pytest library to capture logs.
        """
        caplog.set_level(logging.DEBUG)
        team = team_repository.save(Team(name="Red"))

        team_repository.delete_by_id(team.id)
        team_repository.delete_by_id(team.id)

        assert team_repository.find_by_id(team.id) is None
        assert "Deleted Team with id '1'." in caplog.text
        assert "No Team with id '1' to delete." in caplog.text

    def test_associations_are_held_as_records(
        self, team_repository: FixtureRepository, member_repository: FixtureRepository
    ):
        """
        Test that to-one associations are stored as the associated records themselves.

        Args:
            team_repository: An empty in-memory repository of `Team` records.
            member_repository: An empty in-memory repository of `Member` records.
        """
        team = team_repository.save(Team(name="Red"))
        member = member_repository.save(Member(name="Ada", team=team))
        assert member_repository.find_by_id(member.id).team == team

    def test_concurrent_saves_get_unique_ids(self):
        """
        Test that saving from many threads at once never hands out the same id twice.
        """
        repository = InMemoryRepository(Team, Long)

        def _save_many():
            for _ in range(50):
                repository.save(Team(name="Threaded"))

        threads = [threading.Thread(target=_save_many) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        ids = [team.id for team in repository.find_all()]
        assert len(ids) == len(set(ids)) == 400
        assert max(ids) == 400
