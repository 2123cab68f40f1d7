##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Tests for the `redis_repository.py` module.
"""

import fnmatch
import json
import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Dict
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture

from metacrud.backends.memory.memory_repository import InMemoryRepository
from metacrud.backends.redis.redis_repository import RedisRepository
from metacrud.backends.utils import UnloadedReference
from metacrud.metadata import Long
from tests.fixture_data_classes import Member, Role, Team, Token


@pytest.fixture
def redis_store(mock_redis: MagicMock) -> Dict[str, Dict[str, str]]:
    """
    Back the mocked Redis client with a dictionary so hashes written by one call
    can be read by the next.

    Args:
        mock_redis: A mocked Redis client.

    Returns:
        The dictionary of hashes keyed by Redis key.
    """
    store: Dict[str, Dict[str, str]] = {}
    counters: Dict[str, int] = {}

    def _hset(key, mapping=None):
        store.setdefault(key, {}).update(mapping)
        return len(mapping)

    def _incr(key):
        counters[key] = counters.get(key, 0) + 1
        return counters[key]

    def _scan_iter(match="*"):
        return iter([key for key in list(store) + list(counters) if fnmatch.fnmatch(key, match)])

    mock_redis.hset.side_effect = _hset
    mock_redis.hgetall.side_effect = lambda key: dict(store.get(key, {}))
    mock_redis.incr.side_effect = _incr
    mock_redis.exists.side_effect = lambda key: int(key in store)
    mock_redis.scan_iter.side_effect = _scan_iter
    mock_redis.delete.side_effect = lambda key: 1 if store.pop(key, None) is not None else 0
    return store


class TestRedisRepository:
    """
    Tests for the `RedisRepository` class.
    """

    @pytest.fixture
    def teams(self, mock_redis: MagicMock, redis_store: Dict[str, Dict[str, str]]) -> RedisRepository:
        """
        A Redis repository of `Team` records backed by the mocked client.

        Args:
            mock_redis: A mocked Redis client.
            redis_store: The dictionary backing the mocked client.

        Returns:
            A Redis repository of `Team` records.
        """
        return RedisRepository(Team, Long, client=mock_redis)

    def test_client_created_from_url(self, mocker: MockerFixture):
        """
        Test that a client is created from the connection settings when none is given.

        Args:
            mocker: PyTest mocker fixture.
        """
        mock_from_url = mocker.patch("metacrud.backends.redis.redis_repository.Redis.from_url")

        RedisRepository(Team, Long, host="cache", port=6380, db=2)
        mock_from_url.assert_called_once_with(url="redis://cache:6380/2", decode_responses=True)

        RedisRepository(Team, Long, url="rediss://secure:6379/0")
        mock_from_url.assert_called_with(url="rediss://secure:6379/0", decode_responses=True)

    def test_key_prefix(self, teams: RedisRepository, mock_redis: MagicMock):
        """
        Test that keys default to the lowercased record type name and can be overridden.

        Args:
            teams: A Redis repository of `Team` records.
            mock_redis: A mocked Redis client.
        """
        assert teams.key == "team"
        assert teams._get_full_key(3) == "team:3"
        assert RedisRepository(Team, Long, client=mock_redis, key="squads").key == "squads"

    def test_save_new_record(self, teams: RedisRepository, redis_store: Dict[str, Dict[str, str]]):
        """
        Test that a new record gets its id from the sequence counter and is stored as a JSON hash.

        Args:
            teams: A Redis repository of `Team` records.
            redis_store: The dictionary backing the mocked client.
        """
        team = teams.save(Team(name="Red"))

        assert team.id == 1
        assert redis_store["team:1"] == {"id": "1", "name": '"Red"', "motto": "null"}
        assert teams.save(Team(name="Blue")).id == 2

    def test_generated_id_skips_explicit_ids(self, teams: RedisRepository, redis_store: Dict[str, Dict[str, str]]):
        """
        Test that saving a record with an explicit id and then one without keeps both,
        with the generated id moving past the explicit one.

        Args:
            teams: A Redis repository of `Team` records.
            redis_store: The dictionary backing the mocked client.
        """
        teams.save(Team(id=1, name="First"))
        teams.save(Team(id=3, name="Third"))

        second = teams.save(Team(name="Second"))
        fourth = teams.save(Team(name="Fourth"))

        assert second.id == 2
        assert fourth.id == 4
        assert teams.find_by_id(1).name == "First"
        assert teams.find_by_id(3).name == "Third"
        assert sorted(redis_store) == ["team:1", "team:2", "team:3", "team:4"]

    def test_round_trip(self, mock_redis: MagicMock, redis_store: Dict[str, Dict[str, str]]):
        """
        Test that typed fields survive JSON encoding and that eager associations are loaded.

        Args:
            mock_redis: A mocked Redis client.
            redis_store: The dictionary backing the mocked client.
        """
        teams = InMemoryRepository(Team, Long)
        team = teams.save(Team(name="Red"))
        members = RedisRepository(Member, Long, client=mock_redis, related={"Team": teams})

        members.save(
            Member(
                name="Ada",
                salary=Decimal("1.10"),
                role=Role.USER,
                birth_date=date(1990, 5, 6),
                avatar=b"\x00\xff",
                team=team,
                active=True,
            )
        )

        stored = redis_store["member:1"]
        assert json.loads(stored["avatar"]) == "AP8="
        assert json.loads(stored["team"]) == 1
        assert "scratch" not in stored

        found = members.find_by_id(1)
        assert found.salary == Decimal("1.10")
        assert found.role is Role.USER
        assert found.birth_date == date(1990, 5, 6)
        assert found.avatar == b"\x00\xff"
        assert found.active is True
        assert found.team.name == "Red"

    def test_unlinked_association(self, mock_redis: MagicMock, redis_store: Dict[str, Dict[str, str]]):
        """
        Test that an association without a linked repository loads as an `UnloadedReference`.

        Args:
            mock_redis: A mocked Redis client.
            redis_store: The dictionary backing the mocked client.
        """
        members = RedisRepository(Member, Long, client=mock_redis)
        members.save(Member(name="Ada", team=Team(id=9)))
        assert members.find_by_id(1).team == UnloadedReference("Team", 9)

    def test_uuid_identifiers(self, mock_redis: MagicMock, redis_store: Dict[str, Dict[str, str]]):
        """
        Test that UUID identifiers are generated instead of drawn from the counter.

        Args:
            mock_redis: A mocked Redis client.
            redis_store: The dictionary backing the mocked client.
        """
        tokens = RedisRepository(Token, uuid.UUID, client=mock_redis)
        token = tokens.save(Token(value="abc"))

        assert isinstance(token.id, uuid.UUID)
        mock_redis.incr.assert_not_called()
        assert tokens.find_by_id(token.id).id == token.id

    def test_find_by_id_missing(self, teams: RedisRepository):
        """
        Test that looking up an unknown id returns None.

        Args:
            teams: A Redis repository of `Team` records.
        """
        assert teams.find_by_id(5) is None

    def test_find_all_skips_sequence_key(self, teams: RedisRepository, mock_redis: MagicMock):
        """
        Test that `find_all` returns every record and ignores the sequence counter.

        Args:
            teams: A Redis repository of `Team` records.
            mock_redis: A mocked Redis client.
        """
        teams.save(Team(name="Red"))
        teams.save(Team(name="Blue"))

        records = teams.find_all()

        assert sorted(team.name for team in records) == ["Blue", "Red"]
        mock_redis.scan_iter.assert_called_with(match="team:*")
        mock_redis.hgetall.assert_any_call("team:1")
        assert "team:seq" not in [call.args[0] for call in mock_redis.hgetall.call_args_list]

    def test_find_all_warns_on_vanished_record(
        self, teams: RedisRepository, mock_redis: MagicMock, caplog: pytest.LogCaptureFixture
    ):
        """
        Test that a key whose hash disappears between the scan and the read is skipped with a warning.

        Args:
            teams: A Redis repository of `Team` records.
            mock_redis: A mocked Redis client.
            caplog: A built-in fixture from the pytest library to capture logs.
        """
        caplog.set_level(logging.WARNING)
        mock_redis.scan_iter.side_effect = lambda match: iter(["team:7"])

        assert teams.find_all() == []
        assert "Team at key 'team:7' could not be retrieved or does not exist." in caplog.text

    def test_find_all_paginated(self, teams: RedisRepository):
        """
        Test that paging, sorting, and searching happen over every stored record.

        Args:
            teams: A Redis repository of `Team` records.
        """
        for name in ("Delta", "Alpha", "Charlie"):
            teams.save(Team(name=name))

        page = teams.find_all_paginated(0, 2, "name")
        assert [team.name for team in page.records] == ["Alpha", "Charlie"]
        assert page.total_count == 3

        searched = teams.find_all_paginated(0, 2, "name", search="DEL")
        assert [team.name for team in searched.records] == ["Delta"]

        with pytest.raises(ValueError, match="unknown field"):
            teams.find_all_paginated(0, 2, "members")

    def test_delete_by_id(self, teams: RedisRepository, caplog: pytest.LogCaptureFixture):
        """
        Test deleting existing and missing records.

        Args:
            teams: A Redis repository of `Team` records.
            caplog: A built-in fixture from the pytest library to capture logs.
        """
        caplog.set_level(logging.DEBUG)
        teams.save(Team(name="Red"))

        teams.delete_by_id(1)
        teams.delete_by_id(1)

        assert teams.find_by_id(1) is None
        assert "Successfully deleted team '1' from Redis." in caplog.text
        assert "No team with id '1' to delete." in caplog.text
