##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Redis-based repository for arbitrary dataclass records.

Each record is stored as a Redis hash under `<prefix>:<id>`, with every field
value JSON encoded so that types survive the round trip. Integer identifiers
come from an `INCR` counter stored under `<prefix>:seq`. Redis has no secondary
indexes here, so sorting, searching, and paging happen in process.

See also:
    - metacrud.backends.repository: Base class
    - metacrud.backends.relation_support_mixin: Loading of stored associations
"""

import json
import logging
from typing import Any, Dict, Generic, List, Optional, Type

from redis import Redis

from metacrud.backends.relation_support_mixin import RelationSupportMixin
from metacrud.backends.repository import ID, Page, R, Repository
from metacrud.backends.utils import (
    INTEGER_ID_TYPES,
    build_record,
    coerce_identifier,
    decode_value,
    encode_value,
    generate_identifier,
    identifier_name,
    paginate,
    stored_columns,
)
from metacrud.metadata.introspection import IntrospectionService


LOG = logging.getLogger(__name__)


class RedisRepository(RelationSupportMixin, Repository[R, ID], Generic[R, ID]):
    """
    Repository storing one record type as Redis hashes.

    Attributes:
        client (Redis): The Redis client used for database operations.
        key (str): The prefix key used for Redis entries.
        record_type (Type[R]): The dataclass type stored by this repository.
        id_type (Type[ID]): The type of the stored records' identifiers.
        descriptors (Tuple[FieldDescriptor, ...]): The field descriptors of `record_type`.
        related (Dict[str, Repository]): Repositories used to load eager associations.

    Methods:
        find_by_id: Retrieve a record by identifier.
        find_all_paginated: Retrieve one sorted page of records, optionally filtered by search text.
        find_all: Retrieve every record.
        save: Create or update a record.
        delete_by_id: Delete a record by identifier.
        link: Make the repository of an associated model available.
    """

    def __init__(
        self,
        record_type: Type[R],
        id_type: Type[ID] = int,
        client: Redis = None,
        url: str = None,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        key: str = None,
        related: Dict[str, Repository] = None,
        introspection: IntrospectionService = None,
    ):
        """
        Initialize the repository.

        Args:
            record_type: The dataclass type to store.
            id_type: The identifier type.
            client: A Redis client. One is created from `url`, or `host`/`port`/`db`, when omitted.
            url: A Redis connection URL.
            host: The Redis server host.
            port: The Redis server port.
            db: The Redis database number.
            key: The key prefix. Defaults to the lowercased record type name.
            related: Repositories of associated models, keyed by model name.
            introspection: The service used to read the record type's fields.
        """
        if client is None:
            client = Redis.from_url(url=url or f"redis://{host}:{port}/{db}", decode_responses=True)
        self.client: Redis = client
        self.record_type: Type[R] = record_type
        self.id_type: Type[ID] = id_type
        self.key: str = key or record_type.__name__.lower()
        self.descriptors = (introspection or IntrospectionService()).inspect(record_type)
        self.related: Dict[str, Repository] = dict(related or {})
        self._columns = stored_columns(self.descriptors)
        self._id_field: str = identifier_name(self.descriptors)
        self._sequence_key: str = f"{self.key}:seq"

    def _get_full_key(self, identifier: Any) -> str:
        """
        Get the full Redis key for a record.

        Args:
            identifier: The record identifier.

        Returns:
            The full Redis key.
        """
        return f"{self.key}:{identifier}"

    def _next_sequence_id(self) -> int:
        """
        Draw the next integer identifier from the sequence counter.

        Records saved with an explicit identifier don't advance the counter, so
        values already taken by a stored record are skipped.

        Returns:
            An integer identifier with no record stored under it.
        """
        identifier = int(self.client.incr(self._sequence_key))
        while self.client.exists(self._get_full_key(identifier)):
            LOG.debug(f"{self.key.capitalize()} id '{identifier}' is already taken; drawing the next one.")
            identifier = int(self.client.incr(self._sequence_key))
        return identifier

    def _serialize(self, record: R) -> Dict[str, str]:
        return {
            desc.name: json.dumps(encode_value(desc, getattr(record, desc.name, None), binary_as_text=True))
            for desc in self._columns
        }

    def _deserialize(self, data: Dict[str, str]) -> R:
        values = {}
        for desc in self._columns:
            if desc.name not in data:
                continue
            raw = json.loads(data[desc.name])
            if desc.name == self._id_field:
                values[desc.name] = coerce_identifier(raw, self.id_type)
            elif desc.is_to_one:
                values[desc.name] = self._resolve_reference(desc, raw)
            else:
                values[desc.name] = decode_value(desc, raw, binary_as_text=True)
        return build_record(self.record_type, values)

    def find_by_id(self, identifier: ID) -> Optional[R]:
        LOG.debug(f"Retrieving {self.key} with id '{identifier}' from Redis.")
        data = self.client.hgetall(self._get_full_key(identifier))
        if not data:
            return None
        return self._deserialize(data)

    def find_all(self) -> List[R]:
        LOG.debug(f"Fetching all {self.key} records from Redis...")
        records = []

        # Loop through all records using scan_iter for better efficiency with large datasets
        for redis_key in self.client.scan_iter(match=f"{self.key}:*"):
            if redis_key == self._sequence_key:
                continue
            data = self.client.hgetall(redis_key)
            if data:
                records.append(self._deserialize(data))
            else:
                LOG.warning(f"{self.key.capitalize()} at key '{redis_key}' could not be retrieved or does not exist.")

        LOG.debug(f"Successfully retrieved {len(records)} {self.key} records from Redis.")
        return records

    def find_all_paginated(
        self, page_index: int, page_size: int, sort_field: str, ascending: bool = True, search: str = None
    ) -> Page[R]:
        return paginate(self.find_all(), self._columns, page_index, page_size, sort_field, ascending, search)

    def save(self, record: R) -> R:
        """
        Create or update a record in Redis.

        Records without an identifier are assigned one, which is set on `record`.

        Args:
            record: The record to save.

        Returns:
            The saved record.
        """
        identifier = getattr(record, self._id_field)
        if identifier is None:
            if self.id_type in INTEGER_ID_TYPES:
                identifier = self._next_sequence_id()
            else:
                identifier = generate_identifier(self.id_type)
            setattr(record, self._id_field, identifier)
            LOG.debug(f"Creating a {self.key} entry in Redis with id '{identifier}'...")
        else:
            LOG.debug(f"Saving {self.key} with id '{identifier}' to Redis...")

        self.client.hset(self._get_full_key(identifier), mapping=self._serialize(record))
        return record

    def delete_by_id(self, identifier: ID):
        LOG.info(f"Attempting to delete {self.key} with id '{identifier}' from Redis...")
        if self.client.delete(self._get_full_key(identifier)):
            LOG.info(f"Successfully deleted {self.key} '{identifier}' from Redis.")
        else:
            LOG.debug(f"No {self.key} with id '{identifier}' to delete.")
