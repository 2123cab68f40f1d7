##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Thread-safe in-process repository.

`InMemoryRepository` keeps records in a dictionary guarded by a re-entrant
lock. Records are deep copied on the way in and on the way out so callers can
never mutate stored state, collections included, without going through `save`.
Associations are held as copies of the associated records taken at save time.
"""

import copy
import logging
import threading
from typing import Dict, Generic, List, Optional, Type

from metacrud.backends.repository import ID, Page, R, Repository
from metacrud.backends.utils import INTEGER_ID_TYPES, generate_identifier, identifier_name, paginate
from metacrud.metadata.introspection import IntrospectionService


LOG = logging.getLogger(__name__)


class InMemoryRepository(Repository[R, ID], Generic[R, ID]):
    """
    Repository storing records in process memory.

    Attributes:
        record_type (Type[R]): The dataclass type stored by this repository.
        id_type (Type[ID]): The type of the stored records' identifiers.
        descriptors (Tuple[FieldDescriptor, ...]): The field descriptors of `record_type`.

    Methods:
        find_by_id: Retrieve a record by identifier.
        find_all_paginated: Retrieve one sorted page of records, optionally filtered by search text.
        find_all: Retrieve every record in insertion order.
        save: Create or update a record.
        delete_by_id: Delete a record by identifier.
        count: Get the number of stored records.
    """

    def __init__(self, record_type: Type[R], id_type: Type[ID] = int, introspection: IntrospectionService = None):
        """
        Initialize an empty repository.

        Args:
            record_type: The dataclass type to store.
            id_type: The identifier type. Integer, string, and UUID identifiers are generated on save.
            introspection: The service used to read the record type's fields.
        """
        self.record_type: Type[R] = record_type
        self.id_type: Type[ID] = id_type
        self.descriptors = (introspection or IntrospectionService()).inspect(record_type)
        self._id_field: str = identifier_name(self.descriptors)
        self._records: Dict[ID, R] = {}
        self._last_id: int = 0
        self._lock = threading.RLock()

    def find_by_id(self, identifier: ID) -> Optional[R]:
        with self._lock:
            record = self._records.get(identifier)
            return copy.deepcopy(record) if record is not None else None

    def find_all_paginated(
        self, page_index: int, page_size: int, sort_field: str, ascending: bool = True, search: str = None
    ) -> Page[R]:
        with self._lock:
            records = [copy.deepcopy(record) for record in self._records.values()]
        return paginate(records, self.descriptors, page_index, page_size, sort_field, ascending, search)

    def find_all(self) -> List[R]:
        with self._lock:
            return [copy.deepcopy(record) for record in self._records.values()]

    def save(self, record: R) -> R:
        """
        Create or update a record.

        A record without an identifier is assigned a new one, which is also set on
        the record passed in.

        Args:
            record: The record to save.

        Returns:
            A copy of the stored record.
        """
        with self._lock:
            identifier = getattr(record, self._id_field)
            if identifier is None:
                identifier = generate_identifier(self.id_type, self._last_id)
                setattr(record, self._id_field, identifier)
                LOG.debug(f"Creating {self.record_type.__name__} with id '{identifier}'...")
            else:
                LOG.debug(f"Saving {self.record_type.__name__} with id '{identifier}'...")

            if self.id_type in INTEGER_ID_TYPES:
                self._last_id = max(self._last_id, identifier)

            self._records[identifier] = copy.deepcopy(record)
            return copy.deepcopy(record)

    def delete_by_id(self, identifier: ID):
        with self._lock:
            if self._records.pop(identifier, None) is None:
                LOG.debug(f"No {self.record_type.__name__} with id '{identifier}' to delete.")
            else:
                LOG.info(f"Deleted {self.record_type.__name__} with id '{identifier}'.")

    def count(self) -> int:
        """
        Get the number of stored records.

        Returns:
            The number of records.
        """
        with self._lock:
            return len(self._records)
