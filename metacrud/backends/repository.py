##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
This module defines the abstract storage handle every model is registered with.

The [`Repository`][backends.repository.Repository] class outlines the interface
the CRUD engine relies on: lookup by identifier, paginated and full listing,
saving, and deleting. Concrete repositories (in-memory, SQLite, Redis) inherit
from it and own their own concurrency and consistency discipline.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Type, TypeVar


R = TypeVar("R")
ID = TypeVar("ID")


@dataclass
class Page(Generic[R]):
    """
    One page of records.

    Attributes:
        records: The records on this page.
        total_count: The number of records across all pages.
        page_index: The zero-based index of this page.
        page_size: The maximum number of records per page.
    """

    records: List[R] = field(default_factory=list)
    total_count: int = 0
    page_index: int = 0
    page_size: int = 0

    @property
    def total_pages(self) -> int:
        """The number of pages needed to hold every record."""
        if self.page_size <= 0:
            return 1 if self.total_count else 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_next(self) -> bool:
        """True if a page follows this one."""
        return self.page_index + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        """True if a page precedes this one."""
        return self.page_index > 0


class Repository(ABC, Generic[R, ID]):
    """
    Base class for all storage handles.

    Subclasses either set the `record_type` and `id_type` attributes or are
    declared with concrete generic parameters (e.g. `class EmployeeRepository(Repository[Employee, Long])`)
    so that the model registry can work out which record type they store.

    Attributes:
        record_type (Type[R]): The dataclass type stored by this repository.
        id_type (Type[ID]): The type of the stored records' identifiers.

    Methods:
        find_by_id: Retrieve a record by identifier.
        find_all_paginated: Retrieve one sorted page of records.
        find_all: Retrieve every record.
        save: Create or update a record.
        delete_by_id: Delete a record by identifier.
    """

    record_type: Type[R] = None
    id_type: Type[ID] = None

    @abstractmethod
    def find_by_id(self, identifier: ID) -> Optional[R]:
        """
        Retrieve a record by identifier.

        Args:
            identifier: The record's identifier.

        Returns:
            The record if found, None otherwise.
        """
        raise NotImplementedError("Subclasses of `Repository` must implement a `find_by_id` method.")

    @abstractmethod
    def find_all_paginated(
        self, page_index: int, page_size: int, sort_field: str, ascending: bool = True, search: str = None
    ) -> Page[R]:
        """
        Retrieve one page of records.

        Args:
            page_index: The zero-based page to retrieve.
            page_size: The maximum number of records on the page.
            sort_field: The name of the field to sort by.
            ascending: Sort ascending if True, descending otherwise.
            search: Optional free text. How it narrows the results is up to the repository.

        Returns:
            The requested page along with the total record count.
        """
        raise NotImplementedError("Subclasses of `Repository` must implement a `find_all_paginated` method.")

    @abstractmethod
    def find_all(self) -> List[R]:
        """
        Retrieve every record.

        Returns:
            A list of records.
        """
        raise NotImplementedError("Subclasses of `Repository` must implement a `find_all` method.")

    @abstractmethod
    def save(self, record: R) -> R:
        """
        Create or update a record. Records without an identifier are assigned one.

        Args:
            record: The record to save.

        Returns:
            The saved record, with its identifier set.
        """
        raise NotImplementedError("Subclasses of `Repository` must implement a `save` method.")

    @abstractmethod
    def delete_by_id(self, identifier: ID):
        """
        Delete a record by identifier. Deleting a missing record does nothing.

        Args:
            identifier: The record's identifier.
        """
        raise NotImplementedError("Subclasses of `Repository` must implement a `delete_by_id` method.")
