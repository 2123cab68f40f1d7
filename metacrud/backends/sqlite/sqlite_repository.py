##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
SQLite-based repository for arbitrary dataclass records.

This module defines `SQLiteRepository`, which stores one record type in one
table. The table is created on first use from the record type's field
descriptors. To-one associations are stored as the associated record's
identifier; to-many associations and transient fields are not stored.

See also:
    - metacrud.backends.repository: Base class
    - metacrud.backends.relation_support_mixin: Loading of stored associations
"""

import logging
import os
from typing import Any, Dict, Generic, List, Optional, Tuple, Type

from metacrud.backends.relation_support_mixin import RelationSupportMixin
from metacrud.backends.repository import ID, Page, R, Repository
from metacrud.backends.sqlite.sqlite_connection import SQLiteConnection
from metacrud.backends.utils import (
    INTEGER_ID_TYPES,
    build_record,
    coerce_identifier,
    decode_value,
    encode_value,
    generate_identifier,
    identifier_name,
    stored_columns,
)
from metacrud.metadata.field_metadata import FieldDescriptor, FieldKind
from metacrud.metadata.introspection import IntrospectionService


LOG = logging.getLogger(__name__)

DEFAULT_DB_PATH = os.path.join(os.path.expanduser("~"), ".metacrud", "metacrud.db")

SQLITE_TYPES = {
    FieldKind.STRING: "TEXT",
    FieldKind.INTEGER: "INTEGER",
    FieldKind.LONG: "INTEGER",
    FieldKind.FLOAT: "REAL",
    FieldKind.DOUBLE: "REAL",
    FieldKind.BOOLEAN: "INTEGER",  # SQLite uses 0 and 1 for booleans
    FieldKind.ENUM: "TEXT",
    FieldKind.DATE: "TEXT",  # ISO format string
    FieldKind.TIMESTAMP: "TEXT",  # ISO format string
    FieldKind.BINARY: "BLOB",
}


def _quote(name: str) -> str:
    return f'"{name}"'


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLiteRepository(RelationSupportMixin, Repository[R, ID], Generic[R, ID]):
    """
    Repository storing one record type in one SQLite table.

    Attributes:
        record_type (Type[R]): The dataclass type stored by this repository.
        id_type (Type[ID]): The type of the stored records' identifiers.
        db_path (str): The path to the database file.
        table_name (str): The table holding the records.
        descriptors (Tuple[FieldDescriptor, ...]): The field descriptors of `record_type`.
        columns (List[FieldDescriptor]): The descriptors of the stored fields.
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
        db_path: str = DEFAULT_DB_PATH,
        table_name: str = None,
        related: Dict[str, Repository] = None,
        introspection: IntrospectionService = None,
    ):
        """
        Initialize the repository and create its table if needed.

        Args:
            record_type: The dataclass type to store.
            id_type: The identifier type. Integer identifiers use SQLite's rowid;
                string and UUID identifiers are generated on save.
            db_path: The path to the database file.
            table_name: The table name. Defaults to the lowercased record type name.
            related: Repositories of associated models, keyed by model name.
            introspection: The service used to read the record type's fields.
        """
        self.record_type: Type[R] = record_type
        self.id_type: Type[ID] = id_type
        self.db_path: str = os.path.expanduser(db_path)
        self.table_name: str = table_name or record_type.__name__.lower()
        self.descriptors = (introspection or IntrospectionService()).inspect(record_type)
        self.columns: List[FieldDescriptor] = stored_columns(self.descriptors)
        self.related: Dict[str, Repository] = dict(related or {})
        self._id_field: str = identifier_name(self.descriptors)
        self.create_table_if_not_exists()

    def _connect(self) -> SQLiteConnection:
        return SQLiteConnection(self.db_path)

    def _get_sqlite_type(self, descriptor: FieldDescriptor) -> str:
        """
        Map a field to a SQLite column type.

        Args:
            descriptor: The field's descriptor.

        Returns:
            A string representing the corresponding SQLite column type.
        """
        if descriptor.name == self._id_field:
            return "INTEGER PRIMARY KEY" if self.id_type in INTEGER_ID_TYPES else "TEXT PRIMARY KEY"
        if descriptor.is_to_one:
            related = self.related.get(descriptor.relationship.target_model)
            return "INTEGER" if related is None or related.id_type in INTEGER_ID_TYPES else "TEXT"
        if descriptor.kind == FieldKind.DOUBLE and descriptor.declared_type is not float:
            return "TEXT"  # arbitrary-precision decimals keep every digit as text
        return SQLITE_TYPES.get(descriptor.kind, "TEXT")

    def create_table_if_not_exists(self):
        """
        Create the table if it doesn't exist.
        """
        field_defs = ", ".join(f"{_quote(desc.name)} {self._get_sqlite_type(desc)}" for desc in self.columns)
        with self._connect() as conn:
            conn.execute(f"CREATE TABLE IF NOT EXISTS {_quote(self.table_name)} ({field_defs});")

    def _serialize(self, record: R) -> Dict[str, Any]:
        return {desc.name: encode_value(desc, getattr(record, desc.name, None)) for desc in self.columns}

    def _deserialize(self, row) -> R:
        available = set(row.keys())
        values = {}
        for desc in self.columns:
            raw = row[desc.name] if desc.name in available else None
            if desc.name == self._id_field:
                values[desc.name] = coerce_identifier(raw, self.id_type)
            elif desc.is_to_one:
                values[desc.name] = self._resolve_reference(desc, raw)
            else:
                values[desc.name] = decode_value(desc, raw)
        return build_record(self.record_type, values)

    def _encode_identifier(self, identifier: ID) -> Any:
        return identifier if self.id_type in INTEGER_ID_TYPES else str(identifier)

    def find_by_id(self, identifier: ID) -> Optional[R]:
        LOG.debug(f"Retrieving {self.table_name} with id '{identifier}' from SQLite.")
        with self._connect() as conn:
            cursor = conn.execute(
                f"SELECT * FROM {_quote(self.table_name)} WHERE {_quote(self._id_field)} = :identifier",
                {"identifier": self._encode_identifier(identifier)},
            )
            row = cursor.fetchone()

        return None if row is None else self._deserialize(row)

    def _build_search_clause(self, search: Optional[str]) -> Tuple[str, List[Any]]:
        """
        Build the SQL WHERE clause and parameters for a free-text search over string columns.

        Args:
            search: The search text.

        Returns:
            A tuple of (where_clause: str, params: List[Any]). Both are empty when there is nothing to filter.
        """
        if search is None or not search.strip():
            return "", []

        text_columns = [desc.name for desc in self.columns if desc.kind == FieldKind.STRING]
        if not text_columns:
            LOG.debug(f"{self.table_name} has no text columns; ignoring search '{search}'.")
            return "", []

        pattern = f"%{_escape_like(search.strip())}%"
        conditions = [f"{_quote(name)} LIKE ? ESCAPE '\\'" for name in text_columns]
        return "WHERE " + " OR ".join(conditions), [pattern] * len(conditions)

    def find_all_paginated(
        self, page_index: int, page_size: int, sort_field: str, ascending: bool = True, search: str = None
    ) -> Page[R]:
        if sort_field not in {desc.name for desc in self.columns}:
            raise ValueError(f"Cannot sort {self.table_name} by unknown column '{sort_field}'")

        where_clause, params = self._build_search_clause(search)
        direction = "ASC" if ascending else "DESC"
        query = (
            f"SELECT * FROM {_quote(self.table_name)} {where_clause} "
            f"ORDER BY {_quote(sort_field)} IS NULL, {_quote(sort_field)} {direction}, "
            f"{_quote(self._id_field)} {direction} LIMIT ? OFFSET ?"
        )
        LOG.debug(f"SQLite query: {query}")
        LOG.debug(f"SQLite params: {params}")

        with self._connect() as conn:
            total = conn.execute(f"SELECT COUNT(*) FROM {_quote(self.table_name)} {where_clause}", params).fetchone()[0]
            rows = conn.execute(query, params + [page_size, max(page_index, 0) * page_size]).fetchall()

        return Page(
            records=[self._deserialize(row) for row in rows],
            total_count=total,
            page_index=page_index,
            page_size=page_size,
        )

    def find_all(self) -> List[R]:
        LOG.debug(f"Fetching all {self.table_name} records from SQLite...")
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_quote(self.table_name)} ORDER BY {_quote(self._id_field)}"
            ).fetchall()
        return [self._deserialize(row) for row in rows]

    def _exists(self, conn, identifier: ID) -> bool:
        cursor = conn.execute(
            f"SELECT 1 FROM {_quote(self.table_name)} WHERE {_quote(self._id_field)} = ?",
            [self._encode_identifier(identifier)],
        )
        return cursor.fetchone() is not None

    def save(self, record: R) -> R:
        """
        Create or update a record in the SQLite database.

        Records without an identifier are inserted and the new identifier is set on `record`.

        Args:
            record: The record to save.

        Returns:
            The saved record.
        """
        identifier = getattr(record, self._id_field)
        if identifier is None and self.id_type not in INTEGER_ID_TYPES:
            identifier = generate_identifier(self.id_type)
            setattr(record, self._id_field, identifier)

        data = self._serialize(record)
        with self._connect() as conn:
            if identifier is not None and self._exists(conn, identifier):
                LOG.debug(f"Attempting to update {self.table_name} with id '{identifier}'...")
                set_str = ", ".join(f"{_quote(name)} = :{name}" for name in data if name != self._id_field)
                conn.execute(
                    f"UPDATE {_quote(self.table_name)} SET {set_str} WHERE {_quote(self._id_field)} = :{self._id_field}",
                    data,
                )
                LOG.debug(f"Successfully updated {self.table_name} with id '{identifier}'.")
                return record

            if identifier is None:
                # Let SQLite assign the rowid
                data.pop(self._id_field)
            columns_str = ", ".join(_quote(name) for name in data)
            placeholders_str = ", ".join(f":{name}" for name in data)
            cursor = conn.execute(
                f"INSERT INTO {_quote(self.table_name)} ({columns_str}) VALUES ({placeholders_str})", data
            )
            if identifier is None:
                setattr(record, self._id_field, cursor.lastrowid)

        LOG.debug(f"Successfully created a {self.table_name} with id '{getattr(record, self._id_field)}' in SQLite.")
        return record

    def delete_by_id(self, identifier: ID):
        LOG.info(f"Attempting to delete {self.table_name} with id '{identifier}' from SQLite...")
        with self._connect() as conn:
            cursor = conn.execute(
                f"DELETE FROM {_quote(self.table_name)} WHERE {_quote(self._id_field)} = ?",
                [self._encode_identifier(identifier)],
            )
            deleted = cursor.rowcount

        if deleted == 0:
            LOG.debug(f"No rows were deleted for {self.table_name} with id '{identifier}'")
        else:
            LOG.info(f"Successfully deleted {self.table_name} '{identifier}' from SQLite.")
