##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Generic CRUD operations over every registered model.

This module defines `GenericCrudController`, which implements listing, form
preparation, saving, deleting, and binary downloads for any model in a
[`ModelRegistry`][registry.model_registry.ModelRegistry]. The controller holds
no per-request state; every call works only from its arguments and the
collaborators given at construction.

Read operations raise not-found and bad-request errors directly so the caller
can translate them with
[`handle_exception`][controller.error_handler.handle_exception]. Saving and
deleting never raise; failures are reported in the returned
[`OperationResult`][controller.views.OperationResult].
"""

import logging
import uuid
from types import SimpleNamespace
from typing import Any, Dict, List, Mapping, Optional

from metacrud.backends.utils import UnloadedReference, identifier_name
from metacrud.binding import FormDataBinder
from metacrud.common.enums import ErrorKind
from metacrud.controller.error_handler import GENERIC_ERROR_MESSAGE
from metacrud.controller.views import BinaryContent, DashboardView, FormView, ListView, OperationResult
from metacrud.conversion import TypeConverter
from metacrud.exceptions import (
    ConversionError,
    FieldNotFoundError,
    MetacrudError,
    RecordNotFoundError,
    UnsupportedIdentifierTypeError,
    ValidationError,
)
from metacrud.metadata.constraints import validate_record
from metacrud.metadata.field_metadata import FieldDescriptor
from metacrud.metadata.introspection import IntrospectionService
from metacrud.metadata.model_entry import ModelEntry
from metacrud.metadata.types import Long
from metacrud.registry import ModelRegistry


LOG = logging.getLogger(__name__)

MAX_LIST_COLUMNS = 10
DEFAULT_PAGE_SIZE = 20
DEFAULT_BASE_PATH = "/admin"
DEFAULT_APP_TITLE = "Metacrud Admin"
SUPPORTED_ID_TYPES = (int, Long, str, uuid.UUID)


class GenericCrudController:
    """
    CRUD operations for every model in a registry.

    Attributes:
        registry (ModelRegistry): The registered models.
        introspection (IntrospectionService): Provides the field descriptors of record types.
        converter (TypeConverter): Converts identifier text.
        binder (FormDataBinder): Binds form input to records.
        page_size (int): The number of records on a list page.
        base_path (str): The prefix of every redirect path.
        app_title (str): The application title shown on every view.

    Methods:
        dashboard: List the registered models.
        list_records: Get one sorted, optionally filtered page of a model's records.
        new_form: Prepare the form for creating a record.
        edit_form: Prepare the form for editing a record.
        save: Create or update a record from form input.
        delete: Delete a record.
        download_binary: Get the contents of a binary field.
        convert_id: Convert identifier text to a model's identifier type.
    """

    def __init__(
        self,
        registry: ModelRegistry,
        settings: SimpleNamespace = None,
        introspection: IntrospectionService = None,
        converter: TypeConverter = None,
        binder: FormDataBinder = None,
    ):
        """
        Args:
            registry: The registered models.
            settings: The `admin` configuration section. Missing settings use their defaults.
            introspection: Defaults to the registry's introspection service.
            converter: Defaults to a new `TypeConverter`.
            binder: Defaults to a `FormDataBinder` over the same collaborators.
        """
        settings = settings or SimpleNamespace()
        self.registry: ModelRegistry = registry
        self.introspection: IntrospectionService = introspection or registry.introspection
        self.converter: TypeConverter = converter or TypeConverter()

        self.page_size: int = int(getattr(settings, "page_size", DEFAULT_PAGE_SIZE))
        self.base_path: str = str(getattr(settings, "base_path", DEFAULT_BASE_PATH)).rstrip("/")
        self.app_title: str = getattr(settings, "app_title", DEFAULT_APP_TITLE)

        if binder is None:
            max_file_size_mb = getattr(settings, "max_file_size_mb", None)
            max_file_size = int(max_file_size_mb * 1024 * 1024) if max_file_size_mb else None
            binder = FormDataBinder(registry, self.introspection, self.converter, max_file_size)
        self.binder: FormDataBinder = binder

    # Paths

    def list_path(self, model_name: str) -> str:
        return f"{self.base_path}/models/{model_name}"

    def new_path(self, model_name: str) -> str:
        return f"{self.list_path(model_name)}/new"

    def edit_path(self, model_name: str, record_id: Any) -> str:
        return f"{self.list_path(model_name)}/edit/{record_id}"

    # Read operations

    def dashboard(self) -> DashboardView:
        """
        List the registered models.

        Returns:
            A view holding every model entry in registration order.
        """
        return DashboardView(models=self.registry.all(), app_title=self.app_title)

    def list_records(
        self,
        model_name: str,
        page: int = 0,
        sort_by: Optional[str] = None,
        sort_dir: str = "asc",
        search: Optional[str] = None,
    ) -> ListView:
        """
        Get one page of a model's records.

        The page shows at most `MAX_LIST_COLUMNS` columns: the model's fields
        that are neither transient, hidden, nor binary, in descriptor order.

        Args:
            model_name: The model to list.
            page: The zero-based page index. Negative values are treated as 0.
            sort_by: The field to sort by. Defaults to the identifier field.
            sort_dir: "desc" (in any case) for descending order, anything else for ascending.
            search: Optional text that the records' string fields are matched against.

        Returns:
            The list view.

        Raises:
            ModelNotFoundError: If the model is not registered.
            FieldNotFoundError: If `sort_by` is not a sortable field of the model.
        """
        entry = self.registry.require(model_name)
        descriptors = self.introspection.inspect(entry.record_type)
        sort_by = sort_by or identifier_name(descriptors)
        self._require_sortable(entry, descriptors, sort_by)

        ascending = (sort_dir or "").lower() != "desc"
        page = max(page, 0)
        visible = [desc for desc in descriptors if desc.is_visible and not desc.is_binary][:MAX_LIST_COLUMNS]

        LOG.debug(f"Listing {model_name}: page={page}, sort_by={sort_by}, ascending={ascending}, search={search!r}")
        result = entry.repository.find_all_paginated(page, self.page_size, sort_by, ascending, search)
        for record in result.records:
            self._load_references(record, visible)

        return ListView(
            model_name=model_name,
            fields=visible,
            page=result,
            sort_by=sort_by,
            sort_dir="asc" if ascending else "desc",
            search=search,
            app_title=self.app_title,
        )

    def new_form(self, model_name: str) -> FormView:
        """
        Prepare the form for creating a record.

        Args:
            model_name: The model to create a record of.

        Returns:
            A form view without a record.

        Raises:
            ModelNotFoundError: If the model is not registered.
        """
        entry = self.registry.require(model_name)
        descriptors = self.introspection.inspect(entry.record_type)
        return FormView(
            model_name=model_name,
            fields=descriptors,
            record=None,
            relationship_options=self._relationship_options(descriptors),
            is_edit=False,
            app_title=self.app_title,
        )

    def edit_form(self, model_name: str, record_id: str) -> FormView:
        """
        Prepare the form for editing a record.

        Args:
            model_name: The model of the record.
            record_id: The record's identifier as text.

        Returns:
            A form view holding the record.

        Raises:
            ModelNotFoundError: If the model is not registered.
            ConversionError: If `record_id` can't be converted to the model's identifier type.
            UnsupportedIdentifierTypeError: If the model's identifier type is not supported.
            RecordNotFoundError: If no record has the identifier.
        """
        entry = self.registry.require(model_name)
        record = self._require_record(entry, record_id)
        descriptors = self.introspection.inspect(entry.record_type)
        self._load_references(record, descriptors)
        return FormView(
            model_name=model_name,
            fields=descriptors,
            record=record,
            relationship_options=self._relationship_options(descriptors),
            is_edit=True,
            app_title=self.app_title,
        )

    def download_binary(self, model_name: str, record_id: str, field_name: str) -> BinaryContent:
        """
        Get the contents of a binary field.

        Args:
            model_name: The model of the record.
            record_id: The record's identifier as text.
            field_name: The binary field to download.

        Returns:
            The field's contents. `no_content` is True when the field is empty.

        Raises:
            ModelNotFoundError: If the model is not registered.
            FieldNotFoundError: If the field doesn't exist or is not binary.
            RecordNotFoundError: If no record has the identifier.
        """
        entry = self.registry.require(model_name)
        descriptor = self.introspection.get_field(entry.record_type, field_name)
        if descriptor is None:
            raise FieldNotFoundError(model_name, field_name)
        if not descriptor.is_binary:
            raise FieldNotFoundError(model_name, field_name, "is not a binary field")

        record = self._require_record(entry, record_id)
        content = getattr(record, field_name, None)
        return BinaryContent(filename=field_name, content=None if content is None else bytes(content))

    # Write operations

    def save(
        self, model_name: str, form_fields: Mapping[str, str], file_fields: Optional[Mapping[str, Any]] = None
    ) -> OperationResult:
        """
        Create or update a record from form input.

        The record is updated when the form carries the identifier of an
        existing record, and created otherwise. The bound record is checked
        against its fields' constraints before it is stored.

        Args:
            model_name: The model of the record.
            form_fields: Raw text values keyed by field name.
            file_fields: Uploaded payloads keyed by field name.

        Returns:
            The result. On failure, `redirect` points back at the form and
                `error_kind` tells what went wrong.
        """
        id_text = None
        try:
            entry = self.registry.require(model_name)
            descriptors = self.introspection.inspect(entry.record_type)

            raw_id = form_fields.get(identifier_name(descriptors))
            existing = None
            if raw_id is not None and str(raw_id).strip():
                id_text = str(raw_id).strip()
                existing = entry.repository.find_by_id(self.convert_id(id_text, entry.id_type))
                if existing is None:
                    LOG.debug(f"No {model_name} with id '{id_text}'; creating a new record.")

            record = self.binder.bind(form_fields, file_fields, existing, entry.record_type)

            violations = validate_record(record, descriptors)
            if violations:
                raise ValidationError(model_name, violations)

            saved = entry.repository.save(record)
            LOG.info(f"Successfully saved {model_name}.")
            return OperationResult(
                success=True,
                message=f"Successfully saved {model_name}",
                redirect=self.list_path(model_name),
                record=saved,
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            redirect = self.edit_path(model_name, id_text) if id_text else self.new_path(model_name)
            return self._failure("save", model_name, exc, redirect)

    def delete(self, model_name: str, record_id: str) -> OperationResult:
        """
        Delete a record. Deleting a record that doesn't exist is not an error.

        Args:
            model_name: The model of the record.
            record_id: The record's identifier as text.

        Returns:
            The result, always redirecting to the model's list.
        """
        try:
            entry = self.registry.require(model_name)
            entry.repository.delete_by_id(self.convert_id(record_id, entry.id_type))
            LOG.info(f"Successfully deleted {model_name} '{record_id}'.")
            return OperationResult(
                success=True, message=f"Successfully deleted {model_name}", redirect=self.list_path(model_name)
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return self._failure("delete", model_name, exc, self.list_path(model_name))

    # Helpers

    def convert_id(self, text: str, id_type: Any) -> Any:
        """
        Convert identifier text to a model's identifier type.

        Args:
            text: The identifier text.
            id_type: One of `int`, `Long`, `str`, or `uuid.UUID`.

        Returns:
            The identifier.

        Raises:
            UnsupportedIdentifierTypeError: If `id_type` is not supported.
            ConversionError: If the text is blank or can't be converted.
        """
        if id_type not in SUPPORTED_ID_TYPES:
            raise UnsupportedIdentifierTypeError(id_type)
        identifier = self.converter.convert(text, id_type)
        if identifier is None:
            raise ConversionError(text, id_type, "an identifier is required")
        return identifier

    def _require_record(self, entry: ModelEntry, record_id: str) -> Any:
        record = entry.repository.find_by_id(self.convert_id(record_id, entry.id_type))
        if record is None:
            raise RecordNotFoundError(entry.name, record_id)
        return record

    @staticmethod
    def _require_sortable(entry: ModelEntry, descriptors, sort_by: str):
        descriptor = next((desc for desc in descriptors if desc.name == sort_by), None)
        if descriptor is None:
            raise FieldNotFoundError(entry.name, sort_by)
        if descriptor.is_transient or descriptor.is_to_many:
            raise FieldNotFoundError(entry.name, sort_by, "cannot be used for sorting")

    def _relationship_options(self, descriptors) -> Dict[str, List[Any]]:
        """
        Get the selectable records of every to-one field.

        Args:
            descriptors: The field descriptors of the form's model.

        Returns:
            All records of each field's target model keyed by field name. Fields
                whose target model isn't registered get an empty list.
        """
        options: Dict[str, List[Any]] = {}
        for descriptor in descriptors:
            if not descriptor.is_to_one:
                continue
            target = self.registry.get(descriptor.relationship.target_model)
            options[descriptor.name] = target.repository.find_all() if target is not None else []
        return options

    def _load_references(self, record: Any, descriptors: List[FieldDescriptor]):
        """
        Replace unloaded to-one references on a record with the referenced records.

        Args:
            record: The record to update in place.
            descriptors: The fields to check.
        """
        for descriptor in descriptors:
            if not descriptor.is_to_one:
                continue
            value = getattr(record, descriptor.name, None)
            if not isinstance(value, UnloadedReference):
                continue
            target = self.registry.get(value.model_name)
            if target is None:
                LOG.debug(f"Cannot load {value}: model '{value.model_name}' is not registered.")
                continue
            setattr(record, descriptor.name, target.repository.find_by_id(value.identifier))

    def _failure(self, operation: str, model_name: str, exc: Exception, redirect: str) -> OperationResult:
        kind = exc.kind if isinstance(exc, MetacrudError) else ErrorKind.INTERNAL
        if kind is ErrorKind.INTERNAL:
            LOG.exception(f"Failed to {operation} {model_name}: {exc}")
            message = f"Failed to {operation}: {GENERIC_ERROR_MESSAGE}"
        else:
            LOG.error(f"Failed to {operation} {model_name}: {exc}")
            message = f"Failed to {operation}: {exc}"
        return OperationResult(success=False, message=message, redirect=redirect, error_kind=kind)
