##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Binds submitted form input to record instances.

Form input arrives as two mappings: `form_fields`, which maps field names to
raw text, and `file_fields`, which maps field names to uploaded payloads. The
binder walks the record type's field descriptors in order and sets each field
it knows how to handle, converting text with the
[`TypeConverter`][conversion.type_converter.TypeConverter] and resolving
to-one associations through the target model's repository.

To-many associations are not bound. Their fields are left untouched.
"""

import logging
from typing import Any, Mapping, Optional, Type

from metacrud.conversion import TypeConverter
from metacrud.exceptions import BindingError, ModelNotFoundError
from metacrud.metadata.field_metadata import FieldDescriptor
from metacrud.metadata.introspection import IntrospectionService
from metacrud.registry import ModelRegistry


LOG = logging.getLogger(__name__)


class FormDataBinder:
    """
    Sets record fields from form text and uploaded files.

    Attributes:
        registry (ModelRegistry): Used to find the repository of a to-one association's target model.
        introspection (IntrospectionService): Provides the field descriptors of record types.
        converter (TypeConverter): Converts form text to field values.
        max_file_size (Optional[int]): The largest accepted upload in bytes, or None for no limit.

    Methods:
        bind: Bind form input to a record.
    """

    def __init__(
        self,
        registry: ModelRegistry,
        introspection: IntrospectionService = None,
        converter: TypeConverter = None,
        max_file_size: Optional[int] = None,
    ):
        self.registry: ModelRegistry = registry
        self.introspection: IntrospectionService = introspection or registry.introspection
        self.converter: TypeConverter = converter or TypeConverter()
        self.max_file_size: Optional[int] = max_file_size

    def bind(
        self,
        form_fields: Mapping[str, str],
        file_fields: Optional[Mapping[str, Any]],
        record: Any,
        record_type: Type,
    ) -> Any:
        """
        Bind form input to a record.

        Transient, hidden, and read-only fields are never touched. A field missing from
        `form_fields` keeps its current value, except to-one associations,
        which are cleared when no identifier is submitted.

        Args:
            form_fields: Raw text values keyed by field name.
            file_fields: Uploaded payloads keyed by field name. Each payload is
                `bytes` or a file-like object with a `read` method.
            record: The record to bind to, or None to bind to a new `record_type` instance.
            record_type: The dataclass type of the record.

        Returns:
            The bound record.

        Raises:
            BindingError: If any field fails to bind. The underlying error is chained.
        """
        if record is None:
            record = record_type()
        file_fields = file_fields or {}

        for descriptor in self.introspection.inspect(record_type):
            if descriptor.is_transient or descriptor.is_hidden or descriptor.is_read_only:
                continue
            try:
                self._bind_field(descriptor, form_fields, file_fields, record)
            except BindingError:
                raise
            except Exception as exc:  # pylint: disable=broad-exception-caught
                LOG.error(f"Failed to bind field '{descriptor.name}': {exc}")
                raise BindingError(descriptor.name, str(exc)) from exc

        return record

    def _bind_field(
        self, descriptor: FieldDescriptor, form_fields: Mapping[str, str], file_fields: Mapping[str, Any], record: Any
    ):
        name = descriptor.name

        if descriptor.is_binary:
            content = self._read_file(descriptor, file_fields.get(name))
            if content:
                setattr(record, name, content)
                LOG.debug(f"Bound {len(content)} bytes to field '{name}'")
            return

        if descriptor.is_to_one:
            setattr(record, name, self._resolve_association(descriptor, form_fields.get(name)))
            return

        if descriptor.is_to_many:
            LOG.debug(f"Binding of to-many field '{name}' is not supported; leaving it untouched.")
            return

        if name in form_fields:
            setattr(record, name, self.converter.convert(form_fields[name], descriptor.declared_type))

    def _read_file(self, descriptor: FieldDescriptor, payload: Any) -> Optional[bytes]:
        """
        Read an uploaded payload into bytes, enforcing the size limit.

        Args:
            descriptor: The binary field's descriptor.
            payload: The uploaded payload, if any.

        Returns:
            The payload's bytes, or None when nothing was uploaded.

        Raises:
            BindingError: If the payload exceeds `max_file_size`.
        """
        if payload is None:
            return None
        content = payload.read() if hasattr(payload, "read") else payload
        if isinstance(content, str):
            content = content.encode()
        content = bytes(content)

        if self.max_file_size is not None and len(content) > self.max_file_size:
            raise BindingError(
                descriptor.name, f"uploaded file is {len(content)} bytes, the limit is {self.max_file_size} bytes"
            )
        return content

    def _resolve_association(self, descriptor: FieldDescriptor, text: Optional[str]) -> Any:
        """
        Fetch the record a to-one association points to.

        Args:
            descriptor: The association field's descriptor.
            text: The submitted identifier of the associated record.

        Returns:
            The associated record, or None when no identifier was submitted or no record has it.

        Raises:
            BindingError: If the association's target model is not registered.
        """
        if text is None or not str(text).strip():
            return None

        target_name = descriptor.relationship.target_model
        try:
            target = self.registry.require(target_name)
        except ModelNotFoundError as exc:
            raise BindingError(descriptor.name, f"target model '{target_name}' is not registered") from exc

        identifier = self.converter.convert(text, target.id_type)
        related = target.repository.find_by_id(identifier)
        if related is None:
            LOG.debug(f"No {target_name} with id '{identifier}'; clearing field '{descriptor.name}'.")
        return related

