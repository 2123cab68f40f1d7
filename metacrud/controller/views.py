##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Result types returned by the CRUD controller.

These are plain data holders. Rendering them (as HTML, terminal tables, or
anything else) is left to the presentation layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from metacrud.backends.repository import Page
from metacrud.common.enums import ErrorKind
from metacrud.metadata.field_metadata import FieldDescriptor
from metacrud.metadata.model_entry import ModelEntry


@dataclass
class DashboardView:
    """
    The list of registered models.

    Attributes:
        models: Every registered model keyed by name, in registration order.
        app_title: The application title.
    """

    models: Mapping[str, ModelEntry]
    app_title: str


@dataclass
class ListView:
    """
    One page of a model's records.

    Attributes:
        model_name: The model being listed.
        fields: The descriptors of the columns to show.
        page: The page of records.
        sort_by: The field the records are sorted by.
        sort_dir: "asc" or "desc".
        search: The search text the records were filtered with, if any.
        app_title: The application title.
    """

    model_name: str
    fields: List[FieldDescriptor]
    page: Page
    sort_by: str
    sort_dir: str
    search: Optional[str]
    app_title: str

    @property
    def records(self) -> List[Any]:
        return self.page.records


@dataclass
class FormView:
    """
    The data needed to render a create or edit form.

    Attributes:
        model_name: The model the form is for.
        fields: Every field descriptor of the model.
        record: The record being edited, or None for a new record.
        relationship_options: The selectable records of each to-one field, keyed by field name.
        is_edit: True when editing an existing record.
        app_title: The application title.
    """

    model_name: str
    fields: Tuple[FieldDescriptor, ...]
    record: Any
    relationship_options: Dict[str, List[Any]]
    is_edit: bool
    app_title: str


@dataclass
class OperationResult:
    """
    The outcome of a save or delete.

    Attributes:
        success: True if the operation went through.
        message: A message to show the user.
        redirect: The path the user should be sent to next.
        error_kind: The kind of failure, when `success` is False.
        record: The saved record, when a save succeeded.
    """

    success: bool
    message: str
    redirect: str
    error_kind: Optional[ErrorKind] = None
    record: Any = None


@dataclass
class BinaryContent:
    """
    The contents of a binary field prepared for download.

    Attributes:
        filename: The name to offer the download under.
        content: The raw bytes, None when the field is empty.
        content_type: The MIME type of the content.
    """

    filename: str
    content: Optional[bytes]
    content_type: str = "application/octet-stream"

    @property
    def no_content(self) -> bool:
        """True when there is nothing to download."""
        return self.content is None


@dataclass
class ErrorView:
    """
    An error translated for display.

    Attributes:
        status: The HTTP-style status code (404, 400, or 500).
        kind: The kind of error.
        message: A message safe to show the user.
        details: Extra information, e.g. per-field validation messages. Always empty for internal errors.
    """

    status: int
    kind: ErrorKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
