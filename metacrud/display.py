##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Manages formatting for displaying controller results to the console.
"""
import logging
from typing import Any, List

from tabulate import tabulate

from metacrud.backends.utils import UnloadedReference, record_identifier
from metacrud.controller.views import DashboardView, ErrorView, FormView, ListView, OperationResult
from metacrud.conversion import TypeConverter
from metacrud.metadata.field_metadata import FieldDescriptor


LOG = logging.getLogger(__name__)

CONVERTER = TypeConverter()


def format_value(descriptor: FieldDescriptor, value: Any) -> str:
    """
    Render a field value as a table cell.

    Associations show the associated records' identifiers and binary fields show their size.

    Args:
        descriptor: The field's descriptor.
        value: The field value.

    Returns:
        The cell text.
    """
    if value is None:
        return ""
    if descriptor.is_to_one:
        if isinstance(value, UnloadedReference):
            return str(value)
        return CONVERTER.to_text(record_identifier(value))
    if descriptor.is_to_many:
        return ", ".join(CONVERTER.to_text(record_identifier(item)) for item in value)
    if descriptor.is_binary:
        return f"<{len(value)} bytes>"
    return CONVERTER.to_text(value)


def describe_constraints(descriptor: FieldDescriptor) -> str:
    """
    Summarize a field's constraints, e.g. `NotBlank, Size(min=2, max=50)`.

    Args:
        descriptor: The field's descriptor.

    Returns:
        The constraint summary, empty if the field has none.
    """
    summaries = []
    for name, constraint in descriptor.constraints.items():
        params = ", ".join(f"{key}={val!r}" for key, val in vars(constraint).items() if key != "message")
        summaries.append(f"{name}({params})" if params else name)
    return ", ".join(summaries)


def display_dashboard(view: DashboardView):
    """
    Print the registered models.

    Args:
        view: The dashboard view.
    """
    print(view.app_title)
    print("-" * len(view.app_title))
    rows = [
        [name, entry.record_type.__name__, getattr(entry.id_type, "__name__", str(entry.id_type))]
        for name, entry in view.models.items()
    ]
    print(tabulate(rows, headers=["Model", "Record Type", "ID Type"]))


def display_list(view: ListView):
    """
    Print one page of records as a table.

    Args:
        view: The list view.
    """
    headers = [desc.display_label for desc in view.fields]
    rows = [[format_value(desc, getattr(record, desc.name, None)) for desc in view.fields] for record in view.records]
    print(tabulate(rows, headers=headers))

    page = view.page
    summary = f"\nPage {page.page_index + 1} of {max(page.total_pages, 1)} ({page.total_count} records"
    summary += f", sorted by {view.sort_by} {view.sort_dir}"
    if view.search:
        summary += f", matching '{view.search}'"
    print(summary + ")")


def display_form(view: FormView):
    """
    Print a form's fields, with the current values when editing.

    Args:
        view: The form view.
    """
    action = "Edit" if view.is_edit else "New"
    print(f"{action} {view.model_name}")

    headers: List[str] = ["Field", "Label", "Kind", "Editable", "Constraints"]
    if view.is_edit:
        headers.append("Value")

    rows = []
    for desc in view.fields:
        if desc.is_transient or desc.is_hidden:
            continue
        row = [desc.name, desc.display_label, desc.kind.name, "yes" if desc.is_editable else "no"]
        row.append(describe_constraints(desc))
        if view.is_edit:
            row.append(format_value(desc, getattr(view.record, desc.name, None)))
        rows.append(row)
    print(tabulate(rows, headers=headers))

    for field_name, options in view.relationship_options.items():
        choices = ", ".join(CONVERTER.to_text(record_identifier(option)) for option in options) or "(none)"
        print(f"\nChoices for {field_name}: {choices}")


def display_result(result: OperationResult):
    """
    Report the outcome of a save or delete.

    Args:
        result: The operation result.
    """
    if result.success:
        LOG.info(result.message)
        if result.record is not None:
            print(f"Saved with id '{CONVERTER.to_text(record_identifier(result.record))}'")
    else:
        LOG.error(f"{result.message} [{result.error_kind.name}]")
    LOG.debug(f"Next: {result.redirect}")


def display_error(view: ErrorView):
    """
    Report an error view.

    Args:
        view: The error view.
    """
    LOG.error(f"{view.status} {view.kind.name}: {view.message}")
    for field_name, messages in view.details.get("violations", {}).items():
        LOG.error(f"  {field_name}: {', '.join(messages)}")
