##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
The generic CRUD controller and the result types it returns.

Modules:
    crud_controller: Contains `GenericCrudController`.
    error_handler: Translates exceptions into `ErrorView` results.
    views: The result types returned by the controller.
"""

from metacrud.controller.crud_controller import GenericCrudController
from metacrud.controller.error_handler import handle_exception
from metacrud.controller.views import BinaryContent, DashboardView, ErrorView, FormView, ListView, OperationResult


__all__ = [
    "BinaryContent",
    "DashboardView",
    "ErrorView",
    "FormView",
    "GenericCrudController",
    "ListView",
    "OperationResult",
    "handle_exception",
]
