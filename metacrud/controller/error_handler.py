##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Translates exceptions raised by the controller's read operations into error views.
"""

import logging

from metacrud.common.enums import ErrorKind
from metacrud.controller.views import ErrorView
from metacrud.exceptions import MetacrudError, ValidationError


LOG = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred."


def handle_exception(exc: Exception) -> ErrorView:
    """
    Translate an exception into an error view.

    Not-found and bad-request errors keep their message. Every other exception
    is logged with its traceback and reported with a generic message, so no
    internal detail reaches the user.

    Args:
        exc: The exception to translate.

    Returns:
        The error view.
    """
    kind = exc.kind if isinstance(exc, MetacrudError) else ErrorKind.INTERNAL

    if kind is ErrorKind.INTERNAL:
        LOG.error(f"Unhandled error: {exc}", exc_info=exc)
        return ErrorView(status=kind.status, kind=kind, message=GENERIC_ERROR_MESSAGE)

    LOG.debug(f"{kind.name} error: {exc}")
    details = {"violations": exc.violations} if isinstance(exc, ValidationError) else {}
    return ErrorView(status=kind.status, kind=kind, message=str(exc), details=details)
