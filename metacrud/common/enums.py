##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""This module provides enumerations shared across the package."""
from enum import Enum, IntEnum


__all__ = ("ErrorKind", "ReturnCode")


class ReturnCode(IntEnum):
    """
    Enum for Metacrud CLI return codes.

    Attributes:
        OK (int): Indicates a successful operation. Numeric value: 0.
        ERROR (int): Indicates a general error occurred. Numeric value: 1.
    """

    OK: int = 0
    ERROR: int = 1


class ErrorKind(Enum):
    """
    Coarse classification of failures, used to pick how a caller renders them.

    Attributes:
        NOT_FOUND: An unknown model, record, or field was requested. HTTP status 404.
        BAD_REQUEST: The caller supplied input that could not be used. HTTP status 400.
        INTERNAL: Anything unanticipated. HTTP status 500.
    """

    NOT_FOUND = 404
    BAD_REQUEST = 400
    INTERNAL = 500

    @property
    def status(self) -> int:
        """The HTTP status code associated with this kind of error."""
        return self.value
