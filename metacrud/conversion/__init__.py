##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
The `conversion` package maps form text to typed field values and back.

Modules:
    type_converter: Contains `TypeConverter`.
"""

from metacrud.conversion.type_converter import TypeConverter


__all__ = ["TypeConverter"]
