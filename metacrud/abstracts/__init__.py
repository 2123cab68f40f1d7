##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
The `abstracts` package provides ABC classes that can be used throughout
Metacrud's codebase.

Modules:
    factory: Contains `BaseFactory`, used to manage pluggable components in Metacrud.
"""

from metacrud.abstracts.factory import BaseFactory


__all__ = ["BaseFactory"]
