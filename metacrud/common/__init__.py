##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
The `common` package contains functionality shared across Metacrud.

Modules:
    enums.py: Defines enumerations for return codes and error kinds.
"""
