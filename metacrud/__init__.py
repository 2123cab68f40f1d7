##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Metacrud: metadata-driven CRUD over arbitrary record types.

This module contains the source code for Metacrud.
"""

__version__ = "0.4.0"
VERSION = __version__
