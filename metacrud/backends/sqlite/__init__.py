##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
SQLite repository implementation.

Modules:
    sqlite_connection: Contains the `SQLiteConnection` context manager.
    sqlite_repository: Contains `SQLiteRepository`.
"""
