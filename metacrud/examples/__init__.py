##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
The `examples` package provides a small application to explore Metacrud with.

Modules:
    demo_app.py: Department, employee, category, and product records, and the
        `build_demo_registry` callable the CLI uses by default.
"""
