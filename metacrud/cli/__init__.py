##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Command-line interface for browsing and editing the registered models.

Modules:
    argparse_main: Builds the main `metacrud` argument parser.
    commands: The individual CLI commands.
    utils: Helpers shared by the CLI commands.
"""
