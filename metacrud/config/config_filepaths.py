##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
This module stores constants representing file paths that will be needed for
Metacrud's configuration.
"""

import os


APP_FILENAME: str = "app.yaml"
USER_HOME: str = os.path.expanduser("~")
METACRUD_HOME: str = os.path.join(USER_HOME, ".metacrud")
CONFIG_PATH_FILE: str = os.path.join(METACRUD_HOME, "config_path.txt")
DEFAULT_DB_PATH: str = os.path.join(METACRUD_HOME, "metacrud.db")
