##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Metacrud CLI Commands Package.

This package defines all command implementations for the Metacrud command-line
interface. Each module encapsulates the logic and argument parsing for a
distinct command, following a consistent structure built around the
`CommandEntryPoint` interface.

Modules:
    command_entry_point: Defines the abstract base class `CommandEntryPoint` for all CLI commands.
    delete: Implements the `delete` command for removing a record.
    download: Implements the `download` command for saving a binary field to a file.
    fields: Implements the `fields` command for describing a model's fields.
    list: Implements the `list` command for paging through a model's records.
    models: Implements the `models` command for listing the registered models.
    save: Implements the `save` command for creating and updating records.
    show: Implements the `show` command for viewing a single record.
"""

from metacrud.cli.commands.delete import DeleteCommand
from metacrud.cli.commands.download import DownloadCommand
from metacrud.cli.commands.fields import FieldsCommand
from metacrud.cli.commands.list import ListCommand
from metacrud.cli.commands.models import ModelsCommand
from metacrud.cli.commands.save import SaveCommand
from metacrud.cli.commands.show import ShowCommand


# Keep these in alphabetical order
ALL_COMMANDS = [
    DeleteCommand(),
    DownloadCommand(),
    FieldsCommand(),
    ListCommand(),
    ModelsCommand(),
    SaveCommand(),
    ShowCommand(),
]
