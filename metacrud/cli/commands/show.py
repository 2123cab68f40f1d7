##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
CLI module for viewing a single record.

This module defines the `ShowCommand` class, which implements the `show`
subcommand of the Metacrud CLI. It prints the edit form of a record: every
field with its current value, plus the choices available for its associations.
"""

import logging
from argparse import ArgumentParser, Namespace

from metacrud.cli.commands.command_entry_point import CommandEntryPoint
from metacrud.cli.utils import load_controller, run_and_display
from metacrud.display import display_form


LOG = logging.getLogger("metacrud")


class ShowCommand(CommandEntryPoint):
    """
    Handles `show` CLI command for viewing a record.

    Methods:
        add_parser: Adds the `show` command to the CLI parser.
        process_command: Processes the CLI input and dispatches the appropriate action.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `show` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `show` command parser will be added.
        """
        show = self.register(subparsers, "show", help="Show a record and its editable fields.")
        show.add_argument("model", type=str, help="The name of the record's model")
        show.add_argument("id", type=str, help="The record's identifier")

    def process_command(self, args: Namespace):
        """
        CLI command to show a record.

        Args:
            args: Parsed CLI arguments containing the `model` and `id` of the record.
        """
        controller = load_controller(args)
        run_and_display(controller.edit_form, display_form, args.model, args.id)
