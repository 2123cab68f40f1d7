##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
CLI module for deleting records.

This module defines the `DeleteCommand` class, which implements the `delete`
subcommand of the Metacrud CLI.
"""

import logging
from argparse import ArgumentParser, Namespace

from metacrud.cli.commands.command_entry_point import CommandEntryPoint
from metacrud.cli.utils import load_controller


LOG = logging.getLogger("metacrud")


class DeleteCommand(CommandEntryPoint):
    """
    Handles `delete` CLI command for removing a record.

    Methods:
        add_parser: Adds the `delete` command to the CLI parser.
        process_command: Processes the CLI input and dispatches the appropriate action.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `delete` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `delete` command parser will be added.
        """
        delete = self.register(subparsers, "delete", help="Delete a record.")
        delete.add_argument("model", type=str, help="The name of the record's model")
        delete.add_argument("id", type=str, help="The record's identifier")

    def process_command(self, args: Namespace):
        """
        CLI command to delete a record.

        Args:
            args: Parsed CLI arguments containing the `model` and `id` of the record.
        """
        controller = load_controller(args)
        result = controller.delete(args.model, args.id)
        self.report_result(result)
