##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
CLI module for listing the registered models.

This module defines the `ModelsCommand` class, which implements the `models`
subcommand of the Metacrud CLI, the command-line counterpart of the admin dashboard.
"""

import logging
from argparse import ArgumentParser, Namespace

from metacrud.cli.commands.command_entry_point import CommandEntryPoint
from metacrud.cli.utils import load_controller, run_and_display
from metacrud.display import display_dashboard


LOG = logging.getLogger("metacrud")


class ModelsCommand(CommandEntryPoint):
    """
    Handles `models` CLI command for listing every registered model.

    Methods:
        add_parser: Adds the `models` command to the CLI parser.
        process_command: Processes the CLI input and dispatches the appropriate action.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `models` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `models` command parser will be added.
        """
        self.register(subparsers, "models", help="List the registered models.")

    def process_command(self, args: Namespace):
        """
        CLI command to list the registered models.

        Args:
            args: Parsed CLI arguments.
        """
        controller = load_controller(args)
        run_and_display(controller.dashboard, display_dashboard)
