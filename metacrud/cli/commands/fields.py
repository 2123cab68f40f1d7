##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
CLI module for describing the fields of a model.

This module defines the `FieldsCommand` class, which implements the `fields`
subcommand of the Metacrud CLI. It prints the form for a new record, which
tells a user what `metacrud save` accepts for the model.
"""

import logging
from argparse import ArgumentParser, Namespace

from metacrud.cli.commands.command_entry_point import CommandEntryPoint
from metacrud.cli.utils import load_controller, run_and_display
from metacrud.display import display_form


LOG = logging.getLogger("metacrud")


class FieldsCommand(CommandEntryPoint):
    """
    Handles `fields` CLI command for describing a model's fields.

    Methods:
        add_parser: Adds the `fields` command to the CLI parser.
        process_command: Processes the CLI input and dispatches the appropriate action.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `fields` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `fields` command parser will be added.
        """
        fields = self.register(subparsers, "fields", help="Describe the fields of a model.")
        fields.add_argument("model", type=str, help="The name of the model to describe")

    def process_command(self, args: Namespace):
        """
        CLI command to describe a model's fields.

        Args:
            args: Parsed CLI arguments containing the `model` to describe.
        """
        controller = load_controller(args)
        run_and_display(controller.new_form, display_form, args.model)
