##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
CLI module for creating and updating records.

This module defines the `SaveCommand` class, which implements the `save`
subcommand of the Metacrud CLI. Field values are given as `--set FIELD=value`
pairs and binary fields as `--file FIELD=path` pairs, exactly as a submitted
form would provide them. Including the identifier field updates that record.
"""

# pylint: disable=duplicate-code

import logging
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace

from metacrud.cli.commands.command_entry_point import CommandEntryPoint
from metacrud.cli.utils import load_controller, parse_assignments, read_files


LOG = logging.getLogger("metacrud")


class SaveCommand(CommandEntryPoint):
    """
    Handles `save` CLI command for creating or updating a record.

    Methods:
        add_parser: Adds the `save` command to the CLI parser.
        process_command: Processes the CLI input and dispatches the appropriate action.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `save` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `save` command parser will be added.
        """
        save = self.register(
            subparsers,
            "save",
            help="Create a record, or update one by including its identifier field.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        save.add_argument("model", type=str, help="The name of the record's model")
        save.add_argument(
            "--set",
            action="store",
            dest="values",
            type=str,
            nargs="+",
            default=None,
            help="Field values to set. Space-delimited. Example: '--set first_name=Jane department=3'",
        )
        save.add_argument(
            "--file",
            action="store",
            dest="files",
            type=str,
            nargs="+",
            default=None,
            help="Files to upload to binary fields. Space-delimited. Example: '--file profile_picture=jane.png'",
        )

    def process_command(self, args: Namespace):
        """
        CLI command to save a record.

        Args:
            args: Parsed CLI arguments containing:\n
                - `model`: The record's model.
                - `values`: "FIELD=value" strings.
                - `files`: "FIELD=path" strings.
        """
        form_fields = parse_assignments(args.values)
        file_fields = read_files(args.files)

        controller = load_controller(args)
        result = controller.save(args.model, form_fields, file_fields)
        self.report_result(result)
