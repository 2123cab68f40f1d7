##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
CLI module for listing the records of a model.

This module defines the `ListCommand` class, which implements the `list`
subcommand of the Metacrud CLI. Records are shown one page at a time, sorted
by a chosen field and optionally filtered by search text.
"""

# pylint: disable=duplicate-code

import logging
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace

from metacrud.cli.commands.command_entry_point import CommandEntryPoint
from metacrud.cli.utils import load_controller, run_and_display
from metacrud.display import display_list


LOG = logging.getLogger("metacrud")


class ListCommand(CommandEntryPoint):
    """
    Handles `list` CLI command for viewing one page of a model's records.

    Methods:
        add_parser: Adds the `list` command to the CLI parser.
        process_command: Processes the CLI input and dispatches the appropriate action.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `list` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `list` command parser will be added.
        """
        list_cmd = self.register(
            subparsers,
            "list",
            help="List one page of a model's records.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        list_cmd.add_argument("model", type=str, help="The name of the model to list")
        list_cmd.add_argument("-p", "--page", type=int, default=0, help="The zero-based page to show")
        list_cmd.add_argument(
            "--sort-by",
            type=str,
            dest="sort_by",
            default=None,
            help="The field to sort by. Defaults to the model's identifier field.",
        )
        list_cmd.add_argument(
            "--sort-dir",
            type=str,
            dest="sort_dir",
            choices=["asc", "desc"],
            default="asc",
            help="The sort direction",
        )
        list_cmd.add_argument(
            "-s", "--search", type=str, default=None, help="Only show records whose text fields contain this text"
        )

    def process_command(self, args: Namespace):
        """
        CLI command to list one page of a model's records.

        Args:
            args: Parsed CLI arguments containing:\n
                - `model`: The model to list.
                - `page`: The zero-based page index.
                - `sort_by`: The field to sort by.
                - `sort_dir`: The sort direction.
                - `search`: Optional search text.
        """
        controller = load_controller(args)
        run_and_display(
            controller.list_records,
            display_list,
            args.model,
            page=args.page,
            sort_by=args.sort_by,
            sort_dir=args.sort_dir,
            search=args.search,
        )
