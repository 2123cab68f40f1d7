##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
CLI module for downloading the contents of binary fields.

This module defines the `DownloadCommand` class, which implements the
`download` subcommand of the Metacrud CLI.
"""

import logging
import os
from argparse import ArgumentParser, Namespace

from metacrud.cli.commands.command_entry_point import CommandEntryPoint
from metacrud.cli.utils import load_controller, run_and_display
from metacrud.controller.views import BinaryContent


LOG = logging.getLogger("metacrud")


class DownloadCommand(CommandEntryPoint):
    """
    Handles `download` CLI command for saving a binary field to a file.

    Methods:
        add_parser: Adds the `download` command to the CLI parser.
        process_command: Processes the CLI input and dispatches the appropriate action.
        write_content: Write downloaded content to the requested file.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `download` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `download` command parser will be added.
        """
        download = self.register(subparsers, "download", help="Save the contents of a binary field to a file.")
        download.add_argument("model", type=str, help="The name of the record's model")
        download.add_argument("id", type=str, help="The record's identifier")
        download.add_argument("field", type=str, help="The binary field to download")
        download.add_argument(
            "-o",
            "--output",
            type=str,
            default=None,
            help="The file to write. Defaults to the field name in the current directory.",
        )

    def process_command(self, args: Namespace):
        """
        CLI command to download a binary field.

        Args:
            args: Parsed CLI arguments containing:\n
                - `model`: The record's model.
                - `id`: The record's identifier.
                - `field`: The binary field.
                - `output`: Optional path of the file to write.
        """
        controller = load_controller(args)
        run_and_display(
            controller.download_binary,
            lambda content: self.write_content(content, args.output),
            args.model,
            args.id,
            args.field,
        )

    @staticmethod
    def write_content(content: BinaryContent, output: str = None):
        """
        Write downloaded content to a file.

        Args:
            content: The downloaded content.
            output: The file to write. Defaults to `content.filename`.
        """
        if content.no_content:
            LOG.warning(f"Field '{content.filename}' has no content; nothing was written.")
            return

        path = os.path.expanduser(output or content.filename)
        with open(path, "wb") as outfile:
            outfile.write(content.content)
        LOG.info(f"Wrote {len(content.content)} bytes to '{path}'.")
