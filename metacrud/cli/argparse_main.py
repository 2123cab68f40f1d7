##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Main CLI parser setup for the Metacrud command-line interface.

This module defines the primary argument parser for the `metacrud` CLI tool,
including custom error handling and integration of all available subcommands.
"""

import sys
from argparse import ArgumentParser, RawDescriptionHelpFormatter

from metacrud import VERSION
from metacrud.cli.commands import ALL_COMMANDS


DEFAULT_LOG_LEVEL = "INFO"

DESCRIPTION = """\
Metacrud: browse and edit the records of every registered model.

The models come from the callable named by the `application.registry`
setting of the configuration file (the bundled demo application by default).
"""


class HelpParser(ArgumentParser):
    """
    This class overrides the error message of the argument parser to
    print the help message when an error happens.

    Methods:
        error: Override the error message of the `ArgumentParser` class.
    """

    def error(self, message: str):
        """
        Override the error message of the `ArgumentParser` class.

        Args:
            message: The error message to log.
        """
        sys.stderr.write(f"error: {message}\n")
        self.print_help()
        sys.exit(2)


def build_main_parser() -> ArgumentParser:
    """
    Set up the command-line argument parser for the Metacrud package.

    Returns:
        An `ArgumentParser` object with every parser defined in Metacrud's codebase.
    """
    parser = HelpParser(
        prog="metacrud",
        description=DESCRIPTION,
        formatter_class=RawDescriptionHelpFormatter,
        epilog="See metacrud <command> --help for more info",
    )
    parser.add_argument("-v", "--version", action="version", version=VERSION)
    parser.add_argument(
        "-lvl",
        "--level",
        type=str,
        default=DEFAULT_LOG_LEVEL,
        help="Set log level: DEBUG, INFO, WARNING, ERROR [Default: %(default)s]",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Path to an app.yaml file, or a directory containing one. "
        "Defaults to ./app.yaml, then the path in ~/.metacrud/config_path.txt, then ~/.metacrud/app.yaml.",
    )
    parser.add_argument(
        "--local",
        action="store_true",
        default=False,
        help="Use the default configuration instead of reading a configuration file.",
    )
    subparsers = parser.add_subparsers(dest="subparsers", required=True)

    for command in ALL_COMMANDS:
        command.add_parser(subparsers)

    return parser
