##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Defines the base class for Metacrud CLI subcommands.

Every subcommand registers its own parser on the `metacrud` parser and, when
invoked, works on the `GenericCrudController` built from the configured
application by `metacrud.cli.utils.load_controller`. Read commands display the
view the controller returns; write commands report the `OperationResult` and
end the program with `ReturnCode.ERROR` when the operation failed.
"""

import logging
import sys
from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace

from metacrud.common.enums import ReturnCode
from metacrud.controller.views import OperationResult
from metacrud.display import display_result


LOG = logging.getLogger("metacrud")


class CommandEntryPoint(ABC):
    """
    Abstract base class for a Metacrud CLI subcommand.

    Methods:
        add_parser: Add this subcommand's parser to the `metacrud` subparsers.
        process_command: Run this subcommand against the configured application.
        register: Create this subcommand's parser and route it to `process_command`.
        report_result: Display the outcome of a controller write operation.
    """

    @abstractmethod
    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the parser for this subcommand, usually through `register`.

        Args:
            subparsers: The subparsers object of the `metacrud` parser.
        """
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement an `add_parser` method.")

    @abstractmethod
    def process_command(self, args: Namespace):
        """
        Run this subcommand.

        Implementations load the controller with `load_controller(args)` once
        their own arguments have been validated.

        Args:
            args: The parsed CLI arguments, including the global `config` and `local` options.
        """
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement a `process_command` method.")

    def register(self, subparsers: ArgumentParser, name: str, **kwargs) -> ArgumentParser:
        """
        Create the parser for this subcommand and dispatch it to `process_command`.

        Args:
            subparsers: The subparsers object of the `metacrud` parser.
            name: The name of the subcommand.
            **kwargs: Extra options for `add_parser`, such as `help`.

        Returns:
            The new parser, ready for the subcommand's arguments.
        """
        parser: ArgumentParser = subparsers.add_parser(name, **kwargs)
        parser.set_defaults(func=self.process_command)
        return parser

    @staticmethod
    def report_result(result: OperationResult):
        """
        Display the outcome of a create, update, or delete.

        Args:
            result: The result returned by the controller.

        Raises:
            SystemExit: With `ReturnCode.ERROR` if the operation failed.
        """
        display_result(result)
        if not result.success:
            LOG.debug(f"Operation failed; exiting with return code {int(ReturnCode.ERROR)}.")
            sys.exit(ReturnCode.ERROR)
