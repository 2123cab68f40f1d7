##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Main entry point into Metacrud's codebase.
"""

import logging
import sys
import traceback

from metacrud.cli.argparse_main import build_main_parser
from metacrud.config.configfile import is_debug
from metacrud.log_formatter import setup_logging


LOG = logging.getLogger("metacrud")


def main():
    """
    Entry point for the Metacrud command-line interface (CLI) operations.

    This function sets up the argument parser, handles command-line arguments,
    initializes logging, and executes the appropriate function based on the
    provided command. The user receives help information if no arguments are
    provided, and any exception raised by the command is logged and turned
    into a non-zero exit code.
    """
    parser = build_main_parser()
    if len(sys.argv) == 1:
        parser.print_help(sys.stdout)
        return 1
    args = parser.parse_args()

    log_level = "DEBUG" if is_debug() else args.level.upper()
    setup_logging(logger=LOG, log_level=log_level, colors=True)

    try:
        args.func(args)
        # pylint complains that this exception is too broad - being at the literal top of the program stack, it's ok.
    except Exception as excpt:  # pylint: disable=broad-except
        LOG.debug(traceback.format_exc())
        LOG.error(str(excpt))
        sys.exit(1)

    sys.exit()


if __name__ == "__main__":
    main()
