##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Utility functions to support Metacrud CLI command handlers.

This module provides the helpers every command shares: building the CRUD
controller from the configured application, parsing `KEY=value` arguments,
and reporting controller errors the same way for every command.
"""

import logging
import os
import sys
from argparse import Namespace
from typing import Any, Callable, Dict, List, Optional

from metacrud.common.enums import ReturnCode
from metacrud.config.configfile import initialize_config
from metacrud.controller import GenericCrudController, handle_exception
from metacrud.display import display_error
from metacrud.exceptions import MetacrudError
from metacrud.registry import ModelRegistry
from metacrud.utils import import_from_string


LOG = logging.getLogger("metacrud")


def load_controller(args: Namespace) -> GenericCrudController:
    """
    Build the CRUD controller for the configured application.

    The configuration is loaded from `args.config` (or the default search
    locations), and the model registry is built by the callable named in its
    `application.registry` setting.

    Args:
        args: Parsed CLI arguments holding the `config` and `local` options.

    Returns:
        The controller.

    Raises:
        TypeError: If the registry callable doesn't return a `ModelRegistry`.
    """
    config = initialize_config(path=getattr(args, "config", None), local_mode=getattr(args, "local", False))
    LOG.debug(f"Using {config}")

    build_registry = import_from_string(config.application.registry)
    registry = build_registry(config)
    if not isinstance(registry, ModelRegistry):
        raise TypeError(f"'{config.application.registry}' returned {type(registry).__name__}, expected a ModelRegistry")

    return GenericCrudController(registry, config.admin)


def parse_assignments(assignments: Optional[List[str]], option: str = "--set") -> Dict[str, str]:
    """
    Parse a list of "KEY=value" strings into a dictionary.

    Only the first '=' separates the key from the value, so values may contain '='.

    Args:
        assignments: The strings to parse, e.g. ["first_name=Jane", "department=3"].
        option: The option the strings came from, used in error messages.

    Returns:
        The values keyed by field name. Empty if `assignments` is None.

    Raises:
        ValueError: If a string has no '=' or an empty key.
    """
    result: Dict[str, str] = {}
    for arg in assignments or []:
        key, sep, value = arg.partition("=")
        if not sep:
            raise ValueError(f"{option} requires the form KEY=value, got '{arg}'.")
        if not key.strip():
            raise ValueError(f"{option} requires a field name before '=', got '{arg}'.")
        result[key.strip()] = value
    LOG.debug(f"Parsed {option} values: {result}")
    return result


def read_files(assignments: Optional[List[str]]) -> Dict[str, bytes]:
    """
    Read the files named by a list of "FIELD=path" strings.

    Args:
        assignments: The strings to parse, e.g. ["profile_picture=~/me.png"].

    Returns:
        Each file's contents keyed by field name.

    Raises:
        ValueError: If a string is malformed or a file doesn't exist.
    """
    payloads: Dict[str, bytes] = {}
    for field_name, path in parse_assignments(assignments, option="--file").items():
        path = os.path.expanduser(path)
        if not os.path.isfile(path):
            raise ValueError(f"The file '{path}' given for field '{field_name}' does not exist.")
        with open(path, "rb") as upload:
            payloads[field_name] = upload.read()
    return payloads


def run_and_display(operation: Callable[..., Any], display_func: Callable[[Any], None], *args, **kwargs):
    """
    Run a controller read operation and display its result.

    Controller errors are displayed as error views and end the program with
    an error return code. Other exceptions propagate to `main`.

    Args:
        operation: The controller method to call.
        display_func: The function that displays the method's result.
        *args: Positional arguments for `operation`.
        **kwargs: Keyword arguments for `operation`.
    """
    try:
        view = operation(*args, **kwargs)
    except MetacrudError as exc:
        display_error(handle_exception(exc))
        sys.exit(ReturnCode.ERROR)
    display_func(view)
