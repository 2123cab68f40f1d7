##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Module for project-wide utility functions.
"""

import importlib
import logging
import re
from copy import deepcopy
from types import SimpleNamespace
from typing import Any, Callable, Dict

import yaml


LOG = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def load_yaml(filepath: str) -> Dict:
    """
    Safely read a YAML file and return its contents.

    Args:
        filepath: The file path to the YAML file to be read.

    Returns:
        A dict representing the contents of the YAML file.
    """
    with open(filepath, "r") as _file:
        return yaml.safe_load(_file)


def nested_dict_to_namespaces(dic: Dict) -> SimpleNamespace:
    """
    Convert a nested dictionary into a nested SimpleNamespace structure.

    Each key in the dictionary becomes an attribute of a SimpleNamespace,
    allowing for attribute-style access to the data.

    Args:
        dic: The nested dictionary to be converted.

    Returns:
        A SimpleNamespace object representing the nested structure of the input dictionary.

    Raises:
        TypeError: If the input is not a dictionary.
    """

    def recurse(dic):
        if not isinstance(dic, dict):
            return dic
        for key, val in list(dic.items()):
            dic[key] = recurse(val)
        return SimpleNamespace(**dic)

    if not isinstance(dic, dict):
        raise TypeError(f"{dic} is not a dict")

    new_dic = deepcopy(dic)
    return recurse(new_dic)


def humanize_name(name: str) -> str:
    """
    Turn a field name into a display label.

    Both snake_case and camelCase names are split into words and each word
    is capitalized, e.g. `first_name` and `firstName` become `First Name`.

    Args:
        name: The field name to humanize.

    Returns:
        The humanized label.
    """
    words = []
    for chunk in name.strip("_").split("_"):
        words.extend(part for part in _CAMEL_BOUNDARY.split(chunk) if part)
    return " ".join(word[:1].upper() + word[1:] for word in words)


def import_from_string(path: str) -> Callable[..., Any]:
    """
    Import an attribute given as `package.module:attribute`.

    Args:
        path: The dotted module path and attribute name separated by a colon.

    Returns:
        The imported attribute.

    Raises:
        ValueError: If `path` is not in the `module:attribute` form.
        ImportError: If the module or attribute can't be found.
    """
    module_path, sep, attr = path.partition(":")
    if not sep or not module_path or not attr:
        raise ValueError(f"'{path}' is not a valid import path. Expected the form 'package.module:attribute'.")

    module = importlib.import_module(module_path)
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise ImportError(f"Module '{module_path}' has no attribute '{attr}'.") from exc
