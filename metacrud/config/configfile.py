##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
This module provides functionality for locating and loading application
configuration files and filling in default settings.

It houses the `CONFIG` object that holds the most recently initialized configuration.
"""
import logging
import os
from typing import Dict, Optional

from metacrud.config import Config
from metacrud.config.config_filepaths import APP_FILENAME, CONFIG_PATH_FILE, DEFAULT_DB_PATH, METACRUD_HOME
from metacrud.utils import load_yaml


LOG: logging.Logger = logging.getLogger(__name__)

CONFIG: Optional[Config] = None
IS_LOCAL_MODE: bool = False

DEFAULT_REGISTRY: str = "metacrud.examples.demo_app:build_demo_registry"


def set_local_mode(enable: bool = True):
    """
    Sets Metacrud to run in local mode, which doesn't require a configuration file.

    Args:
        enable (bool): True to enable local mode, False to disable it.
    """
    global IS_LOCAL_MODE  # pylint: disable=global-statement
    IS_LOCAL_MODE = enable
    if enable:
        LOG.info("Running Metacrud in local mode (no configuration file required)")


def is_local_mode() -> bool:
    """
    Checks if Metacrud is running in local mode.

    Returns:
        True if running in local mode, False otherwise.
    """
    return IS_LOCAL_MODE


def load_config(filepath: str) -> Dict:
    """
    Reads a Metacrud YAML configuration file and returns its contents as a dictionary.

    Args:
        filepath (str): The path to the YAML configuration file.

    Returns:
        A dictionary containing the contents of the YAML file or None if file doesn't exist.
    """
    if not os.path.isfile(filepath):
        LOG.info(f"No app config file at {filepath}")
        return None
    LOG.info(f"Reading app config from file {filepath}")
    return load_yaml(filepath) or {}


def find_config_file(path: str = None) -> str:
    """
    Locate the Metacrud application configuration file (`app.yaml`).

    If a `path` is provided it is used as-is when it names a file, or searched
    for `app.yaml` when it names a directory. Otherwise this fallback sequence is used:
      1. Check for `app.yaml` in the current working directory.
      2. Check if `CONFIG_PATH_FILE` exists and points to a valid config file.
      3. Check for `app.yaml` in the `METACRUD_HOME` directory.

    Args:
        path (str, optional): A specific file, or directory to look for `app.yaml` in.

    Returns:
        The full path to the configuration file if found, otherwise `None`.
    """
    if path is None:
        local_app = os.path.join(os.getcwd(), APP_FILENAME)
        if os.path.isfile(local_app):
            return local_app

        if os.path.isfile(CONFIG_PATH_FILE):
            with open(CONFIG_PATH_FILE, "r") as f:
                config_path = f.read().strip()
            if os.path.isfile(config_path):
                return config_path

        path_app = os.path.join(METACRUD_HOME, APP_FILENAME)
        if os.path.isfile(path_app):
            return path_app

        return None

    path = os.path.expanduser(path)
    if os.path.isfile(path):
        return path

    app_path = os.path.join(path, APP_FILENAME)
    if os.path.exists(app_path):
        return app_path

    return None


def get_default_config() -> Dict:
    """
    Creates the default configuration used in local mode and to fill in missing settings.

    Returns:
        A configuration dictionary with every setting at its default value.
    """
    return {
        "admin": {
            "page_size": 20,
            "base_path": "/admin",
            "app_title": "Metacrud Admin",
            "strict_registration": False,
            "max_file_size_mb": 10,
        },
        "backend": {
            "name": "memory",
            "path": DEFAULT_DB_PATH,
            "host": "localhost",
            "port": 6379,
            "db": 0,
        },
        "application": {"registry": DEFAULT_REGISTRY},
    }


def load_defaults(config: Dict):
    """
    Fill in every setting missing from `config` with its default value.

    Args:
        config (Dict): The configuration dictionary to be updated with default values.
    """
    for section, defaults in get_default_config().items():
        if not isinstance(config.get(section), dict):
            config[section] = {}
        for key, value in defaults.items():
            config[section].setdefault(key, value)


def get_config(path: Optional[str] = None) -> Dict:
    """
    Loads a Metacrud configuration file and returns a dictionary containing the configuration data.

    Args:
        path (str, optional): The file or directory to search for the configuration file.
            If `None`, default search paths are used.

    Returns:
        A dictionary containing all the configuration data with defaults applied.

    Raises:
        ValueError: If the configuration file cannot be found and it's not a local run.
    """
    if is_local_mode():
        LOG.info("Using default configuration (local mode)")
        config = get_default_config()
        load_defaults(config)
        return config

    filepath: Optional[str] = find_config_file(path)
    if filepath is None:
        raise ValueError(
            "Cannot find a metacrud config file! Create one at "
            f"'{os.path.join(METACRUD_HOME, APP_FILENAME)}' or run with '--local'."
        )
    config: Dict = load_config(filepath)
    load_defaults(config)
    return config


def is_debug() -> bool:
    """
    Determines whether the application is running in debug mode.

    Returns:
        True if `METACRUD_DEBUG` is set to `1` in the environment, otherwise False.
    """
    return os.environ.get("METACRUD_DEBUG", "").strip() == "1"


def initialize_config(path: Optional[str] = None, local_mode: bool = False) -> Config:
    """
    Initializes, stores in `CONFIG`, and returns the Metacrud configuration.

    Args:
        path (Optional[str]): Path to look for configuration file
        local_mode (bool): Whether to use local mode (no config file required)

    Returns:
        The initialized configuration object
    """
    if local_mode:
        set_local_mode(True)

    global CONFIG  # pylint: disable=global-statement

    try:
        app_config = get_config(path)
        CONFIG = Config(app_config)
    except ValueError as e:
        LOG.warning(f"Error loading configuration: {e}. Falling back to default configuration.")
        CONFIG = Config(get_default_config())

    return CONFIG
