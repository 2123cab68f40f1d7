##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Used to store the application configuration.

The `config` package loads the `app.yaml` file that tells Metacrud how to page
and label its admin views, which storage engine to create repositories with,
and where to find the callable that builds the application's model registry.

Modules:
    config_filepaths.py: Constants for the default configuration file locations.
    configfile.py: Handles the locating, loading, and defaulting of application configuration files.
"""
from copy import copy
from types import SimpleNamespace
from typing import Dict, List, Optional

from metacrud.utils import nested_dict_to_namespaces


CONFIG_SECTIONS: List[str] = ["admin", "backend", "application"]


class Config:  # pylint: disable=R0903
    """
    The Config class, meant to store all Metacrud config settings in one place.
    Regardless of the config data loading method, this class is meant to
    standardize config data retrieval throughout all parts of Metacrud.

    Attributes:
        admin (Optional[SimpleNamespace]): Settings for the admin views (paging, titles, upload limits).
        backend (Optional[SimpleNamespace]): Settings for the storage engine repositories are created with.
        application (Optional[SimpleNamespace]): Settings locating the application's models.

    Methods:
        __copy__: Creates a shallow copy of the Config instance.
        __str__: Returns a formatted string representation of the Config instance.
        load_app_into_namespaces: Converts the provided configuration dictionary into namespaces
            and assigns them to the Config instance's attributes.
    """

    def __init__(self, app_dict: Dict):
        """
        Initializes the Config instance with configuration data from a dictionary.

        Args:
            app_dict: A dictionary containing configuration data for the application.
                Each of the "admin", "backend", and "application" keys is converted into
                a `SimpleNamespace` and assigned to the attribute of the same name.
        """
        self.admin: Optional[SimpleNamespace] = None
        self.backend: Optional[SimpleNamespace] = None
        self.application: Optional[SimpleNamespace] = None
        self.load_app_into_namespaces(app_dict)

    def __copy__(self) -> "Config":
        cls = self.__class__
        result = cls.__new__(cls)
        result.__dict__.update({section: copy(self.__dict__[section]) for section in CONFIG_SECTIONS})
        return result

    def __str__(self) -> str:
        formatted_str = "config:"
        for name in CONFIG_SECTIONS:
            attr = getattr(self, name)
            if attr is not None:
                items = (f"    {k}: {v!r}" for k, v in attr.__dict__.items())
                joined_items = "\n".join(items)
                formatted_str += f"\n  {name}:\n{joined_items}"
            else:
                formatted_str += f"\n  {name}:\n    None"
        return formatted_str

    def load_app_into_namespaces(self, app_dict: Dict):
        """
        Converts the provided application dictionary into namespaces and assigns them
        to the Config instance's attributes.

        Args:
            app_dict: A dictionary containing configuration data for the application.
        """
        for section in CONFIG_SECTIONS:
            try:
                setattr(self, section, nested_dict_to_namespaces(app_dict[section]))
            except KeyError:
                # The sections are optional
                pass
