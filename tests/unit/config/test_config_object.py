##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Test the functionality of the Config object.
"""

from copy import copy
from types import SimpleNamespace

from metacrud.config import Config


class TestConfig:
    """
    Class for testing the Config object. We'll store a valid `app_dict`
    as an attribute here so that each test doesn't have to redefine it
    each time.
    """

    app_dict = {
        "admin": {"page_size": 10, "base_path": "/crud", "app_title": "Shop", "limits": {"max_file_size_mb": 2}},
        "backend": {"name": "sqlite", "path": "/tmp/shop.db"},
        "application": {"registry": "shop.models:build_registry"},
    }

    def test_config_creation(self):
        """
        Test the creation of the Config object. This should create nested namespaces
        for each section in the `app_dict` variable and save them to their respective
        attributes in the object.
        """
        config = Config(self.app_dict)

        assert config.admin == SimpleNamespace(
            page_size=10, base_path="/crud", app_title="Shop", limits=SimpleNamespace(max_file_size_mb=2)
        )
        assert config.backend == SimpleNamespace(**self.app_dict["backend"])
        assert config.application.registry == "shop.models:build_registry"

    def test_config_creation_missing_sections(self):
        """
        Test that sections missing from the dictionary are left as None and unknown sections are ignored.
        """
        config = Config({"backend": {"name": "memory"}, "extra": {"ignored": True}})

        assert config.admin is None
        assert config.application is None
        assert config.backend.name == "memory"
        assert not hasattr(config, "extra")

    def test_config_copy(self):
        """
        Test the `__copy__` magic method of the Config object. Here we'll make sure
        each attribute was copied properly but the ids should be different.
        """
        orig_config = Config(self.app_dict)
        copied_config = copy(orig_config)

        assert orig_config.admin == copied_config.admin
        assert orig_config.backend == copied_config.backend
        assert orig_config.application == copied_config.application

        assert id(orig_config.admin) != id(copied_config.admin)
        assert id(orig_config.backend) != id(copied_config.backend)
        assert id(orig_config.application) != id(copied_config.application)

    def test_config_str(self):
        """
        Test the `__str__` magic method of the Config object.
        """
        config = Config({"backend": {"name": "memory", "port": 6379}})

        expected = (
            "config:\n"
            "  admin:\n"
            "    None\n"
            "  backend:\n"
            "    name: 'memory'\n"
            "    port: 6379\n"
            "  application:\n"
            "    None"
        )
        assert str(config) == expected
