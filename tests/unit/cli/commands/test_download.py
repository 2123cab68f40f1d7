##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Tests for the `download.py` file of the `cli/commands` folder.
"""

import logging
import os
from argparse import Namespace

import pytest
from pytest_mock import MockerFixture

from metacrud.cli.commands.download import DownloadCommand
from metacrud.controller.views import BinaryContent
from tests.fixture_types import FixtureCallable, FixtureController, FixtureRegistry


def test_add_parser_sets_up_download_command(create_parser: FixtureCallable):
    """
    Ensure the `download` command sets the correct default function and defaults.

    Args:
        create_parser: A fixture to help create a parser.
    """
    command = DownloadCommand()
    parser = create_parser(command)
    args = parser.parse_args(["download", "Employee", "1", "profile_picture"])
    assert args.func.__name__ == command.process_command.__name__
    assert (args.model, args.id, args.field) == ("Employee", "1", "profile_picture")
    assert args.output is None

    args = parser.parse_args(["download", "Employee", "1", "profile_picture", "-o", "me.png"])
    assert args.output == "me.png"


class TestWriteContent:
    """
    Tests for the `write_content` static method.
    """

    def test_writes_to_output(self, tmp_path, caplog: pytest.LogCaptureFixture):
        """
        Test that content is written to the requested file.

        Args:
            tmp_path: PyTest temporary directory fixture.
            caplog: A built-in fixture from the pytest library to capture logs.
        """
        caplog.set_level(logging.INFO)
        output = tmp_path / "me.png"

        DownloadCommand.write_content(BinaryContent(filename="profile_picture", content=b"\x89PNG"), str(output))

        assert output.read_bytes() == b"\x89PNG"
        assert f"Wrote 4 bytes to '{output}'." in caplog.text

    def test_defaults_to_field_name(self, mocker: MockerFixture, tmp_path):
        """
        Test that content is written to a file named after the field when no output is given.

        Args:
            mocker: PyTest mocker fixture.
            tmp_path: PyTest temporary directory fixture.
        """
        mocker.patch("os.path.expanduser", side_effect=lambda path: os.path.join(tmp_path, path))

        DownloadCommand.write_content(BinaryContent(filename="profile_picture", content=b"abc"))

        assert (tmp_path / "profile_picture").read_bytes() == b"abc"

    def test_no_content(self, tmp_path, caplog: pytest.LogCaptureFixture):
        """
        Test that nothing is written for an empty field.

        Args:
            tmp_path: PyTest temporary directory fixture.
            caplog: A built-in fixture from the pytest library to capture logs.
        """
        caplog.set_level(logging.WARNING)
        output = tmp_path / "me.png"

        DownloadCommand.write_content(BinaryContent(filename="profile_picture", content=None), str(output))

        assert not output.exists()
        assert "Field 'profile_picture' has no content; nothing was written." in caplog.text


def test_process_command_demo_download(
    tmp_path, mocker: MockerFixture, demo_controller: FixtureController, demo_registry: FixtureRegistry
):
    """
    Ensure the binary field of a demo record is written to the output file.

    Args:
        tmp_path: PyTest temporary directory fixture.
        mocker: PyTest mocker fixture.
        demo_controller: A controller over the seeded demo application.
        demo_registry: The demo registry.
    """
    employees = demo_registry.require("Employee").repository
    employee = employees.find_by_id(1)
    employee.profile_picture = b"\x89PNG"
    employees.save(employee)
    mocker.patch("metacrud.cli.commands.download.load_controller", return_value=demo_controller)
    output = tmp_path / "john.png"

    DownloadCommand().process_command(Namespace(model="Employee", id="1", field="profile_picture", output=str(output)))

    assert output.read_bytes() == b"\x89PNG"


def test_process_command_not_binary(
    mocker: MockerFixture, caplog: pytest.LogCaptureFixture, demo_controller: FixtureController
):
    """
    Ensure downloading a field that isn't binary exits with an error code.

    Args:
        mocker: PyTest mocker fixture.
        caplog: A built-in fixture from the pytest library to capture logs.
        demo_controller: A controller over the seeded demo application.
    """
    caplog.set_level(logging.ERROR)
    mocker.patch("metacrud.cli.commands.download.load_controller", return_value=demo_controller)

    with pytest.raises(SystemExit) as excinfo:
        DownloadCommand().process_command(Namespace(model="Employee", id="1", field="email", output=None))

    assert excinfo.value.code == 1
    assert "is not a binary field" in caplog.text
