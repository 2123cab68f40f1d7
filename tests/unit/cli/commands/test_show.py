##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Tests for the `show.py` file of the `cli/commands` folder.
"""

import logging
from argparse import Namespace

import pytest
from _pytest.capture import CaptureFixture
from pytest_mock import MockerFixture

from metacrud.cli.commands.show import ShowCommand
from tests.fixture_types import FixtureCallable, FixtureController


def test_add_parser_sets_up_show_command(create_parser: FixtureCallable):
    """
    Ensure the `show` command sets the correct default function.

    Args:
        create_parser: A fixture to help create a parser.
    """
    command = ShowCommand()
    parser = create_parser(command)
    args = parser.parse_args(["show", "Employee", "3"])
    assert args.func.__name__ == command.process_command.__name__
    assert args.model == "Employee"
    assert args.id == "3"


def test_process_command_displays_edit_form(mocker: MockerFixture):
    """
    Ensure `process_command` displays the record's edit form.

    Args:
        mocker: PyTest mocker fixture.
    """
    controller = mocker.Mock()
    mocker.patch("metacrud.cli.commands.show.load_controller", return_value=controller)
    display_mock = mocker.patch("metacrud.cli.commands.show.display_form")

    ShowCommand().process_command(Namespace(model="Employee", id="3"))

    controller.edit_form.assert_called_once_with("Employee", "3")
    display_mock.assert_called_once_with(controller.edit_form.return_value)


def test_process_command_demo_output(mocker: MockerFixture, capsys: CaptureFixture, demo_controller: FixtureController):
    """
    Ensure a demo record is printed with its current values.

    Args:
        mocker: PyTest mocker fixture.
        capsys: PyTest capsys fixture.
        demo_controller: A controller over the seeded demo application.
    """
    mocker.patch("metacrud.cli.commands.show.load_controller", return_value=demo_controller)

    ShowCommand().process_command(Namespace(model="Employee", id="1"))

    output = capsys.readouterr().out
    assert output.startswith("Edit Employee\n")
    assert "john.doe@example.com" in output
    assert "Choices for department: 1, 2, 3, 4" in output


def test_process_command_missing_record(
    mocker: MockerFixture, caplog: pytest.LogCaptureFixture, demo_controller: FixtureController
):
    """
    Ensure showing a record that doesn't exist exits with an error code.

    Args:
        mocker: PyTest mocker fixture.
        caplog: A built-in fixture from the pytest library to capture logs.
        demo_controller: A controller over the seeded demo application.
    """
    caplog.set_level(logging.ERROR)
    mocker.patch("metacrud.cli.commands.show.load_controller", return_value=demo_controller)

    with pytest.raises(SystemExit) as excinfo:
        ShowCommand().process_command(Namespace(model="Employee", id="99"))

    assert excinfo.value.code == 1
    assert "Employee with id '99' does not exist." in caplog.text
