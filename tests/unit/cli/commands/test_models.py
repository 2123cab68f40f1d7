##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Tests for the `models.py` file of the `cli/commands` folder.
"""

from argparse import Namespace

from _pytest.capture import CaptureFixture
from pytest_mock import MockerFixture

from metacrud.cli.commands.models import ModelsCommand
from tests.fixture_types import FixtureCallable, FixtureController


def test_add_parser_sets_up_models_command(create_parser: FixtureCallable):
    """
    Ensure the `models` command sets the correct default function.

    Args:
        create_parser: A fixture to help create a parser.
    """
    command = ModelsCommand()
    parser = create_parser(command)
    args = parser.parse_args(["models"])
    assert hasattr(args, "func")
    assert args.func.__name__ == command.process_command.__name__


def test_process_command_displays_dashboard(mocker: MockerFixture):
    """
    Ensure `process_command` displays the controller's dashboard.

    Args:
        mocker: PyTest mocker fixture.
    """
    controller = mocker.Mock()
    load_mock = mocker.patch("metacrud.cli.commands.models.load_controller", return_value=controller)
    display_mock = mocker.patch("metacrud.cli.commands.models.display_dashboard")
    args = Namespace(config=None, local=True)

    ModelsCommand().process_command(args)

    load_mock.assert_called_once_with(args)
    controller.dashboard.assert_called_once_with()
    display_mock.assert_called_once_with(controller.dashboard.return_value)


def test_process_command_demo_output(mocker: MockerFixture, capsys: CaptureFixture, demo_controller: FixtureController):
    """
    Ensure the demo application's models are printed in registration order.

    Args:
        mocker: PyTest mocker fixture.
        capsys: PyTest capsys fixture.
        demo_controller: A controller over the seeded demo application.
    """
    mocker.patch("metacrud.cli.commands.models.load_controller", return_value=demo_controller)

    ModelsCommand().process_command(Namespace())

    output = capsys.readouterr().out
    assert output.startswith("Metacrud Admin\n")
    assert output.index("Department") < output.index("Employee") < output.index("Category") < output.index("Product")
