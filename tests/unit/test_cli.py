"""Command-line argument handling."""

import io
import json
from unittest.mock import AsyncMock, patch

import pytest

from ghostwrite import cli

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("argv", "expected"),
    [
        (["status"], {"action": "GET_STATUS"}),
        (["recheck"], {"action": "RECHECK_API"}),
        (["upgrade"], {"action": "OPEN_UPGRADE"}),
        (["set-key", "gw_abc"], {"action": "SAVE_API_KEY", "apiKey": "gw_abc"}),
        (["check", "a a test"], {"action": "CHECK_GRAMMAR", "text": "a a test"}),
        (["rewrite", "draft"], {"action": "REWRITE_TEXT", "text": "draft"}),
    ],
)
def test_commands_map_to_messages(argv, expected):
    args = cli.build_parser().parse_args(argv)

    assert cli.build_message(args) == expected


def test_dash_reads_text_from_stdin(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("piped draft\n"))
    args = cli.build_parser().parse_args(["humanize", "-"])

    assert cli.build_message(args) == {"action": "HUMANIZE_TEXT", "text": "piped draft\n"}


def test_command_is_required():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_main_prints_response_and_exit_code(capsys):
    response = {"success": False, "error": "No credits", "kind": "insufficient_credits"}
    with patch.object(cli, "run", AsyncMock(return_value=response)):
        code = cli.main(["humanize", "text"])

    assert code == 1
    assert json.loads(capsys.readouterr().out) == response


def test_main_reports_configuration_errors(capsys):
    with patch.object(cli, "run", AsyncMock(side_effect=ValueError("bad config"))):
        code = cli.main(["status"])

    assert code == 2
    assert "bad config" in capsys.readouterr().err
