from __future__ import annotations

from typer.testing import CliRunner

from jprov import __version__
from jprov.cli.app import app

runner = CliRunner()


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_commands_registered() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for name in ("find", "list", "download"):
        assert name in result.output


def test_find_requires_version() -> None:
    result = runner.invoke(app, ["find"])
    assert result.exit_code != 0
