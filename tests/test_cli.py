"""Tests for the command line interface."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lightbulbs.cli import app
from lightbulbs.config import get_settings


@pytest.fixture
def runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[CliRunner, None, None]:
    """A CLI runner pointed at a fresh SQLite database with tables created."""
    monkeypatch.setenv("LIGHTBULBS_DB__URL", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    get_settings.cache_clear()

    runner = CliRunner()
    result = runner.invoke(app, ["init-db"])
    assert result.exit_code == 0, result.output
    assert "Database schema initialized" in result.output

    yield runner

    get_settings.cache_clear()


def test_help() -> None:
    result = CliRunner().invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "search-bulbs" in result.output


def test_add_and_list_categories(runner: CliRunner) -> None:
    result = runner.invoke(app, ["add-category", "Hobbies", "--description", "Free time"])
    assert result.exit_code == 0, result.output
    assert "Created category" in result.output

    result = runner.invoke(app, ["list-categories"])
    assert result.exit_code == 0, result.output
    assert "Hobbies" in result.output


def test_duplicate_category(runner: CliRunner) -> None:
    runner.invoke(app, ["add-category", "Hobbies"])
    result = runner.invoke(app, ["add-category", "Hobbies"])
    assert result.exit_code == 1
    assert "conflicts with an existing record" in result.output


def test_search_without_results(runner: CliRunner) -> None:
    result = runner.invoke(app, ["search-bulbs", "--title", "mozart"])
    assert result.exit_code == 0, result.output
    assert "No bulbs found" in result.output


def test_search_with_invalid_tag(runner: CliRunner) -> None:
    result = runner.invoke(app, ["search-bulbs", "--tag", "not-an-id"])
    assert result.exit_code == 1
    assert "Invalid bulb filter" in result.output


def test_show_missing_bulb(runner: CliRunner) -> None:
    result = runner.invoke(app, ["show-bulb", "6f1c3d5e-0000-4000-8000-000000000000"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_empty_listings(runner: CliRunner) -> None:
    for command in ("list-tags", "list-sources"):
        result = runner.invoke(app, [command])
        assert result.exit_code == 0, result.output
