"""Unit tests for the command-line entry point (scaffold_engine.cli).

Tests cover:
- Argument parsing (platforms, variables, post-enhance tri-state)
- The ``templates`` and ``archetypes`` listings
- ``generate`` end to end with commands stubbed out, including --report
- Exit codes for success, failure, and bad input
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from scaffold_engine.cli import _parse_vars, build_parser, main
from scaffold_engine.config import Config


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    return Config(output_dir=tmp_path / "projects").save(tmp_path / "config.json")


@pytest.fixture
def no_commands():
    """Stub out template commands and command-based rules so no package manager runs."""
    stub = AsyncMock(return_value=(0, "", ""))
    with patch("scaffold_engine.orchestrator.run_command", new=stub), patch(
        "scaffold_engine.validation.run_command", new=stub
    ):
        yield stub


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParser:
    @pytest.mark.unit
    def test_generate_defaults(self):
        args = build_parser().parse_args(["generate", "cli-tool", "mycli"])
        assert args.archetype == "cli-tool"
        assert args.name == "mycli"
        assert args.platform is None
        assert args.post_enhance is None
        assert args.no_llm is False
        assert args.var == []

    @pytest.mark.unit
    def test_repeated_options(self):
        args = build_parser().parse_args(
            [
                "generate", "nx-monorepo", "acme",
                "--platform", "web", "--platform", "mobile",
                "--var", "port=3000", "--var", "author=Ada",
                "--post-enhance",
            ]
        )
        assert args.platform == ["web", "mobile"]
        assert args.var == ["port=3000", "author=Ada"]
        assert args.post_enhance is True

    @pytest.mark.unit
    def test_no_post_enhance(self):
        args = build_parser().parse_args(["generate", "cli-tool", "mycli", "--no-post-enhance"])
        assert args.post_enhance is False

    @pytest.mark.unit
    def test_unknown_platform_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["generate", "cli-tool", "x", "--platform", "tv"])

    @pytest.mark.unit
    def test_parse_vars(self):
        assert _parse_vars(["a=1", "b=x=y", "c="]) == {"a": "1", "b": "x=y", "c": ""}

    @pytest.mark.unit
    @pytest.mark.parametrize("pair", ["novalue", "=1"])
    def test_parse_vars_invalid(self, pair: str):
        with pytest.raises(ValueError):
            _parse_vars([pair])


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


class TestListings:
    @pytest.mark.unit
    def test_templates(self, config_file: Path, capsys):
        assert main(["--config", str(config_file), "templates"]) == 0
        out = capsys.readouterr().out
        assert "discord-bot-typescript" in out
        assert "nx-monorepo-full-stack" in out

    @pytest.mark.unit
    def test_archetypes(self, config_file: Path, capsys):
        assert main(["--config", str(config_file), "archetypes"]) == 0
        out = capsys.readouterr().out
        assert "expo-mobile" in out
        assert "node-backend" in out


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


class TestGenerate:
    @pytest.mark.unit
    def test_generate_discord_bot(self, config_file: Path, tmp_path: Path, no_commands):
        report = tmp_path / "report.json"
        code = main(
            [
                "--config", str(config_file),
                "generate", "discord-bot", "pingbot",
                "--no-llm",
                "--report", str(report),
            ]
        )

        assert code == 0
        project = tmp_path / "projects" / "pingbot"
        assert (project / "src" / "index.ts").exists()
        data = json.loads(report.read_text(encoding="utf-8"))
        assert data["success"] is True
        assert data["template_id"] == "discord-bot-typescript"
        assert data["final_state"] == "completed"

    @pytest.mark.unit
    def test_generate_with_output_and_vars(self, config_file: Path, tmp_path: Path, no_commands):
        code = main(
            [
                "--config", str(config_file),
                "generate", "cli-tool", "mycli",
                "-o", str(tmp_path / "custom"),
                "--var", "author=Ada",
                "--no-llm",
            ]
        )
        assert code == 0
        assert no_commands.await_count >= 1
        assert (tmp_path / "custom" / "mycli" / "package.json").exists()

    @pytest.mark.unit
    def test_unknown_archetype_exit_code(self, config_file: Path, capsys):
        code = main(["--config", str(config_file), "generate", "cobol", "x", "--no-llm"])
        assert code == 1
        assert "Unknown project type: cobol" in capsys.readouterr().out

    @pytest.mark.unit
    def test_archetype_without_template(self, config_file: Path, capsys):
        code = main(["--config", str(config_file), "generate", "nextjs-web", "site", "--no-llm"])
        assert code == 1
        assert "No templates available for project type: nextjs-web" in capsys.readouterr().out

    @pytest.mark.unit
    def test_bad_var_exit_code(self, config_file: Path):
        code = main(["--config", str(config_file), "generate", "cli-tool", "x", "--var", "oops"])
        assert code == 2
