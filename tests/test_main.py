"""Tests for the command line interface."""

import json

import pytest
from typer.testing import CliRunner

from cadence.config import Configuration, Preferences
from cadence.main import cli, run_script

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "cadence.json"
    path.write_text(json.dumps({"triggerAfterInsertEnter": False}), encoding="utf-8")
    return path


def write_script(tmp_path, data):
    path = tmp_path / "session.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestReplay:
    def test_replay_prints_menus_and_buffer(self, tmp_path, config_file):
        script = write_script(tmp_path, {"lines": ["foo foobar", ""], "steps": [{"type": "fo"}]})

        result = runner.invoke(cli, ["replay", str(script), "--config", str(config_file)])

        assert result.exit_code == 0, result.output
        assert "menu 1 @ col 0: foo foobar" in result.output
        assert result.output.rstrip().endswith("foo foobar\nfo")

    def test_replay_missing_script(self, tmp_path):
        result = runner.invoke(cli, ["replay", str(tmp_path / "missing.json")])

        assert result.exit_code != 0

    @pytest.mark.asyncio
    async def test_accepting_an_item_writes_it(self):
        configuration = Configuration(Preferences(triggerAfterInsertEnter=False))
        data = {"lines": ["foo foobar", ""], "steps": [{"type": "fo"}, {"accept": 0}]}

        host = await run_script(data, configuration)

        assert host.lines == ["foo foobar", "foo"]
        assert host.errors == []

    @pytest.mark.asyncio
    async def test_dictionary_words_are_offered(self):
        configuration = Configuration(Preferences(triggerAfterInsertEnter=False))
        data = {"dictionary": ["printf", "println"], "steps": [{"type": "pri"}]}

        host = await run_script(data, configuration)

        assert host.menus[0].words == ("printf", "println")

    @pytest.mark.asyncio
    async def test_unknown_step(self):
        with pytest.raises(ValueError):
            await run_script({"steps": [{"jump": 1}]}, Configuration())


class TestSources:
    def test_lists_builtin_sources(self, tmp_path, config_file):
        words = tmp_path / "words.txt"
        words.write_text("print\n", encoding="utf-8")

        result = runner.invoke(
            cli,
            ["sources", "--filetype", "python", "--dictionary", str(words), "--config", str(config_file)],
        )

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0].split()[:3] == ["around", "native", "enabled"]
        assert lines[1].split() == ["dictionary", "native", "enabled", str(words)]
