"""Tests for the hydrald command-line interface."""

from __future__ import annotations

import json
import sys
import textwrap
from pathlib import Path

import pytest

from hydrald.cli import load_target, main
from hydrald.errors import HydraError

MODULE_NAME = "cli_sample_models"

MODULE_SOURCE = textwrap.dedent(
    """
    from dataclasses import dataclass

    from hydrald import expose, term


    @expose("Human")
    @term("mbox", "http://xmlns.com/foaf/0.1/mbox")
    @dataclass
    class Person:
        name: str = "Ada"
        mbox: str = "ada@example.org"


    ADA = Person()


    def make_bob():
        return Person("Bob", "bob@example.org")
    """
)


@pytest.fixture
def sample_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    (tmp_path / f"{MODULE_NAME}.py").write_text(MODULE_SOURCE)
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, MODULE_NAME, raising=False)
    monkeypatch.chdir(tmp_path)
    return MODULE_NAME


class TestLoadTarget:
    def test_object(self, sample_module):
        """Module-level objects are returned as is."""
        assert load_target(f"{sample_module}:ADA").name == "Ada"

    def test_callable(self, sample_module):
        """Callables are called to build the object."""
        assert load_target(f"{sample_module}:make_bob").name == "Bob"

    def test_class_is_instantiated(self, sample_module):
        """Classes are instantiated without arguments."""
        assert load_target(f"{sample_module}:Person").name == "Ada"

    def test_malformed(self):
        """A target without a colon is rejected."""
        with pytest.raises(HydraError, match="MODULE:ATTR"):
            load_target("no_colon")

    def test_missing_attribute(self, sample_module):
        """A missing attribute is reported by name."""
        with pytest.raises(HydraError, match="no attribute"):
            load_target(f"{sample_module}:Nope")


class TestRender:
    def test_render_compact(self, sample_module, capsys):
        """Default output is compact JSON-LD on one line."""
        assert main(["render", f"{sample_module}:ADA"]) == 0
        out = capsys.readouterr().out
        assert out == (
            '{"@context":{"@vocab":"http://schema.org/",'
            '"mbox":"http://xmlns.com/foaf/0.1/mbox"},'
            '"@type":"Human","name":"Ada","mbox":"ada@example.org"}\n'
        )

    def test_render_indent(self, sample_module, capsys):
        """--indent produces indented output."""
        assert main(["render", f"{sample_module}:make_bob", "--indent", "2"]) == 0
        out = capsys.readouterr().out
        assert out.startswith('{\n  "@context": {')
        assert json.loads(out)["name"] == "Bob"

    def test_render_pretty(self, sample_module, capsys):
        """--pretty still prints parseable JSON."""
        assert main(["render", f"{sample_module}:ADA", "--pretty"]) == 0
        assert json.loads(capsys.readouterr().out)["@type"] == "Human"

    def test_render_with_config_profile(self, sample_module, tmp_path, capsys):
        """--config and --profile select the settings used."""
        config = tmp_path / "custom.toml"
        config.write_text(
            '[serializer]\ndefault_vocab = "http://example.org/"\n'
            "[profiles.pretty]\nindent = 3\n"
        )
        code = main(["--config", str(config), "--profile", "pretty", "render", f"{sample_module}:ADA"])
        assert code == 0
        out = capsys.readouterr().out
        assert out.startswith('{\n   "@context"')
        assert json.loads(out)["@context"]["@vocab"] == "http://example.org/"

    def test_render_picks_up_config_file(self, sample_module, tmp_path, capsys):
        """.hydrald.toml in the working directory is used."""
        (tmp_path / ".hydrald.toml").write_text("[serializer]\nindent = 2\n")
        assert main(["render", f"{sample_module}:ADA"]) == 0
        assert capsys.readouterr().out.startswith("{\n  ")

    def test_render_error(self, capsys):
        """Import failures exit with status 1."""
        assert main(["render", "missing_module_xyz:thing"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_missing_config_file(self, sample_module, tmp_path, capsys):
        """A missing --config file exits with status 1."""
        code = main(["--config", str(tmp_path / "absent.toml"), "render", f"{sample_module}:ADA"])
        assert code == 1
        assert "Config file not found" in capsys.readouterr().err


class TestInspect:
    def test_inspect(self, sample_module, capsys):
        """The table lists type, vocab and terms."""
        assert main(["inspect", f"{sample_module}:ADA"]) == 0
        out = capsys.readouterr().out
        assert "Human" in out
        assert "http://schema.org/" in out
        assert "mbox" in out

    def test_inspect_error(self, capsys):
        """A malformed target exits with status 1."""
        assert main(["inspect", "bad"]) == 1
        assert "MODULE:ATTR" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    """Running without a command prints usage."""
    assert main([]) == 0
    assert "usage: hydrald" in capsys.readouterr().out
