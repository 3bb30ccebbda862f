"""Tests for logtee.config — three-layer config resolution and application."""

import io
import json
from argparse import Namespace

import pytest

from logtee.errors import InvalidConfiguration
from logtee.levels import DEBUG, ERROR
from logtee.manager import get_tee
from logtee.prefixes import epoch_prefix
from logtee.config import (
    apply_config,
    configure_tee,
    find_project_config,
    load_json,
    load_project_config,
    resolve_config,
    save_project_config,
)


class TestFindProjectConfig:
    """Test .logtee.json discovery by walking up directories."""

    def test_finds_config_in_cwd(self, tmp_path):
        cfg_file = tmp_path / ".logtee.json"
        cfg_file.write_text('{"prefix": "pid"}')
        assert find_project_config(str(tmp_path)) == cfg_file

    def test_finds_config_in_parent(self, tmp_path):
        cfg_file = tmp_path / ".logtee.json"
        cfg_file.write_text('{"prefix": "pid"}')
        child = tmp_path / "subdir" / "deep"
        child.mkdir(parents=True)
        assert find_project_config(str(child)) == cfg_file

    def test_returns_none_when_missing(self, tmp_path):
        assert find_project_config(str(tmp_path)) is None


class TestLoadJson:
    """Test JSON file loading with error handling."""

    def test_load_valid_json(self, tmp_path):
        f = tmp_path / "test.json"
        f.write_text('{"key": "value"}')
        assert load_json(f) == {"key": "value"}

    def test_load_missing_file(self, tmp_path):
        assert load_json(tmp_path / "nope.json") == {}

    def test_load_malformed_json(self, tmp_path):
        f = tmp_path / "bad.json"
        f.write_text("{not json")
        assert load_json(f) == {}

    def test_load_non_object(self, tmp_path):
        f = tmp_path / "list.json"
        f.write_text("[1, 2]")
        assert load_json(f) == {}


class TestResolveConfig:
    """CLI > project > global precedence."""

    def _args(self, **kw):
        base = {"sinks": None, "levels": None, "prefix": None,
                "line_max": None, "config": None}
        base.update(kw)
        return Namespace(**base)

    def test_cli_wins(self, tmp_path, tmp_config_home, monkeypatch):
        monkeypatch.chdir(tmp_path)
        save_project_config({"prefix": "iso"}, tmp_path)
        resolved = resolve_config(self._args(prefix="pid"))
        assert resolved["prefix"] == "pid"

    def test_project_over_global(self, tmp_path, tmp_config_home, monkeypatch):
        monkeypatch.chdir(tmp_path)
        save_project_config({"prefix": "iso"}, tmp_path)
        (tmp_config_home / ".logtee").mkdir()
        (tmp_config_home / ".logtee" / "config.json").write_text(
            json.dumps({"prefix": "epoch", "line_max": 100}))
        resolved = resolve_config(self._args())
        assert resolved["prefix"] == "iso"
        assert resolved["line_max"] == 100

    def test_empty_cli_list_falls_through(self, tmp_path, tmp_config_home, monkeypatch):
        monkeypatch.chdir(tmp_path)
        save_project_config({"sinks": ["a.log:1"]}, tmp_path)
        resolved = resolve_config(self._args(sinks=[]))
        assert resolved["sinks"] == ["a.log:1"]

    def test_explicit_config_file(self, tmp_path, tmp_config_home, monkeypatch):
        monkeypatch.chdir(tmp_path)
        save_project_config({"prefix": "iso"}, tmp_path)
        other = tmp_path / "other.json"
        other.write_text('{"prefix": "epoch"}')
        resolved = resolve_config(self._args(config=str(other)))
        assert resolved["prefix"] == "epoch"

    def test_hyphenated_json_keys(self, tmp_path, tmp_config_home, monkeypatch):
        monkeypatch.chdir(tmp_path)
        save_project_config({"line-max": 64}, tmp_path)
        assert resolve_config(self._args())["line_max"] == 64

    def test_unset_everywhere(self, tmp_path, tmp_config_home, monkeypatch):
        monkeypatch.chdir(tmp_path)
        resolved = resolve_config(self._args())
        assert resolved == {"sinks": None, "levels": None, "prefix": None,
                            "line_max": None, "terminator": None}

    def test_load_project_config_returns_path(self, tmp_path):
        path = save_project_config({"prefix": "pid"}, tmp_path)
        data, found = load_project_config(str(tmp_path))
        assert data == {"prefix": "pid"}
        assert found == path


class TestApplyConfig:
    """apply_config() wires levels, provider and sinks into a TeeLogger."""

    def test_sinks_levels_prefix(self, tee, tmp_path):
        log = tmp_path / "cfg.log"
        apply_config(tee, {
            "sinks": [f"{log}:2", {"path": str(log), "level": "debug"}],
            "levels": [{"level": 5, "prefix": "(NN): "}, "-3:(TT): "],
            "prefix": "epoch",
        })
        assert tee.prefix_callback is epoch_prefix
        assert [e.threshold for e in tee.sinks.active()] == [2, DEBUG]
        assert tee.levels.lookup(5) == "(NN): "
        assert tee.levels.lookup(-3) == "(TT): "

    def test_unknown_prefix(self, tee):
        with pytest.raises(InvalidConfiguration, match="unknown prefix provider"):
            apply_config(tee, {"prefix": "nanoseconds"})

    @pytest.mark.parametrize("entry", [42, {"path": "x", "level": "loud"}])
    def test_bad_sink_entry(self, tee, entry):
        with pytest.raises(InvalidConfiguration):
            apply_config(tee, {"sinks": [entry]})

    @pytest.mark.parametrize("entry", ["no-colon", {"prefix": "x"}, 3])
    def test_bad_level_entry(self, tee, entry):
        with pytest.raises(InvalidConfiguration):
            apply_config(tee, {"levels": [entry]})

    def test_empty_level_prefix_reported(self, tee, buf):
        tee.add_sink(buf, 0)
        apply_config(tee, {"levels": ["6:"]})
        assert "(WW): add_level: invalid prefix.\n" in buf.getvalue()

    def test_level_warnings_reach_configured_sinks(self, tee, tmp_path):
        log = tmp_path / "warn.log"
        apply_config(tee, {"levels": ["6:"], "sinks": [str(log)]})
        tee.reset()
        assert log.read_text(encoding="utf-8") == "(WW): add_level: invalid prefix.\n"


class TestConfigureTee:
    def test_installs_singleton(self):
        tee = configure_tee({"line_max": "32", "terminator": "\n"})
        assert get_tee() is tee
        assert tee.line_max == 32
        buf = io.StringIO()
        tee.add_sink(buf, 0)
        tee.error("x" * 50)
        assert buf.getvalue() == "(EE): " + "x" * 31 + "\n"
        assert tee.levels.lookup(ERROR) == "(EE): "

    @pytest.mark.parametrize("line_max", ["big", 1])
    def test_bad_line_max(self, line_max):
        with pytest.raises(InvalidConfiguration):
            configure_tee({"line_max": line_max})
