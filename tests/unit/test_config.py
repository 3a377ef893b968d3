"""Tests for core/config.py."""

from __future__ import annotations

from pathlib import Path

from autogrc.core.config import (
    deep_merge,
    get_effective_config,
    load_project_config,
    resolve_reports_dir,
    resolve_snapshot_path,
)


class TestDeepMerge:
    def test_simple_merge(self):
        result = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
        assert result == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self):
        base = {"ssllabs": {"max_attempts": 30, "poll_interval_seconds": 10}}
        override = {"ssllabs": {"max_attempts": 5}}
        result = deep_merge(base, override)
        assert result["ssllabs"]["max_attempts"] == 5
        assert result["ssllabs"]["poll_interval_seconds"] == 10

    def test_arrays_replaced(self):
        base = {"fail_on": ["critical"]}
        result = deep_merge(base, {"fail_on": ["critical", "warning"]})
        assert result["fail_on"] == ["critical", "warning"]

    def test_base_not_mutated(self):
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"b": 2}})
        assert base["a"]["b"] == 1


class TestLoadProjectConfig:
    def test_loads_yaml(self, initialized_project: Path):
        config = load_project_config(initialized_project)
        assert config["project"]["name"] == "test-project"
        assert config["data"]["snapshot"] == "data.yaml"

    def test_missing_config_returns_empty(self, tmp_project: Path):
        assert load_project_config(tmp_project) == {}

    def test_empty_config_returns_empty(self, tmp_path: Path):
        grc_dir = tmp_path / ".autogrc"
        grc_dir.mkdir()
        (grc_dir / "config.yaml").write_text("", encoding="utf-8")
        assert load_project_config(tmp_path) == {}

    def test_invalid_yaml_returns_empty(self, tmp_path: Path):
        grc_dir = tmp_path / ".autogrc"
        grc_dir.mkdir()
        (grc_dir / "config.yaml").write_text("data: [unclosed", encoding="utf-8")
        assert load_project_config(tmp_path) == {}


class TestGetEffectiveConfig:
    def test_defaults_applied(self, tmp_project: Path):
        config = get_effective_config(tmp_project)
        assert config["data"]["match"] == "control"
        assert config["mapping"]["sort_key"] == "ID"
        assert config["ci"]["exit_codes"]["critical"] == 1

    def test_project_overrides_defaults(self, initialized_project: Path):
        config = get_effective_config(initialized_project)
        assert config["project"]["name"] == "test-project"
        assert config["data"]["snapshot"] == "data.yaml"
        assert config["data"]["match"] == "control"

    def test_cli_overrides_project(self, initialized_project: Path):
        config = get_effective_config(
            initialized_project,
            cli_overrides={"data": {"snapshot": "other.json"}},
        )
        assert config["data"]["snapshot"] == "other.json"

    def test_defaults_not_shared(self, tmp_project: Path):
        first = get_effective_config(tmp_project)
        first["ci"]["fail_on"].append("warning")
        assert get_effective_config(tmp_project)["ci"]["fail_on"] == ["critical"]


class TestResolvePaths:
    def test_relative_snapshot(self, initialized_project: Path):
        config = get_effective_config(initialized_project)
        assert resolve_snapshot_path(config) == initialized_project / "data.yaml"

    def test_absolute_snapshot(self, tmp_path: Path):
        target = tmp_path / "elsewhere.json"
        config = get_effective_config(tmp_path, {"data": {"snapshot": str(target)}})
        assert resolve_snapshot_path(config) == target

    def test_reports_dir(self, tmp_project: Path):
        config = get_effective_config(tmp_project)
        assert resolve_reports_dir(config) == tmp_project / ".autogrc" / "reports"
