"""Tests for config loading, validation, env var overrides and filters input."""

from pathlib import Path

import pytest

from pathfilter.config.loader import (
    ConfigError,
    is_path_input,
    load_config,
    read_filters_text,
)


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.filters.filters == ".github/filters.yml"
        assert cfg.filters.predicate_quantifier == "some"
        assert cfg.git.base == ""
        assert cfg.git.head == "HEAD"
        assert cfg.output.format == "terminal"
        assert cfg.output.list_files == "none"

    def test_custom_toml(self, tmp_path: Path):
        (tmp_path / ".pathfilter.toml").write_text(
            'version = "1.0"\n'
            "[filters]\n"
            'filters = "ci/filters.yml"\n'
            'predicate_quantifier = "every"\n'
            "[git]\n"
            'base = "main"\n'
            "[output]\n"
            'list_files = "json"\n'
        )
        cfg = load_config(tmp_path)
        assert cfg.filters.filters == "ci/filters.yml"
        assert cfg.filters.predicate_quantifier == "every"
        assert cfg.git.base == "main"
        assert cfg.output.list_files == "json"
        assert cfg.output.format == "terminal"

    def test_unknown_keys_ignored(self, tmp_path: Path):
        (tmp_path / ".pathfilter.toml").write_text('[git]\nremote = "origin"\n')
        assert load_config(tmp_path).git.head == "HEAD"

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text('[output]\nformat = "json"\n')
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.output.format == "json"

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / ".pathfilter.toml").write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_section_must_be_table(self, tmp_path: Path):
        (tmp_path / ".pathfilter.toml").write_text('git = "main"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            load_config(tmp_path)

    @pytest.mark.parametrize(
        "toml",
        [
            '[filters]\npredicate_quantifier = "most"\n',
            '[output]\nformat = "xml"\n',
            '[output]\nlist_files = "tsv"\n',
        ],
    )
    def test_invalid_values_raise(self, tmp_path: Path, toml: str):
        (tmp_path / ".pathfilter.toml").write_text(toml)
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestEnvVarOverrides:
    def test_base_and_head_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PATHFILTER_BASE", "develop")
        monkeypatch.setenv("PATHFILTER_HEAD", "feature")
        cfg = load_config(tmp_path)
        assert cfg.git.base == "develop"
        assert cfg.git.head == "feature"

    def test_env_beats_file(self, tmp_path: Path, monkeypatch):
        (tmp_path / ".pathfilter.toml").write_text('[output]\nformat = "json"\n')
        monkeypatch.setenv("PATHFILTER_FORMAT", "outputs")
        assert load_config(tmp_path).output.format == "outputs"

    def test_filters_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PATHFILTER_FILTERS", "other.yml")
        assert load_config(tmp_path).filters.filters == "other.yml"

    def test_list_files_override_case_insensitive(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PATHFILTER_LIST_FILES", "SHELL")
        assert load_config(tmp_path).output.list_files == "shell"

    def test_invalid_env_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PATHFILTER_PREDICATE_QUANTIFIER", "most")
        monkeypatch.setenv("PATHFILTER_FORMAT", "xml")
        cfg = load_config(tmp_path)
        assert cfg.filters.predicate_quantifier == "some"  # default unchanged
        assert cfg.output.format == "terminal"


class TestFiltersInput:
    def test_path_or_inline(self):
        assert is_path_input(".github/filters.yml")
        assert not is_path_input("src:\n  - src/**\n")

    def test_inline_yaml_returned_as_is(self):
        text = "src:\n  - src/**\n"
        assert read_filters_text(text) == text

    def test_reads_relative_to_repo_root(self, tmp_path: Path):
        (tmp_path / "filters.yml").write_text("docs: '**/*.md'\n")
        assert read_filters_text("filters.yml", tmp_path) == "docs: '**/*.md'\n"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="'nope.yml' not found"):
            read_filters_text("nope.yml", tmp_path)

    def test_directory_is_not_a_file(self, tmp_path: Path):
        (tmp_path / "ci").mkdir()
        with pytest.raises(ConfigError, match="is not a file"):
            read_filters_text("ci", tmp_path)
