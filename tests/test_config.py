"""Tests for config — crosstype.toml loading."""

from __future__ import annotations

import pytest

from crosstype.config import CrosstypeConfig, find_config, load_config


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "crosstype.toml"
    path.write_text(
        "[output]\nno_version_header = true\n"
        '[reasonml.type_mappings]\nUuid = "string"\n'
        '[typescript.type_mappings]\nUuid = "string"\ndatetime = "string"\n'
    )
    return path


class TestLoadConfig:
    def test_output_section(self, config_file):
        config = load_config(config_file)
        assert config.output.no_version_header is True

    def test_language_mappings(self, config_file):
        config = load_config(config_file)
        assert config.languages["reasonml"].type_mappings == {"Uuid": "string"}
        assert config.languages["typescript"].type_mappings["datetime"] == "string"

    def test_defaults(self, tmp_path):
        path = tmp_path / "crosstype.toml"
        path.write_text("")
        config = load_config(path)
        assert config.output.no_version_header is False
        assert config.languages == {}

    def test_non_string_mapping_rejected(self, tmp_path):
        path = tmp_path / "crosstype.toml"
        path.write_text("[reasonml.type_mappings]\nUuid = 3\n")
        with pytest.raises(ValueError, match="Uuid"):
            load_config(path)


class TestOptions:
    def test_options_for_language(self, config_file):
        options = load_config(config_file).options_for("reasonml")
        assert options.type_mappings["Uuid"] == "string"
        assert options.no_version_header is True

    def test_unknown_language_gets_empty_table(self, config_file):
        options = load_config(config_file).options_for("swift")
        assert dict(options.type_mappings) == {}

    def test_flag_overrides_file(self):
        options = CrosstypeConfig().options_for("reasonml", no_version_header=True)
        assert options.no_version_header is True

    def test_options_are_read_only(self, config_file):
        options = load_config(config_file).options_for("reasonml")
        with pytest.raises(TypeError):
            options.type_mappings["Uuid"] = "int"  # type: ignore[index]


class TestFindConfig:
    def test_walks_up(self, config_file, tmp_path):
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == config_file.resolve()

    def test_from_file_path(self, config_file, tmp_path):
        ir_file = tmp_path / "module.json"
        ir_file.write_text("{}")
        assert find_config(ir_file) == config_file.resolve()

    def test_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="No crosstype.toml found"):
            find_config(tmp_path)
