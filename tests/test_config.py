"""Tests for configuration loading."""

import pytest
from receipt_parser.config import DEFAULT_CONFIG, ConfigError, load_config


class TestLoadConfig:
    """Test suite for load_config."""

    def test_defaults_without_path(self):
        config = load_config()

        assert config == DEFAULT_CONFIG
        config['review']['tolerance'] = 5
        assert DEFAULT_CONFIG['review']['tolerance'] == 0.01

    def test_merges_over_defaults(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("max_workers: 2\nreview:\n  tolerance: 0.05\nextra: kept\n", encoding="utf-8")

        config = load_config(path)

        assert config['max_workers'] == 2
        assert config['review']['tolerance'] == 0.05
        assert config['input_patterns'] == ['*.txt']
        assert config['extra'] == 'kept'

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == DEFAULT_CONFIG

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("input_patterns: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)
