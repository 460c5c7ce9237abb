"""
Tests for loading and saving the JSON configuration.
"""

import json

from rainfx.config_manager import DEFAULT_CONFIG, load_config, save_config
from rainfx.storm import RainStorm


class TestLoadConfig:
    def test_missing_file_returns_defaults(self, tmp_path):
        config = load_config(DEFAULT_CONFIG, path=str(tmp_path / "nope.json"))
        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_file_values_override_defaults(self, tmp_path):
        path = tmp_path / "rain.json"
        path.write_text(json.dumps({"wind": 50, "base_dim": 0.8}), encoding="utf-8")
        config = load_config(DEFAULT_CONFIG, path=str(path))
        assert config["wind"] == 50
        assert config["base_dim"] == 0.8
        assert config["density"] == DEFAULT_CONFIG["density"]

    def test_malformed_file_returns_defaults(self, tmp_path, capsys):
        path = tmp_path / "rain.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_config(DEFAULT_CONFIG, path=str(path)) == DEFAULT_CONFIG
        assert "WARNING" in capsys.readouterr().out

    def test_non_object_returns_defaults(self, tmp_path):
        path = tmp_path / "rain.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert load_config(DEFAULT_CONFIG, path=str(path)) == DEFAULT_CONFIG


class TestSaveConfig:
    def test_save_creates_folder_and_is_readable(self, tmp_path):
        path = tmp_path / "config" / "rain.json"
        config = dict(DEFAULT_CONFIG, gravity=2000)
        assert save_config(config, path=str(path)) is True
        assert load_config(DEFAULT_CONFIG, path=str(path))["gravity"] == 2000

    def test_save_failure_reports_false(self, tmp_path, capsys):
        # A directory where the file should be makes open() fail
        path = tmp_path / "rain.json"
        path.mkdir()
        assert save_config(DEFAULT_CONFIG, path=str(path)) is False
        assert "ERROR" in capsys.readouterr().out


class TestNonFiniteConfig:
    def test_infinity_in_file_does_not_break_storm(self, tmp_path, rng):
        path = tmp_path / "rain.json"
        path.write_text('{"density": Infinity, "gravity": -Infinity}', encoding="utf-8")
        config = load_config(DEFAULT_CONFIG, path=str(path))
        storm = RainStorm(800, 600, options=config, rng=rng)
        assert storm.config.density == DEFAULT_CONFIG["density"]
        assert storm.config.gravity == DEFAULT_CONFIG["gravity"]
        assert len(storm.drops) == 150
