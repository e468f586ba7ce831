"""
Unit tests for engine configuration.
"""

import json

from rabcalc.bootstrap.config import (
    EngineConfig,
    get_config,
    load_config,
)


class TestDefaults:
    """Tests for built-in defaults."""

    def test_rates(self, config):
        assert config.rates.tukang_rate == 150000
        assert config.rates.pekerja_rate == 135000

    def test_defaults(self, config):
        assert config.defaults.concrete_grade == "K-225"
        assert config.defaults.profit_percent == 20.0
        assert config.defaults.waste_percent == 5.0
        assert config.defaults.formwork_productivity == 10.0
        assert config.defaults.rebar_productivity == 200.0
        assert config.defaults.stock_bar_length_m == 12.0

    def test_to_dict(self, config):
        data = config.to_dict()
        assert data["rates"]["tukang_rate"] == 150000
        assert data["logging"]["level"] == "INFO"


class TestEnvironment:
    """Tests for RABCALC_* environment overrides."""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("RABCALC_TUKANG_RATE", "175000")
        monkeypatch.setenv("RABCALC_PROFIT_PERCENT", "15")
        monkeypatch.setenv("RABCALC_CONCRETE_GRADE", "K-250")
        monkeypatch.setenv("RABCALC_JSON_LOGS", "true")

        config = EngineConfig.from_env()

        assert config.rates.tukang_rate == 175000.0
        assert config.rates.pekerja_rate == 135000.0
        assert config.defaults.profit_percent == 15.0
        assert config.defaults.concrete_grade == "K-250"
        assert config.logging.json_logs is True


class TestFile:
    """Tests for JSON config files."""

    def test_from_file(self, tmp_path):
        path = tmp_path / "rabcalc.json"
        path.write_text(json.dumps({
            "environment": "production",
            "rates": {"pekerja_rate": 120000},
            "defaults": {"waste_percent": 7.5, "bogus": 1},
            "settings": {"region": "Jawa Timur"},
        }))

        config = EngineConfig.from_file(str(path))

        assert config.environment == "production"
        assert config.rates.pekerja_rate == 120000
        assert config.rates.tukang_rate == 150000
        assert config.defaults.waste_percent == 7.5
        assert not hasattr(config.defaults, "bogus")
        assert config.settings["region"] == "Jawa Timur"

    def test_missing_file_falls_back(self, tmp_path):
        config = EngineConfig.from_file(str(tmp_path / "absent.json"))
        assert config.defaults.profit_percent == 20.0

    def test_load_from_default_location(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "rabcalc.json").write_text(json.dumps({"environment": "staging"}))
        assert load_config().environment == "staging"
        assert get_config().environment == "staging"

    def test_get_config_caches(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert get_config() is get_config()
