"""
bootstrap/config.py - Engine configuration

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import os
import json
import logging

from ..core.constants import (
    DEFAULT_CONCRETE_GRADE,
    DEFAULT_PEKERJA_RATE,
    DEFAULT_TUKANG_RATE,
    FORMWORK_PRODUCTIVITY_M2_DAY,
    REBAR_PRODUCTIVITY_KG_DAY,
    STOCK_BAR_LENGTH_M,
)

logger = logging.getLogger("bootstrap.config")


@dataclass
class RatesConfig:
    """Daily wages per labor tier."""

    tukang_rate: float = DEFAULT_TUKANG_RATE
    pekerja_rate: float = DEFAULT_PEKERJA_RATE

    @classmethod
    def from_env(cls) -> "RatesConfig":
        return cls(
            tukang_rate=float(os.getenv("RABCALC_TUKANG_RATE", str(DEFAULT_TUKANG_RATE))),
            pekerja_rate=float(os.getenv("RABCALC_PEKERJA_RATE", str(DEFAULT_PEKERJA_RATE))),
        )


@dataclass
class DefaultsConfig:
    """Values used when a request leaves a field out."""

    concrete_grade: str = DEFAULT_CONCRETE_GRADE
    profit_percent: float = 20.0
    waste_percent: float = 5.0
    formwork_productivity: float = FORMWORK_PRODUCTIVITY_M2_DAY  # m2/day
    rebar_productivity: float = REBAR_PRODUCTIVITY_KG_DAY  # kg/day
    stock_bar_length_m: float = STOCK_BAR_LENGTH_M

    @classmethod
    def from_env(cls) -> "DefaultsConfig":
        return cls(
            concrete_grade=os.getenv("RABCALC_CONCRETE_GRADE", DEFAULT_CONCRETE_GRADE),
            profit_percent=float(os.getenv("RABCALC_PROFIT_PERCENT", "20")),
            waste_percent=float(os.getenv("RABCALC_WASTE_PERCENT", "5")),
            formwork_productivity=float(os.getenv(
                "RABCALC_FORMWORK_PRODUCTIVITY", str(FORMWORK_PRODUCTIVITY_M2_DAY))),
            rebar_productivity=float(os.getenv(
                "RABCALC_REBAR_PRODUCTIVITY", str(REBAR_PRODUCTIVITY_KG_DAY))),
            stock_bar_length_m=float(os.getenv(
                "RABCALC_STOCK_BAR_LENGTH", str(STOCK_BAR_LENGTH_M))),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("RABCALC_LOG_LEVEL", "INFO"),
            format=os.getenv("RABCALC_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("RABCALC_LOG_FILE"),
            json_logs=os.getenv("RABCALC_JSON_LOGS", "false").lower() == "true",
        )


@dataclass
class EngineConfig:
    """Root configuration for the estimation engine."""

    environment: str = "development"
    debug: bool = False
    version: str = "0.1.0"

    rates: RatesConfig = field(default_factory=RatesConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Additional settings
    settings: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create configuration from environment variables."""
        return cls(
            environment=os.getenv("RABCALC_ENVIRONMENT", "development"),
            debug=os.getenv("RABCALC_DEBUG", "false").lower() == "true",
            rates=RatesConfig.from_env(),
            defaults=DefaultsConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "EngineConfig":
        """Load configuration from JSON file."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Create config from dictionary."""
        config = cls.from_env()

        # Override with file values
        if "environment" in data:
            config.environment = data["environment"]
        if "debug" in data:
            config.debug = data["debug"]

        for section in ("rates", "defaults", "logging"):
            if section in data:
                target = getattr(config, section)
                for key, value in data[section].items():
                    if hasattr(target, key):
                        setattr(target, key, value)
                    else:
                        logger.warning(f"Unknown config key ignored: {section}.{key}")

        if "settings" in data:
            config.settings.update(data["settings"])

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "version": self.version,
            "rates": {
                "tukang_rate": self.rates.tukang_rate,
                "pekerja_rate": self.rates.pekerja_rate,
            },
            "defaults": {
                "concrete_grade": self.defaults.concrete_grade,
                "profit_percent": self.defaults.profit_percent,
                "waste_percent": self.defaults.waste_percent,
                "formwork_productivity": self.defaults.formwork_productivity,
                "rebar_productivity": self.defaults.rebar_productivity,
                "stock_bar_length_m": self.defaults.stock_bar_length_m,
            },
            "logging": {
                "level": self.logging.level,
                "log_file": self.logging.log_file,
                "json_logs": self.logging.json_logs,
            },
        }


# Global config instance
_config: Optional[EngineConfig] = None


def load_config(filepath: str = None) -> EngineConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        EngineConfig instance
    """
    global _config

    if filepath:
        _config = EngineConfig.from_file(filepath)
    else:
        # Try default locations
        default_paths = [
            "./rabcalc.json",
            "./config/rabcalc.json",
            os.path.expanduser("~/.rabcalc/config.json"),
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = EngineConfig.from_file(path)
                return _config

        # Fall back to environment
        _config = EngineConfig.from_env()

    logger.info(f"Configuration loaded: environment={_config.environment}")
    return _config


def get_config() -> EngineConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads."""
    global _config
    _config = None
