"""
bootstrap/ - Configuration, logging and entry points
"""

from .config import (
    EngineConfig,
    RatesConfig,
    DefaultsConfig,
    LoggingConfig,
    load_config,
    get_config,
    reset_config,
)

from .entrypoints import (
    cli_main,
    setup_logging,
)


__all__ = [
    # Config
    "EngineConfig",
    "RatesConfig",
    "DefaultsConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    "reset_config",
    # Entry points
    "cli_main",
    "setup_logging",
]
