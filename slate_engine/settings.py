"""
Engine Settings

Loads settings from environment variables and provides defaults.
Supports loading from a .env file using python-dotenv.

    SLATE_ENGINE_CONFIG     path to a JSON EngineConfig (sections or flat keys)
    SLATE_ENGINE_WEIGHTS    path to a JSON FeatureWeights file
    SLATE_ENGINE_LOG_LEVEL  logging level name (default WARNING)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from slate_engine.exceptions import ConfigurationError
from slate_engine.models.config import DEFAULT_CONFIG, EngineConfig
from slate_engine.models.weights import FeatureWeights

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@dataclass
class EngineSettings:
    """Where the engine's config and weights come from."""

    config_path: Optional[Path] = None
    weights_path: Optional[Path] = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "EngineSettings":
        """Load settings from environment variables (after reading .env when present)."""
        env_file = env_file or PROJECT_ROOT / ".env"
        if env_file.exists():
            load_dotenv(env_file)

        def _path_env(key: str) -> Optional[Path]:
            v = os.getenv(key)
            if not v:
                return None
            p = Path(v)
            return p if p.is_absolute() else (PROJECT_ROOT / p).resolve()

        return cls(
            config_path=_path_env("SLATE_ENGINE_CONFIG"),
            weights_path=_path_env("SLATE_ENGINE_WEIGHTS"),
            log_level=os.getenv("SLATE_ENGINE_LOG_LEVEL", "WARNING").upper(),
        )

    def load_config(self) -> EngineConfig:
        if self.config_path is None:
            return DEFAULT_CONFIG
        if not self.config_path.exists():
            raise ConfigurationError(f"Engine config not found: {self.config_path}")
        return EngineConfig.from_json_file(self.config_path)

    def load_weights(self, config: EngineConfig) -> FeatureWeights:
        """Weights file when configured, else the defaults for the config's scoring mode."""
        if self.weights_path is None:
            return FeatureWeights.defaults(config.scoring_mode)
        if not self.weights_path.exists():
            raise ConfigurationError(f"Weights file not found: {self.weights_path}")
        return FeatureWeights.from_json_file(self.weights_path)

    def configure_logging(self) -> None:
        level = logging.getLevelName(self.log_level)
        if not isinstance(level, int):
            raise ConfigurationError(f"Unknown log level: {self.log_level}")
        logging.getLogger("slate_engine").setLevel(level)
