"""
User configuration management for photoprint.

Supports configuration from multiple sources (in order of priority):
1. Command-line flags (highest priority, applied by the CLI)
2. Environment variables
3. User config file (~/.photoprint/config.json)
4. Default values from config.py (lowest priority)

Example config.json:
{
    "default_workers": 8,
    "fuzz_factor": 2,
    "low_threshold": 10,
    "high_threshold": 1000,
    "fingerprint_size": [100, 100],
    "bit_depth": 32,
    "extensions": [".jpg", ".jpeg", ".png", ".tif"]
}

The distortion thresholds have no built-in default.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional
import logging

from .config import (
    DEFAULT_WORKERS,
    DEFAULT_FUZZ_FACTOR,
    FINGERPRINT_SIZE,
    FINGERPRINT_BIT_DEPTH,
    IMAGE_EXTENSIONS,
)
from .utils.validators import parse_extensions, parse_size

logger = logging.getLogger(__name__)


class UserConfig:
    """
    Manages user configuration from file and environment variables.

    The config file is read lazily and cached.
    """

    _instance: Optional['UserConfig'] = None
    _config_data: Optional[dict] = None

    def __new__(cls):
        """Singleton pattern to ensure one config instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        env_dir = os.getenv('PHOTOPRINT_CONFIG_DIR')
        if env_dir:
            return Path(env_dir)
        return Path.home() / '.photoprint'

    @property
    def config_file_path(self) -> Path:
        """Get the configuration file path."""
        return self.config_dir / 'config.json'

    def _load_config_file(self) -> dict:
        """Load configuration from JSON file."""
        if not self.config_file_path.exists():
            return {}

        try:
            with open(self.config_file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                logger.debug(f"Loaded configuration from {self.config_file_path}")
                return data
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {self.config_file_path}: {e}")
            return {}

    def _get_config_data(self) -> dict:
        """Get cached config data (lazy loading)."""
        if self._config_data is None:
            self._config_data = self._load_config_file()
        return self._config_data

    def reload(self):
        """Drop the cached file contents so the next read hits the disk."""
        self._config_data = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Get a configuration value with priority:
        1. Environment variable (if env_var specified)
        2. Config file
        3. Default value

        Args:
            key: Configuration key
            default: Default value if not found
            env_var: Optional environment variable name to check

        Returns:
            Configuration value
        """
        if env_var:
            env_value = os.getenv(env_var)
            if env_value is not None:
                # Try to parse as JSON for numbers and lists
                try:
                    return json.loads(env_value)
                except (json.JSONDecodeError, TypeError):
                    return env_value

        config_data = self._get_config_data()
        if key in config_data:
            return config_data[key]

        return default

    @property
    def default_workers(self) -> int:
        """Number of worker threads."""
        return self.get('default_workers', default=DEFAULT_WORKERS, env_var='PHOTOPRINT_WORKERS')

    @property
    def fuzz_factor(self) -> float:
        """Per-pixel tolerance applied before distortion scoring."""
        return self.get('fuzz_factor', default=DEFAULT_FUZZ_FACTOR, env_var='PHOTOPRINT_FUZZ')

    @property
    def low_threshold(self) -> Optional[float]:
        """Distortion below which images are identical. No default."""
        return self.get('low_threshold', env_var='PHOTOPRINT_LOW_THRESHOLD')

    @property
    def high_threshold(self) -> Optional[float]:
        """Distortion below which images are similar. No default."""
        return self.get('high_threshold', env_var='PHOTOPRINT_HIGH_THRESHOLD')

    @property
    def fingerprint_size(self) -> tuple[int, int]:
        """Fingerprint (width, height)."""
        size = self.get('fingerprint_size', default=FINGERPRINT_SIZE, env_var='PHOTOPRINT_SIZE')
        if isinstance(size, str):
            return parse_size(size)
        return tuple(size)

    @property
    def bit_depth(self) -> int:
        """Bit depth of normalized fingerprints."""
        return self.get('bit_depth', default=FINGERPRINT_BIT_DEPTH, env_var='PHOTOPRINT_BIT_DEPTH')

    @property
    def extensions(self) -> frozenset[str]:
        """Recognized image suffixes."""
        values = self.get('extensions', default=IMAGE_EXTENSIONS, env_var='PHOTOPRINT_EXTENSIONS')
        if isinstance(values, str):
            return parse_extensions(values)
        return parse_extensions(','.join(str(ext) for ext in values))

    def create_example_config(self) -> bool:
        """Create an example configuration file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        example_config = {
            "_comment": "photoprint user configuration",
            "default_workers": DEFAULT_WORKERS,
            "fuzz_factor": DEFAULT_FUZZ_FACTOR,
            "low_threshold": None,
            "high_threshold": None,
            "fingerprint_size": list(FINGERPRINT_SIZE),
            "bit_depth": FINGERPRINT_BIT_DEPTH,
            "extensions": sorted(IMAGE_EXTENSIONS),
        }

        try:
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example_config, f, indent=2)
            logger.info(f"Created example config file at {self.config_file_path}")
            return True
        except OSError as e:
            logger.error(f"Failed to create example config: {e}")
            return False


# Global instance
_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Get the global UserConfig instance."""
    return _user_config
