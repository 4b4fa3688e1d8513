"""
User configuration management for PhotoSweep.

Supports configuration from multiple sources (in order of priority):
1. Runtime parameters (highest priority)
2. Environment variables
3. User config file (~/.photosweep/config.json)
4. Default values from config.py (lowest priority)

Only operational knobs are configurable here. Quality breakpoints, sample
sizes and the similarity threshold are fixed in config.py.

Example config.json:
{
    "default_workers": 1,
    "exclude_failed_fingerprints": false,
    "max_image_pixels": 500000000
}
"""

import json
import os
from pathlib import Path
from typing import Any, Optional
import logging

from .config import CONFIG_DIR, DEFAULT_MAX_IMAGE_PIXELS, DEFAULT_WORKERS

logger = logging.getLogger(__name__)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


class UserConfig:
    """
    Manages user configuration from file and environment variables.

    Attributes are lazy-loaded and cached for performance.
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
        env_dir = os.getenv('PHOTOSWEEP_CONFIG_DIR')
        if env_dir:
            return Path(env_dir)
        return Path(CONFIG_DIR)

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
                return data if isinstance(data, dict) else {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {self.config_file_path}: {e}")
            return {}

    def _get_config_data(self) -> dict:
        """Get cached config data (lazy loading)."""
        if self._config_data is None:
            self._config_data = self._load_config_file()
        return self._config_data

    def reload(self):
        """Reload configuration from file."""
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
                # Try to parse as JSON for numbers and booleans
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
        """Number of sampling workers (1 = sequential)."""
        value = self.get('default_workers', default=DEFAULT_WORKERS, env_var='PHOTOSWEEP_WORKERS')
        try:
            return max(1, int(value))
        except (TypeError, ValueError):
            return DEFAULT_WORKERS

    @property
    def exclude_failed_fingerprints(self) -> bool:
        """Keep photos whose fingerprint sample failed out of clustering."""
        return _as_bool(self.get(
            'exclude_failed_fingerprints',
            default=False,
            env_var='PHOTOSWEEP_EXCLUDE_FAILED'
        ))

    @property
    def max_image_pixels(self) -> Optional[int]:
        """
        Maximum image size in pixels (decompression bomb limit).

        null in the config file or environment disables the limit. Values
        that are not a positive whole number fall back to the default.
        """
        value = self.get(
            'max_image_pixels',
            default=DEFAULT_MAX_IMAGE_PIXELS,
            env_var='PHOTOSWEEP_MAX_PIXELS'
        )
        if value is None:
            return None
        try:
            pixels = 0 if isinstance(value, bool) else int(value)
        except (TypeError, ValueError):
            pixels = 0
        if pixels <= 0:
            logger.warning(f"Invalid max_image_pixels {value!r}, using {DEFAULT_MAX_IMAGE_PIXELS:,}")
            return DEFAULT_MAX_IMAGE_PIXELS
        return pixels

    def create_example_config(self) -> bool:
        """Create an example configuration file."""
        example_config = {
            "_comment": "PhotoSweep User Configuration",
            "default_workers": DEFAULT_WORKERS,
            "exclude_failed_fingerprints": False,
            "max_image_pixels": DEFAULT_MAX_IMAGE_PIXELS,
        }

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
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
