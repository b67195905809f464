"""
Configuration Manager for sshdeck
Handles application settings stored as JSON
"""

import json
import logging
import os
from typing import Any, Dict, Optional, Tuple

from .platform_utils import get_config_dir, get_ssh_config_path

logger = logging.getLogger(__name__)

# Increment this whenever the configuration format changes
CONFIG_VERSION = 1

DEFAULT_DEBOUNCE_MS = 100
DEFAULT_STATUS_TIMEOUT = 6


class Config:
    """Configuration manager for sshdeck"""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or os.path.join(get_config_dir(), 'config.json')
        self.config_data = self.load_json_config()

    def get_default_config(self) -> Dict[str, Any]:
        """Return default configuration values"""
        return {
            'config_version': CONFIG_VERSION,
            'ssh_config_path': None,
            'ssh_command': 'ssh',
            'key_debounce_ms': DEFAULT_DEBOUNCE_MS,
            'status_timeout': DEFAULT_STATUS_TIMEOUT,
        }

    def _ensure_config_defaults(self, config: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
        """Fill in keys missing from an older file."""
        updated = False
        for key, value in self.get_default_config().items():
            if key not in config:
                config[key] = value
                updated = True
        return config, updated

    def load_json_config(self) -> Dict[str, Any]:
        """Load configuration from JSON file"""
        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, 'r') as f:
                    config = json.load(f)
                if not isinstance(config, dict):
                    raise ValueError("configuration root must be an object")

                # Purge outdated configurations
                try:
                    stored_version = int(config.get('config_version', 0))
                except (TypeError, ValueError):
                    stored_version = 0
                if stored_version < CONFIG_VERSION:
                    backup_file = f"{self.config_file}.bak"
                    try:
                        os.replace(self.config_file, backup_file)
                        logger.warning(
                            "Outdated config version %s detected; backing up to %s and regenerating defaults",
                            stored_version,
                            backup_file,
                        )
                    except OSError:
                        os.remove(self.config_file)
                        logger.warning(
                            "Outdated config version %s detected; old config removed and new defaults generated",
                            stored_version,
                        )

                    config = self.get_default_config()
                    self.save_json_config(config)
                else:
                    config, updated = self._ensure_config_defaults(config)
                    if updated:
                        self.save_json_config(config)

                return config
            else:
                # Create default config
                default_config = self.get_default_config()
                self.save_json_config(default_config)
                return default_config
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load JSON config: {e}")
            return self.get_default_config()

    def save_json_config(self, config_data: Dict[str, Any] = None):
        """Save configuration to JSON file"""
        try:
            if config_data is None:
                config_data = self.config_data

            os.makedirs(os.path.dirname(self.config_file), exist_ok=True)
            with open(self.config_file, 'w') as f:
                json.dump(config_data, f, indent=2)

            logger.debug("Configuration saved to JSON file")
        except OSError as e:
            logger.error(f"Failed to save JSON config: {e}")

    def get_setting(self, key: str, default: Any = None) -> Any:
        return self.config_data.get(key, default)

    def set_setting(self, key: str, value: Any):
        self.config_data[key] = value
        self.save_json_config()

    # --- Typed helpers ----------------------------------------------------

    def get_ssh_config_path(self) -> str:
        path = self.get_setting('ssh_config_path') or get_ssh_config_path()
        return os.path.abspath(os.path.expanduser(os.path.expandvars(str(path))))

    def get_debounce_seconds(self) -> float:
        """Key repeat window in seconds; invalid values fall back to the default."""
        raw = self.get_setting('key_debounce_ms', DEFAULT_DEBOUNCE_MS)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            logger.warning("Invalid key_debounce_ms %r; using %s", raw, DEFAULT_DEBOUNCE_MS)
            value = DEFAULT_DEBOUNCE_MS
        return max(value, 0.0) / 1000.0

    def get_status_timeout(self) -> float:
        """Seconds before a non-error status message clears; 0 keeps it."""
        raw = self.get_setting('status_timeout', DEFAULT_STATUS_TIMEOUT)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            logger.warning("Invalid status_timeout %r; using %s", raw, DEFAULT_STATUS_TIMEOUT)
            value = DEFAULT_STATUS_TIMEOUT
        return max(value, 0.0)
