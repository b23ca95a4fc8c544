"""
Settings management for cmdguard.

This module provides functions to manage application settings,
including loading, saving, and accessing configuration values.
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from cmdguard.executor import platform_utils
from cmdguard.utils.logging import get_logger

logger = get_logger("config.settings")


class Settings:
    """
    Settings manager for cmdguard.

    This class handles loading, saving, and accessing application settings.
    """

    # Default settings
    DEFAULT_SETTINGS = {
        "ui": {
            "use_colors": True,
            "show_dry_run": True,
        },
        "execution": {
            "shell": "",
            "timeout": 0,
        },
        "advanced": {
            "debug_mode": False,
            "log_level": "WARNING",
            "log_file": "",
        },
    }

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the settings manager.

        Args:
            config_dir (Optional[Path]): Override for the configuration directory.
        """
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)
        self.config_dir = Path(config_dir) if config_dir else self._get_config_dir()
        self.config_file = self.config_dir / "settings.json"

        if self.config_file.exists():
            self.load()

    def _get_config_dir(self) -> Path:
        """
        Get the configuration directory for the application.

        Returns:
            Path: Path to the configuration directory.
        """
        if platform_utils.is_windows():
            # Windows: %APPDATA%\cmdguard
            return Path(os.environ.get("APPDATA", "")) / "cmdguard"

        elif platform_utils.is_macos():
            # macOS: ~/Library/Application Support/cmdguard
            return Path.home() / "Library" / "Application Support" / "cmdguard"

        else:
            # Linux/Unix: ~/.config/cmdguard
            xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
            if xdg_config_home:
                return Path(xdg_config_home) / "cmdguard"
            else:
                return Path.home() / ".config" / "cmdguard"

    def load(self) -> bool:
        """
        Load settings from the configuration file.

        Returns:
            bool: True if successful, False otherwise.
        """
        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                loaded_settings = json.load(f)

            if not isinstance(loaded_settings, dict):
                raise ValueError("settings file must contain a JSON object")

            self._update_nested_dict(self.settings, loaded_settings)
            return True

        except (json.JSONDecodeError, ValueError, OSError) as e:
            logger.warning(f"Error loading settings: {e}")
            return False

    def save(self) -> bool:
        """
        Save settings to the configuration file.

        Returns:
            bool: True if successful, False otherwise.
        """
        try:
            os.makedirs(self.config_dir, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(self.settings, f, indent=2)
            return True

        except OSError as e:
            logger.warning(f"Error saving settings: {e}")
            return False

    def _update_nested_dict(self, target: Dict, source: Dict) -> None:
        """
        Update a nested dictionary with values from another dictionary.

        Args:
            target (Dict): Target dictionary to update.
            source (Dict): Source dictionary with new values.
        """
        for key, value in source.items():
            if (
                key in target
                and isinstance(target[key], dict)
                and isinstance(value, dict)
            ):
                self._update_nested_dict(target[key], value)
            else:
                target[key] = value

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a setting value.

        Args:
            section (str): Settings section.
            key (str): Setting key.
            default (Any): Default value if not found.

        Returns:
            Any: Setting value or default.
        """
        try:
            return self.settings[section][key]
        except (KeyError, TypeError):
            return default

    def set(self, section: str, key: str, value: Any) -> None:
        """
        Set a setting value.

        Args:
            section (str): Settings section.
            key (str): Setting key.
            value (Any): Setting value.
        """
        self.settings.setdefault(section, {})[key] = value

    def get_all(self) -> Dict[str, Dict[str, Any]]:
        """
        Get all settings.

        Returns:
            Dict[str, Dict[str, Any]]: All settings.
        """
        return copy.deepcopy(self.settings)

    def reset_to_defaults(self) -> None:
        """Reset all settings to default values."""
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)

    def get_log_file_path(self, debug: bool = False) -> Optional[Path]:
        """
        Get the path to the log file.

        Args:
            debug (bool): Treat the run as debug mode even if not configured.

        Returns:
            Optional[Path]: Path to the log file, or None if not set.
        """
        log_file = self.get("advanced", "log_file", "")

        if log_file:
            return Path(log_file)
        elif debug or self.get("advanced", "debug_mode", False):
            # Default log file in config directory if debug mode is enabled
            return self.config_dir / "cmdguard.log"
        else:
            return None

    def get_shell(self) -> Optional[str]:
        """
        Get the shell executable configured for running commands.

        Returns:
            Optional[str]: The configured shell, or None for the system default.
        """
        return self.get("execution", "shell", "") or None

    def get_timeout(self) -> Optional[float]:
        """
        Get the execution timeout.

        Returns:
            Optional[float]: Timeout in seconds, or None when unlimited.
        """
        try:
            timeout = float(self.get("execution", "timeout", 0) or 0)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid execution.timeout setting")
            return None
        return timeout if timeout > 0 else None


# Global settings instance
settings = Settings()
