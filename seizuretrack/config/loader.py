"""
Configuration loader
Supports loading configuration from TOML and YAML files, with environment variable override support
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import toml
import yaml

logger = logging.getLogger(__name__)

APP_HOME_ENV = "SEIZURETRACK_HOME"


def get_app_home() -> Path:
    """Get the application home directory

    ``$SEIZURETRACK_HOME`` wins over the standard ``~/.config/seizuretrack``.
    Kept free of other package imports, the logger depends on this module.
    """
    override = os.getenv(APP_HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "seizuretrack"


class ConfigLoader:
    """Configuration loader class"""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or self._get_default_config_file()
        self._config: Dict[str, Any] = {}

    def _get_default_config_file(self) -> str:
        """Get default configuration file path

        Strategy:
        1. Use <app home>/config.toml
        2. If file doesn't exist, it is created from the default template during load()
        """
        user_config_file = get_app_home() / "config.toml"
        logger.info(f"Using user configuration file: {user_config_file}")
        return str(user_config_file)

    def load(self) -> Dict[str, Any]:
        """Load configuration, create default configuration if it doesn't exist"""
        config_path = Path(self.config_file)

        if not config_path.exists():
            logger.info(f"Configuration file doesn't exist: {self.config_file}")
            self._create_default_config(config_path)

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                config_content = f.read()

            config_content = self._replace_env_vars(config_content)

            # Choose parser based on file extension
            if self.config_file.endswith(".toml"):
                self._config = toml.loads(config_content)
            else:
                self._config = yaml.safe_load(config_content) or {}

            logger.info(f"✓ Configuration file loaded successfully: {self.config_file}")
            return self._config

        except (yaml.YAMLError, toml.TomlDecodeError) as e:
            logger.error(f"Configuration file parsing error: {e}")
            raise
        except Exception as e:
            logger.error(f"Configuration loading failed: {e}")
            raise

    def _create_default_config(self, config_path: Path) -> None:
        """Create default configuration file"""
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)

            with open(config_path, "w", encoding="utf-8") as f:
                f.write(self._get_default_config_content(config_path.suffix))

            logger.info(f"✓ Default configuration file created: {config_path}")

        except Exception as e:
            logger.error(f"Failed to create default configuration file: {e}")
            raise

    def _get_default_config_content(self, suffix: str = ".toml") -> str:
        """Get default configuration content"""
        home = get_app_home()
        defaults = {
            "server": {"host": "127.0.0.1", "port": 8000, "debug": False},
            "database": {"path": str(home / "seizuretrack.db")},
            "logging": {
                "level": "INFO",
                "logs_dir": str(home / "logs"),
                "file_name": "seizuretrack.log",
                "error_file_name": "error.log",
                "max_file_size": "10MB",
                "backup_count": 5,
            },
            "store": {"cascade_medication_reminders": True},
            "reminders": {"check_interval": 60, "notification_history": 50},
            "reports": {
                "default_range": "30d",
                "week_starts_on": "sunday",
                "output_dir": str(home / "reports"),
            },
        }

        if suffix in (".yaml", ".yml"):
            return yaml.safe_dump(defaults, sort_keys=False)

        header = (
            "# SeizureTrack configuration file\n"
            f"# Location: {home / 'config.toml'}\n\n"
        )
        return header + toml.dumps(defaults)

    def _replace_env_vars(self, content: str) -> str:
        """Replace environment variable placeholders"""

        def replace_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) else ""
            return os.getenv(var_name, default_value)

        # Match ${VAR_NAME} or ${VAR_NAME:default_value} format
        pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"
        return re.sub(pattern, replace_var, content)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value, supports dot-separated nested keys"""
        keys = key.split(".")
        value = self._config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> bool:
        """Set configuration value, supports dot-separated nested keys"""
        keys = key.split(".")
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
        return self.save()

    def save(self) -> bool:
        """Save configuration to file"""
        try:
            config_path = Path(self.config_file)
            config_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.config_file, "w", encoding="utf-8") as f:
                if self.config_file.endswith(".toml"):
                    toml.dump(self._config, f)
                else:
                    yaml.safe_dump(self._config, f, sort_keys=False)

            logger.info(f"✓ Configuration saved to: {self.config_file}")
            return True

        except Exception as e:
            logger.error(f"Failed to save configuration: {e}")
            return False


def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """Convenience function for loading configuration"""
    loader = get_config(config_file)
    if loader._config:  # type: ignore[attr-defined]
        return loader._config  # type: ignore[attr-defined]
    return loader.load()


# Global configuration instance
_config_instance: Optional[ConfigLoader] = None


def get_config(config_file: Optional[str] = None) -> ConfigLoader:
    """Get global configuration instance"""
    global _config_instance
    if config_file is not None:
        _config_instance = ConfigLoader(config_file)
        _config_instance.load()
    elif _config_instance is None:
        _config_instance = ConfigLoader()
        _config_instance.load()
    return _config_instance
