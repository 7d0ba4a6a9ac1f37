"""
GravityOS Configuration Loader

Configuration management that provides:
- JSON configuration file loading
- Configuration validation
- Default value handling
- Runtime configuration updates

Author: YSNRFD
Version: 1.0.0
"""

import json
import threading
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Optional

from gravityos.exceptions import BootFailureError, ConfigValidationError


@dataclass
class SystemConfig:
    """Identification settings shown at boot and by 'about'."""
    name: str = "GR4V1TYOS"
    version: str = "4.0"
    boot_message: str = "Welcome to GR4V1TYOS v4.0"


@dataclass
class FilesystemConfig:
    """Virtual filesystem and disk image settings."""
    disk_file: str = "savdisk.txt"
    autosave: bool = True
    encoding: str = "utf-8"
    # None means unbounded
    max_dirs_per_dir: Optional[int] = None
    max_files_per_dir: Optional[int] = None


@dataclass
class AppsConfig:
    """Installed app settings."""
    apps_dir: str = "/apps"
    extension: str = ".savapp"


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    log_file: Optional[str] = None
    console_output: bool = True


@dataclass
class ShellConfig:
    """Shell configuration settings."""
    prompt: str = "GR4V1TYOS:"
    wipe_confirmation: str = "yes"


@dataclass
class Config:
    """
    Main configuration container.

    Holds all configuration settings for a session.
    """
    system: SystemConfig = field(default_factory=SystemConfig)
    filesystem: FilesystemConfig = field(default_factory=FilesystemConfig)
    apps: AppsConfig = field(default_factory=AppsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    shell: ShellConfig = field(default_factory=ShellConfig)


_LOG_LEVELS = ('DEBUG', 'INFO', 'NOTICE', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigLoader:
    """
    Configuration loader and manager.

    Handles loading configuration from JSON files, validating
    settings, and providing runtime configuration access.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('config.json')
        >>> print(config.filesystem.disk_file)
        savdisk.txt
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._loaded = False
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            BootFailureError: If the file cannot be loaded or parsed
            ConfigValidationError: If a value has the wrong type
        """
        path = Path(config_path)

        if not path.exists():
            raise BootFailureError(
                f"Configuration file not found: {config_path}",
                subsystem="config"
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise BootFailureError(
                f"Invalid JSON in configuration file: {e}",
                subsystem="config"
            )
        except OSError as e:
            raise BootFailureError(
                f"Cannot read configuration file: {e}",
                subsystem="config"
            )

        self._config = self.parse(data)
        self._loaded = True
        return self._config

    def parse(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into a validated Config object."""
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration root must be an object")

        config = Config()

        for section in fields(Config):
            if section.name not in data:
                continue
            section_data = data[section.name]
            if not isinstance(section_data, dict):
                raise ConfigValidationError(
                    f"Section '{section.name}' must be an object",
                    key=section.name
                )

            current = getattr(config, section.name)
            known = {f.name for f in fields(current)}
            unknown = set(section_data) - known
            if unknown:
                key = f"{section.name}.{sorted(unknown)[0]}"
                raise ConfigValidationError(f"Invalid configuration key: {key}", key=key)

            values = {**asdict(current), **section_data}
            setattr(config, section.name, type(current)(**values))

        self.validate(config)
        return config

    @staticmethod
    def validate(config: Config) -> None:
        """
        Check value ranges that the dataclass types cannot express.

        Raises:
            ConfigValidationError: On the first invalid value
        """
        fs = config.filesystem
        if not isinstance(fs.disk_file, str) or not fs.disk_file:
            raise ConfigValidationError(
                "disk_file must be a non-empty string", key="filesystem.disk_file"
            )
        for key in ('max_dirs_per_dir', 'max_files_per_dir'):
            limit = getattr(fs, key)
            if limit is not None and (not isinstance(limit, int) or limit < 1):
                raise ConfigValidationError(
                    f"{key} must be a positive integer or null",
                    key=f"filesystem.{key}"
                )

        apps = config.apps
        if not apps.apps_dir.startswith('/'):
            raise ConfigValidationError(
                "apps_dir must be an absolute virtual path", key="apps.apps_dir"
            )
        if not apps.extension.startswith('.'):
            raise ConfigValidationError(
                "extension must start with '.'", key="apps.extension"
            )

        if config.logging.level not in _LOG_LEVELS:
            raise ConfigValidationError(
                f"Unknown log level: {config.logging.level}", key="logging.level"
            )

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if not self._loaded:
            return Config()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'filesystem.disk_file')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        obj: Any = self._config

        for part in key.split('.'):
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default

        return obj

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value at runtime.

        Args:
            key: Dot-notation key (e.g., 'filesystem.autosave')
            value: Value to set

        Note:
            This modifies configuration at runtime but does not
            persist changes to disk.
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts[:-1]:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                raise ConfigValidationError(f"Invalid configuration key: {key}", key=key)

        final_key = parts[-1]
        if not hasattr(obj, final_key):
            raise ConfigValidationError(f"Invalid configuration key: {key}", key=key)
        setattr(obj, final_key, value)
        self._loaded = True

    def reset(self) -> None:
        """Drop any loaded configuration and go back to defaults."""
        self._config = Config()
        self._loaded = False

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self._config)


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    loader = ConfigLoader()
    return loader.config
