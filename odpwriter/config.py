"""
odpwriter Configuration
=======================

Loads writer settings from odpwriter.yaml with environment variable
overrides.

Example odpwriter.yaml:

    disk_caching:
      enabled: true
      directory: /var/tmp/odp-cache
    archive:
      compression: deflated
      compresslevel: 6
    temp:
      directory: .
      prefix: odptmp
    logging:
      level: INFO
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "odpwriter.yaml"

_TRUE_VALUES = ("true", "1", "yes", "on")


# =============================================================================
# Configuration Data Classes
# =============================================================================

@dataclass
class DiskCachingConfig:
    """Spool drawing bytes through temporary files instead of memory."""
    enabled: bool = False
    directory: str = "."


@dataclass
class ArchiveConfig:
    """ZIP container settings."""
    compression: str = "deflated"           # deflated | stored
    compresslevel: Optional[int] = None     # None -> zlib default

    def __post_init__(self):
        valid = ("deflated", "stored")
        if self.compression not in valid:
            raise ValueError(f"Invalid compression {self.compression!r}, must be one of {valid}")
        if self.compresslevel is not None and not 0 <= self.compresslevel <= 9:
            raise ValueError(f"Invalid compresslevel {self.compresslevel!r}, must be within 0-9")


@dataclass
class TempConfig:
    """Where stream targets are staged."""
    directory: str = "."
    prefix: str = "odptmp"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"

    def __post_init__(self):
        self.level = self.level.upper()


@dataclass
class WriterConfig:
    """Root configuration container."""
    disk_caching: DiskCachingConfig = field(default_factory=DiskCachingConfig)
    archive: ArchiveConfig = field(default_factory=ArchiveConfig)
    temp: TempConfig = field(default_factory=TempConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for persistence."""
        return {
            "disk_caching": {
                "enabled": self.disk_caching.enabled,
                "directory": self.disk_caching.directory,
            },
            "archive": {
                "compression": self.archive.compression,
                "compresslevel": self.archive.compresslevel,
            },
            "temp": {
                "directory": self.temp.directory,
                "prefix": self.temp.prefix,
            },
            "logging": {"level": self.logging.level},
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WriterConfig":
        """Deserialize from dictionary; missing keys keep their defaults."""
        dc = d.get("disk_caching", {}) or {}
        ar = d.get("archive", {}) or {}
        tmp = d.get("temp", {}) or {}
        log = d.get("logging", {}) or {}

        return cls(
            disk_caching=DiskCachingConfig(
                enabled=bool(dc.get("enabled", False)),
                directory=str(dc.get("directory", ".")),
            ),
            archive=ArchiveConfig(
                compression=ar.get("compression", "deflated"),
                compresslevel=ar.get("compresslevel"),
            ),
            temp=TempConfig(
                directory=str(tmp.get("directory", ".")),
                prefix=tmp.get("prefix", "odptmp"),
            ),
            logging=LoggingConfig(level=log.get("level", "WARNING")),
        )


# =============================================================================
# Configuration Loader
# =============================================================================

def find_config_file(start_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find odpwriter.yaml by searching upward from start_path.

    Search order:
    1. start_path / odpwriter.yaml
    2. start_path / .odpwriter / odpwriter.yaml
    3. Parent directories (recursive)
    4. ~/.config/odpwriter/odpwriter.yaml

    Args:
        start_path: Starting directory (defaults to cwd)

    Returns:
        Path to config file or None if not found
    """
    if start_path is None:
        start_path = Path.cwd()

    current = Path(start_path).resolve()
    for _ in range(10):  # Max 10 levels up
        for candidate in (current / CONFIG_FILENAME, current / ".odpwriter" / CONFIG_FILENAME):
            if candidate.exists():
                return candidate

        parent = current.parent
        if parent == current:
            break
        current = parent

    user_config = Path.home() / ".config" / "odpwriter" / CONFIG_FILENAME
    if user_config.exists():
        return user_config

    return None


def load_config(config_path: Optional[Path] = None) -> WriterConfig:
    """
    Load configuration from YAML file with environment variable overrides.

    Environment variables override config file values:
    - ODPWRITER_DISK_CACHING -> disk_caching.enabled
    - ODPWRITER_DISK_CACHE_DIR -> disk_caching.directory
    - ODPWRITER_TEMP_DIR -> temp.directory
    - ODPWRITER_COMPRESSION -> archive.compression
    - ODPWRITER_LOG_LEVEL -> logging.level

    An unreadable or malformed file is logged and replaced by defaults.

    Args:
        config_path: Path to config file (auto-detected if None)

    Returns:
        WriterConfig instance
    """
    config = WriterConfig()

    if config_path is None:
        config_path = find_config_file()

    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            config = WriterConfig.from_dict(data)
        except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to load config: {e}, using defaults")
    else:
        logger.info("No config file found, using defaults")

    return _apply_env_overrides(config)


def _apply_env_overrides(config: WriterConfig) -> WriterConfig:
    """Apply environment variable overrides to config."""
    if os.environ.get("ODPWRITER_DISK_CACHING"):
        config.disk_caching.enabled = os.environ["ODPWRITER_DISK_CACHING"].lower() in _TRUE_VALUES

    if os.environ.get("ODPWRITER_DISK_CACHE_DIR"):
        config.disk_caching.directory = os.environ["ODPWRITER_DISK_CACHE_DIR"]

    if os.environ.get("ODPWRITER_TEMP_DIR"):
        config.temp.directory = os.environ["ODPWRITER_TEMP_DIR"]

    if os.environ.get("ODPWRITER_COMPRESSION"):
        compression = os.environ["ODPWRITER_COMPRESSION"].lower()
        if compression in ("deflated", "stored"):
            config.archive.compression = compression
        else:
            logger.warning(f"Unknown compression '{compression}', keeping {config.archive.compression}")

    if os.environ.get("ODPWRITER_LOG_LEVEL"):
        config.logging.level = os.environ["ODPWRITER_LOG_LEVEL"].upper()

    return config


def save_config(config: WriterConfig, path: Path) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: WriterConfig instance
        path: Output path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

    logger.info(f"Configuration saved to: {path}")


# =============================================================================
# Global Config Instance
# =============================================================================

_global_config: Optional[WriterConfig] = None


def get_config() -> WriterConfig:
    """Get the global configuration instance (lazy-loaded)."""
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def set_config(config: Optional[WriterConfig]) -> None:
    """Set (or with None, reset) the global configuration."""
    global _global_config
    _global_config = config
