"""Service configuration loader.

Loads configuration from ~/.userinfo/config.json, then applies
``USERINFO_*`` environment overrides.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .resolver import DEFAULT_KEY_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".userinfo" / "config.json"

BACKENDS = ("sqlite", "memory")


@dataclass
class ServiceConfig:
    """Configuration for the attribute service.

    Attributes:
        key_prefix: Prefix of every storage key.
        backend: "sqlite" for the persistent store, "memory" for an in-process one.
        db_path: SQLite database file (~/.userinfo/userinfo.db if None).
        log_dir: Audit log directory (~/.userinfo/logs if None).
        audit_log_enabled: Write a JSONL entry per operation.
        log_max_size_mb: Rotate the audit log past this size.
    """

    key_prefix: str = DEFAULT_KEY_PREFIX
    backend: str = "sqlite"
    db_path: Path | None = None
    log_dir: Path | None = None
    audit_log_enabled: bool = True
    log_max_size_mb: float = 10.0

    def __post_init__(self) -> None:
        """Validate config and set defaults."""
        if self.db_path is None:
            self.db_path = Path.home() / ".userinfo" / "userinfo.db"

        if self.log_dir is None:
            self.log_dir = Path.home() / ".userinfo" / "logs"

        if not self.key_prefix:
            raise ValueError("key_prefix must not be empty")

        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {', '.join(BACKENDS)}")

        if self.log_max_size_mb <= 0:
            raise ValueError("log_max_size_mb must be positive")


def load_config(config_path: Path | None = None) -> ServiceConfig:
    """Load ServiceConfig from a JSON file and the environment.

    The config file should have this structure:
    ```json
    {
      "store": {
        "backend": "sqlite",
        "db_path": "~/.userinfo/userinfo.db",
        "key_prefix": "USER-INFORMATION_"
      },
      "logging": {
        "dir": "~/.userinfo/logs",
        "audit": true,
        "max_size_mb": 10
      }
    }
    ```

    Args:
        config_path: Path to config file. Uses DEFAULT_CONFIG_PATH if None.

    Returns:
        ServiceConfig instance with loaded values.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    data: dict[str, Any] = {}

    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
    else:
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s. Using defaults.", path, e)
        except OSError as e:
            logger.warning("Cannot read %s: %s. Using defaults.", path, e)

    if not isinstance(data, dict):
        logger.warning("Config in %s is not an object. Using defaults.", path)
        data = {}

    return _parse_config(data, os.environ)


def _parse_config(data: dict[str, Any], env: Any) -> ServiceConfig:
    """Parse config dictionary plus environment into ServiceConfig.

    Args:
        data: Parsed JSON data.
        env: Environment mapping (os.environ in production).

    Returns:
        ServiceConfig instance.
    """
    store_data = data.get("store", {})
    if not isinstance(store_data, dict):
        store_data = {}
    logging_data = data.get("logging", {})
    if not isinstance(logging_data, dict):
        logging_data = {}

    key_prefix = env.get("USERINFO_KEY_PREFIX") or store_data.get("key_prefix")
    if not isinstance(key_prefix, str) or not key_prefix:
        key_prefix = DEFAULT_KEY_PREFIX

    backend = env.get("USERINFO_BACKEND") or store_data.get("backend", "sqlite")
    if backend not in BACKENDS:
        logger.warning("Unknown backend %r, using sqlite", backend)
        backend = "sqlite"

    db_path = _parse_path(env.get("USERINFO_DB_PATH") or store_data.get("db_path"))
    log_dir = _parse_path(env.get("USERINFO_LOG_DIR") or logging_data.get("dir"))

    audit = logging_data.get("audit", True)
    if not isinstance(audit, bool):
        audit = True

    max_size = logging_data.get("max_size_mb", 10.0)
    if isinstance(max_size, bool) or not isinstance(max_size, (int, float)) or max_size <= 0:
        max_size = 10.0

    return ServiceConfig(
        key_prefix=key_prefix,
        backend=backend,
        db_path=db_path,
        log_dir=log_dir,
        audit_log_enabled=audit,
        log_max_size_mb=float(max_size),
    )


def _parse_path(value: Any) -> Path | None:
    if not isinstance(value, str) or not value:
        return None
    return Path(value).expanduser()


def save_config(config: ServiceConfig, config_path: Path | None = None) -> None:
    """Save ServiceConfig to a JSON file.

    Only values that differ from the defaults are written.

    Args:
        config: The config to save.
        config_path: Path to write to. Uses DEFAULT_CONFIG_PATH if None.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    defaults = ServiceConfig()

    path.parent.mkdir(parents=True, exist_ok=True)

    store_data: dict[str, Any] = {}
    if config.key_prefix != defaults.key_prefix:
        store_data["key_prefix"] = config.key_prefix
    if config.backend != defaults.backend:
        store_data["backend"] = config.backend
    if config.db_path != defaults.db_path:
        store_data["db_path"] = str(config.db_path)

    logging_data: dict[str, Any] = {}
    if config.log_dir != defaults.log_dir:
        logging_data["dir"] = str(config.log_dir)
    if config.audit_log_enabled != defaults.audit_log_enabled:
        logging_data["audit"] = config.audit_log_enabled
    if config.log_max_size_mb != defaults.log_max_size_mb:
        logging_data["max_size_mb"] = config.log_max_size_mb

    data: dict[str, Any] = {}
    if store_data:
        data["store"] = store_data
    if logging_data:
        data["logging"] = logging_data

    try:
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise
