"""
Configuration Loader - Load and merge configuration from multiple sources.

Configuration precedence (low → high):
1. ~/.permstore/config.json (global defaults)
2. .permstore/config.json (project config)
3. Environment variables (PERMSTORE_*)

Example config.json:

    {
        "default_policy": "rw",
        "definitions_dir": ".permstore/stores",
        "log_level": "DEBUG",
        "permissions": {
            "user": {"id": "r", "password": "w"}
        }
    }
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ..logger import get_logger
from ..permission import Permission, PermissionTable
from .definitions import StoreDefinition, load_definitions

_logger = get_logger()


@dataclass
class PermstoreConfig:
    """Parsed permstore configuration.

    Attributes:
        default_policy: Default policy for stores built from config
        definitions_dir: Directory containing store definition YAML files
        log_level: Logging level
        log_directory: Directory for log files
        permissions: Named permission tables (table name -> key -> permission)
    """
    default_policy: str = "rw"
    definitions_dir: str = ".permstore/stores"
    log_level: str = "INFO"
    log_directory: Optional[str] = None
    permissions: Dict[str, Dict[str, str]] = field(default_factory=dict)

    @property
    def policy(self) -> Permission:
        """The default policy as a Permission."""
        return Permission.parse(self.default_policy)

    def permission_table(self, name: str) -> PermissionTable:
        """Get a named permission table.

        Args:
            name: Table name under "permissions"

        Returns:
            Parsed PermissionTable (empty if the name is unknown)

        Raises:
            ValueError: If the table holds an unknown permission
        """
        return PermissionTable(self.permissions.get(name, {}))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "default_policy": self.default_policy,
            "definitions_dir": self.definitions_dir,
            "log_level": self.log_level,
            "log_directory": self.log_directory,
            "permissions": self.permissions,
        }


class ConfigLoader:
    """Load configuration from multiple sources with precedence.

    Example:
        loader = ConfigLoader(project_root="/path/to/project")
        config = loader.load()
        store = Store(config.permission_table("user"), config.policy)
    """

    ENV_MAPPINGS = {
        "PERMSTORE_DEFAULT_POLICY": "default_policy",
        "PERMSTORE_DEFINITIONS_DIR": "definitions_dir",
        "PERMSTORE_LOG_LEVEL": "log_level",
        "PERMSTORE_LOG_DIR": "log_directory",
    }

    def __init__(
        self,
        project_root: Optional[str] = None,
        home_dir: Optional[str] = None,
    ):
        """Initialize the config loader.

        Args:
            project_root: Project root directory (default: current working dir)
            home_dir: Home directory (default: user's home)
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.home_dir = Path(home_dir) if home_dir else Path.home()

        self.global_config_path = self.home_dir / ".permstore" / "config.json"
        self.project_config_path = self.project_root / ".permstore" / "config.json"

    def load(self) -> PermstoreConfig:
        """Load and merge configuration from all sources.

        Returns:
            Merged PermstoreConfig object
        """
        config_dict: Dict[str, Any] = {}

        for path in (self.global_config_path, self.project_config_path):
            if path.exists():
                config_dict = self._deep_merge(config_dict, self._load_json(path))

        config_dict = self._apply_env_vars(config_dict)

        return PermstoreConfig(
            default_policy=config_dict.get("default_policy", "rw"),
            definitions_dir=config_dict.get("definitions_dir", ".permstore/stores"),
            log_level=config_dict.get("log_level", "INFO"),
            log_directory=config_dict.get("log_directory"),
            permissions=config_dict.get("permissions", {}),
        )

    def get_definitions_dir(self, config: Optional[PermstoreConfig] = None) -> Path:
        """Resolve the definitions directory against the project root."""
        config = config or self.load()
        path = Path(config.definitions_dir)
        if path.is_absolute():
            return path
        return self.project_root / path

    def load_definitions(self, config: Optional[PermstoreConfig] = None) -> Dict[str, StoreDefinition]:
        """Load every store definition from the configured definitions dir."""
        return load_definitions(str(self.get_definitions_dir(config)))

    def _load_json(self, path: Path) -> Dict[str, Any]:
        """Load a JSON configuration file.

        Returns:
            Parsed JSON object, or empty dict if unreadable
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            _logger.warn("config", "load_failed", {"path": str(path), "error": e})
            return {}

        if not isinstance(data, dict):
            _logger.warn("config", "not_an_object", {"path": str(path)})
            return {}
        return data

    def _deep_merge(
        self,
        base: Dict[str, Any],
        override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Deep merge two dictionaries; override wins, nested dicts merge."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply PERMSTORE_* environment variable overrides."""
        for env_var, config_key in self.ENV_MAPPINGS.items():
            value = os.environ.get(env_var)
            if value is not None:
                config[config_key] = value
        return config


def load_config(project_root: Optional[str] = None) -> PermstoreConfig:
    """Convenience function to load configuration.

    Args:
        project_root: Optional project root directory

    Returns:
        Loaded PermstoreConfig
    """
    return ConfigLoader(project_root=project_root).load()
