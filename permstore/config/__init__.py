"""
Configuration System - Load configs and store definitions.

Provides:
- ConfigLoader: Load and merge configuration from files and environment
- PermstoreConfig: Parsed configuration with named permission tables
- DefinitionParser: Parse YAML store definitions
- StoreDefinition: Parsed definition that builds a Store

Configuration precedence (low → high):
1. ~/.permstore/config.json (global defaults)
2. .permstore/config.json (project config)
3. Environment variables (PERMSTORE_*)
"""

from .definitions import (
    DefinitionParser,
    StoreDefinition,
    load_definition_from_file,
    load_definitions,
)
from .loader import ConfigLoader, PermstoreConfig, load_config

__all__ = [
    "ConfigLoader",
    "PermstoreConfig",
    "load_config",
    "DefinitionParser",
    "StoreDefinition",
    "load_definition_from_file",
    "load_definitions",
]
