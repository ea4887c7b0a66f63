"""
Store Definitions - Declare store permission tables in YAML files.

A definition file describes one kind of store:

```yaml
description: Public user profile
default_policy: r
permissions:
  password: w
  email: rw
  internal: none
entries:
  name: Ada
  email: ada@example.com
  settings:
    theme: dark
```

The file stem is the definition name. `entries` seed the store when it is
built; seeding ignores `permissions`, so seeded keys may be read-only.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..errors import DefinitionError
from ..logger import get_logger
from ..permission import Permission, PermissionTable
from ..store import Store

_logger = get_logger()


@dataclass
class StoreDefinition:
    """Parsed store definition.

    Attributes:
        name: Definition name (from filename)
        description: Human-readable description
        default_policy: Policy for keys without an override
        permissions: Per-key overrides
        entries: Initial contents imported on build
        file_path: Path to the source YAML file
    """
    name: str
    description: str = ""
    default_policy: Permission = Permission.RW
    permissions: PermissionTable = field(default_factory=PermissionTable)
    entries: Dict[str, Any] = field(default_factory=dict)
    file_path: Optional[str] = None

    def build(self) -> Store:
        """Build a store from this definition.

        Entries are imported while the store is fully writable; the
        permission table and default policy are installed afterwards.
        """
        store = Store()
        if self.entries:
            store.write_entries(self.entries)
        store.permissions = self.permissions
        store.default_policy = self.default_policy
        _logger.debug("definitions", "build", {
            "name": self.name,
            "keys": len(store.keys()),
            "overrides": len(self.permissions),
        })
        return store


class DefinitionParser:
    """Parse store definition YAML files.

    Example:
        parser = DefinitionParser()
        definition = parser.parse_file("/path/to/user.yaml")
        store = definition.build()
    """

    def parse_file(self, file_path: str) -> StoreDefinition:
        """Parse a store definition from a YAML file.

        Raises:
            FileNotFoundError: If file doesn't exist
            DefinitionError: If file content is invalid
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Definition file not found: {file_path}")

        with open(path, "r", encoding="utf-8") as f:
            content = f.read()

        return self.parse_content(content, path.stem, str(path))

    def parse_content(
        self,
        content: str,
        name: str,
        file_path: Optional[str] = None
    ) -> StoreDefinition:
        """Parse a store definition from YAML content.

        Args:
            content: YAML document
            name: Definition name
            file_path: Optional source file path

        Returns:
            Parsed StoreDefinition

        Raises:
            DefinitionError: If the YAML is malformed or a field is invalid
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DefinitionError(f"{name}: invalid YAML: {e}") from None

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise DefinitionError(f"{name}: definition must be a mapping")

        permissions = data.get("permissions") or {}
        entries = data.get("entries") or {}
        if not isinstance(permissions, dict):
            raise DefinitionError(f"{name}: permissions must be a mapping")
        if not isinstance(entries, dict):
            raise DefinitionError(f"{name}: entries must be a mapping")

        try:
            default_policy = Permission.parse(data.get("default_policy", "rw"))
            table = PermissionTable(permissions)
        except ValueError as e:
            raise DefinitionError(f"{name}: {e}") from None

        return StoreDefinition(
            name=name,
            description=str(data.get("description", "")),
            default_policy=default_policy,
            permissions=table,
            entries=entries,
            file_path=file_path,
        )


def load_definition_from_file(file_path: str) -> StoreDefinition:
    """Convenience function to load one store definition."""
    return DefinitionParser().parse_file(file_path)


def load_definitions(definitions_dir: str) -> Dict[str, StoreDefinition]:
    """Load all store definitions from a directory.

    Invalid files are skipped and logged.

    Args:
        definitions_dir: Directory containing *.yaml / *.yml files

    Returns:
        Definitions keyed by name
    """
    path = Path(definitions_dir)
    if not path.exists():
        return {}

    parser = DefinitionParser()
    definitions: Dict[str, StoreDefinition] = {}

    with _logger.span("definitions", "load", {"dir": str(path)}) as span:
        files = sorted(list(path.glob("*.yaml")) + list(path.glob("*.yml")))
        for definition_file in files:
            try:
                definition = parser.parse_file(str(definition_file))
            except DefinitionError as e:
                _logger.warn("definitions", "invalid_file", {
                    "path": str(definition_file),
                    "error": str(e),
                })
                continue
            definitions[definition.name] = definition
        span.set_data({"count": len(definitions)})

    return definitions
