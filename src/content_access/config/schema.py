"""
Access Engine Configuration Schema

Defines the configuration structure for the access engine.
All configuration can be specified via access.yaml or environment variables.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PermissionNames:
    """Names of the permissions the evaluators query"""
    view: str = "page-view"
    edit: str = "page-edit"
    add: str = "page-add"
    create: str = "page-create"
    delete: str = "page-delete"
    move: str = "page-move"
    sort: str = "page-sort"
    template: str = "page-template"
    lock: str = "page-lock"
    publish: str = "page-publish"        # Optional; its absence disables the publish workflow
    user_admin: str = "user-admin"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PermissionNames":
        defaults = cls()
        unknown = set(data) - set(defaults.__dict__)
        if unknown:
            raise KeyError(f"Unknown permission keys: {', '.join(sorted(unknown))}")
        return cls(**{k: str(v) for k, v in data.items()})

    def to_dict(self) -> Dict[str, str]:
        return dict(self.__dict__)


@dataclass
class TreeConfig:
    """Ids of the structurally special resources in the tree"""
    root_id: int = 1
    accounts_container_id: Optional[int] = None
    trash_id: Optional[int] = None
    protected_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TreeConfig":
        return cls(
            root_id=int(data.get("root_id", 1)),
            accounts_container_id=_optional_int(data.get("accounts_container_id")),
            trash_id=_optional_int(data.get("trash_id")),
            protected_ids=[int(i) for i in data.get("protected_ids", [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root_id": self.root_id,
            "accounts_container_id": self.accounts_container_id,
            "trash_id": self.trash_id,
            "protected_ids": list(self.protected_ids),
        }


@dataclass
class EngineConfig:
    """
    Central configuration for the access engine.

    Example access.yaml:
    ```yaml
    superuser_role: superuser

    permissions:
      edit: page-edit
      publish: "${PUBLISH_PERMISSION:-page-publish}"

    tree:
      root_id: 1
      accounts_container_id: 29
      trash_id: 7
      protected_ids: [2, 27]
    ```
    """
    permissions: PermissionNames = field(default_factory=PermissionNames)
    superuser_role: str = "superuser"
    tree: TreeConfig = field(default_factory=TreeConfig)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Create EngineConfig from dictionary (e.g., parsed YAML)"""
        return cls(
            permissions=PermissionNames.from_dict(data.get("permissions") or {}),
            superuser_role=data.get("superuser_role", "superuser"),
            tree=TreeConfig.from_dict(data.get("tree") or {}),
            metadata=data.get("metadata", {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary (for serialization)"""
        return {
            "permissions": self.permissions.to_dict(),
            "superuser_role": self.superuser_role,
            "tree": self.tree.to_dict(),
            "metadata": self.metadata,
        }


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)
