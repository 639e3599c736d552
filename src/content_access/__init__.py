"""
Content Access

Authorization decisions for a hierarchical content tree: given a resource,
its template and a principal, decide whether a capability (view, edit,
add, move, delete, ...) is allowed.
"""

from .config import EngineConfig, load_config
from .core import (
    StatusFlag,
    TemplateFlag,
    Template,
    Resource,
    ResourceKind,
    AccountDetails,
    ProcessDescriptor,
    Permission,
    TemplateRegistry,
    PermissionCatalog,
    ContentTree,
    InMemoryTree,
    AccessError,
    Principal,
    Role,
    AccessEngine,
    Capability,
    CapabilityRequest,
)

__version__ = "0.1.0"

__all__ = [
    "EngineConfig",
    "load_config",
    "StatusFlag",
    "TemplateFlag",
    "Template",
    "Resource",
    "ResourceKind",
    "AccountDetails",
    "ProcessDescriptor",
    "Permission",
    "TemplateRegistry",
    "PermissionCatalog",
    "ContentTree",
    "InMemoryTree",
    "AccessError",
    "Principal",
    "Role",
    "AccessEngine",
    "Capability",
    "CapabilityRequest",
]
