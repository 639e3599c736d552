"""
Content Access Core

Core components of the access decision engine.
"""

from .status import StatusFlag, TemplateFlag, is_unpublished_tier
from .model import Template, Resource, ResourceKind, AccountDetails, ProcessDescriptor, Permission
from .registry import TemplateRegistry, PermissionCatalog
from .tree import ContentTree, InMemoryTree
from .errors import (
    AccessError,
    MalformedResourceError,
    TemplateNotFoundError,
    UnknownCapabilityError,
    SnapshotError,
)
from .auth import Principal, Role
from .engine import AccessEngine, Capability, CapabilityRequest

__all__ = [
    # Flags
    "StatusFlag",
    "TemplateFlag",
    "is_unpublished_tier",
    # Model
    "Template",
    "Resource",
    "ResourceKind",
    "AccountDetails",
    "ProcessDescriptor",
    "Permission",
    # Collaborators
    "TemplateRegistry",
    "PermissionCatalog",
    "ContentTree",
    "InMemoryTree",
    # Errors
    "AccessError",
    "MalformedResourceError",
    "TemplateNotFoundError",
    "UnknownCapabilityError",
    "SnapshotError",
    # Principals
    "Principal",
    "Role",
    # Engine
    "AccessEngine",
    "Capability",
    "CapabilityRequest",
]
