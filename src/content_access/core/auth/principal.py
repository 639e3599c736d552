"""
Principal Identity Model

Actors requesting capabilities:
- Role: named bundle of permissions, optionally scoped to access templates
- Principal: identity, privilege extremes (superuser, guest) and roles

How roles are granted and stored is owned elsewhere; this module only
answers `has_role` and `has_permission` queries against an already
resolved set of roles.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, FrozenSet, Tuple, Union, Iterable

from ..model import Resource, Template

PermissionContext = Union[Resource, Template, None]


@dataclass(frozen=True)
class Role:
    """
    A role and the permissions it grants.

    template_scopes narrows a permission to the listed access template ids.
    A permission without a scope entry applies everywhere.
    """
    name: str
    permissions: FrozenSet[str] = frozenset()
    template_scopes: Dict[str, FrozenSet[int]] = field(default_factory=dict, hash=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.permissions, frozenset):
            object.__setattr__(self, "permissions", frozenset(self.permissions))
        scopes = {name: frozenset(ids) for name, ids in self.template_scopes.items()}
        object.__setattr__(self, "template_scopes", scopes)

    def grants(self, permission: str, context: PermissionContext = None) -> bool:
        """Check if this role grants a permission in a context"""
        if permission not in self.permissions:
            return False
        scope = self.template_scopes.get(permission)
        if scope is None or context is None:
            return True
        return context.effective_access_template_id in scope

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "permissions": sorted(self.permissions),
            "template_scopes": {k: sorted(v) for k, v in self.template_scopes.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Role":
        return cls(
            name=data["name"],
            permissions=frozenset(data.get("permissions", [])),
            template_scopes={k: frozenset(v) for k, v in data.get("template_scopes", {}).items()},
        )


@dataclass(frozen=True)
class Principal:
    """
    The actor a decision is made for.

    Superusers hold every permission. Guests are unauthenticated visitors;
    they usually still carry a guest role granting page-view.
    """
    principal_id: str
    name: str = ""
    is_superuser: bool = False
    is_guest: bool = False
    roles: Tuple[Role, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.roles, tuple):
            object.__setattr__(self, "roles", tuple(self.roles))

    @property
    def role_names(self) -> FrozenSet[str]:
        return frozenset(role.name for role in self.roles)

    def has_role(self, role_name: str) -> bool:
        """Check if principal holds a role"""
        return role_name in self.role_names

    def has_permission(self, permission: str, context: PermissionContext = None) -> bool:
        """
        Check if principal holds a permission.

        Args:
            permission: Permission name (e.g. "page-edit")
            context: Resource or Template narrowing the check to its access
                template, or None for a context-free check

        Returns:
            True if any role grants the permission in this context
        """
        if self.is_superuser:
            return True
        return any(role.grants(permission, context) for role in self.roles)

    @classmethod
    def guest(cls, roles: Iterable[Role] = ()) -> "Principal":
        """Create the guest principal (unauthenticated)"""
        return cls(
            principal_id="guest",
            name="Guest",
            is_guest=True,
            roles=tuple(roles),
        )

    @classmethod
    def superuser(cls, principal_id: str = "admin", name: str = "Superuser") -> "Principal":
        """Create a superuser principal"""
        return cls(
            principal_id=principal_id,
            name=name,
            is_superuser=True,
            roles=(Role(name="superuser"),),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary"""
        return {
            "principal_id": self.principal_id,
            "name": self.name,
            "is_superuser": self.is_superuser,
            "is_guest": self.is_guest,
            "roles": [role.to_dict() for role in self.roles],
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Principal":
        """Deserialize from dictionary"""
        return cls(
            principal_id=data["principal_id"],
            name=data.get("name", ""),
            is_superuser=data.get("is_superuser", False),
            is_guest=data.get("is_guest", False),
            roles=tuple(Role.from_dict(r) for r in data.get("roles", [])),
            metadata=data.get("metadata", {}),
        )


def owns_account(principal: Principal, resource: Resource) -> bool:
    """Check if an account resource belongs to the principal"""
    return resource.is_account and resource.account.principal_id == principal.principal_id


def account_is_superuser(resource: Resource, superuser_role: str) -> bool:
    """Check if an account resource holds the superuser role"""
    return resource.is_account and resource.account.has_role(superuser_role)
