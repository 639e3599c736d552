"""
Content Tree Model

Read-only views of the entities the evaluators reason about:
- Template: structural rules and role delegation
- Resource: a node in the content tree (page or account)
- AccountDetails: account-only data carried by ACCOUNT resources
- ProcessDescriptor: administrative tool bound to a resource
- Permission: a named entry in the permission catalog

All of these are owned by the persistence layer; the engine never mutates
them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, FrozenSet, Dict, Any

from .errors import MalformedResourceError
from .status import StatusFlag, TemplateFlag, normalize_status


class ResourceKind(str, Enum):
    """Discriminates ordinary pages from account resources"""
    PAGE = "page"
    ACCOUNT = "account"


@dataclass(frozen=True)
class Permission:
    """A permission known to the system"""
    id: int
    name: str
    title: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "title": self.title}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Permission":
        return cls(id=data["id"], name=data["name"], title=data.get("title", ""))


@dataclass(frozen=True)
class Template:
    """
    Schema and policy descriptor bound to resources.

    An empty child_template_ids or parent_template_ids tuple means the
    template places no restriction on that side of the relationship.
    """
    id: int
    name: str
    flags: TemplateFlag = TemplateFlag.NONE
    child_template_ids: Tuple[int, ...] = ()
    parent_template_ids: Tuple[int, ...] = ()
    access_template_id: Optional[int] = None   # Delegate, when DELEGATES_ROLES is set
    renderable: bool = True                    # Has a renderable representation
    guest_searchable: bool = False

    def has_flag(self, flag: TemplateFlag) -> bool:
        return bool(self.flags & flag)

    @property
    def delegates_roles(self) -> bool:
        return self.has_flag(TemplateFlag.DELEGATES_ROLES)

    @property
    def effective_access_template_id(self) -> int:
        """Id of the template whose role grants govern this template"""
        if self.delegates_roles and self.access_template_id is not None:
            return self.access_template_id
        return self.id

    def allows_child(self, template_id: int) -> bool:
        """Check the allowed-child list (empty = unrestricted)"""
        return not self.child_template_ids or template_id in self.child_template_ids

    def allows_parent(self, template_id: int) -> bool:
        """Check the allowed-parent list (empty = unrestricted)"""
        return not self.parent_template_ids or template_id in self.parent_template_ids


@dataclass(frozen=True)
class ProcessDescriptor:
    """Administrative tool bound to a resource"""
    name: str
    permission: Optional[str] = None
    title: str = ""

    def declared_permission_name(self) -> Optional[str]:
        """Permission required to use this tool, if it declares one"""
        return self.permission or None


@dataclass(frozen=True)
class AccountDetails:
    """Account-only data: who the account belongs to and its roles"""
    principal_id: str
    roles: FrozenSet[str] = frozenset()

    def has_role(self, role: str) -> bool:
        return role in self.roles


@dataclass(eq=False)
class Resource:
    """
    A node in the content tree.

    ACCOUNT resources must carry AccountDetails and PAGE resources must not.
    Resources compare by identity of their id.
    """
    id: int
    template: Template
    parent: Optional["Resource"] = None
    name: str = ""
    status: StatusFlag = StatusFlag.NONE
    kind: ResourceKind = ResourceKind.PAGE
    account: Optional[AccountDetails] = None
    process: Optional[ProcessDescriptor] = None
    access_template_id: Optional[int] = None   # Per-resource override (e.g. inherited)

    def __post_init__(self):
        if self.template is None:
            raise MalformedResourceError(f"Resource {self.id} has no template")
        if self.kind == ResourceKind.ACCOUNT and self.account is None:
            raise MalformedResourceError(f"Account resource {self.id} has no account details")
        if self.kind != ResourceKind.ACCOUNT and self.account is not None:
            raise MalformedResourceError(f"Resource {self.id} carries account details but is not an account")
        self.status = normalize_status(StatusFlag(self.status))

    def __eq__(self, other):
        if not isinstance(other, Resource):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(("resource", self.id))

    def __repr__(self) -> str:
        return f"Resource(id={self.id!r}, name={self.name!r}, template={self.template.name!r})"

    def has_status(self, flag: StatusFlag) -> bool:
        return bool(self.status & flag)

    @property
    def is_account(self) -> bool:
        return self.kind == ResourceKind.ACCOUNT

    @property
    def effective_access_template_id(self) -> int:
        """Id of the template whose role grants govern this resource"""
        if self.access_template_id is not None:
            return self.access_template_id
        return self.template.effective_access_template_id
