"""
Access Engine

Wires the evaluators together and exposes them two ways:
- One method per capability (is_viewable, is_editable, ...)
- `check()` / `decide()`: a thin dispatch adapter for callers that route
  capability tags, validating argument shapes before delegating

Malformed arguments degrade to a denial. Unknown capability tags are
programming errors and raise UnknownCapabilityError.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Any, Tuple, Union

from ..config.schema import EngineConfig
from .auth.principal import Principal
from .errors import UnknownCapabilityError
from .evaluators import (
    AccessEnvironment,
    EditabilityEvaluator,
    FieldEditabilityEvaluator,
    ProcessVisibilityEvaluator,
    VisibilityEvaluator,
    ListabilityEvaluator,
    ChildTemplateAccessResolver,
    AddabilityEvaluator,
    MoveabilityEvaluator,
    SortabilityEvaluator,
    DeletabilityEvaluator,
    PublishabilityEvaluator,
)
from .model import Resource, ProcessDescriptor
from .registry import TemplateRegistry, PermissionCatalog
from .tree import ContentTree, InMemoryTree

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    """Capability tags accepted by dispatch"""
    VIEW = "view"
    LIST = "list"
    EDIT = "edit"
    EDIT_FIELD = "edit-field"
    DELETE = "delete"
    ADD = "add"
    MOVE = "move"
    SORT = "sort"
    PUBLISH = "publish"
    ACCESS_PROCESS = "access-process"
    CREATE_UNDER = "create-under"


@dataclass(frozen=True)
class CapabilityRequest:
    """
    A capability query as received from a dispatcher.

    principal may be None, in which case the ambient principal supplied to
    `AccessEngine.decide()` is used.
    """
    capability: Union[Capability, str]
    resource: Any
    principal: Optional[Principal] = None
    args: Tuple[Any, ...] = ()


class AccessEngine:
    """
    Authorization decision surface for the content tree.

    Holds no mutable state: every call reads the collaborators it was built
    with and returns a bool.
    """

    def __init__(
        self,
        templates: TemplateRegistry,
        catalog: PermissionCatalog,
        tree: Optional[ContentTree] = None,
        config: Optional[EngineConfig] = None,
    ):
        config = config or EngineConfig()
        tree = tree or InMemoryTree(config.tree)
        self.env = AccessEnvironment(templates=templates, catalog=catalog, tree=tree, config=config)

        env = self.env
        self.field_editability = FieldEditabilityEvaluator(env)
        self.editability = EditabilityEvaluator(env, self.field_editability)
        self.processes = ProcessVisibilityEvaluator(env)
        self.visibility = VisibilityEvaluator(env, self.editability, self.processes)
        self.listability = ListabilityEvaluator(env, self.editability, self.processes)
        self.publishability = PublishabilityEvaluator(env, self.editability)
        self.child_templates = ChildTemplateAccessResolver(env)
        self.addability = AddabilityEvaluator(env, self.child_templates)
        self.moveability = MoveabilityEvaluator(env, self.editability, self.addability)
        self.sortability = SortabilityEvaluator(env, self.editability)
        self.deletability = DeletabilityEvaluator(env, self.editability)

    # =========================================================================
    # Capabilities
    # =========================================================================

    def is_editable(self, resource: Resource, principal: Principal, field_name: Optional[str] = None) -> bool:
        return self.editability.is_editable(resource, principal, field_name)

    def is_field_editable(self, resource: Resource, field_name: str, principal: Principal) -> bool:
        """Editability of one named field; the resource itself must be editable"""
        if not isinstance(field_name, str):
            logger.debug(f"Non-string field name {field_name!r} denied")
            return False
        return self.editability.is_editable(resource, principal, field_name)

    def can_access_process(self, process: ProcessDescriptor, principal: Principal) -> bool:
        return self.processes.can_access_process(process, principal)

    def is_viewable(self, resource: Resource, principal: Principal) -> bool:
        return self.visibility.is_viewable(resource, principal)

    def is_listable(self, resource: Resource, principal: Principal) -> bool:
        return self.listability.is_listable(resource, principal)

    def is_publishable(self, resource: Resource, principal: Principal) -> bool:
        return self.publishability.is_publishable(resource, principal)

    def can_create_under_parent(self, parent: Resource, principal: Principal) -> bool:
        return self.child_templates.can_create_under_parent(parent, principal)

    def is_addable(self, parent: Resource, principal: Principal, child: Optional[Resource] = None) -> bool:
        return self.addability.is_addable(parent, principal, child)

    def is_moveable(self, resource: Resource, principal: Principal, new_parent: Optional[Resource] = None) -> bool:
        return self.moveability.is_moveable(resource, principal, new_parent)

    def is_sortable(self, resource: Resource, principal: Principal) -> bool:
        return self.sortability.is_sortable(resource, principal)

    def is_deletable(self, resource: Resource, principal: Principal) -> bool:
        return self.deletability.is_deletable(resource, principal)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def decide(self, request: CapabilityRequest, ambient_principal: Optional[Principal] = None) -> bool:
        """Evaluate a queued request, falling back to the ambient principal"""
        principal = request.principal if request.principal is not None else ambient_principal
        return self.check(request.capability, request.resource, principal, *request.args)

    def check(self, capability: Union[Capability, str], resource: Any, principal: Any, *args: Any) -> bool:
        """
        Evaluate a capability by tag.

        Args:
            capability: Capability tag (enum member or its string value)
            resource: Target resource
            principal: Principal asking
            *args: Capability-specific argument: an override principal for
                VIEW, a field name for EDIT/EDIT_FIELD, a candidate child
                for ADD, a candidate parent for MOVE

        Returns:
            The decision; malformed arguments are denied
        """
        try:
            capability = Capability(capability)
        except ValueError:
            raise UnknownCapabilityError(f"Unknown capability: {capability}")

        if not isinstance(resource, Resource):
            return self._degrade(capability, "resource is not a Resource")
        if not isinstance(principal, Principal):
            return self._degrade(capability, "no principal")

        arg = args[0] if args else None

        if capability == Capability.VIEW:
            if arg is not None and not isinstance(arg, Principal):
                return self._degrade(capability, "override is not a Principal")
            decision = self.is_viewable(resource, arg or principal)

        elif capability == Capability.LIST:
            decision = self.is_listable(resource, principal)

        elif capability == Capability.EDIT:
            if arg is not None and not isinstance(arg, str):
                return self._degrade(capability, "field name is not a string")
            decision = self.is_editable(resource, principal, arg)

        elif capability == Capability.EDIT_FIELD:
            if not isinstance(arg, str):
                return self._degrade(capability, "field name is not a string")
            decision = self.is_editable(resource, principal, arg)

        elif capability == Capability.DELETE:
            decision = self.is_deletable(resource, principal)

        elif capability == Capability.ADD:
            if arg is not None and not isinstance(arg, Resource):
                return self._degrade(capability, "child is not a Resource")
            decision = self.is_addable(resource, principal, arg)

        elif capability == Capability.MOVE:
            if arg is not None and not isinstance(arg, Resource):
                return self._degrade(capability, "new parent is not a Resource")
            decision = self.is_moveable(resource, principal, arg)

        elif capability == Capability.SORT:
            decision = self.is_sortable(resource, principal)

        elif capability == Capability.PUBLISH:
            decision = self.is_publishable(resource, principal)

        elif capability == Capability.ACCESS_PROCESS:
            if resource.process is None:
                return self._degrade(capability, "resource has no bound process")
            decision = self.can_access_process(resource.process, principal)

        else:
            # The resolver assumes the add permission was already confirmed
            decision = (
                principal.has_permission(self.env.permissions.add, resource)
                and self.can_create_under_parent(resource, principal)
            )

        logger.debug(
            f"{capability.value} on {resource.id} for {principal.principal_id}: "
            f"{'allow' if decision else 'deny'}"
        )
        return decision

    def _degrade(self, capability: Capability, reason: str) -> bool:
        logger.debug(f"{capability.value} denied: {reason}")
        return False
