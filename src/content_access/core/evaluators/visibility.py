"""
Visibility

Who may see a resource:
- ProcessVisibilityEvaluator: explicit access to an administrative tool
- VisibilityEvaluator: may the resource be rendered for the principal
- ListabilityEvaluator: may the resource appear in listings (weaker than
  viewable: no render access implied)
"""

import logging

from ..auth.policy import AccessContext, DecisionTable, PolicyRule, PolicyDecision
from ..auth.principal import Principal
from ..model import Resource, ProcessDescriptor
from ..status import StatusFlag, is_unpublished_tier
from .base import Evaluator, AccessEnvironment
from .editability import EditabilityEvaluator

logger = logging.getLogger(__name__)


class ProcessVisibilityEvaluator(Evaluator):
    """Access to the administrative tool bound to a resource"""

    def can_access_process(self, process: ProcessDescriptor, principal: Principal) -> bool:
        if principal.is_guest:
            return False
        if principal.is_superuser:
            return True
        permission = process.declared_permission_name()
        if not permission:
            logger.debug(f"Process {process.name} declares no permission, denied")
            return False
        return principal.has_permission(permission, None)


class VisibilityEvaluator(Evaluator):
    """
    May a resource be viewed.

    Drafts are hidden by the cascade, then re-granted to non-guest
    principals who can edit them, provided the template is renderable.
    """

    def __init__(
        self,
        env: AccessEnvironment,
        editability: EditabilityEvaluator,
        processes: ProcessVisibilityEvaluator,
    ):
        super().__init__(env)
        self.editability = editability
        self.processes = processes
        self.table = self._build_table()

    def _build_table(self) -> DecisionTable:
        perms = self.perms
        processes = self.processes

        table = DecisionTable(table_id="viewable", default=PolicyDecision.ALLOW)

        table.add_rule(PolicyRule(
            rule_id="deny-unpublished-tier",
            description="Unpublished and trashed resources are hidden",
            condition=lambda ctx: is_unpublished_tier(ctx.resource.status),
            decision=PolicyDecision.DENY,
            priority=1,
        ))
        table.add_rule(PolicyRule(
            rule_id="deny-not-renderable",
            description="Templates without a renderable representation cannot be viewed",
            condition=lambda ctx: not ctx.resource.template.renderable,
            decision=PolicyDecision.DENY,
            priority=2,
        ))
        table.add_rule(PolicyRule(
            rule_id="allow-superuser",
            description="Superusers view everything renderable",
            condition=lambda ctx: ctx.principal.is_superuser,
            decision=PolicyDecision.ALLOW,
            priority=3,
        ))
        table.add_rule(PolicyRule(
            rule_id="allow-process",
            description="Tool resources are viewable to principals with tool access",
            condition=lambda ctx: (
                ctx.resource.process is not None
                and processes.can_access_process(ctx.resource.process, ctx.principal)
            ),
            decision=PolicyDecision.ALLOW,
            priority=4,
        ))
        table.add_rule(PolicyRule(
            rule_id="deny-process",
            description="Tool resources are hidden from principals without tool access",
            condition=lambda ctx: ctx.resource.process is not None,
            decision=PolicyDecision.DENY,
            priority=5,
        ))
        table.add_rule(PolicyRule(
            rule_id="deny-no-view-permission",
            description="View permission is required",
            condition=lambda ctx: not ctx.principal.has_permission(perms.view, ctx.resource),
            decision=PolicyDecision.DENY,
            priority=6,
        ))
        table.add_rule(PolicyRule(
            rule_id="deny-trash",
            description="Trashed resources are hidden",
            condition=lambda ctx: ctx.resource.has_status(StatusFlag.TRASH),
            decision=PolicyDecision.DENY,
            priority=7,
        ))

        return table

    def is_viewable(self, resource: Resource, principal: Principal) -> bool:
        if self.table.allows(AccessContext(resource=resource, principal=principal)):
            return True

        if (
            not principal.is_guest
            and resource.has_status(StatusFlag.UNPUBLISHED)
            and not resource.has_status(StatusFlag.TRASH)
        ):
            viewable = self.editability.is_editable(resource, principal) and resource.template.renderable
            if viewable:
                logger.debug(f"Draft {resource.id} viewable to its editor {principal.principal_id}")
            return viewable

        return False


class ListabilityEvaluator(Evaluator):
    """May a resource appear in a listing"""

    def __init__(
        self,
        env: AccessEnvironment,
        editability: EditabilityEvaluator,
        processes: ProcessVisibilityEvaluator,
    ):
        super().__init__(env)
        self.editability = editability
        self.processes = processes
        self.table = self._build_table()

    def _build_table(self) -> DecisionTable:
        perms = self.perms
        editability = self.editability
        processes = self.processes

        table = DecisionTable(table_id="listable", default=PolicyDecision.ALLOW)

        table.add_rule(PolicyRule(
            rule_id="allow-superuser",
            description="Superusers list everything",
            condition=lambda ctx: ctx.principal.is_superuser,
            decision=PolicyDecision.ALLOW,
            priority=1,
        ))
        table.add_rule(PolicyRule(
            rule_id="deny-unpublished-not-editable",
            description="Drafts are listed only for their editors",
            condition=lambda ctx: (
                ctx.resource.has_status(StatusFlag.UNPUBLISHED)
                and not editability.is_editable(ctx.resource, ctx.principal)
            ),
            decision=PolicyDecision.DENY,
            priority=2,
        ))
        table.add_rule(PolicyRule(
            rule_id="deny-process",
            description="Tool resources are listed only for principals with tool access",
            condition=lambda ctx: (
                ctx.resource.process is not None
                and not processes.can_access_process(ctx.resource.process, ctx.principal)
            ),
            decision=PolicyDecision.DENY,
            priority=3,
        ))
        table.add_rule(PolicyRule(
            rule_id="deny-trash",
            description="Trashed resources are not listed",
            condition=lambda ctx: ctx.resource.has_status(StatusFlag.TRASH),
            decision=PolicyDecision.DENY,
            priority=4,
        ))
        table.add_rule(PolicyRule(
            rule_id="allow-guest-searchable",
            description="Templates may opt into listing regardless of view permission",
            condition=lambda ctx: ctx.resource.template.guest_searchable,
            decision=PolicyDecision.ALLOW,
            priority=5,
        ))
        table.add_rule(PolicyRule(
            rule_id="deny-no-view-permission",
            description="View permission is required",
            condition=lambda ctx: not ctx.principal.has_permission(perms.view, ctx.resource),
            decision=PolicyDecision.DENY,
            priority=6,
        ))

        return table

    def is_listable(self, resource: Resource, principal: Principal) -> bool:
        return self.table.allows(AccessContext(resource=resource, principal=principal))
