"""
Editability

The base gate for nearly every other capability:
- EditabilityEvaluator: may the principal edit this resource at all
- FieldEditabilityEvaluator: may the principal edit one named field of an
  already editable resource
"""

import logging
from typing import Optional

from ..auth.policy import AccessContext, DecisionTable, PolicyRule, PolicyDecision
from ..auth.principal import Principal, account_is_superuser
from ..model import Resource
from ..status import StatusFlag, TemplateFlag
from .base import Evaluator, AccessEnvironment

logger = logging.getLogger(__name__)

# Field names with dedicated policy
ID_FIELD = "id"
NAME_FIELD = "name"
TEMPLATE_FIELDS = ("template", "templates_id")
PARENT_FIELDS = ("parent", "parent_id")
SORT_FIELD = "sortfield"
ROLES_FIELD = "roles"
SYSTEM_LOCKED_FIELDS = (ID_FIELD, NAME_FIELD) + TEMPLATE_FIELDS + PARENT_FIELDS


class FieldEditabilityEvaluator(Evaluator):
    """
    Per-field refinement of editability.

    Only called once the resource itself is editable. Every rule must pass;
    field names without a rule are editable.
    """

    def is_field_editable(self, resource: Resource, field_name: Optional[str], principal: Principal) -> bool:
        if field_name is not None and not isinstance(field_name, str):
            logger.debug(f"Non-string field name {field_name!r} denied")
            return False
        if not field_name:
            return True

        perms = self.perms
        template = resource.template

        if field_name == ID_FIELD and resource.has_status(StatusFlag.SYSTEM_ID):
            return False

        if resource.has_status(StatusFlag.SYSTEM) and field_name in SYSTEM_LOCKED_FIELDS:
            return False

        if field_name in TEMPLATE_FIELDS:
            if template.has_flag(TemplateFlag.NO_CHANGE_TEMPLATE):
                return False
            if not principal.has_permission(perms.template, resource):
                return False

        if field_name in PARENT_FIELDS:
            if template.has_flag(TemplateFlag.NO_MOVE):
                return False
            if not principal.has_permission(perms.move, resource):
                return False

        if field_name == SORT_FIELD and not principal.has_permission(perms.sort, resource):
            return False

        if field_name == ROLES_FIELD and not principal.has_permission(perms.user_admin):
            return False

        return True


class EditabilityEvaluator(Evaluator):
    """
    May a principal edit a resource.

    Cascade (first match wins):
    1. Superuser: allow
    2. System status: deny
    3. Locked without the lock permission: deny
    4. Account holding the superuser role: deny
    5. Account and principal administers users: allow
    6. No edit permission: deny
    7. Publish workflow installed: allow with publish permission or while
       unpublished, otherwise deny
    8. Allow
    """

    def __init__(self, env: AccessEnvironment, fields: Optional[FieldEditabilityEvaluator] = None):
        super().__init__(env)
        self.fields = fields or FieldEditabilityEvaluator(env)
        self.table = self._build_table()

    def _build_table(self) -> DecisionTable:
        perms = self.perms
        env = self.env

        table = DecisionTable(table_id="editable", default=PolicyDecision.ALLOW)

        table.add_rule(PolicyRule(
            rule_id="allow-superuser",
            description="Superusers may edit anything",
            condition=lambda ctx: ctx.principal.is_superuser,
            decision=PolicyDecision.ALLOW,
            priority=1,
        ))

        table.add_rule(PolicyRule(
            rule_id="deny-system",
            description="System resources are editable only by superusers",
            condition=lambda ctx: ctx.resource.has_status(StatusFlag.SYSTEM),
            decision=PolicyDecision.DENY,
            priority=2,
        ))

        table.add_rule(PolicyRule(
            rule_id="deny-locked",
            description="Locked resources need the lock permission",
            condition=lambda ctx: (
                ctx.resource.has_status(StatusFlag.LOCKED)
                and not ctx.principal.has_permission(perms.lock, ctx.resource)
            ),
            decision=PolicyDecision.DENY,
            priority=3,
        ))

        table.add_rule(PolicyRule(
            rule_id="deny-superuser-account",
            description="Only superusers may edit a superuser account",
            condition=lambda ctx: (
                account_is_superuser(ctx.resource, env.config.superuser_role)
                and not ctx.principal.is_superuser
            ),
            decision=PolicyDecision.DENY,
            priority=4,
        ))

        table.add_rule(PolicyRule(
            rule_id="allow-user-admin",
            description="User administrators may edit accounts",
            condition=lambda ctx: (
                ctx.resource.is_account
                and ctx.principal.has_permission(perms.user_admin)
            ),
            decision=PolicyDecision.ALLOW,
            priority=5,
        ))

        table.add_rule(PolicyRule(
            rule_id="deny-no-edit-permission",
            description="Edit permission is required",
            condition=lambda ctx: not ctx.principal.has_permission(perms.edit, ctx.resource),
            decision=PolicyDecision.DENY,
            priority=6,
        ))

        table.add_rule(PolicyRule(
            rule_id="allow-publisher-or-draft",
            description="With a publish workflow, publishers edit anything and editors edit drafts",
            condition=lambda ctx: env.publish_workflow_installed() and (
                ctx.principal.has_permission(perms.publish, ctx.resource)
                or ctx.resource.has_status(StatusFlag.UNPUBLISHED)
            ),
            decision=PolicyDecision.ALLOW,
            priority=7,
        ))

        table.add_rule(PolicyRule(
            rule_id="deny-published-without-publish",
            description="With a publish workflow, published resources need the publish permission",
            condition=lambda ctx: env.publish_workflow_installed(),
            decision=PolicyDecision.DENY,
            priority=8,
        ))

        return table

    def is_editable(self, resource: Resource, principal: Principal, field_name: Optional[str] = None) -> bool:
        """
        Check if a resource (or one field of it) is editable.

        Args:
            resource: Resource to edit
            principal: Principal asking
            field_name: Optional field to refine the decision to

        Returns:
            True if editable
        """
        if field_name is not None and not isinstance(field_name, str):
            logger.debug(f"Non-string field name {field_name!r} denied")
            return False

        if not self.table.allows(AccessContext(resource=resource, principal=principal)):
            return False

        # Structural field rules bind superusers too
        if field_name:
            return self.fields.is_field_editable(resource, field_name, principal)

        return True
