"""
Addability

- ChildTemplateAccessResolver: is there any template the principal may
  create under a parent
- AddabilityEvaluator: may the principal add a child (optionally a given
  child) under a parent
"""

import logging
from typing import Optional

from ..auth.principal import Principal
from ..model import Resource, Template
from ..status import TemplateFlag
from .base import Evaluator

logger = logging.getLogger(__name__)


class ChildTemplateAccessResolver(Evaluator):
    """
    Template-driven check for creating children.

    Called only after the principal is known to hold the add permission on
    the parent.
    """

    def can_create_under_parent(self, parent: Resource, principal: Principal) -> bool:
        parent_template = parent.template

        if parent_template.child_template_ids:
            return self._any_allowed_child(parent_template, principal)

        return self._any_template_for_parent(parent_template, principal)

    def _any_allowed_child(self, parent_template: Template, principal: Principal) -> bool:
        templates = self.env.templates
        for template_id in parent_template.child_template_ids:
            candidate = templates.get(template_id)
            if candidate is None:
                logger.debug(f"Allowed child template {template_id} of {parent_template.name} is unknown")
                continue
            access_template = templates.resolve_access_template(candidate)
            if access_template is None:
                continue
            if principal.has_permission(self.perms.create, access_template):
                return True
        return False

    def _any_template_for_parent(self, parent_template: Template, principal: Principal) -> bool:
        templates = self.env.templates
        for candidate in templates:
            if candidate.has_flag(TemplateFlag.NO_PARENTS):
                continue
            if not candidate.allows_parent(parent_template.id):
                continue
            access_template = templates.resolve_access_template(candidate)
            if access_template is None:
                continue
            if principal.has_permission(self.perms.create, access_template):
                return True
        return False


class AddabilityEvaluator(Evaluator):
    """
    May a principal add children to a parent.

    With a candidate child, the parent's allowed-child list is enforced on
    the child's template.
    """

    def __init__(self, env, resolver: Optional[ChildTemplateAccessResolver] = None):
        super().__init__(env)
        self.resolver = resolver or ChildTemplateAccessResolver(env)

    def is_addable(self, parent: Resource, principal: Principal, child: Optional[Resource] = None) -> bool:
        addable = self._addable(parent, principal)

        if addable and child is not None:
            if not parent.template.allows_child(child.template.id):
                logger.debug(
                    f"Template {child.template.name} is not an allowed child of {parent.template.name}"
                )
                addable = False

        return addable

    def _addable(self, parent: Resource, principal: Principal) -> bool:
        perms = self.perms

        if parent.template.has_flag(TemplateFlag.NO_CHILDREN):
            return False

        if principal.is_superuser:
            return True

        if self.env.tree.is_accounts_container(parent) and principal.has_permission(perms.user_admin):
            return True

        if principal.has_permission(perms.add, parent) and self.resolver.can_create_under_parent(parent, principal):
            return True

        return False
