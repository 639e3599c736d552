"""
Structural Capabilities

Moving, sorting and deleting resources. All three build on editability;
moving also needs addability on the destination.
"""

import logging
from typing import Optional

from ..auth.principal import Principal, owns_account, account_is_superuser
from ..model import Resource
from .base import Evaluator, AccessEnvironment
from .editability import EditabilityEvaluator, PARENT_FIELDS
from .addability import AddabilityEvaluator

logger = logging.getLogger(__name__)


class MoveabilityEvaluator(Evaluator):
    """May a resource change parent (optionally to a given parent)"""

    def __init__(self, env: AccessEnvironment, editability: EditabilityEvaluator, addability: AddabilityEvaluator):
        super().__init__(env)
        self.editability = editability
        self.addability = addability

    def is_moveable(self, resource: Resource, principal: Principal, new_parent: Optional[Resource] = None) -> bool:
        if self.env.tree.is_root(resource):
            return False

        moveable = self.editability.is_editable(resource, principal, PARENT_FIELDS[0])

        if moveable and new_parent is not None:
            moveable = self.addability.is_addable(new_parent, principal, resource)

        return moveable


class SortabilityEvaluator(Evaluator):
    """May a resource be reordered among its siblings"""

    def __init__(self, env: AccessEnvironment, editability: EditabilityEvaluator):
        super().__init__(env)
        self.editability = editability

    def is_sortable(self, resource: Resource, principal: Principal) -> bool:
        if self.env.tree.is_root(resource) or resource.parent is None:
            return False
        if not self.editability.is_editable(resource, principal):
            return False
        return principal.has_permission(self.perms.sort, resource.parent)


class DeletabilityEvaluator(Evaluator):
    """
    May a resource be deleted.

    Accounts add two carve-outs that even superusers cannot pass: nobody
    deletes their own account, and only superusers delete superuser
    accounts.
    """

    def __init__(self, env: AccessEnvironment, editability: EditabilityEvaluator):
        super().__init__(env)
        self.editability = editability

    def is_deletable(self, resource: Resource, principal: Principal) -> bool:
        if not self.env.tree.structurally_deletable(resource):
            return False
        if not self.editability.is_editable(resource, principal):
            return False
        if not principal.has_permission(self.perms.delete, resource):
            return False

        if resource.is_account:
            if owns_account(principal, resource):
                logger.debug(f"{principal.principal_id} may not delete their own account")
                return False
            if account_is_superuser(resource, self.env.config.superuser_role) and not principal.is_superuser:
                return False

        return True
