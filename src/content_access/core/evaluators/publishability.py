"""Publishing: open to every editor unless a publish workflow is installed"""

from ..auth.principal import Principal
from ..model import Resource
from .base import Evaluator, AccessEnvironment
from .editability import EditabilityEvaluator


class PublishabilityEvaluator(Evaluator):
    """
    May a principal publish a resource.

    Superusers always may. Everyone else needs edit access, plus the
    publish permission when the workflow is installed.
    """

    def __init__(self, env: AccessEnvironment, editability: EditabilityEvaluator):
        super().__init__(env)
        self.editability = editability

    def is_publishable(self, resource: Resource, principal: Principal) -> bool:
        if principal.is_superuser:
            return True
        if not self.editability.is_editable(resource, principal):
            return False
        if not self.env.publish_workflow_installed():
            return True
        return principal.has_permission(self.perms.publish, resource)
