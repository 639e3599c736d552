"""
Evaluator Environment

Everything an evaluator may read besides the resource and principal. It is
passed explicitly to each evaluator; there is no global lookup.
"""

from dataclasses import dataclass, field

from ...config.schema import EngineConfig, PermissionNames
from ..registry import TemplateRegistry, PermissionCatalog
from ..tree import ContentTree


@dataclass(frozen=True)
class AccessEnvironment:
    """Read-only collaborators for one consistent snapshot of the system"""
    templates: TemplateRegistry
    catalog: PermissionCatalog
    tree: ContentTree
    config: EngineConfig = field(default_factory=EngineConfig)

    @property
    def permissions(self) -> PermissionNames:
        return self.config.permissions

    def publish_workflow_installed(self) -> bool:
        """Check if the optional publish permission exists"""
        return self.catalog.get(self.permissions.publish) is not None


class Evaluator:
    """Base class holding the environment"""

    def __init__(self, env: AccessEnvironment):
        self.env = env

    @property
    def perms(self) -> PermissionNames:
        return self.env.permissions
