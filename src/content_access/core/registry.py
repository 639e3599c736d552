"""
Template Registry and Permission Catalog

Read-side views over the persistence layer:
- TemplateRegistry: templates by id, iterable in registration order
- PermissionCatalog: permissions by name, existence-checkable

Both are populated by the surrounding system (or a snapshot) and only read
by the evaluators.
"""

import logging
from typing import Optional, Dict, Iterator, Iterable, Any, List

from .errors import TemplateNotFoundError
from .model import Template, Permission

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """Registry of templates keyed by id"""

    def __init__(self, templates: Optional[Iterable[Template]] = None):
        self._templates: Dict[int, Template] = {}
        for template in templates or ():
            self.register(template)

    def register(self, template: Template) -> None:
        """Register or replace a template"""
        self._templates[template.id] = template
        logger.debug(f"Registered template: {template.name} ({template.id})")

    def get(self, template_id: int) -> Optional[Template]:
        """Get a template by id, None if unknown"""
        return self._templates.get(template_id)

    def require(self, template_id: int) -> Template:
        """Get a template by id, raising if it is unknown"""
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template

    def resolve_access_template(self, template: Template) -> Optional[Template]:
        """
        Resolve the template whose role grants apply to `template`.

        Returns the template itself unless it delegates its roles, in which
        case the delegate is looked up. An unknown delegate resolves to None.
        """
        if not template.delegates_roles:
            return template
        if template.access_template_id is None:
            logger.debug(f"Template {template.name} delegates roles but names no access template")
            return None
        return self._templates.get(template.access_template_id)

    def __iter__(self) -> Iterator[Template]:
        return iter(list(self._templates.values()))

    def __len__(self) -> int:
        return len(self._templates)


class PermissionCatalog:
    """
    Catalog of permissions installed in the system.

    A permission either exists or does not. Optional features (such as a
    publish workflow) are switched on by installing their permission.
    """

    def __init__(self, permissions: Optional[Iterable[Permission]] = None):
        self._permissions: Dict[str, Permission] = {}
        for permission in permissions or ():
            self.register(permission)

    def register(self, permission: Permission) -> None:
        """Install or replace a permission"""
        self._permissions[permission.name] = permission
        logger.debug(f"Registered permission: {permission.name}")

    def remove(self, name: str) -> None:
        """Uninstall a permission"""
        if name in self._permissions:
            del self._permissions[name]
            logger.debug(f"Removed permission: {name}")

    def get(self, name: str) -> Optional[Permission]:
        """Get a permission by name, None if it is not installed"""
        return self._permissions.get(name)

    def exists(self, name: str) -> bool:
        return name in self._permissions

    def __iter__(self) -> Iterator[Permission]:
        return iter(list(self._permissions.values()))

    def __len__(self) -> int:
        return len(self._permissions)

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self._permissions.values()]

    @classmethod
    def from_dicts(cls, data: Iterable[Dict[str, Any]]) -> "PermissionCatalog":
        catalog = cls(Permission.from_dict(item) for item in data)
        logger.info(f"Loaded {len(catalog)} permissions")
        return catalog
