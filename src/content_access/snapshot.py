"""
Site Snapshots

Loads a consistent, read-only view of a site (permissions, roles,
templates, principals and resources) from YAML or JSON and builds the
collaborators the engine needs. Used by the CLI and for fixtures.

Example site.yaml:
```yaml
config:
  tree: {root_id: 1, accounts_container_id: 29}
permissions:
  - {id: 1, name: page-view}
  - {id: 2, name: page-edit}
roles:
  - name: editor
    permissions: [page-view, page-edit]
templates:
  - {id: 1, name: home}
  - {id: 2, name: article, parent_templates: [1], flags: [no-children]}
principals:
  - {id: ada, roles: [editor]}
resources:
  - {id: 1, name: home, template: 1}
  - {id: 1042, name: hello, template: 2, parent: 1, status: [unpublished]}
```
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from .config.loader import interpolate_env_vars
from .config.schema import EngineConfig
from .core.auth.principal import Principal, Role
from .core.engine import AccessEngine
from .core.errors import SnapshotError, MalformedResourceError
from .core.model import (
    Template,
    Resource,
    ResourceKind,
    AccountDetails,
    ProcessDescriptor,
    Permission,
)
from .core.registry import TemplateRegistry, PermissionCatalog
from .core.status import StatusFlag, TemplateFlag
from .core.tree import InMemoryTree

logger = logging.getLogger(__name__)


class PermissionModel(BaseModel):
    id: int
    name: str
    title: str = ""


class RoleModel(BaseModel):
    name: str
    permissions: List[str] = Field(default_factory=list)
    template_scopes: Dict[str, List[int]] = Field(default_factory=dict)


class TemplateModel(BaseModel):
    id: int
    name: str
    flags: List[str] = Field(default_factory=list)
    child_templates: List[int] = Field(default_factory=list)
    parent_templates: List[int] = Field(default_factory=list)
    access_template: Optional[int] = None
    renderable: bool = True
    guest_searchable: bool = False


class PrincipalModel(BaseModel):
    id: str
    name: str = ""
    superuser: bool = False
    guest: bool = False
    roles: List[str] = Field(default_factory=list)


class ProcessModel(BaseModel):
    name: str
    permission: Optional[str] = None
    title: str = ""


class AccountModel(BaseModel):
    principal: str
    roles: List[str] = Field(default_factory=list)


class ResourceModel(BaseModel):
    id: int
    template: int
    name: str = ""
    parent: Optional[int] = None
    status: List[str] = Field(default_factory=list)
    account: Optional[AccountModel] = None
    process: Optional[ProcessModel] = None
    access_template: Optional[int] = None


class SnapshotModel(BaseModel):
    """Raw snapshot document"""
    config: Dict[str, Any] = Field(default_factory=dict)
    permissions: List[PermissionModel] = Field(default_factory=list)
    roles: List[RoleModel] = Field(default_factory=list)
    templates: List[TemplateModel] = Field(default_factory=list)
    principals: List[PrincipalModel] = Field(default_factory=list)
    resources: List[ResourceModel] = Field(default_factory=list)


@dataclass
class Snapshot:
    """Built collaborators for one site"""
    config: EngineConfig
    templates: TemplateRegistry
    catalog: PermissionCatalog
    tree: InMemoryTree
    principals: Dict[str, Principal] = field(default_factory=dict)
    resources: Dict[int, Resource] = field(default_factory=dict)

    def engine(self) -> AccessEngine:
        return AccessEngine(self.templates, self.catalog, self.tree, self.config)

    def principal(self, principal_id: str) -> Principal:
        try:
            return self.principals[principal_id]
        except KeyError:
            raise SnapshotError(f"Unknown principal: {principal_id}")

    def resource(self, resource_id: int) -> Resource:
        try:
            return self.resources[resource_id]
        except KeyError:
            raise SnapshotError(f"Unknown resource: {resource_id}")


def build_snapshot(data: Dict[str, Any], config: Optional[EngineConfig] = None) -> Snapshot:
    """
    Validate a snapshot document and build its collaborators.

    Args:
        data: Parsed snapshot document
        config: Engine configuration overriding the document's `config` key

    Raises:
        SnapshotError: If validation fails or ids do not resolve
    """
    try:
        model = SnapshotModel.model_validate(data)
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot: {e}") from e

    try:
        if config is None:
            config = EngineConfig.from_dict(interpolate_env_vars(model.config))
        templates = TemplateRegistry(_build_template(t) for t in model.templates)
    except (KeyError, ValueError) as e:
        raise SnapshotError(f"Invalid snapshot: {e}") from e

    catalog = PermissionCatalog(Permission(id=p.id, name=p.name, title=p.title) for p in model.permissions)

    roles = {
        r.name: Role(
            name=r.name,
            permissions=frozenset(r.permissions),
            template_scopes={k: frozenset(v) for k, v in r.template_scopes.items()},
        )
        for r in model.roles
    }

    principals = {}
    for p in model.principals:
        missing = [name for name in p.roles if name not in roles]
        if missing:
            raise SnapshotError(f"Principal {p.id} references unknown roles: {', '.join(missing)}")
        principals[p.id] = Principal(
            principal_id=p.id,
            name=p.name or p.id,
            is_superuser=p.superuser,
            is_guest=p.guest,
            roles=tuple(roles[name] for name in p.roles),
        )

    resources = _build_resources(model.resources, templates)

    snapshot = Snapshot(
        config=config,
        templates=templates,
        catalog=catalog,
        tree=InMemoryTree(config.tree),
        principals=principals,
        resources=resources,
    )
    logger.info(
        f"Loaded snapshot: {len(templates)} templates, {len(catalog)} permissions, "
        f"{len(principals)} principals, {len(resources)} resources"
    )
    return snapshot


def load_snapshot(path: Union[str, Path], config: Optional[EngineConfig] = None) -> Snapshot:
    """Load a snapshot from a YAML or JSON file"""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot not found: {path}")

    logger.info(f"Loading snapshot from {path}")
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SnapshotError(f"Malformed snapshot {path}: {e}") from e

    return build_snapshot(data or {}, config)


def _build_template(model: TemplateModel) -> Template:
    return Template(
        id=model.id,
        name=model.name,
        flags=TemplateFlag.parse(model.flags),
        child_template_ids=tuple(model.child_templates),
        parent_template_ids=tuple(model.parent_templates),
        access_template_id=model.access_template,
        renderable=model.renderable,
        guest_searchable=model.guest_searchable,
    )


def _build_resources(models: List[ResourceModel], templates: TemplateRegistry) -> Dict[int, Resource]:
    """Build resources parents-first, whatever order the document lists them in"""
    by_id = {m.id: m for m in models}
    built: Dict[int, Resource] = {}
    pending = list(models)

    while pending:
        progressed = False
        remaining = []
        for m in pending:
            if m.parent is not None and m.parent not in built:
                if m.parent not in by_id:
                    raise SnapshotError(f"Resource {m.id} references unknown parent {m.parent}")
                remaining.append(m)
                continue
            built[m.id] = _build_resource(m, built.get(m.parent), templates)
            progressed = True
        if not progressed:
            ids = ", ".join(str(m.id) for m in remaining)
            raise SnapshotError(f"Resource parent cycle among: {ids}")
        pending = remaining

    return built


def _build_resource(model: ResourceModel, parent: Optional[Resource], templates: TemplateRegistry) -> Resource:
    template = templates.get(model.template)
    if template is None:
        raise SnapshotError(f"Resource {model.id} references unknown template {model.template}")

    account = None
    if model.account is not None:
        account = AccountDetails(principal_id=model.account.principal, roles=frozenset(model.account.roles))

    process = None
    if model.process is not None:
        process = ProcessDescriptor(
            name=model.process.name,
            permission=model.process.permission,
            title=model.process.title,
        )

    try:
        return Resource(
            id=model.id,
            name=model.name,
            template=template,
            parent=parent,
            status=StatusFlag.parse(model.status),
            kind=ResourceKind.ACCOUNT if account is not None else ResourceKind.PAGE,
            account=account,
            process=process,
            access_template_id=model.access_template,
        )
    except (ValueError, MalformedResourceError) as e:
        raise SnapshotError(f"Invalid resource {model.id}: {e}") from e
