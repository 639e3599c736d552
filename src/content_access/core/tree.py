"""
Content Tree Collaborator

The evaluators need three structural facts about the tree which they do not
derive themselves:
- is this the tree root
- is this the container that holds account resources
- may this resource be deleted at all (protected branches)
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Set

from ..config.schema import TreeConfig
from .model import Resource
from .status import StatusFlag

logger = logging.getLogger(__name__)


class ContentTree(ABC):
    """Structural facts supplied by the tree owner"""

    @abstractmethod
    def is_root(self, resource: Resource) -> bool:
        """Check if a resource is the tree root"""
        pass

    @abstractmethod
    def is_accounts_container(self, resource: Resource) -> bool:
        """Check if a resource is the parent of all account resources"""
        pass

    @abstractmethod
    def structurally_deletable(self, resource: Resource) -> bool:
        """Check if a resource may be deleted regardless of who asks"""
        pass


class InMemoryTree(ContentTree):
    """
    ContentTree driven by configured ids.

    A resource is structurally deletable unless it is system status, the
    root, the accounts container, the trash container or one of the
    configured protected ids.
    """

    def __init__(self, config: Optional[TreeConfig] = None):
        self.config = config or TreeConfig()

    def is_root(self, resource: Resource) -> bool:
        return resource.id == self.config.root_id

    def is_accounts_container(self, resource: Resource) -> bool:
        return (
            self.config.accounts_container_id is not None
            and resource.id == self.config.accounts_container_id
        )

    def protected_ids(self) -> Set[int]:
        ids = {self.config.root_id, *self.config.protected_ids}
        if self.config.accounts_container_id is not None:
            ids.add(self.config.accounts_container_id)
        if self.config.trash_id is not None:
            ids.add(self.config.trash_id)
        return ids

    def structurally_deletable(self, resource: Resource) -> bool:
        if resource.has_status(StatusFlag.SYSTEM | StatusFlag.SYSTEM_ID):
            return False
        if resource.id in self.protected_ids():
            logger.debug(f"Resource {resource.id} is a protected branch")
            return False
        return True
