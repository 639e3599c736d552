"""
Resource Status and Template Flags

Bit flags consulted by the access evaluators:
- StatusFlag: per-resource state (system, locked, unpublished, trash)
- TemplateFlag: structural rules declared by a template
"""

from enum import IntFlag
from typing import Iterable, Union


class StatusFlag(IntFlag):
    """
    Resource status bits.

    UNPUBLISHED and TRASH are the highest bits, so any status carrying either
    of them sits in the "unpublished tier".
    """
    NONE = 0
    LOCKED = 4          # Not editable without the lock permission
    SYSTEM_ID = 8       # Identifier may never change
    SYSTEM = 16         # Editable only by superusers
    UNPUBLISHED = 2048  # Draft
    TRASH = 8192        # In the trash

    @classmethod
    def parse(cls, names: Iterable[Union[str, int]]) -> "StatusFlag":
        """Build a flag set from names like "unpublished" or "system-id" """
        status = cls.NONE
        for name in names:
            if isinstance(name, int):
                status |= cls(name)
                continue
            key = name.strip().upper().replace("-", "_")
            try:
                status |= cls[key]
            except KeyError:
                raise ValueError(f"Unknown status flag: {name}")
        return status


UNPUBLISHED_TIER = StatusFlag.UNPUBLISHED | StatusFlag.TRASH


def is_unpublished_tier(status: StatusFlag) -> bool:
    """Check if a status is unpublished or trashed"""
    return bool(status & UNPUBLISHED_TIER)


def normalize_status(status: StatusFlag) -> StatusFlag:
    """System-identifier status always implies system status"""
    if status & StatusFlag.SYSTEM_ID:
        status |= StatusFlag.SYSTEM
    return status


class TemplateFlag(IntFlag):
    """Structural flags declared by a template"""
    NONE = 0
    NO_CHANGE_TEMPLATE = 1   # Resources may not switch to another template
    NO_MOVE = 2              # Resources may not change parent
    NO_CHILDREN = 4          # Resources may not have children
    NO_PARENTS = 8           # Resources may not be created under any parent
    DELEGATES_ROLES = 16     # Role grants come from the access template

    @classmethod
    def parse(cls, names: Iterable[Union[str, int]]) -> "TemplateFlag":
        """Build a flag set from names like "no-move" """
        flags = cls.NONE
        for name in names:
            if isinstance(name, int):
                flags |= cls(name)
                continue
            key = name.strip().upper().replace("-", "_")
            try:
                flags |= cls[key]
            except KeyError:
                raise ValueError(f"Unknown template flag: {name}")
        return flags
