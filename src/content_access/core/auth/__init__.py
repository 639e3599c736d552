"""
Principals and Decision Tables

Core concepts:
- Principal / Role: who is asking and what their roles grant
- DecisionTable: ordered guard clauses, first match wins
"""

from .principal import Principal, Role, owns_account, account_is_superuser
from .policy import AccessContext, PolicyRule, DecisionTable, PolicyDecision

__all__ = [
    "Principal",
    "Role",
    "owns_account",
    "account_is_superuser",
    "AccessContext",
    "PolicyRule",
    "DecisionTable",
    "PolicyDecision",
]
