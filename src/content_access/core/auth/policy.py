"""
Decision Tables

Ordered policy cascades used by the evaluators:
- AccessContext: the resource/principal pair under evaluation
- PolicyRule: a single guard clause (condition -> decision)
- DecisionTable: rules evaluated in priority order, first match wins

Unlike a general rule language, every table is assembled in code by its
evaluator and never changes at runtime.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from ..model import Resource
from .principal import Principal

logger = logging.getLogger(__name__)


class PolicyDecision(str, Enum):
    """Authorization decision"""
    ALLOW = "allow"
    DENY = "deny"

    @property
    def allowed(self) -> bool:
        return self is PolicyDecision.ALLOW


@dataclass
class AccessContext:
    """Context for a single decision"""
    resource: Resource
    principal: Principal


@dataclass
class PolicyRule:
    """
    A single guard clause.

    Rules are evaluated in priority order (lower = earlier). Exceptions
    raised by the condition propagate: a collaborator failure is not a
    denial.
    """
    rule_id: str
    description: str
    condition: Callable[[AccessContext], bool]
    decision: PolicyDecision
    priority: int = 100

    def evaluate(self, context: AccessContext) -> Optional[PolicyDecision]:
        """
        Evaluate this rule against the context.

        Returns:
            The rule's decision if it matches, None otherwise
        """
        if self.condition(context):
            return self.decision
        return None


@dataclass
class DecisionTable:
    """
    Ordered collection of rules for one evaluator.

    The first matching rule determines the decision; `default` applies when
    nothing matches.
    """
    table_id: str
    rules: List[PolicyRule] = field(default_factory=list)
    default: PolicyDecision = PolicyDecision.DENY

    def add_rule(self, rule: PolicyRule) -> "DecisionTable":
        """Add a rule, keeping priority order"""
        self.rules.append(rule)
        self.rules.sort(key=lambda r: r.priority)
        return self

    def evaluate(self, context: AccessContext) -> Tuple[PolicyDecision, str]:
        """
        Evaluate the table against the context.

        Returns:
            (decision, rule_id) tuple; rule_id is "default" on fallthrough
        """
        for rule in self.rules:
            decision = rule.evaluate(context)
            if decision is not None:
                logger.debug(
                    f"{self.table_id}: {decision.value} for resource {context.resource.id} "
                    f"({context.principal.principal_id}) by {rule.rule_id}"
                )
                return (decision, rule.rule_id)

        logger.debug(
            f"{self.table_id}: {self.default.value} for resource {context.resource.id} "
            f"({context.principal.principal_id}) by default"
        )
        return (self.default, "default")

    def allows(self, context: AccessContext) -> bool:
        decision, _ = self.evaluate(context)
        return decision.allowed
