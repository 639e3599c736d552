"""
Access Engine Errors

Policy outcomes are booleans, never exceptions. These errors signal that a
decision could not be made at all and must be handled as evaluation
failures by the caller.
"""


class AccessError(Exception):
    """Base class for access engine failures"""


class MalformedResourceError(AccessError):
    """Resource is missing its template or has inconsistent kind data"""


class TemplateNotFoundError(AccessError, KeyError):
    """A required template id is not in the registry"""

    def __init__(self, template_id):
        self.template_id = template_id
        super().__init__(f"Template not found: {template_id}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownCapabilityError(AccessError, ValueError):
    """Dispatch received a capability tag it does not know"""


class SnapshotError(AccessError):
    """Site snapshot failed validation or references unknown ids"""
