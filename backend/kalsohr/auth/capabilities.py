"""
Permission capabilities - the six independent flags granted per module.

Every module in both the organization and the platform catalog is governed by
the same fixed set of capabilities. Wire names are camelCase (``canRead``) and
map one-to-one onto the snake_case attributes of ``PermissionSet``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final


class Capability(str, Enum):
    """A single grantable capability on a module."""

    CAN_READ = "canRead"
    CAN_WRITE = "canWrite"
    CAN_UPDATE = "canUpdate"
    CAN_DELETE = "canDelete"
    CAN_APPROVE = "canApprove"
    CAN_EXPORT = "canExport"

    @property
    def attribute(self) -> str:
        """Attribute name on ``PermissionSet`` (``canRead`` -> ``can_read``)."""
        return _ATTRIBUTE_BY_CAPABILITY[self]

    @classmethod
    def parse(cls, value: str | Capability) -> Capability:
        """Accept either the wire name or the attribute name.

        Raises:
            ValueError: If the value names no capability
        """
        if isinstance(value, Capability):
            return value
        if value in _CAPABILITY_BY_ATTRIBUTE:
            return _CAPABILITY_BY_ATTRIBUTE[value]
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Invalid capability '{value}'. "
                f"Must be one of: {', '.join(c.value for c in cls)}"
            ) from None


_ATTRIBUTE_BY_CAPABILITY: Final[dict[Capability, str]] = {
    Capability.CAN_READ: "can_read",
    Capability.CAN_WRITE: "can_write",
    Capability.CAN_UPDATE: "can_update",
    Capability.CAN_DELETE: "can_delete",
    Capability.CAN_APPROVE: "can_approve",
    Capability.CAN_EXPORT: "can_export",
}

_CAPABILITY_BY_ATTRIBUTE: Final[dict[str, Capability]] = {
    attribute: capability for capability, attribute in _ATTRIBUTE_BY_CAPABILITY.items()
}

# The only capability a dependency can force on
IMPLIED_CAPABILITY: Final[Capability] = Capability.CAN_READ


@dataclass(frozen=True)
class PermissionAction:
    capability: Capability
    label: str
    description: str


# Column order of the permission matrix
PERMISSION_ACTIONS: Final[tuple[PermissionAction, ...]] = (
    PermissionAction(Capability.CAN_READ, "Read", "View and access module data"),
    PermissionAction(Capability.CAN_WRITE, "Create", "Create new records"),
    PermissionAction(Capability.CAN_UPDATE, "Update", "Edit existing records"),
    PermissionAction(Capability.CAN_DELETE, "Delete", "Delete records"),
    PermissionAction(Capability.CAN_APPROVE, "Approve", "Approve or reject actions"),
    PermissionAction(Capability.CAN_EXPORT, "Export", "Export data to files"),
)
