from __future__ import annotations

from typing import Final

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..auth.capabilities import Capability


class PermissionSet(BaseModel):
    """Six independent capability flags for one module.

    Immutable; all six fields are always present. Serializes to camelCase
    (``canRead`` ...) and accepts either naming on input. Flags must be real
    booleans, so malformed input fails here instead of inside the resolver.
    """

    model_config = ConfigDict(
        frozen=True,
        strict=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    can_read: bool = False
    can_write: bool = False
    can_update: bool = False
    can_delete: bool = False
    can_approve: bool = False
    can_export: bool = False

    def get(self, capability: Capability | str) -> bool:
        return getattr(self, Capability.parse(capability).attribute)

    def with_capability(self, capability: Capability | str, value: bool) -> PermissionSet:
        """Copy with exactly one flag changed.

        Raises:
            ValueError: If ``capability`` is unknown or ``value`` is not a bool
        """
        attribute = Capability.parse(capability).attribute
        # model_copy skips validation, so strictness is enforced here
        if not isinstance(value, bool):
            raise ValueError(
                f"Invalid value for '{attribute}': expected a boolean, got {type(value).__name__}"
            )
        return self.model_copy(update={attribute: value})

    def enabled_capabilities(self) -> list[Capability]:
        return [capability for capability in Capability if self.get(capability)]

    def has_any(self) -> bool:
        return (
            self.can_read
            or self.can_write
            or self.can_update
            or self.can_delete
            or self.can_approve
            or self.can_export
        )


# Full permission state for one role, keyed by module code
PermissionMapping = dict[str, PermissionSet]

DEFAULT_PERMISSIONS: Final[PermissionSet] = PermissionSet()

FULL_ACCESS_PERMISSIONS: Final[PermissionSet] = PermissionSet(
    can_read=True,
    can_write=True,
    can_update=True,
    can_delete=True,
    can_approve=True,
    can_export=True,
)


def has_any_permission(permission_set: PermissionSet | None) -> bool:
    """A missing entry counts as DEFAULT_PERMISSIONS."""
    return permission_set is not None and permission_set.has_any()
