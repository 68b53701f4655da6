import logging
from collections.abc import Iterable, Mapping

from ..auth.capabilities import Capability
from ..config import DEFAULT_PROTECTED_ROLE_CODES
from ..domain.permission_set import DEFAULT_PERMISSIONS, PermissionSet
from ..errors import PermissionError

logger = logging.getLogger(__name__)


def has_permission(
    mapping: Mapping[str, PermissionSet],
    module_code: str,
    capability: Capability | str,
    *,
    is_super_admin: bool = False,
    has_role: bool = True,
) -> bool:
    """Check a role's permission state for one capability on one module.

    Args:
        mapping: The role's permission mapping
        module_code: Module to check
        capability: Capability to check
        is_super_admin: Whether the user is a platform super admin
        has_role: Whether the user has a role at all

    Returns:
        bool: True if the capability is granted. An unknown capability is
        denied rather than raised.
    """
    # Super admins without a role have full access
    if is_super_admin and not has_role:
        return True
    if not has_role:
        return False
    try:
        resolved = Capability.parse(capability)
    except ValueError:
        logger.warning(
            "permission_check_denied module=%s capability=%s reason=unknown_capability",
            module_code,
            capability,
        )
        return False
    return mapping.get(module_code, DEFAULT_PERMISSIONS).get(resolved)


def can_view_audit_info(
    mapping: Mapping[str, PermissionSet],
    module_code: str,
    *,
    is_super_admin: bool = False,
    has_role: bool = True,
) -> bool:
    """Audit trails (created by / updated by) need ``canApprove`` on the module."""
    return has_permission(
        mapping,
        module_code,
        Capability.CAN_APPROVE,
        is_super_admin=is_super_admin,
        has_role=has_role,
    )


def ensure_role_permissions_editable(
    role_code: str,
    protected_codes: Iterable[str] = DEFAULT_PROTECTED_ROLE_CODES,
) -> None:
    """
    Reject edits to roles that always carry full access.

    Raises:
        PermissionError: If ``role_code`` is protected
    """
    if role_code in set(protected_codes):
        logger.warning("protected_role_edit_rejected role=%s", role_code)
        raise PermissionError(
            f"Role '{role_code}' has full access by default and cannot be modified",
            details={"role_code": role_code},
        )
