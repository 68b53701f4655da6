import logging
from collections.abc import Iterable, Mapping

from ..auth.capabilities import Capability
from ..auth.module_catalog import PermissionScope, catalog_for
from ..auth.module_dependencies import dependency_graph_for
from ..domain.permission_set import (
    DEFAULT_PERMISSIONS,
    FULL_ACCESS_PERMISSIONS,
    PermissionMapping,
    PermissionSet,
)
from ..errors import ValidationError
from ..schemas.permission import PermissionMatrixRow, RolePermissionRecord
from .permission_mapping import mapping_from_records, mapping_to_records
from .permission_resolver import PermissionResolver

logger = logging.getLogger(__name__)


class PermissionEditor:
    """In-memory permission state for one role during one edit session.

    Mirrors the "Manage Permissions" dialog: load the role's records, apply
    checkbox toggles and bulk actions, render rows with their lock state, and
    hand back records for submission. Nothing is persisted here; discarding the
    editor cancels the session.
    """

    def __init__(
        self,
        scope: PermissionScope | str,
        records: Iterable[RolePermissionRecord | Mapping] = (),
        *,
        resolver: PermissionResolver | None = None,
    ):
        self.scope = PermissionScope(scope)
        self.modules = catalog_for(self.scope)
        self.resolver = resolver or PermissionResolver(dependency_graph_for(self.scope))
        self._mapping: PermissionMapping = {}
        self.reset(records)

    @property
    def module_codes(self) -> tuple[str, ...]:
        return tuple(module.code for module in self.modules)

    @property
    def mapping(self) -> PermissionMapping:
        return dict(self._mapping)

    def reset(self, records: Iterable[RolePermissionRecord | Mapping] = ()) -> None:
        """Reload from store records. Stored data that predates a dependency is resolved on load."""
        loaded = mapping_from_records(records, self.module_codes)
        self._mapping = self.resolver.apply_dependencies(loaded)
        logger.debug(
            "permission_editor_loaded scope=%s modules=%d", self.scope.value, len(self._mapping)
        )

    def toggle(self, module_code: str, capability: Capability | str, value: bool) -> None:
        resolved = self._capability(capability)
        try:
            self._mapping = self.resolver.update_permission(
                self._mapping, module_code, resolved, value
            )
        except ValueError as exc:
            raise ValidationError(
                str(exc),
                details={"module_code": module_code, "capability": resolved.value},
            ) from exc

    def set_module(self, module_code: str, permission_set: PermissionSet) -> None:
        self._mapping = self.resolver.set_module_permissions(
            self._mapping, module_code, permission_set
        )

    def grant_all(self, module_code: str) -> None:
        self.set_module(module_code, FULL_ACCESS_PERMISSIONS)

    def revoke_all(self, module_code: str) -> None:
        self.set_module(module_code, DEFAULT_PERMISSIONS)

    def permissions_for(self, module_code: str) -> PermissionSet:
        return self._mapping.get(module_code, DEFAULT_PERMISSIONS)

    def is_locked(self, module_code: str, capability: Capability | str) -> bool:
        return self.resolver.is_locked(self._mapping, module_code, self._capability(capability))

    def rows(self) -> list[PermissionMatrixRow]:
        """One row per catalog module, in display order."""
        rows = []
        for module in self.modules:
            required_by = self.resolver.locking_modules(self._mapping, module.code)
            rows.append(
                PermissionMatrixRow(
                    code=module.code,
                    name=module.name,
                    description=module.description,
                    is_core=module.is_core,
                    icon=module.icon,
                    permissions=self.permissions_for(module.code),
                    read_locked=self.resolver.is_required_dependency(self._mapping, module.code),
                    required_by=list(required_by),
                )
            )
        return rows

    def records(self, *, active_only: bool = False) -> list[RolePermissionRecord]:
        return mapping_to_records(self._mapping, self.module_codes, active_only=active_only)

    @staticmethod
    def _capability(capability: Capability | str) -> Capability:
        try:
            return Capability.parse(capability)
        except ValueError as exc:
            raise ValidationError(str(exc), details={"capability": str(capability)}) from exc
