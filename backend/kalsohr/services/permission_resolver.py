import logging
from collections.abc import Mapping

from ..auth.capabilities import IMPLIED_CAPABILITY, Capability
from ..auth.module_dependencies import DependencyGraph
from ..domain.permission_set import (
    DEFAULT_PERMISSIONS,
    PermissionMapping,
    PermissionSet,
    has_any_permission,
)

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Resolves read permissions implied by module dependencies.

    Invariant maintained: whenever a module has any capability enabled, every
    module it depends on has at least ``canRead`` enabled.

    The graph is injected so the same resolver serves the organization and the
    platform permission surfaces. Mappings are treated as values: every
    operation returns a new dict and leaves its argument untouched. Only
    malformed capability arguments raise; module codes missing from the mapping
    count as DEFAULT_PERMISSIONS.
    """

    def __init__(self, graph: DependencyGraph):
        self.graph = graph

    def apply_dependencies(self, mapping: Mapping[str, PermissionSet]) -> PermissionMapping:
        """Grant ``canRead`` on the dependencies of every module holding any permission.

        Single pass over the graph in declaration order. Whether a module holds
        a permission is decided by ``mapping`` as passed in, so a read granted
        during this pass does not cascade further within the same call.
        Implied reads are only ever added, never revoked.

        Args:
            mapping: Current permission state

        Returns:
            PermissionMapping: New mapping with first-order implications applied
        """
        resolved: PermissionMapping = dict(mapping)

        for module_code, dependencies in self.graph.items():
            if not has_any_permission(mapping.get(module_code)):
                continue
            for dependency in dependencies:
                current = resolved.get(dependency, DEFAULT_PERMISSIONS)
                if current.can_read:
                    continue
                resolved[dependency] = current.with_capability(IMPLIED_CAPABILITY, True)
                logger.debug(
                    "implied_read module=%s dependency=%s", module_code, dependency
                )

        return resolved

    def update_permission(
        self,
        mapping: Mapping[str, PermissionSet],
        module_code: str,
        capability: Capability | str,
        value: bool,
    ) -> PermissionMapping:
        """Set one flag on one module (a single checkbox click), then resolve.

        Raises:
            ValueError: If ``capability`` names no capability or ``value`` is not a bool
        """
        updated: PermissionMapping = dict(mapping)
        current = updated.get(module_code, DEFAULT_PERMISSIONS)
        updated[module_code] = current.with_capability(capability, value)
        return self.apply_dependencies(updated)

    def set_module_permissions(
        self,
        mapping: Mapping[str, PermissionSet],
        module_code: str,
        permission_set: PermissionSet,
    ) -> PermissionMapping:
        """Replace a module's whole permission set ("Grant All" / "Revoke All"), then resolve."""
        updated: PermissionMapping = dict(mapping)
        updated[module_code] = permission_set
        return self.apply_dependencies(updated)

    def dependents_of(self, module_code: str) -> tuple[str, ...]:
        """Modules that list ``module_code`` as a dependency, in declaration order."""
        return tuple(
            parent for parent, dependencies in self.graph.items() if module_code in dependencies
        )

    def locking_modules(
        self, mapping: Mapping[str, PermissionSet], module_code: str
    ) -> tuple[str, ...]:
        """Dependents of ``module_code`` that currently hold any permission."""
        return tuple(
            parent
            for parent in self.dependents_of(module_code)
            if has_any_permission(mapping.get(parent))
        )

    def is_required_dependency(
        self, mapping: Mapping[str, PermissionSet], module_code: str
    ) -> bool:
        """True when some dependent of ``module_code`` holds any permission.

        Drives the locked, auto-selected state of the module's read checkbox.
        """
        for parent, dependencies in self.graph.items():
            if module_code in dependencies and has_any_permission(mapping.get(parent)):
                return True
        return False

    def is_locked(
        self,
        mapping: Mapping[str, PermissionSet],
        module_code: str,
        capability: Capability | str,
    ) -> bool:
        """Only ``canRead`` is ever locked."""
        if Capability.parse(capability) is not IMPLIED_CAPABILITY:
            return False
        return self.is_required_dependency(mapping, module_code)
