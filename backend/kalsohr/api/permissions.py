"""
Permission matrix endpoints.

Stateless: every request carries the role's current permission records and
every response returns the resolved matrix, so the client keeps the single
copy of the edit state between calls.
"""
from __future__ import annotations

from fastapi import APIRouter

from ..auth.capabilities import PERMISSION_ACTIONS
from ..auth.module_catalog import PermissionScope, catalog_for, get_module_by_code
from ..auth.module_dependencies import dependency_graph_for
from ..config import settings
from ..domain.permission_set import DEFAULT_PERMISSIONS, FULL_ACCESS_PERMISSIONS
from ..errors import NotFoundError, ValidationError
from ..schemas.permission import (
    ModuleCatalogResponse,
    ModuleRead,
    PermissionActionRead,
    PermissionMatrixResponse,
    ResolveRequest,
    SetModulePermissionsRequest,
    SubmitPermissionsRequest,
    SubmitPermissionsResponse,
    UpdatePermissionRequest,
)
from ..services.permission_checks import ensure_role_permissions_editable
from ..services.permission_editor import PermissionEditor

router = APIRouter(prefix="/permissions/{scope}", tags=["permissions"])

_PRESETS = {
    "all": FULL_ACCESS_PERMISSIONS,
    "none": DEFAULT_PERMISSIONS,
}


def _resolve_scope(scope: str) -> PermissionScope:
    try:
        return PermissionScope(scope)
    except ValueError:
        raise NotFoundError(
            f"Unknown permission scope '{scope}'", details={"scope": scope}
        ) from None


def _require_module(scope: PermissionScope, module_code: str) -> None:
    if get_module_by_code(module_code, scope) is None:
        raise NotFoundError(
            f"Module '{module_code}' not found",
            details={"scope": scope.value, "module_code": module_code},
        )


def _actions() -> list[PermissionActionRead]:
    return [
        PermissionActionRead(
            key=action.capability, label=action.label, description=action.description
        )
        for action in PERMISSION_ACTIONS
    ]


def _matrix(editor: PermissionEditor) -> PermissionMatrixResponse:
    return PermissionMatrixResponse(
        scope=editor.scope.value,
        modules=editor.rows(),
        actions=_actions(),
    )


@router.get("/modules", response_model=ModuleCatalogResponse)
async def list_modules(scope: str) -> ModuleCatalogResponse:
    """Module catalog, dependency graph and permission columns for a scope."""
    resolved = _resolve_scope(scope)
    graph = dependency_graph_for(resolved)
    return ModuleCatalogResponse(
        scope=resolved.value,
        modules=[
            ModuleRead(
                code=module.code,
                name=module.name,
                description=module.description,
                is_core=module.is_core,
                icon=module.icon,
            )
            for module in catalog_for(resolved)
        ],
        dependencies={module: list(dependencies) for module, dependencies in graph.items()},
        actions=_actions(),
    )


@router.post("/resolve", response_model=PermissionMatrixResponse)
async def resolve_permissions(scope: str, payload: ResolveRequest) -> PermissionMatrixResponse:
    editor = PermissionEditor(_resolve_scope(scope), payload.permissions)
    return _matrix(editor)


@router.post("/update", response_model=PermissionMatrixResponse)
async def update_permission(
    scope: str, payload: UpdatePermissionRequest
) -> PermissionMatrixResponse:
    """Apply a single checkbox change."""
    resolved = _resolve_scope(scope)
    _require_module(resolved, payload.module_code)
    editor = PermissionEditor(resolved, payload.permissions)
    editor.toggle(payload.module_code, payload.capability, payload.value)
    return _matrix(editor)


@router.post("/set-module", response_model=PermissionMatrixResponse)
async def set_module_permissions(
    scope: str, payload: SetModulePermissionsRequest
) -> PermissionMatrixResponse:
    """Apply a bulk action: a preset ("all" / "none") or an explicit permission set."""
    resolved = _resolve_scope(scope)
    _require_module(resolved, payload.module_code)
    if (payload.preset is None) == (payload.permission_set is None):
        raise ValidationError(
            "Exactly one of 'preset' or 'permissionSet' must be provided",
            details={"module_code": payload.module_code},
        )
    permission_set = (
        _PRESETS[payload.preset] if payload.preset is not None else payload.permission_set
    )
    editor = PermissionEditor(resolved, payload.permissions)
    editor.set_module(payload.module_code, permission_set)
    return _matrix(editor)


@router.post("/submit", response_model=SubmitPermissionsResponse)
async def submit_permissions(
    scope: str, payload: SubmitPermissionsRequest
) -> SubmitPermissionsResponse:
    """
    Prepare a role's permissions for the store.

    Resolves dependencies once more and keeps only modules with at least one
    capability. Protected roles are rejected with 403.
    """
    resolved = _resolve_scope(scope)
    ensure_role_permissions_editable(payload.role_code, settings.protected_role_codes)
    editor = PermissionEditor(resolved, payload.permissions)
    return SubmitPermissionsResponse(
        role_code=payload.role_code,
        permissions=editor.records(active_only=True),
    )
