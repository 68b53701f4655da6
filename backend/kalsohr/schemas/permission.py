from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..auth.capabilities import Capability
from ..domain.permission_set import PermissionSet


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RolePermissionRecord(_CamelModel):
    """Flat permission row as loaded from and saved to the permission store."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
        extra="ignore",
    )

    module_code: str = Field(..., min_length=1, max_length=100)
    can_read: bool = False
    can_write: bool = False
    can_update: bool = False
    can_delete: bool = False
    can_approve: bool = False
    can_export: bool = False

    def to_permission_set(self) -> PermissionSet:
        return PermissionSet(
            can_read=self.can_read,
            can_write=self.can_write,
            can_update=self.can_update,
            can_delete=self.can_delete,
            can_approve=self.can_approve,
            can_export=self.can_export,
        )

    @classmethod
    def from_permission_set(
        cls, module_code: str, permission_set: PermissionSet
    ) -> "RolePermissionRecord":
        return cls(module_code=module_code, **permission_set.model_dump())


class PermissionActionRead(_CamelModel):
    key: Capability
    label: str
    description: str


class ModuleRead(_CamelModel):
    code: str
    name: str
    description: str
    is_core: bool
    icon: str | None = None


class PermissionMatrixRow(ModuleRead):
    permissions: PermissionSet
    read_locked: bool
    required_by: list[str] = Field(default_factory=list)


class PermissionMatrixResponse(_CamelModel):
    scope: str
    modules: list[PermissionMatrixRow]
    actions: list[PermissionActionRead]


class ModuleCatalogResponse(_CamelModel):
    scope: str
    modules: list[ModuleRead]
    dependencies: dict[str, list[str]]
    actions: list[PermissionActionRead]


class ResolveRequest(_CamelModel):
    permissions: list[RolePermissionRecord] = Field(default_factory=list)


class UpdatePermissionRequest(ResolveRequest):
    module_code: str = Field(..., min_length=1, max_length=100)
    capability: Capability
    value: bool


class SetModulePermissionsRequest(ResolveRequest):
    module_code: str = Field(..., min_length=1, max_length=100)
    preset: Literal["all", "none"] | None = None
    permission_set: PermissionSet | None = None


class SubmitPermissionsRequest(ResolveRequest):
    role_code: str = Field(..., min_length=1, max_length=100)


class SubmitPermissionsResponse(_CamelModel):
    role_code: str
    permissions: list[RolePermissionRecord]
