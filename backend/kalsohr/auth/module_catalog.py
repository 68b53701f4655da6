"""
Module catalogs for the organization and platform permission surfaces.

Organization modules are what tenant users work with and can be enabled per
organization by subscription plan (core modules are always enabled). Platform
modules belong to the super admin panel. The two catalogs never mix in the same
permission mapping.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Final


class PermissionScope(str, Enum):
    """Which permission surface a role belongs to."""

    ORGANIZATION = "organization"
    PLATFORM = "platform"


@dataclass(frozen=True)
class ModuleInfo:
    code: str
    name: str
    description: str
    is_core: bool = False
    icon: str | None = None


ORG_MODULES: Final[tuple[ModuleInfo, ...]] = (
    ModuleInfo(
        "dashboard",
        "Dashboard",
        "View organization dashboard with analytics and insights",
        is_core=True,
        icon="LayoutDashboard",
    ),
    ModuleInfo(
        "employees",
        "Employees",
        "Manage employee records, documents, and profiles",
        is_core=True,
        icon="Users",
    ),
    ModuleInfo(
        "attendance",
        "Attendance",
        "Track and manage employee attendance and work hours",
        is_core=True,
        icon="Calendar",
    ),
    ModuleInfo(
        "leave",
        "Leave Management",
        "Manage leave requests, approvals, and balances",
        is_core=True,
        icon="CalendarOff",
    ),
    ModuleInfo(
        "master_data",
        "Master Data",
        "Manage departments, designations, branches, and other master data",
        is_core=True,
        icon="Database",
    ),
    ModuleInfo(
        "roles",
        "Roles & Permissions",
        "Manage user roles and permissions for your organization",
        is_core=True,
        icon="Shield",
    ),
    ModuleInfo(
        "users",
        "User Management",
        "Manage organization users and their access",
        is_core=True,
        icon="UserCog",
    ),
    ModuleInfo(
        "reports",
        "Reports",
        "Generate and view various HR reports and analytics",
        is_core=True,
        icon="FileText",
    ),
    ModuleInfo(
        "recruitment",
        "Recruitment",
        "Manage job postings, candidates, and hiring pipeline",
        icon="Briefcase",
    ),
    ModuleInfo(
        "payroll",
        "Payroll",
        "Process payroll, generate payslips, and manage compensation",
        icon="DollarSign",
    ),
    ModuleInfo(
        "performance",
        "Performance Management",
        "Manage performance reviews, goals, and feedback",
        icon="Target",
    ),
    ModuleInfo(
        "assets",
        "Assets Management",
        "Track and manage company assets assigned to employees",
        icon="Package",
    ),
    ModuleInfo(
        "settings",
        "Organization Settings",
        "Manage organization settings and preferences",
        is_core=True,
        icon="Settings",
    ),
)

PLATFORM_MODULES: Final[tuple[ModuleInfo, ...]] = (
    ModuleInfo("organizations", "Organizations Management", "Create, update, and manage tenant organizations"),
    ModuleInfo("accounts", "Accounts Management", "Manage platform super admin user accounts"),
    ModuleInfo("platform_roles", "Platform Roles & Permissions", "Manage platform-level roles and their permissions"),
    ModuleInfo("subscription_plans", "Subscription Plans", "Manage subscription plans and pricing"),
    ModuleInfo("system_modules", "System Modules", "Manage available system modules"),
    ModuleInfo("system_settings", "System Settings", "Configure system-wide settings and preferences"),
    ModuleInfo("audit_logs", "Audit Logs", "View and manage system audit logs"),
    ModuleInfo("analytics", "Platform Analytics", "View platform-wide analytics and reports"),
    ModuleInfo("master_data", "Master Data", "Manage global master data (countries, states, cities, etc.)"),
)

_CATALOGS: Final[dict[PermissionScope, tuple[ModuleInfo, ...]]] = {
    PermissionScope.ORGANIZATION: ORG_MODULES,
    PermissionScope.PLATFORM: PLATFORM_MODULES,
}


def catalog_for(scope: PermissionScope | str) -> tuple[ModuleInfo, ...]:
    return _CATALOGS[PermissionScope(scope)]


def module_codes_for(scope: PermissionScope | str) -> tuple[str, ...]:
    return tuple(module.code for module in catalog_for(scope))


def get_module_by_code(
    code: str, scope: PermissionScope | str = PermissionScope.ORGANIZATION
) -> ModuleInfo | None:
    for module in catalog_for(scope):
        if module.code == code:
            return module
    return None


def get_core_modules() -> list[ModuleInfo]:
    return [module for module in ORG_MODULES if module.is_core]


def get_optional_modules() -> list[ModuleInfo]:
    return [module for module in ORG_MODULES if not module.is_core]


def get_modules_by_codes(
    codes: Iterable[str], scope: PermissionScope | str = PermissionScope.ORGANIZATION
) -> list[ModuleInfo]:
    """Catalog entries for ``codes`` in catalog order; unknown codes are skipped."""
    wanted = set(codes)
    return [module for module in catalog_for(scope) if module.code in wanted]
