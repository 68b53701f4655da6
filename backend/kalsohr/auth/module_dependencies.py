"""
Module dependency graphs - hard-coded configuration with fail-fast validation.

When a module has ANY capability granted, every module it depends on must be
readable. Two independent graphs exist, one per permission surface; the
resolution algorithm over either is identical.

The built-in graphs are validated at import time. Besides being acyclic they
must be transitively closed (every indirect dependency listed directly), which
keeps a single resolution pass equal to its fixed point.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Final

from .module_catalog import PermissionScope, module_codes_for

DependencyGraph = Mapping[str, Sequence[str]]


ORG_MODULE_DEPENDENCIES: Final[DependencyGraph] = MappingProxyType({
    # Assigning roles to users needs the roles list
    "users": ("roles",),
    "employees": ("master_data",),
    "attendance": ("master_data", "employees"),
    "leave": ("master_data", "employees"),
    "recruitment": ("master_data",),
    "payroll": ("master_data", "employees"),
    "performance": ("master_data", "employees"),
    # Assets are assigned to employees
    "assets": ("master_data", "employees"),
    "reports": ("master_data",),
})

PLATFORM_MODULE_DEPENDENCIES: Final[DependencyGraph] = MappingProxyType({
    # Countries, states, cities, org types, industry types
    "organizations": ("master_data",),
    "subscription_plans": ("master_data",),
    # Accounts get platform roles assigned
    "accounts": ("master_data", "platform_roles"),
    "system_modules": ("master_data",),
    "system_settings": ("master_data",),
})

_GRAPHS: Final[dict[PermissionScope, DependencyGraph]] = {
    PermissionScope.ORGANIZATION: ORG_MODULE_DEPENDENCIES,
    PermissionScope.PLATFORM: PLATFORM_MODULE_DEPENDENCIES,
}


def dependency_graph_for(scope: PermissionScope | str) -> DependencyGraph:
    return _GRAPHS[PermissionScope(scope)]


def find_dependency_cycle(graph: DependencyGraph) -> list[str] | None:
    """Return one cycle as a path (first node repeated at the end), or None."""
    visiting: list[str] = []
    done: set[str] = set()

    def visit(node: str) -> list[str] | None:
        if node in done:
            return None
        if node in visiting:
            return visiting[visiting.index(node):] + [node]
        visiting.append(node)
        for dependency in graph.get(node, ()):
            cycle = visit(dependency)
            if cycle is not None:
                return cycle
        visiting.pop()
        done.add(node)
        return None

    for module in graph:
        cycle = visit(module)
        if cycle is not None:
            return cycle
    return None


def transitive_dependencies(graph: DependencyGraph, module_code: str) -> set[str]:
    """Every module reachable from ``module_code`` (excluding itself). Cycle-safe."""
    seen: set[str] = set()
    stack = list(graph.get(module_code, ()))
    while stack:
        dependency = stack.pop()
        if dependency in seen:
            continue
        seen.add(dependency)
        stack.extend(graph.get(dependency, ()))
    seen.discard(module_code)
    return seen


def find_unclosed_dependencies(graph: DependencyGraph) -> list[tuple[str, str]]:
    """(module, dependency) pairs reachable only indirectly, in declaration order."""
    missing: list[tuple[str, str]] = []
    for module, dependencies in graph.items():
        direct = set(dependencies)
        for dependency in sorted(transitive_dependencies(graph, module) - direct):
            missing.append((module, dependency))
    return missing


def validate_dependency_graph(
    graph: DependencyGraph,
    module_codes: Iterable[str] | None = None,
) -> None:
    """
    Validate a dependency graph before it is handed to a resolver.

    Args:
        graph: Mapping of module code to its dependency codes
        module_codes: Known module catalog; when given, every code in the graph
            must belong to it

    Raises:
        ValueError: On unknown codes, self-dependencies, cycles, or indirect
            dependencies that are not listed directly
    """
    errors: list[str] = []

    if module_codes is not None:
        known = set(module_codes)
        for module, dependencies in graph.items():
            for code in (module, *dependencies):
                if code not in known:
                    errors.append(f"Unknown module code '{code}' in dependencies of '{module}'")

    for module, dependencies in graph.items():
        if module in dependencies:
            errors.append(f"Module '{module}' depends on itself")

    cycle = find_dependency_cycle(graph)
    if cycle is not None:
        errors.append(f"Dependency cycle: {' -> '.join(cycle)}")
    else:
        for module, dependency in find_unclosed_dependencies(graph):
            errors.append(
                f"Module '{module}' depends on '{dependency}' indirectly; list it directly"
            )

    if errors:
        raise ValueError("; ".join(errors))


def _validate_builtin_graphs() -> None:
    """Validate both shipped graphs at module import time."""
    errors = []
    for scope, graph in _GRAPHS.items():
        try:
            validate_dependency_graph(graph, module_codes_for(scope))
        except ValueError as e:
            errors.append(f"{scope.value}: {e}")

    if errors:
        raise RuntimeError(
            "Module dependency validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )


# Run validation on import
_validate_builtin_graphs()
