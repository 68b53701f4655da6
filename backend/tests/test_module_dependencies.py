"""
Tests for the module dependency graphs and their configuration-time validation.
"""
import pytest

from kalsohr.auth import module_dependencies
from kalsohr.auth.module_catalog import PermissionScope, module_codes_for
from kalsohr.auth.module_dependencies import (
    ORG_MODULE_DEPENDENCIES,
    PLATFORM_MODULE_DEPENDENCIES,
    dependency_graph_for,
    find_dependency_cycle,
    find_unclosed_dependencies,
    transitive_dependencies,
    validate_dependency_graph,
)


class TestBuiltinGraphs:
    """The shipped graphs must match the admin console configuration."""

    def test_org_graph_entries(self):
        """Organization graph matches the console's dependencies."""
        assert ORG_MODULE_DEPENDENCIES["users"] == ("roles",)
        assert ORG_MODULE_DEPENDENCIES["employees"] == ("master_data",)
        assert ORG_MODULE_DEPENDENCIES["attendance"] == ("master_data", "employees")
        assert ORG_MODULE_DEPENDENCIES["assets"] == ("master_data", "employees")
        assert set(ORG_MODULE_DEPENDENCIES) == {
            "users",
            "employees",
            "attendance",
            "leave",
            "recruitment",
            "payroll",
            "performance",
            "assets",
            "reports",
        }

    def test_platform_graph_entries(self):
        """Platform graph matches the console's dependencies."""
        assert PLATFORM_MODULE_DEPENDENCIES["accounts"] == ("master_data", "platform_roles")
        assert set(PLATFORM_MODULE_DEPENDENCIES) == {
            "organizations",
            "subscription_plans",
            "accounts",
            "system_modules",
            "system_settings",
        }

    def test_graphs_are_immutable(self):
        """Built-in graphs cannot be modified."""
        with pytest.raises(TypeError):
            ORG_MODULE_DEPENDENCIES["dashboard"] = ("master_data",)  # type: ignore[index]

    def test_graph_selected_by_scope(self):
        """Each scope resolves to its own graph."""
        assert dependency_graph_for("organization") is ORG_MODULE_DEPENDENCIES
        assert dependency_graph_for(PermissionScope.PLATFORM) is PLATFORM_MODULE_DEPENDENCIES

    def test_builtin_graphs_validate(self):
        """Both graphs are acyclic, closed and reference only catalog modules."""
        validate_dependency_graph(ORG_MODULE_DEPENDENCIES, module_codes_for("organization"))
        validate_dependency_graph(PLATFORM_MODULE_DEPENDENCIES, module_codes_for("platform"))


class TestCycleDetection:
    """Cycle detection over arbitrary graphs."""

    def test_acyclic_graph_has_no_cycle(self):
        """An acyclic graph reports no cycle."""
        assert find_dependency_cycle({"A": ["B"], "B": ["C"]}) is None

    def test_two_node_cycle(self):
        """A two-module cycle is reported as a closed path."""
        cycle = find_dependency_cycle({"A": ["B"], "B": ["A"]})
        assert cycle == ["A", "B", "A"]

    def test_self_loop(self):
        """A module depending on itself is a cycle."""
        assert find_dependency_cycle({"A": ["A"]}) == ["A", "A"]

    def test_transitive_dependencies_survive_cycles(self):
        """Transitive lookup terminates on cyclic graphs."""
        assert transitive_dependencies({"A": ["B"], "B": ["A"]}, "A") == {"B"}


class TestGraphValidation:
    """Configuration-time graph validation."""

    def test_unknown_module_rejected(self):
        """Dependencies must name catalog modules."""
        with pytest.raises(ValueError, match="Unknown module code 'ghost'"):
            validate_dependency_graph({"employees": ["ghost"]}, ["employees", "master_data"])

    def test_self_dependency_rejected(self):
        """A module may not depend on itself."""
        with pytest.raises(ValueError, match="depends on itself"):
            validate_dependency_graph({"A": ["A"]})

    def test_cycle_rejected(self):
        """Cycles fail validation with the offending path."""
        with pytest.raises(ValueError, match="Dependency cycle: A -> B -> A"):
            validate_dependency_graph({"A": ["B"], "B": ["A"]})

    def test_indirect_dependency_must_be_listed(self):
        """Indirect dependencies must also be listed directly."""
        graph = {"A": ["B"], "B": ["C"]}
        assert find_unclosed_dependencies(graph) == [("A", "C")]
        with pytest.raises(ValueError, match="'A' depends on 'C' indirectly"):
            validate_dependency_graph(graph)

    def test_closed_graph_accepted(self):
        """A closed acyclic graph passes validation."""
        validate_dependency_graph({"A": ["B", "C"], "B": ["C"]})

    def test_builtin_validation_fails_fast(self, monkeypatch: pytest.MonkeyPatch):
        """A broken built-in graph aborts with RuntimeError."""
        monkeypatch.setitem(
            module_dependencies._GRAPHS,
            PermissionScope.ORGANIZATION,
            {"employees": ("employees",)},
        )
        with pytest.raises(RuntimeError, match="Module dependency validation failed"):
            module_dependencies._validate_builtin_graphs()
