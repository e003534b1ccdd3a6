"""
Tests for the component registry.
"""

import pytest

from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry


@pytest.fixture
def empty_registry(monkeypatch):
    monkeypatch.setattr(ComponentRegistry, "_registry", {})
    return ComponentRegistry


def _make_component(registry, name, dependencies=()):
    @registry.register(
        name=name,
        metadata={"dependencies": list(dependencies), "description": name},
    )
    class _Component(BaseComponent):
        def install(self):
            return True

        def is_installed(self):
            return False

    return _Component


def test_register_sets_metadata_and_name(empty_registry):
    component = _make_component(empty_registry, "alpha", ["beta"])

    assert empty_registry.get_component("alpha") is component
    assert component.component_name == "alpha"
    assert empty_registry.get_component_dependencies("alpha") == {"beta"}


def test_register_duplicate_name(empty_registry):
    _make_component(empty_registry, "alpha")

    with pytest.raises(ValueError, match="already registered"):
        _make_component(empty_registry, "alpha")


def test_get_unknown_component(empty_registry):
    with pytest.raises(KeyError):
        empty_registry.get_component("missing")


def test_resolve_dependencies_orders_dependencies_first(empty_registry):
    _make_component(empty_registry, "prerequisites")
    _make_component(empty_registry, "nodejs", ["prerequisites"])
    _make_component(empty_registry, "claude_code", ["nodejs"])
    _make_component(empty_registry, "github_cli", ["prerequisites"])
    _make_component(empty_registry, "repository", ["github_cli"])

    order = empty_registry.resolve_dependencies(["claude_code", "repository"])

    assert order == [
        "prerequisites",
        "nodejs",
        "claude_code",
        "github_cli",
        "repository",
    ]


def test_resolve_dependencies_keeps_requested_order(empty_registry):
    for name in ["a", "b", "c"]:
        _make_component(empty_registry, name)

    assert empty_registry.resolve_dependencies(["c", "a", "b"]) == ["c", "a", "b"]


def test_resolve_dependencies_cycle(empty_registry):
    _make_component(empty_registry, "a", ["b"])
    _make_component(empty_registry, "b", ["a"])

    with pytest.raises(ValueError, match="Circular dependency"):
        empty_registry.resolve_dependencies(["a"])


def test_resolve_dependencies_unknown_dependency(empty_registry):
    _make_component(empty_registry, "a", ["ghost"])

    with pytest.raises(KeyError):
        empty_registry.resolve_dependencies(["a"])


def test_full_group_order_is_already_resolved():
    """The default sequence needs no reordering by dependency resolution."""
    from installer import config
    from installer.orchestrator import load_all_components

    load_all_components()

    full = config.COMPONENT_GROUPS["full"]
    assert ComponentRegistry.resolve_dependencies(full) == full
