"""
Registry for component modules.

This module provides a registry for component modules to register themselves
and a decorator for registering component classes.
"""

from typing import Any, Dict, List, Optional, Set, Type

from installer.base_component import BaseComponent


class ComponentRegistry:
    """
    Registry for component modules.

    Components register under a unique name; the registry resolves the
    order in which a set of components and their dependencies must run.
    """

    _registry: Dict[str, Type["BaseComponent"]] = {}

    @classmethod
    def register(cls, name: str, metadata: Optional[Dict[str, Any]] = None):
        """
        Decorator for registering component classes.

        Args:
            name: The name of the component.
            metadata: Optional metadata for the component, such as
                      dependencies, estimated time and description.

        Returns:
            A decorator function that registers the component class.
        """

        def decorator(
            component_class: Type["BaseComponent"],
        ) -> Type["BaseComponent"]:
            if name in cls._registry:
                raise ValueError(
                    f"Component with name '{name}' already registered"
                )

            if metadata:
                component_class.metadata = metadata
            component_class.component_name = name

            cls._registry[name] = component_class
            return component_class

        return decorator

    @classmethod
    def get_component(cls, name: str) -> Type["BaseComponent"]:
        """
        Get a component class by name.

        Raises:
            KeyError: If no component with the given name is registered.
        """
        if name not in cls._registry:
            raise KeyError(f"No component registered with name '{name}'")

        return cls._registry[name]

    @classmethod
    def get_all_components(cls) -> Dict[str, Type["BaseComponent"]]:
        """Get a copy of the name -> class mapping of all components."""
        return cls._registry.copy()

    @classmethod
    def get_component_dependencies(cls, name: str) -> Set[str]:
        component_class = cls.get_component(name)
        metadata = getattr(component_class, "metadata", {})
        return set(metadata.get("dependencies", []))

    @classmethod
    def resolve_dependencies(cls, components: List[str]) -> List[str]:
        """
        Resolve dependencies for a list of components.

        Dependencies are visited in sorted order, so the result is stable
        for a given input. Requested components keep their relative order.

        Args:
            components: A list of component names.

        Returns:
            A list of component names in the order they should be processed.

        Raises:
            KeyError: If any of the components or their dependencies are not registered.
            ValueError: If there is a circular dependency.
        """
        result: List[str] = []
        visited: Set[str] = set()
        temp_visited: Set[str] = set()

        def visit(component: str):
            if component in temp_visited:
                raise ValueError(
                    f"Circular dependency detected involving '{component}'"
                )

            if component in visited:
                return

            temp_visited.add(component)

            for dependency in sorted(cls.get_component_dependencies(component)):
                visit(dependency)

            temp_visited.remove(component)
            visited.add(component)
            result.append(component)

        for component in components:
            if component not in visited:
                visit(component)

        return result
