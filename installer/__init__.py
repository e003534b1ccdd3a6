"""
Modular installer framework.

This package provides a modular framework for installing and configuring
the components of the Legal RAG GPU pod.
"""

from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry

__all__ = ["BaseComponent", "ComponentRegistry"]
