"""
Code Generation
Component, entry point and bootstrap source generators.
"""

from .base import (
    ComponentGenerator,
    EntryPointGenerator,
    GenerationResult,
    RootComponentInfo,
    find_root_components,
    handler_name,
    is_identifier,
)
from .react import ReactCodeGenerator
from .app import AppGenerator

__all__ = [
    "ComponentGenerator",
    "EntryPointGenerator",
    "GenerationResult",
    "RootComponentInfo",
    "find_root_components",
    "handler_name",
    "is_identifier",
    "ReactCodeGenerator",
    "AppGenerator",
]
