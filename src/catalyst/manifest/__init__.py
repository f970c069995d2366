"""
Manifest Model
Typed component tree and logic data consumed by code generation.
"""

from .models import (
    Component,
    ComponentEvent,
    ComponentMetadata,
    ComponentStyling,
    Flow,
    FlowEdge,
    FlowNode,
    FlowTrigger,
    LogicContext,
    Manifest,
    PropProperty,
    StateVariable,
    StaticProperty,
)
from .loader import ManifestError, find_manifest, load_manifest, parse_manifest
from .validate import ManifestIssue, check_manifest, validate_manifest

__all__ = [
    "Component",
    "ComponentEvent",
    "ComponentMetadata",
    "ComponentStyling",
    "Flow",
    "FlowEdge",
    "FlowNode",
    "FlowTrigger",
    "LogicContext",
    "Manifest",
    "PropProperty",
    "StateVariable",
    "StaticProperty",
    "ManifestError",
    "find_manifest",
    "load_manifest",
    "parse_manifest",
    "ManifestIssue",
    "check_manifest",
    "validate_manifest",
]
