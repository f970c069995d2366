"""Manifest Data Models.

The manifest is stored as camelCase JSON. Every model accepts both the
camelCase alias and the snake_case field name.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


PropertyDataType = Literal["string", "number", "boolean", "object", "array"]
Primitive = str | int | float | bool | None


class ManifestModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump in manifest (camelCase) form."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================================
# Component
# ============================================================================


class StaticProperty(ManifestModel):
    """Fixed property value."""

    type: Literal["static"] = "static"
    value: Primitive = None
    data_type: PropertyDataType = "string"


class PropProperty(ManifestModel):
    """Property passed in from the parent component."""

    type: Literal["prop"] = "prop"
    data_type: PropertyDataType = "string"
    required: bool = False
    default: Primitive = None
    options: list[str] | None = None
    description: str | None = None


ComponentProperty = Annotated[StaticProperty | PropProperty, Field(discriminator="type")]


class ComponentStyling(ManifestModel):
    """Visual styling of a component."""

    base_classes: list[str] = Field(default_factory=list)
    inline_styles: dict[str, str | int | float] | None = None
    conditional_classes: dict[str, list[str]] | None = None
    custom_css: str | None = Field(default=None, alias="customCSS")


class ComponentEvent(ManifestModel):
    """Reference from a component event to a logic flow."""

    flow_id: str


class ComponentMetadata(ManifestModel):
    """Creation and tracking info."""

    created_at: str = ""
    updated_at: str = ""
    author: Literal["user", "ai"] = "user"
    version: str = "1.0.0"
    description: str | None = None
    tags: list[str] | None = None


class Component(ManifestModel):
    """A node in the UI component tree."""

    id: str
    display_name: str
    type: str
    category: Literal["basic", "layout", "form", "custom"] | None = None
    properties: dict[str, ComponentProperty] = Field(default_factory=dict)
    styling: ComponentStyling = Field(default_factory=ComponentStyling)
    children: list[str] = Field(default_factory=list)
    events: dict[str, ComponentEvent] | None = None
    metadata: ComponentMetadata = Field(default_factory=ComponentMetadata)


# ============================================================================
# Logic (page state and flows)
# ============================================================================


class StateVariable(ManifestModel):
    """Page-level reactive state variable."""

    type: Literal["string", "number", "boolean"]
    initial_value: str | int | float | bool


class NodePosition(ManifestModel):
    """Canvas position of a flow node."""

    x: float = 0
    y: float = 0


class FlowNode(ManifestModel):
    """Flow node; ``config`` shape depends on ``type``."""

    id: str
    type: str
    position: NodePosition = Field(default_factory=NodePosition)
    config: dict[str, Any] = Field(default_factory=dict)


class FlowEdge(ManifestModel):
    """Connection between two flow nodes."""

    id: str
    source: str
    target: str


class FlowTrigger(ManifestModel):
    """Component event that starts a flow."""

    type: str = "onClick"
    component_id: str


class Flow(ManifestModel):
    """Visual logic flow."""

    id: str
    name: str
    trigger: FlowTrigger
    nodes: list[FlowNode] = Field(default_factory=list)
    edges: list[FlowEdge] = Field(default_factory=list)


class LogicContext(ManifestModel):
    """Logic data the entry point needs (present only when non-empty)."""

    page_state: dict[str, StateVariable] = Field(default_factory=dict)
    flows: dict[str, Flow] = Field(default_factory=dict)


# ============================================================================
# Manifest
# ============================================================================


class ProjectMetadata(ManifestModel):
    """Project level metadata."""

    project_name: str = "New Project"
    framework: str = "react"
    created_at: str = ""
    updated_at: str = ""
    author: str | None = None
    description: str | None = None


class BuildConfig(ManifestModel):
    """Build tooling configuration."""

    bundler: str = "vite"
    css_framework: str = "tailwind"
    typescript: bool | None = None


class Manifest(ManifestModel):
    """Complete project manifest."""

    schema_version: str = "1.0.0"
    level: int = 1
    metadata: ProjectMetadata = Field(default_factory=ProjectMetadata)
    build_config: BuildConfig = Field(default_factory=BuildConfig)
    plugins: dict[str, Any] = Field(default_factory=dict)
    components: dict[str, Component] = Field(default_factory=dict)
    page_state: dict[str, StateVariable] | None = None
    flows: dict[str, Flow] | None = None

    def logic_context(self) -> LogicContext | None:
        """Build the entry point logic context, or None if there is no logic."""
        if not self.page_state and not self.flows:
            return None
        return LogicContext(page_state=self.page_state or {}, flows=self.flows or {})


__all__ = [
    "Component",
    "ComponentEvent",
    "ComponentMetadata",
    "ComponentProperty",
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
]
