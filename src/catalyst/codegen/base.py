"""Code generator contracts."""

import re
from typing import Protocol

from pydantic import BaseModel

from catalyst.manifest import Component, Flow, LogicContext, Manifest

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class GenerationResult(BaseModel):
    """Outcome of generating one component file."""

    success: bool
    component_id: str
    component_name: str
    code: str = ""
    error: str | None = None


class RootComponentInfo(BaseModel):
    """Root component as seen by the entry point template."""

    id: str
    display_name: str
    on_click_handler: str | None = None


class ComponentGenerator(Protocol):
    """Turns one component definition into source text."""

    async def generate_component(self, component: Component, manifest: Manifest) -> GenerationResult:
        ...


class EntryPointGenerator(Protocol):
    """Builds the entry point and bootstrap files."""

    async def generate_entry_point(
        self,
        root_components: list[RootComponentInfo],
        logic_context: LogicContext | None = None,
    ) -> str:
        ...

    async def generate_bootstrap(self) -> str:
        ...


def is_identifier(name: str) -> bool:
    """True if ``name`` can be used as a JS identifier."""
    return bool(_IDENTIFIER.match(name))


def handler_name(flow: Flow) -> str:
    """
    Handler function name for a flow: ``handle`` + PascalCase flow name.

    Examples:
        "button click" -> "handleButtonClick"; "!!!" -> "handleClick"
    """
    cleaned = re.sub(r"[^A-Za-z0-9\s]", "", flow.name)
    pascal = "".join(word[:1].upper() + word[1:].lower() for word in cleaned.split())
    return f"handle{pascal or 'Click'}"


def find_root_components(manifest: Manifest) -> list[RootComponentInfo]:
    """
    Root components sorted by display name, with their onClick handler.

    The click handler comes from the flow whose trigger targets the component.
    """
    child_ids = {child for c in manifest.components.values() for child in c.children}
    click_flows = {
        flow.trigger.component_id: flow
        for flow in sorted((manifest.flows or {}).values(), key=lambda f: f.id, reverse=True)
        if flow.trigger.type == "onClick"
    }

    roots = []
    for component in manifest.components.values():
        if component.id in child_ids:
            continue
        flow = click_flows.get(component.id)
        roots.append(RootComponentInfo(
            id=component.id,
            display_name=component.display_name,
            on_click_handler=handler_name(flow) if flow else None,
        ))
    return sorted(roots, key=lambda r: (r.display_name.lower(), r.id))


__all__ = [
    "GenerationResult",
    "RootComponentInfo",
    "ComponentGenerator",
    "EntryPointGenerator",
    "is_identifier",
    "handler_name",
    "find_root_components",
]
