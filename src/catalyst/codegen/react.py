"""React component code generator.

Output is a function component per file. Generation is deterministic: the
same component and manifest always produce byte-identical text.
"""

from catalyst.core import get_logger, safe_json_dumps
from catalyst.manifest import Component, Manifest, PropProperty, StaticProperty
from .base import GenerationResult, is_identifier

logger = get_logger(__name__)

TEXT_PROPERTIES = ("label", "text", "content")
VOID_ELEMENTS = frozenset({"area", "br", "col", "hr", "img", "input", "link", "meta", "source"})
INDENT = "  "


def js_literal(value: object) -> str:
    """JSON is valid JS for every primitive the manifest allows."""
    return safe_json_dumps(value)


class ReactCodeGenerator:
    """Generates ``.jsx`` component files."""

    async def generate_component(self, component: Component, manifest: Manifest) -> GenerationResult:
        """
        Generate source for one component.

        Args:
            component: Component to render
            manifest: Full manifest (resolves child display names)

        Returns:
            GenerationResult with the code or an error message
        """
        result = GenerationResult(
            success=False,
            component_id=component.id,
            component_name=component.display_name,
        )

        if not is_identifier(component.display_name):
            result.error = f"Display name '{component.display_name}' is not a valid identifier"
            return result
        if not component.type or not is_identifier(component.type.replace("-", "_")):
            result.error = f"Element type '{component.type}' is not valid"
            return result
        bad_props = [name for name in component.properties if not is_identifier(name)]
        if bad_props:
            result.error = f"Invalid property names: {', '.join(sorted(bad_props))}"
            return result

        children = [manifest.components[cid] for cid in component.children if cid in manifest.components]
        missing = [cid for cid in component.children if cid not in manifest.components]
        if missing:
            logger.warning("missing_children", component_id=component.id, missing=missing)

        lines = [
            *self._header(component),
            "import React from 'react';",
            *self._imports(component, children),
            "",
            f"export default function {component.display_name}({self._params(component)}) {{",
            f"{INDENT}return (",
            *self._element(component, children, depth=2),
            f"{INDENT});",
            "}",
            "",
        ]
        result.success = True
        result.code = "\n".join(lines)
        return result

    def _header(self, component: Component) -> list[str]:
        lines = ["/**", f" * {component.display_name}"]
        if component.metadata.description:
            lines.append(f" * {component.metadata.description}")
        lines += [
            f" * @generated catalyst (component {component.id}, v{component.metadata.version})",
            " */",
        ]
        return lines

    def _imports(self, component: Component, children: list[Component]) -> list[str]:
        names = sorted({child.display_name for child in children if child.id != component.id})
        return [f"import {name} from './{name}';" for name in names]

    def _params(self, component: Component) -> str:
        params = []
        for name, prop in sorted(component.properties.items()):
            if not isinstance(prop, PropProperty):
                continue
            if prop.default is not None:
                params.append(f"{name} = {js_literal(prop.default)}")
            else:
                params.append(name)
        return f"{{ {', '.join(params)} }}" if params else ""

    def _attributes(self, component: Component) -> list[str]:
        attrs = []
        styling = component.styling
        conditional = [expr for exprs in (styling.conditional_classes or {}).values() for expr in exprs]
        base = " ".join(styling.base_classes)
        if conditional:
            parts = ([base] if base else []) + [f"${{{expr}}}" for expr in conditional]
            attrs.append("className={`" + " ".join(parts) + "`}")
        elif base:
            attrs.append(f"className={js_literal(base)}")
        if styling.inline_styles:
            attrs.append(f"style={{{js_literal(dict(sorted(styling.inline_styles.items())))}}}")

        for name, prop in sorted(component.properties.items()):
            if name in TEXT_PROPERTIES:
                continue
            if isinstance(prop, StaticProperty):
                if prop.value is not None:
                    attrs.append(f"{name}={{{js_literal(prop.value)}}}")
            else:
                attrs.append(f"{name}={{{name}}}")
        return attrs

    def _text(self, component: Component) -> str | None:
        for name in TEXT_PROPERTIES:
            prop = component.properties.get(name)
            if isinstance(prop, StaticProperty) and prop.value is not None:
                return f"{{{js_literal(prop.value)}}}"
            if isinstance(prop, PropProperty):
                return f"{{{name}}}"
        return None

    def _element(self, component: Component, children: list[Component], depth: int) -> list[str]:
        pad = INDENT * depth
        tag = component.type
        attrs = self._attributes(component)
        opening = f"{pad}<{tag}" + "".join(f" {attr}" for attr in attrs)

        text = self._text(component)
        if tag in VOID_ELEMENTS or (not children and text is None):
            return [f"{opening} />"]

        body = []
        if text is not None:
            body.append(f"{pad}{INDENT}{text}")
        for child in children:
            if child.id == component.id:
                continue
            body.append(f"{pad}{INDENT}<{child.display_name} />")
        return [f"{opening}>", *body, f"{pad}</{tag}>"]


__all__ = ["ReactCodeGenerator", "js_literal"]
