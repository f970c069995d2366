"""Entry point (App.jsx) and bootstrap (main.jsx) generation."""

from catalyst.core import get_logger
from catalyst.manifest import Flow, FlowNode, LogicContext
from .base import RootComponentInfo, handler_name, is_identifier
from .react import INDENT, js_literal

logger = get_logger(__name__)

CONSOLE_LEVELS = frozenset({"log", "info", "warn", "error", "debug"})

BOOTSTRAP_TEMPLATE = """\
/**
 * Application bootstrap
 * @generated catalyst
 */
import React from 'react';
import ReactDOM from 'react-dom/client';
import App from './App';
import './index.css';

ReactDOM.createRoot(document.getElementById('root')).render(
  <React.StrictMode>
    <App />
  </React.StrictMode>
);
"""


def setter_name(variable: str) -> str:
    return f"set{variable[:1].upper()}{variable[1:]}"


def _static(value: object) -> object:
    """Unwrap ``{"type": "static", "value": ...}`` flow values."""
    if isinstance(value, dict) and "value" in value:
        return value["value"]
    return value


def order_nodes(flow: Flow) -> list[FlowNode]:
    """
    Action nodes in execution order.

    Follows edges from the event node; nodes not reachable through edges keep
    their declared order at the end.
    """
    by_id = {node.id: node for node in flow.nodes}
    next_ids: dict[str, list[str]] = {}
    for edge in flow.edges:
        next_ids.setdefault(edge.source, []).append(edge.target)

    ordered: list[FlowNode] = []
    seen: set[str] = set()
    queue = [node.id for node in flow.nodes if node.type == "event"]
    while queue:
        node_id = queue.pop(0)
        if node_id in seen or node_id not in by_id:
            continue
        seen.add(node_id)
        ordered.append(by_id[node_id])
        queue.extend(next_ids.get(node_id, []))

    ordered += [node for node in flow.nodes if node.id not in seen]
    return [node for node in ordered if node.type != "event"]


def node_statement(node: FlowNode) -> str:
    """One JS statement for a flow action node."""
    config = node.config
    match node.type:
        case "setState":
            variable = str(config.get("variable", ""))
            return f"{setter_name(variable)}({js_literal(_static(config.get('value')))});"
        case "alert":
            return f"alert({js_literal(_static(config.get('message', '')))});"
        case "console":
            level = config.get("level", "log")
            level = level if level in CONSOLE_LEVELS else "log"
            return f"console.{level}({js_literal(_static(config.get('message', '')))});"
        case _:
            return f"// Unsupported node type: {node.type}"


class AppGenerator:
    """Generates the files that compose and boot the root components."""

    async def generate_entry_point(
        self,
        root_components: list[RootComponentInfo],
        logic_context: LogicContext | None = None,
    ) -> str:
        """
        Build App.jsx.

        Args:
            root_components: Roots in render order
            logic_context: Page state and flows, if the manifest has any

        Returns:
            Source text
        """
        invalid = [root.id for root in root_components if not is_identifier(root.display_name)]
        if invalid:
            logger.warning("invalid_root_names", component_ids=invalid)
            root_components = [root for root in root_components if root.id not in invalid]

        page_state = logic_context.page_state if logic_context else {}
        flows = sorted((logic_context.flows if logic_context else {}).values(), key=lambda f: f.id)

        react_import = "import React, { useState } from 'react';" if page_state else "import React from 'react';"
        lines = ["/**", " * Application entry point", " * @generated catalyst", " */", react_import]
        lines += [f"import {root.display_name} from './components/{root.display_name}';" for root in root_components]
        lines += ["", "export default function App() {"]

        for name, variable in sorted(page_state.items()):
            lines.append(
                f"{INDENT}const [{name}, {setter_name(name)}] = useState({js_literal(variable.initial_value)});"
            )
        if page_state:
            lines.append("")

        emitted: set[str] = set()
        for flow in flows:
            name = handler_name(flow)
            if name in emitted:
                logger.warning("duplicate_handler", flow_id=flow.id, handler=name)
                continue
            emitted.add(name)
            lines.append(f"{INDENT}const {name} = () => {{")
            lines += [f"{INDENT * 2}{node_statement(node)}" for node in order_nodes(flow)]
            lines += [f"{INDENT}}};", ""]

        lines += [f"{INDENT}return (", f"{INDENT * 2}<div className=\"app\">"]
        for root in root_components:
            wiring = f" onClick={{{root.on_click_handler}}}" if root.on_click_handler else ""
            lines.append(f"{INDENT * 3}<{root.display_name}{wiring} />")
        lines += [f"{INDENT * 2}</div>", f"{INDENT});", "}", ""]
        return "\n".join(lines)

    async def generate_bootstrap(self) -> str:
        """Build main.jsx."""
        return BOOTSTRAP_TEMPLATE


__all__ = ["AppGenerator", "order_nodes", "node_statement", "setter_name"]
