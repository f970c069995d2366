"""Structural manifest checks (Result pattern).

Generation tolerates most of these problems: dangling children are skipped
and cycles only affect imports. They are reported so the orchestrator can log
them. A component stored under a key other than its own id is an error.
"""

from dataclasses import dataclass
from typing import Literal

from returns.result import Result, Success, Failure

from .models import Manifest


@dataclass(frozen=True)
class ManifestIssue:
    """Single validation finding."""

    message: str
    component_id: str | None = None
    field: str | None = None
    level: Literal["ERROR", "WARNING"] = "WARNING"


def _find_cycles(manifest: Manifest) -> list[list[str]]:
    """Return child-reference cycles as id paths (first id repeated at the end)."""
    components = manifest.components
    visiting: set[str] = set()
    done: set[str] = set()
    cycles: list[list[str]] = []

    # Explicit stack: nesting depth is unbounded in user manifests.
    for start_id in sorted(components):
        if start_id in done:
            continue
        path = [start_id]
        stack = [iter(components[start_id].children)]
        visiting.add(start_id)

        while stack:
            child_id = next(stack[-1], None)
            if child_id is None:
                stack.pop()
                node_id = path.pop()
                visiting.discard(node_id)
                done.add(node_id)
                continue
            if child_id not in components:
                continue
            if child_id in visiting:
                cycles.append(path[path.index(child_id):] + [child_id])
            elif child_id not in done:
                visiting.add(child_id)
                path.append(child_id)
                stack.append(iter(components[child_id].children))
    return cycles


def check_manifest(manifest: Manifest) -> list[ManifestIssue]:
    """Collect every structural issue in the manifest."""
    issues: list[ManifestIssue] = []
    components = manifest.components
    parents: dict[str, str] = {}

    for key, component in components.items():
        if key != component.id:
            issues.append(ManifestIssue(
                f"Component stored under '{key}' has id '{component.id}'",
                component_id=key,
                field="id",
                level="ERROR",
            ))

        for child_id in component.children:
            if child_id not in components:
                issues.append(ManifestIssue(
                    f"Child '{child_id}' does not exist",
                    component_id=component.id,
                    field="children",
                ))
            elif child_id in parents and parents[child_id] != component.id:
                issues.append(ManifestIssue(
                    f"Child '{child_id}' already belongs to '{parents[child_id]}'",
                    component_id=component.id,
                    field="children",
                ))
            else:
                parents[child_id] = component.id

        for event_name, event in (component.events or {}).items():
            if event.flow_id not in (manifest.flows or {}):
                issues.append(ManifestIssue(
                    f"Event '{event_name}' references unknown flow '{event.flow_id}'",
                    component_id=component.id,
                    field="events",
                ))

    for cycle in _find_cycles(manifest):
        issues.append(ManifestIssue(
            f"Circular children reference: {' -> '.join(cycle)}",
            component_id=cycle[0],
            field="children",
        ))

    for flow in (manifest.flows or {}).values():
        if flow.trigger.component_id not in components:
            issues.append(ManifestIssue(
                f"Flow '{flow.id}' is triggered by unknown component '{flow.trigger.component_id}'",
                field="flows",
            ))

    return issues


def validate_manifest(manifest: Manifest) -> Result[list[ManifestIssue], list[ManifestIssue]]:
    """
    Validate manifest structure.

    Returns:
        Success with the (possibly empty) list of warnings, or Failure with
        the errors when any issue is fatal.
    """
    issues = check_manifest(manifest)
    errors = [issue for issue in issues if issue.level == "ERROR"]
    if errors:
        return Failure(errors)
    return Success(issues)


__all__ = ["ManifestIssue", "check_manifest", "validate_manifest"]
