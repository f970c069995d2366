"""Tests for manifest models, loading and validation."""

import json

import pytest
from returns.result import Failure, Success

from catalyst.manifest import (
    ManifestError,
    PropProperty,
    StaticProperty,
    check_manifest,
    find_manifest,
    load_manifest,
    parse_manifest,
    validate_manifest,
)
from factories import make_component, make_manifest


MANIFEST_JSON = {
    "schemaVersion": "1.0.0",
    "level": 1,
    "metadata": {"projectName": "Demo", "framework": "react"},
    "buildConfig": {"bundler": "vite", "cssFramework": "tailwind"},
    "plugins": {"framework": {"name": "react"}},
    "components": {
        "comp_1": {
            "id": "comp_1",
            "displayName": "Card",
            "type": "div",
            "category": "layout",
            "properties": {
                "title": {"type": "prop", "dataType": "string", "required": False, "default": "Hi"},
                "label": {"type": "static", "value": "Hello", "dataType": "string"},
            },
            "styling": {"baseClasses": ["p-4"], "customCSS": ".x{}"},
            "children": ["comp_2"],
            "metadata": {"createdAt": "t0", "updatedAt": "t1", "author": "user", "version": "1.0.0"},
        },
        "comp_2": {"id": "comp_2", "displayName": "Button", "type": "button"},
    },
    "pageState": {"count": {"type": "number", "initialValue": 0}},
    "flows": {
        "flow_1": {
            "id": "flow_1",
            "name": "increment",
            "trigger": {"type": "onClick", "componentId": "comp_1"},
            "nodes": [],
            "edges": [],
        }
    },
}


class TestModels:

    @pytest.mark.unit
    def test_parse_camel_case(self):
        manifest = parse_manifest(MANIFEST_JSON)
        card = manifest.components["comp_1"]

        assert card.display_name == "Card"
        assert card.children == ["comp_2"]
        assert card.styling.custom_css == ".x{}"
        assert isinstance(card.properties["title"], PropProperty)
        assert card.properties["title"].default == "Hi"
        assert isinstance(card.properties["label"], StaticProperty)
        assert manifest.build_config.css_framework == "tailwind"

    @pytest.mark.unit
    def test_dump_uses_aliases(self):
        card = parse_manifest(MANIFEST_JSON).components["comp_1"]
        data = card.to_json_dict()

        assert data["displayName"] == "Card"
        assert data["styling"]["customCSS"] == ".x{}"
        assert data["metadata"]["updatedAt"] == "t1"

    @pytest.mark.unit
    def test_logic_context(self):
        manifest = parse_manifest(MANIFEST_JSON)
        context = manifest.logic_context()

        assert context is not None
        assert context.page_state["count"].initial_value == 0
        assert "flow_1" in context.flows

    @pytest.mark.unit
    def test_no_logic_context_when_empty(self):
        assert make_manifest(make_component("a")).logic_context() is None
        assert make_manifest(make_component("a"), page_state={}, flows={}).logic_context() is None

    @pytest.mark.unit
    def test_rejects_non_object(self):
        with pytest.raises(ManifestError):
            parse_manifest([1, 2, 3])

    @pytest.mark.unit
    def test_rejects_invalid_schema(self):
        with pytest.raises(ManifestError):
            parse_manifest({"components": {"x": {"id": "x"}}})


class TestLoader:

    @pytest.mark.unit
    def test_load_from_catalyst_dir(self, tmp_path):
        path = tmp_path / ".catalyst" / "manifest.json"
        path.parent.mkdir()
        path.write_text(json.dumps(MANIFEST_JSON))

        assert find_manifest(tmp_path) == path
        assert len(load_manifest(tmp_path).components) == 2

    @pytest.mark.unit
    def test_legacy_location(self, tmp_path):
        path = tmp_path / ".lowcode" / "manifest.json"
        path.parent.mkdir()
        path.write_text(json.dumps(MANIFEST_JSON))

        assert find_manifest(tmp_path) == path

    @pytest.mark.unit
    def test_missing(self, tmp_path):
        with pytest.raises(ManifestError):
            load_manifest(tmp_path)

    @pytest.mark.unit
    def test_corrupt(self, tmp_path):
        path = tmp_path / ".catalyst" / "manifest.json"
        path.parent.mkdir()
        path.write_text("{broken")

        with pytest.raises(ManifestError) as exc:
            load_manifest(tmp_path)
        assert exc.value.path == path


class TestValidation:

    @pytest.mark.unit
    def test_valid_manifest(self, sample_manifest):
        result = validate_manifest(sample_manifest)
        assert isinstance(result, Success)
        assert result.unwrap() == []

    @pytest.mark.unit
    def test_key_mismatch_is_error(self):
        manifest = make_manifest(make_component("a"))
        manifest.components["other"] = manifest.components.pop("a")

        result = validate_manifest(manifest)
        assert isinstance(result, Failure)
        assert result.failure()[0].field == "id"

    @pytest.mark.unit
    def test_dangling_child_warning(self):
        manifest = make_manifest(make_component("a", children=["ghost"]))
        result = validate_manifest(manifest)

        assert isinstance(result, Success)
        assert "ghost" in result.unwrap()[0].message

    @pytest.mark.unit
    def test_cycle(self):
        manifest = make_manifest(
            make_component("a", children=["b"]),
            make_component("b", children=["a"]),
        )
        messages = [issue.message for issue in check_manifest(manifest)]
        assert any("a -> b -> a" in m for m in messages)

    @pytest.mark.unit
    def test_deep_chain(self):
        depth = 3000
        manifest = make_manifest(*(
            make_component(f"c{i}", children=[f"c{i + 1}"] if i + 1 < depth else [])
            for i in range(depth)
        ))

        assert check_manifest(manifest) == []
        assert isinstance(validate_manifest(manifest), Success)

    @pytest.mark.unit
    def test_cycle_at_end_of_deep_chain(self):
        depth = 2000
        components = [make_component(f"c{i}", children=[f"c{i + 1}"]) for i in range(depth - 1)]
        components.append(make_component(f"c{depth - 1}", children=[f"c{depth - 2}"]))
        messages = [issue.message for issue in check_manifest(make_manifest(*components))]

        assert any(f"c{depth - 2} -> c{depth - 1} -> c{depth - 2}" in m for m in messages)

    @pytest.mark.unit
    def test_multiple_parents(self):
        manifest = make_manifest(
            make_component("a", children=["c"]),
            make_component("b", children=["c"]),
            make_component("c"),
        )
        assert any("already belongs" in issue.message for issue in check_manifest(manifest))

    @pytest.mark.unit
    def test_flow_issues(self):
        manifest = parse_manifest({
            "components": {
                "a": {"id": "a", "displayName": "A", "type": "div", "events": {"onClick": {"flowId": "nope"}}},
            },
            "flows": {
                "f": {"id": "f", "name": "f", "trigger": {"type": "onClick", "componentId": "missing"}},
            },
        })
        messages = [issue.message for issue in check_manifest(manifest)]

        assert any("unknown flow 'nope'" in m for m in messages)
        assert any("unknown component 'missing'" in m for m in messages)
