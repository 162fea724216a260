"""
Tests for the design-tree loader.
"""

import json

import pytest

from mailframe.exceptions import LayoutError
from mailframe.models.loader import load_design, node_from_dict
from mailframe.models.node import (
    ContainerNode,
    ContainerType,
    ImageNode,
    ImagePaint,
    LineHeightUnit,
    ShapeNode,
    ShapeType,
    SolidPaint,
    TextDecoration,
    TextNode,
)


def bbox(x=0, y=0, width=10, height=10):
    return {"x": x, "y": y, "width": width, "height": height}


class TestNodeFromDict:
    def test_frame_with_children(self):
        node = node_from_dict({
            "id": "1:1",
            "type": "FRAME",
            "name": "Newsletter",
            "absoluteBoundingBox": bbox(0, 0, 600, 900),
            "fills": [{"type": "SOLID", "color": {"r": 1, "g": 1, "b": 1}}],
            "children": [{"type": "GROUP", "name": "[table] Prices", "children": []}],
        })

        assert isinstance(node, ContainerNode)
        assert node.container_type is ContainerType.FRAME
        assert node.bbox.width == 600
        assert node.fills == [SolidPaint((1.0, 1.0, 1.0))]
        assert node.children[0].container_type is ContainerType.GROUP
        assert node.children[0].bbox is None

    def test_text_with_segments(self):
        node = node_from_dict({
            "type": "TEXT",
            "characters": "Hi there",
            "textAlignHorizontal": "center",
            "absoluteBoundingBox": bbox(),
            "styledTextSegments": [
                {"start": 0, "end": 2, "fontName": {"family": "Inter", "style": "Bold"}, "fontWeight": 700,
                 "fontSize": 20, "fills": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0}}],
                 "lineHeight": {"unit": "PIXELS", "value": 24}, "textDecoration": "UNDERLINE"},
                {"start": 2, "end": 8, "fontName": {"family": "Inter", "style": "Regular"}},
            ],
        })

        assert isinstance(node, TextNode)
        assert node.text_align == "CENTER"
        first, second = node.runs
        assert (first.font.style, first.font_weight, first.font_size) == ("Bold", 700, 20.0)
        assert first.line_height.unit is LineHeightUnit.PIXELS
        assert first.decoration is TextDecoration.UNDERLINE
        assert second.font_size == 16.0
        assert second.decoration is TextDecoration.NONE

    def test_text_without_segments_uses_style(self):
        node = node_from_dict({
            "type": "TEXT",
            "characters": "Plain",
            "style": {"fontFamily": "Roboto", "fontSize": 12, "fontWeight": 500, "lineHeightPx": 18},
            "fills": [{"type": "SOLID", "color": {"r": 1, "g": 0, "b": 0}}],
        })

        run = node.runs[0]
        assert (run.start, run.end) == (0, 5)
        assert run.font.family == "Roboto"
        assert run.fills == (SolidPaint((1.0, 0.0, 0.0)),)
        assert run.line_height.value == 18
        assert node.line_height.unit is LineHeightUnit.PIXELS

    def test_shape_geometry(self):
        node = node_from_dict({
            "type": "RECTANGLE",
            "absoluteBoundingBox": bbox(),
            "strokes": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0}}],
            "strokeWeight": 2,
            "rectangleCornerRadii": [4, 4, 0, 0],
        })

        assert isinstance(node, ShapeNode)
        assert node.shape_type is ShapeType.RECTANGLE
        assert node.stroke.weight == 2.0
        assert node.corner_radius.mixed
        assert node.corner_radius.top_left == 4.0

    def test_uniform_corner_radius(self):
        node = node_from_dict({"type": "ELLIPSE", "cornerRadius": 6})

        assert node.shape_type is ShapeType.ELLIPSE
        assert not node.corner_radius.mixed

    def test_unsupported_paints_are_dropped(self):
        node = node_from_dict({"type": "RECTANGLE", "fills": [
            {"type": "GRADIENT_LINEAR"},
            {"type": "SOLID", "visible": False, "color": {"r": 0, "g": 0, "b": 0}},
            {"type": "IMAGE", "imageRef": "abc", "opacity": 0.5},
            {"type": "SOLID"},
        ]})

        assert node.fills == [ImagePaint("abc", 0.5)]

    def test_unknown_types_become_images(self):
        node = node_from_dict({"type": "BOOLEAN_OPERATION", "name": "Logo"})

        assert isinstance(node, ImageNode)
        assert node.kind == "BOOLEAN_OPERATION"

    def test_malformed_bbox(self):
        assert node_from_dict({"type": "FRAME", "absoluteBoundingBox": {"x": 1}}).bbox is None

    def test_null_numbers_fall_back_to_defaults(self):
        node = node_from_dict({
            "type": "RECTANGLE",
            "fills": [{"type": "SOLID", "opacity": None, "color": {"r": 1, "g": 0, "b": 0}}],
            "strokes": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 0}}],
            "strokeWeight": "thick",
            "rectangleCornerRadii": [4, None, 0, 0],
        })

        assert node.fills == [SolidPaint((1.0, 0.0, 0.0), 1.0)]
        assert node.stroke.weight == 1.0
        assert (node.corner_radius.top_left, node.corner_radius.top_right) == (4.0, 0.0)

    def test_null_segment_values(self):
        node = node_from_dict({
            "type": "TEXT",
            "characters": "Hi",
            "styledTextSegments": [
                {"start": None, "end": None, "fontWeight": None, "fontSize": None,
                 "lineHeight": {"unit": "PIXELS", "value": None}},
                "garbage",
            ],
        })

        run = node.runs[0]
        assert len(node.runs) == 1
        assert (run.start, run.end, run.font_weight, run.font_size) == (0, 2, 400, 16.0)
        assert run.line_height.value == 0.0

    def test_non_list_children(self):
        node = node_from_dict({"type": "FRAME", "children": 5, "fills": {"type": "SOLID"}})

        assert node.children == []
        assert node.fills == []

    def test_non_object(self):
        with pytest.raises(LayoutError):
            node_from_dict(["FRAME"])


class TestLoadDesign:
    def test_document_and_images(self, temp_dir):
        path = temp_dir / "design.json"
        path.write_text(json.dumps({
            "document": {"type": "FRAME", "name": "Root", "absoluteBoundingBox": bbox()},
            "images": {"ref": "assets/hero.png"},
        }), encoding="utf-8")

        root, images = load_design(path)

        assert root.name == "Root"
        assert images == {"ref": temp_dir / "assets" / "hero.png"}

    def test_bare_node(self, temp_dir):
        path = temp_dir / "design.json"
        path.write_text(json.dumps({"type": "FRAME", "name": "Bare"}), encoding="utf-8")

        root, images = load_design(path)

        assert root.name == "Bare"
        assert images == {}

    def test_unreadable_file(self, temp_dir):
        with pytest.raises(LayoutError, match="Cannot read design file"):
            load_design(temp_dir / "missing.json")
