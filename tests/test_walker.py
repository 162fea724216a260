"""
Tests for the node walker.
"""

import asyncio

import pytest

from conftest import (
    DARK_BLUE,
    WHITE,
    FakeHost,
    make_frame,
    make_image,
    make_shape,
    make_text,
)
from mailframe.engine.walker import NodeWalker
from mailframe.exceptions import LayoutError
from mailframe.models.fragment import BackgroundKind
from mailframe.models.node import ContainerType, ImagePaint, ShapeType, SolidPaint


def walk(root, host=None):
    return asyncio.run(NodeWalker(host or FakeHost()).walk(root))


def two_row_table(y=10, height=40.5):
    return make_frame("[table] Prices", 0, y, 300, height, children=[
        make_text("H", 10, y, 100, 20, "Header"),
        make_text("B", 10, y + 20, 100, 20, "Body"),
    ], container_type=ContainerType.GROUP)


class TestBackgroundElision:
    """Full-bleed near-white rectangles."""

    def test_full_bleed_near_white_rectangle_is_skipped(self):
        root = make_frame(width=500, height=200, children=[
            make_shape("Paper", 0, 0, 500, 200, color=(0.98, 0.98, 0.98)),
        ])

        assert walk(root).fragments == []

    def test_rounding_tolerates_subpixel_bounds(self):
        root = make_frame(width=500, height=200, children=[
            make_shape("Paper", 0.3, 0.2, 500.4, 199.6, color=WHITE),
        ])

        assert walk(root).fragments == []

    @pytest.mark.parametrize("shape", [
        make_shape("Offset", 10, 0, 500, 200, color=WHITE),
        make_shape("Grey", 0, 0, 500, 200, color=(0.9, 0.96, 0.96)),
        make_shape("Round", 0, 0, 500, 200, color=WHITE, shape_type=ShapeType.ELLIPSE),
    ])
    def test_other_rectangles_are_rendered(self, shape):
        root = make_frame(width=500, height=200, children=[shape])

        assert len(walk(root).fragments) == 1


class TestOffsetDrift:
    """Height drift of synthesized tables."""

    def test_later_siblings_shift_by_ceiled_drift(self):
        before = make_text("Before", 0, 0, 100, 10)
        after = make_text("After", 0, 100, 100, 20)
        root = make_frame(children=[after, two_row_table(), before])

        result = walk(root)

        # expected 2*34+14 = 82, source 40.5 -> drift 41.5 -> 42
        assert result.offset == 42
        assert [f.top for f in result.fragments] == [0, 10, 142]

    def test_shorter_table_adds_no_offset(self):
        after = make_text("After", 0, 300, 100, 20)
        root = make_frame(children=[two_row_table(height=200), after])

        result = walk(root)

        assert result.offset == 0
        assert result.fragments[-1].top == 300

    def test_offsets_accumulate(self):
        first = two_row_table(y=0, height=40)
        second = two_row_table(y=100, height=40)
        last = make_text("Last", 0, 200, 100, 20)
        root = make_frame(children=[first, second, last])

        result = walk(root)

        assert [f.top for f in result.fragments] == [0, 142, 284]
        assert result.offset == 84

    def test_ties_keep_original_order(self):
        a = make_shape("A", 0, 50, 10, 10)
        b = make_shape("B", 20, 50, 10, 10)
        root = make_frame(children=[a, b])

        fragments = walk(root).fragments

        assert [f.left for f in fragments] == [0, 20]


class TestDispatch:
    """Directive and kind dispatch."""

    def test_invisible_and_unbounded_children_are_skipped(self):
        hidden = make_text("Hidden", visible=False)
        unbounded = make_shape("Nowhere")
        unbounded.bbox = None
        root = make_frame(children=[hidden, unbounded, make_text("Shown")])

        assert len(walk(root).fragments) == 1

    def test_coordinates_are_root_relative(self):
        root = make_frame(x=100, y=200, children=[make_shape("S", 130, 260, 10, 10)])

        fragment = walk(root).fragments[0]

        assert (fragment.left, fragment.top) == (30, 60)

    def test_gif_directive(self):
        root = make_frame(children=[make_shape("[gif] promo-1", 0, 0, 120, 60)])

        result = walk(root)

        assert [p.id for p in result.gif_placeholders] == ["promo-1"]
        assert 'src="./images/promo-1.gif"' in result.fragments[0].markup
        assert result.assets == []

    def test_shape_with_image_fill_is_rasterized(self):
        host = FakeHost()
        photo = make_shape("Photo", fills=[ImagePaint("abc")])
        root = make_frame(children=[photo])

        result = walk(root, host)

        assert [a.name for a in result.assets] == ["image-1.png"]
        assert host.raster_calls[0][:2] == ("Photo", 2.0)
        assert 'src="./images/image-1.png"' in result.fragments[0].markup

    def test_table_directive_requires_frame_or_group(self):
        component = make_frame("[table] C", children=[make_text()], container_type=ContainerType.COMPONENT)
        root = make_frame(children=[component])

        result = walk(root)

        assert [a.name for a in result.assets] == ["image-1.png"]


class TestFailures:
    """Per-node failures degrade, they never abort."""

    def test_raster_failure_omits_node(self):
        host = FakeHost(failing_rasters={"Broken"})
        root = make_frame(children=[
            make_image("Broken", y=0),
            make_image("Fine", y=100),
        ])

        result = walk(root, host)

        assert len(result.fragments) == 1
        assert [a.name for a in result.assets] == ["image-2.png"]

    def test_missing_font_keeps_text(self, caplog):
        host = FakeHost(missing_fonts={"Inter"})
        root = make_frame(children=[make_text("Title", characters="Hi")])

        result = walk(root, host)

        assert "Hi" in result.fragments[0].markup
        assert "Using fallbacks" in caplog.text

    def test_root_without_bounds(self):
        with pytest.raises(LayoutError):
            walk(make_frame(bbox=False))


class TestTransparent:
    """Fill suppression around rasterization."""

    def test_fills_are_suppressed_and_restored(self):
        host = FakeHost()
        logo = make_image("[transparent] logo", fills=[SolidPaint(DARK_BLUE)])
        root = make_frame(children=[logo])

        walk(root, host)

        assert host.raster_calls[0][2] == []
        assert logo.fills == [SolidPaint(DARK_BLUE)]

    def test_fills_restored_after_failure(self):
        host = FakeHost(failing_rasters={"[transparent] logo"})
        logo = make_image("[transparent] logo", fills=[SolidPaint(DARK_BLUE)])

        result = walk(make_frame(children=[logo]), host)

        assert result.fragments == []
        assert logo.fills == [SolidPaint(DARK_BLUE)]


class TestLinks:
    """Hyperlink placeholders."""

    def test_link_placeholder(self):
        host = FakeHost()
        button = make_shape("[link]   https://example.com  ")
        result = walk(make_frame(children=[button]), host)

        placeholder = result.link_placeholders[0]
        assert placeholder.id == button.id
        assert placeholder.original_url == "https://example.com"
        assert placeholder.preview_asset_name == "link-preview-1.png"
        assert [a.name for a in result.preview_assets] == ["link-preview-1.png"]
        assert host.raster_calls[-1][1] == 1.0

        fragment = result.fragments[0]
        assert fragment.link_wrapped
        assert fragment.markup.startswith(f'<div data-link-placeholder-id="{button.id}"><table')

    def test_blank_url_defaults_to_hash(self):
        result = walk(make_frame(children=[make_shape("[link]    ")]))

        assert result.link_placeholders[0].original_url == "#"

    def test_preview_failure_leaves_fragment_unwrapped(self):
        host = FakeHost(failing_previews={"[link] https://example.com"})
        result = walk(make_frame(children=[make_shape("[link] https://example.com")]), host)

        assert result.link_placeholders == []
        assert not result.fragments[0].link_wrapped
        assert result.fragments[0].markup.startswith("<table")

    def test_counter_is_shared_between_assets(self):
        host = FakeHost(images={"bg": b"png"})
        root = make_frame(fills=[ImagePaint("bg")], children=[
            make_image("[link] https://example.com", y=0),
            make_image("Plain", y=100),
        ])

        result = walk(root, host)

        assert [a.name for a in result.assets] == ["bg-image-1.png", "image-2.png", "image-4.png"]
        assert [a.name for a in result.preview_assets] == ["link-preview-3.png"]


class TestBackground:
    """Background spec of the root."""

    def test_solid_fill(self):
        result = walk(make_frame(fills=[SolidPaint((1.0, 0.5, 0.0))]))

        assert result.background.kind is BackgroundKind.COLOR
        assert result.background.value == "#ff8000"

    def test_image_fill(self):
        host = FakeHost(images={"hash": b"\x89PNG"})
        result = walk(make_frame(fills=[ImagePaint("hash")]), host)

        assert result.background.kind is BackgroundKind.IMAGE
        assert result.background.value == "./images/bg-image-1.png"
        assert result.assets[0].data == b"\x89PNG"

    def test_missing_image_bytes(self):
        result = walk(make_frame(fills=[ImagePaint("unknown")]))

        assert result.background.kind is BackgroundKind.NONE

    def test_no_fill(self):
        assert walk(make_frame()).background.kind is BackgroundKind.NONE
