"""Unit tests for overlay layout, hit-testing and rendering."""

import pytest
from PIL import Image

from conftest import make_fragment
from image_text.coordinates import Point, Size
from image_text.grouping import group_fragments
from image_text.overlay import (
    MIN_TAP_HEIGHT,
    MIN_TAP_WIDTH,
    build_overlay,
    render_overlay,
)


def rect_tuple(rect):
    return (rect.x, rect.y, rect.width, rect.height)


@pytest.mark.unit
class TestBuildOverlay:
    """Tests for build_overlay."""

    def test_layout_geometry(self, hello_world):
        groups = group_fragments(hello_world)
        layout = build_overlay(groups, Size(100, 100), Size(300, 600))

        assert layout.fit_size == Size(300, 300)
        assert layout.offset == Point(0, 150)
        assert rect_tuple(layout.image_rect) == pytest.approx((0, 150, 300, 300))

        item = layout.items[0]
        assert item.group == groups[0]
        assert rect_tuple(item.rect) == pytest.approx((30, 193.5, 96, 16.5))
        assert rect_tuple(item.highlight) == pytest.approx((26, 191.5, 104, 20.5))
        assert rect_tuple(item.tap_target) == pytest.approx(rect_tuple(item.highlight))

    def test_small_boxes_get_minimum_tap_target(self):
        groups = group_fragments([make_fragment("i", 0.5, 0.5, 0.01, 0.01)])
        layout = build_overlay(groups, Size(100, 100), Size(100, 100))

        target = layout.items[0].tap_target
        assert (target.width, target.height) == pytest.approx(
            (MIN_TAP_WIDTH, MIN_TAP_HEIGHT)
        )
        assert (target.mid_x, target.mid_y) == pytest.approx((50.5, 49.5))

    @pytest.mark.parametrize(
        "image_size,container",
        [(Size(0, 0), Size(300, 600)), (Size(100, 100), Size(0, 600))],
    )
    def test_degenerate_sizes(self, hello_world, image_size, container):
        groups = group_fragments(hello_world)

        assert build_overlay(groups, image_size, container) is None

    def test_no_groups(self):
        layout = build_overlay([], Size(100, 100), Size(100, 100))

        assert layout.items == ()
        assert layout.hit_test(Point(50, 50)) is None


@pytest.mark.unit
class TestHitTest:
    """Tests for OverlayLayout.hit_test."""

    def test_hit_and_miss(self, hello_world):
        groups = group_fragments(hello_world)
        layout = build_overlay(groups, Size(100, 100), Size(300, 600))

        assert layout.hit_test(Point(60, 200)) == groups[0]
        assert layout.hit_test(Point(60, 400)) is None
        assert layout.hit_test(Point(200, 200)) is None

    @pytest.mark.parametrize(
        "order,topmost",
        [(("wide", "small"), "small"), (("small", "wide"), "wide")],
    )
    def test_last_drawn_target_wins(self, order, topmost):
        fragments = {
            "wide": make_fragment("wide banner", 0.0, 0.5, 1.0, 0.2, id="wide"),
            "small": make_fragment("x", 0.5, 0.55, 0.02, 0.02, id="small"),
        }
        groups = group_fragments([fragments[name] for name in order])
        layout = build_overlay(groups, Size(100, 100), Size(100, 100))

        assert [item.group.fragment_ids for item in layout.items] == [
            (name,) for name in order
        ]
        assert layout.hit_test(Point(51, 44)).fragment_ids == (topmost,)
        assert layout.hit_test(Point(10, 40)).fragment_ids == ("wide",)


@pytest.mark.unit
class TestRenderOverlay:
    """Tests for render_overlay."""

    def test_dims_outside_highlights(self):
        image = Image.new("RGB", (100, 100), (255, 0, 0))
        groups = group_fragments([make_fragment("centre", 0.4, 0.4, 0.2, 0.2)])
        layout = build_overlay(groups, Size(100, 100), Size(100, 100))

        rendered = render_overlay(image, layout)

        assert rendered.size == (100, 100)
        assert rendered.getpixel((50, 50)) == (255, 0, 0)
        red, green, blue = rendered.getpixel((2, 2))
        assert 100 < red < 160
        assert (green, blue) == (0, 0)

    def test_letterboxed_container(self):
        image = Image.new("RGB", (100, 100), (0, 0, 255))
        layout = build_overlay([], Size(100, 100), Size(100, 200))

        rendered = render_overlay(image, layout, dim_opacity=0.0)

        assert rendered.size == (100, 200)
        assert rendered.getpixel((50, 10)) == (255, 255, 255)
        assert rendered.getpixel((50, 100)) == (0, 0, 255)
