"""Tests for container layout modes."""

import pytest

from vectorflow.connector import Connector
from vectorflow.container import Artboard, Container, ContainerConfig, LayoutState
from vectorflow.errors import ConfigurationError
from vectorflow.models import Alignment, Auto, Direction, Fixed
from vectorflow.shapes import Circle, Rectangle


class TestContainerConfig:
    """Tests for container configuration parsing."""

    def test_defaults(self):
        """A default configuration is a bounded, auto-sized container."""
        config = ContainerConfig()
        assert config.direction is Direction.BOUNDED
        assert isinstance(config.width, Auto)
        assert config.main_axis_alignment is Alignment.START

    def test_from_dict_accepts_camel_case(self):
        """camelCase option names are accepted."""
        config = ContainerConfig.from_dict(
            {"direction": "vertical", "mainAxisAlignment": "center", "width": 200, "spacing": 5}
        )
        assert config.direction is Direction.STACK_VERTICAL
        assert config.main_axis_alignment is Alignment.CENTER
        assert config.width == Fixed(200.0)

    def test_unknown_option(self):
        """Unknown options are rejected."""
        with pytest.raises(ConfigurationError, match="Unknown container option"):
            ContainerConfig.from_dict({"gap": 3})

    def test_negative_spacing(self):
        """Spacing cannot be negative."""
        with pytest.raises(ConfigurationError):
            ContainerConfig(spacing=-1)

    def test_invalid_direction(self):
        """Invalid directions fail at construction."""
        with pytest.raises(ConfigurationError):
            Container(direction="sideways")

    def test_from_config(self):
        """Containers can be created from a mapping."""
        container = Container.from_config({"direction": "stack-horizontal", "spacing": 4}, name="row")
        assert container.direction is Direction.STACK_HORIZONTAL
        assert container.name == "row"


class TestStackLayout:
    """Tests for stack-horizontal / stack-vertical containers."""

    def test_vertical_stack_offsets(self, vertical_stack):
        """Children follow each other with the spacing in between."""
        vertical_stack.add_child(Rectangle(100, 50))
        second = vertical_stack.add_child(Rectangle(100, 80))
        assert second.y == 70
        assert second.x == 0

    def test_stack_places_on_insertion(self, horizontal_stack):
        """Placement happens as soon as a child is added."""
        first = horizontal_stack.add_child(Rectangle(30, 10))
        second = horizontal_stack.add_child(Rectangle(20, 10))
        third = horizontal_stack.add_child(Rectangle(20, 10))
        assert (first.x, second.x, third.x) == (0, 40, 70)

    def test_auto_size_fits_children(self, vertical_stack):
        """Auto axes grow to hold the children."""
        vertical_stack.add_child(Rectangle(100, 50))
        vertical_stack.add_child(Rectangle(60, 80))
        assert vertical_stack.width == 100
        assert vertical_stack.height == 150

    def test_padding_offsets_children(self):
        """Children start at the content-box origin."""
        stack = Container(direction="stack-vertical", box_model={"padding": 10, "border": 2})
        child = stack.add_child(Rectangle(40, 40))
        assert (child.x, child.y) == (12, 12)
        assert (stack.width, stack.height) == (64, 64)

    def test_fixed_cross_axis_alignment_on_insert(self):
        """With a fixed cross size, alignment applies immediately."""
        stack = Container(direction="stack-vertical", width=200, cross_axis_alignment="center")
        child = stack.add_child(Rectangle(50, 20))
        assert child.x == 75

    def test_auto_cross_axis_alignment_after_arrange(self):
        """With an auto cross size, alignment waits for arrange()."""
        stack = Container(direction="stack-vertical", cross_axis_alignment="end")
        narrow = stack.add_child(Rectangle(20, 10))
        stack.add_child(Rectangle(100, 10))
        stack.arrange()
        assert narrow.x == 80

    def test_main_axis_center(self):
        """Center alignment splits the free space."""
        stack = Container(direction="stack-horizontal", width=100, main_axis_alignment="center")
        child = stack.add_child(Rectangle(40, 10))
        stack.arrange()
        assert child.x == 30

    def test_main_axis_end(self):
        """End alignment pushes children to the far edge."""
        stack = Container(direction="stack-vertical", height=100, main_axis_alignment="end")
        child = stack.add_child(Rectangle(10, 40))
        stack.arrange()
        assert child.y == 60

    def test_space_between(self):
        """space-between puts the free space between children."""
        stack = Container(direction="stack-horizontal", width=100, main_axis_alignment="space-between")
        a = stack.add_child(Rectangle(20, 10))
        b = stack.add_child(Rectangle(20, 10))
        c = stack.add_child(Rectangle(20, 10))
        stack.arrange()
        assert (a.x, b.x, c.x) == (0, 40, 80)

    def test_removal_restacks(self, vertical_stack):
        """Removing a child closes the gap."""
        first = vertical_stack.add_child(Rectangle(10, 50))
        second = vertical_stack.add_child(Rectangle(10, 30))
        vertical_stack.remove_child(first)
        assert second.y == 0
        assert vertical_stack.height == 30
        assert vertical_stack.state is LayoutState.UNARRANGED

    def test_removal_keeps_fixed_cross_alignment(self):
        """Restacking after a removal keeps the cross-axis alignment."""
        stack = Container(direction="stack-vertical", width=200, cross_axis_alignment="center")
        first = stack.add_child(Rectangle(50, 20))
        second = stack.add_child(Rectangle(50, 20))
        assert second.x == 75
        stack.remove_child(first)
        assert (second.x, second.y) == (75, 0)

    def test_rotated_child_uses_its_bounding_box(self, vertical_stack):
        """A rotated child is stacked by its axis-aligned bounds."""
        vertical_stack.add_child(Rectangle(40, 20, rotation=90))
        below = vertical_stack.add_child(Rectangle(10, 10))
        assert below.y == pytest.approx(60)

    def test_connectors_are_not_stacked(self, vertical_stack):
        """Layout overlays do not take part in stacking."""
        vertical_stack.add_child(Rectangle(10, 10))
        vertical_stack.add_child(Connector((0, 0), (50, 50)))
        b = vertical_stack.add_child(Rectangle(10, 10))
        assert b.y == 30
        assert vertical_stack.width == 10

    def test_nested_stacks(self):
        """Nested containers are arranged before their parent."""
        outer = Container(direction="stack-vertical", spacing=10)
        row = outer.add_child(Container(direction="stack-horizontal", spacing=5))
        row.add_child(Rectangle(20, 20))
        row.add_child(Rectangle(20, 30))
        tail = outer.add_child(Rectangle(10, 10))
        outer.arrange()
        assert (row.width, row.height) == (45, 30)
        assert tail.y == 40
        assert outer.width == 45


class TestBoundedLayout:
    """Tests for bounded containers."""

    def test_unpositioned_children_go_to_origin(self):
        """Children without an explicit position start at the content origin."""
        container = Container(box_model={"padding": 5})
        child = container.add_child(Rectangle(10, 10))
        assert (child.x, child.y) == (5, 5)

    def test_explicit_positions_are_kept(self):
        """Explicit positions are not overridden."""
        container = Container()
        child = container.add_child(Rectangle(10, 10, x=30, y=40))
        assert (child.x, child.y) == (30, 40)
        assert (container.width, container.height) == (40, 50)

    def test_negative_children_are_normalized(self):
        """Negative offsets are shifted so the minimum becomes zero."""
        container = Container()
        a = container.add_child(Rectangle(10, 10, x=-20, y=5))
        b = container.add_child(Rectangle(10, 10, x=10, y=-15))
        xs = [c.layout_bounds().min_x for c in (a, b)]
        ys = [c.layout_bounds().min_y for c in (a, b)]
        assert min(xs) == 0
        assert min(ys) == 0
        assert (container.width, container.height) == (20, 30)

    def test_fixed_axes_are_not_normalized(self, artboard):
        """A fixed-size container keeps negative coordinates."""
        child = artboard.add_child(Rectangle(10, 10, x=-5, y=-5))
        assert (child.x, child.y) == (-5, -5)
        assert (artboard.width, artboard.height) == (800, 600)

    @pytest.mark.parametrize("direction", ["bounded", "freeform"])
    @pytest.mark.parametrize("width, height", [("auto", 100), (100, "auto")])
    def test_mixed_size_modes_normalize_both_axes(self, direction, width, height):
        """One auto axis is enough to shift children on both axes."""
        container = Container(direction=direction, width=width, height=height)
        children = [
            container.add_child(Rectangle(10, 10, x=-20, y=-15)),
            container.add_child(Rectangle(10, 10, x=10, y=5)),
        ]
        container.arrange()
        assert min(c.layout_bounds().min_x for c in children) == 0
        assert min(c.layout_bounds().min_y for c in children) == 0
        fixed = container.height if width == "auto" else container.width
        assert fixed == 100

    def test_circle_at_origin(self):
        """Circles are placed by their bounds, not their center."""
        container = Container()
        circle = container.add_child(Circle(10))
        assert (circle.x, circle.y) == (10, 10)


class TestFreeformLayout:
    """Tests for two-phase freeform containers."""

    def test_no_resize_before_finalize(self, freeform):
        """Phase one leaves the container degenerate."""
        freeform.add_child(Rectangle(50, 50, x=10, y=10))
        assert (freeform.width, freeform.height) == (0, 0)

    def test_finalize_fits_and_normalizes(self, freeform):
        """finalize() resizes auto axes and normalizes."""
        a = freeform.add_child(Rectangle(20, 20, x=-10, y=0))
        b = freeform.add_child(Rectangle(20, 20, x=30, y=40))
        freeform.finalize()
        assert (a.x, b.x) == (0, 40)
        assert (freeform.width, freeform.height) == (60, 60)
        assert freeform.is_arranged

    def test_finalize_is_idempotent(self, freeform):
        """A second finalize changes nothing."""
        children = [
            freeform.add_child(Rectangle(20, 20, x=-10, y=-3)),
            freeform.add_child(Circle(7, x=50, y=12)),
            freeform.add_child(Rectangle(5, 30, x=4, y=60, rotation=30)),
        ]
        freeform.finalize()
        size = (freeform.width, freeform.height)
        positions = [(c.x, c.y) for c in children]
        freeform.finalize()
        assert (freeform.width, freeform.height) == size
        assert [(c.x, c.y) for c in children] == positions
        freeform.arrange()
        assert [(c.x, c.y) for c in children] == positions
        freeform._normalize()
        assert (freeform.width, freeform.height) == pytest.approx(size)
        assert [(c.x, c.y) for c in children] == pytest.approx(positions)

    def test_mutation_reopens_layout(self, freeform):
        """Adding a child after finalize needs another pass."""
        freeform.add_child(Rectangle(20, 20, x=0, y=0))
        freeform.finalize()
        freeform.add_child(Rectangle(20, 20, x=100, y=0))
        assert not freeform.is_arranged
        freeform.finalize()
        assert freeform.width == 120


class TestSizeModes:
    """Tests for switching between fixed and auto sizes."""

    def test_set_width_mode_fixed(self, vertical_stack):
        """Fixing the width overrides the measured width."""
        vertical_stack.add_child(Rectangle(100, 10))
        vertical_stack.set_width_mode(300)
        assert vertical_stack.width == 300
        assert not vertical_stack.is_arranged

    def test_set_width_mode_auto(self):
        """Switching back to auto refits on the next arrange."""
        stack = Container(direction="stack-vertical", width=300)
        stack.add_child(Rectangle(100, 10))
        stack.set_width_mode("auto")
        stack.arrange()
        assert stack.width == 100

    def test_set_size_fixes_both_axes(self, vertical_stack):
        """set_size switches both axes to fixed."""
        vertical_stack.add_child(Rectangle(10, 10))
        vertical_stack.set_size(50, 60)
        vertical_stack.arrange()
        assert (vertical_stack.width, vertical_stack.height) == (50, 60)

    def test_fixed_size_too_small_for_insets(self):
        """A fixed size smaller than the insets is rejected."""
        with pytest.raises(ConfigurationError):
            Container(width=10, box_model={"padding": 8})


class TestArtboard:
    """Tests for the top-level artboard."""

    def test_default_size(self, artboard):
        """The default canvas is 800 x 600."""
        assert (artboard.width, artboard.height) == (800, 600)

    def test_render_arranges(self, auto_artboard):
        """render() arranges the tree before emitting markup."""
        stack = auto_artboard.add_child(Container(direction="stack-vertical", cross_axis_alignment="center"))
        narrow = stack.add_child(Rectangle(20, 10))
        stack.add_child(Rectangle(60, 10))
        auto_artboard.render()
        assert narrow.x == 20
        assert auto_artboard.is_arranged
        assert (auto_artboard.width, auto_artboard.height) == (60, 20)

    def test_background_color(self):
        """The background color becomes the artboard fill."""
        board = Artboard(background_color="#fafafa")
        assert board.style.get("fill") == "#fafafa"
