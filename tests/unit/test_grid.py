"""Tests for the column, grid and overlay helpers."""

import pytest

from vectorflow.errors import ConfigurationError, ElementLookupError
from vectorflow.grid import Columns, Grid, ZStack
from vectorflow.shapes import Rectangle


class TestColumns:
    """Tests for Columns."""

    def test_columns_are_spaced_by_gutter(self):
        """Columns sit side by side with the gutter between them."""
        columns = Columns(3, column_width=100, gutter=20, height=200)
        assert [c.x for c in columns.columns] == [0, 120, 240]
        assert (columns.width, columns.height) == (340, 200)

    def test_children_stack_inside_a_column(self):
        """Each column is a vertical stack by default."""
        columns = Columns(2, column_width=80, column_spacing=5)
        first = columns.column(1).add_child(Rectangle(80, 30))
        second = columns.column(1).add_child(Rectangle(80, 30))
        columns.arrange()
        assert second.y == 35
        assert first.absolute_position().x == 80
        assert columns.height == 65

    def test_column_out_of_bounds(self):
        """Column lookups are bounds-checked."""
        with pytest.raises(ElementLookupError, match="out of bounds"):
            Columns(2, column_width=10).column(2)

    def test_needs_a_column(self):
        """Zero columns is a configuration error."""
        with pytest.raises(ConfigurationError):
            Columns(0, column_width=10)


class TestGrid:
    """Tests for Grid."""

    def test_cell_positions(self):
        """Cells are laid out row by row."""
        grid = Grid(2, 3, cell_width=50, cell_height=40, gutter=10)
        cell = grid.cell(1, 2)
        p = cell.absolute_position()
        assert (p.x, p.y) == (120, 50)
        assert (grid.width, grid.height) == (170, 90)

    def test_rows_and_columns(self):
        """row() and column() return the matching cells."""
        grid = Grid(2, 3, cell_width=10, cell_height=10)
        assert len(grid.row(0)) == 3
        assert len(grid.column(2)) == 2
        assert grid.column(2)[1] is grid.cell(1, 2)

    def test_cells_accept_children(self):
        """Children of a cell start at the cell's origin."""
        grid = Grid(1, 2, cell_width=50, cell_height=50)
        child = grid.cell(0, 1).add_child(Rectangle(10, 10))
        assert child.absolute_position().as_tuple() == (50, 0)

    def test_out_of_bounds(self):
        """Lookups outside the grid fail."""
        grid = Grid(2, 2, cell_width=10, cell_height=10)
        with pytest.raises(ElementLookupError):
            grid.cell(2, 0)
        with pytest.raises(ElementLookupError):
            grid.row(-1)
        with pytest.raises(ElementLookupError):
            grid.column(5)

    def test_invalid_dimensions(self):
        """Grids need at least one row and one column."""
        with pytest.raises(ConfigurationError):
            Grid(0, 2, cell_width=10, cell_height=10)


class TestZStack:
    """Tests for ZStack."""

    def test_children_are_centered_by_default(self):
        """Each layer is centered in the content box."""
        stack = ZStack(width=100, height=100)
        back = stack.add_child(Rectangle(100, 100))
        front = stack.add_child(Rectangle(20, 20))
        stack.arrange()
        assert (back.x, back.y) == (0, 0)
        assert (front.x, front.y) == (40, 40)

    def test_corner_alignment(self):
        """Right/bottom alignment puts layers against the far edges."""
        stack = ZStack(horizontal_align="right", vertical_align="bottom", width=100, height=60)
        child = stack.add_child(Rectangle(30, 20))
        stack.arrange()
        assert (child.x, child.y) == (70, 40)

    def test_layer_offset_cascades(self):
        """Layers shift by index * layer_offset and auto axes grow to fit."""
        stack = ZStack(horizontal_align="left", vertical_align="top", layer_offset=10)
        cards = [stack.add_child(Rectangle(50, 30)) for _ in range(3)]
        stack.arrange()
        assert [(c.x, c.y) for c in cards] == [(0, 0), (10, 10), (20, 20)]
        assert (stack.width, stack.height) == (70, 50)

    def test_far_edge_offsets_move_inward(self):
        """Right-aligned layers shift to the left."""
        stack = ZStack(horizontal_align="right", width=100, height=100, layer_offset=10)
        first = stack.add_child(Rectangle(20, 20))
        second = stack.add_child(Rectangle(20, 20))
        stack.arrange()
        assert (first.x, second.x) == (80, 70)

    def test_centered_offsets_fit_auto_size(self):
        """An auto ZStack leaves room for centered layers to shift."""
        stack = ZStack(layer_offset=10)
        stack.add_child(Rectangle(100, 100))
        top = stack.add_child(Rectangle(100, 100))
        stack.arrange()
        assert stack.width == 120
        assert top.x == 20
        assert top.x + top.width <= stack.width

    def test_explicit_positions_are_kept(self):
        """Explicitly positioned layers are not aligned."""
        stack = ZStack(width=100, height=100)
        pinned = stack.add_child(Rectangle(10, 10, x=5, y=5))
        stack.arrange()
        assert (pinned.x, pinned.y) == (5, 5)

    def test_padding_offsets_layers(self):
        """Layers are aligned inside the content box."""
        stack = ZStack(horizontal_align="left", vertical_align="top", box_model={"padding": 10})
        child = stack.add_child(Rectangle(30, 20))
        stack.arrange()
        assert (child.x, child.y) == (10, 10)
        assert (stack.width, stack.height) == (50, 40)

    def test_rearranges_after_removal(self):
        """Removing a layer shrinks an auto ZStack on the next arrange."""
        stack = ZStack()
        stack.add_child(Rectangle(20, 20))
        big = stack.add_child(Rectangle(80, 80))
        stack.arrange()
        stack.remove_child(big)
        stack.arrange()
        assert (stack.width, stack.height) == (20, 20)

    def test_invalid_options(self):
        """Alignment names and the offset are validated."""
        with pytest.raises(ConfigurationError):
            ZStack(horizontal_align="middle")
        with pytest.raises(ConfigurationError):
            ZStack(vertical_align="left")
        with pytest.raises(ConfigurationError):
            ZStack(layer_offset=-1)
