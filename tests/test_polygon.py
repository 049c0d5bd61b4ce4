import numpy as np
import pytest

from earth_rasters.geometry.polygon import cells_in_polygon, point_in_polygon
from earth_rasters.geometry.sphere import arc_distance

SQUARE_X = [0.0, 0.0, 1.0, 1.0]
SQUARE_Y = [0.0, 1.0, 1.0, 0.0]


def test_unit_square():
    assert point_in_polygon(SQUARE_X, SQUARE_Y, (0.5, 0.5)) is True
    assert point_in_polygon(SQUARE_X, SQUARE_Y, (2.0, 2.0)) is False
    assert point_in_polygon(SQUARE_X, SQUARE_Y, (-0.5, 0.5)) is False


def test_point_on_vertex_is_deterministic():
    results = {point_in_polygon(SQUARE_X, SQUARE_Y, (0.0, 0.0)) for _ in range(5)}
    assert results == {False}
    # the caller's vertex arrays are left untouched
    assert SQUARE_Y == [0.0, 1.0, 1.0, 0.0]


def test_ray_through_vertex_counted_once():
    # diamond; the ray from each test point passes through the vertex (2, 1)
    dx = [0.0, 1.0, 2.0, 1.0]
    dy = [1.0, 0.0, 1.0, 2.0]
    assert point_in_polygon(dx, dy, (0.5, 1.0)) is True
    assert point_in_polygon(dx, dy, (1.5, 1.0)) is True
    assert point_in_polygon(dx, dy, (-1.0, 1.0)) is False
    assert point_in_polygon(dx, dy, (3.0, 1.0)) is False


def test_concave_polygon():
    # L shape with the notch in the upper right
    x = [0, 2, 2, 1, 1, 0]
    y = [0, 0, 1, 1, 2, 2]
    assert point_in_polygon(x, y, (0.5, 1.5))
    assert point_in_polygon(x, y, (1.5, 0.5))
    assert not point_in_polygon(x, y, (1.5, 1.5))


def test_malformed_polygon_raises():
    with pytest.raises(ValueError):
        point_in_polygon([0, 1], [0, 1], (0.5, 0.5))
    with pytest.raises(ValueError):
        point_in_polygon([0, 1, 1], [0, 1], (0.5, 0.5))
    with pytest.raises(ValueError):
        point_in_polygon(SQUARE_X, SQUARE_Y, (0.5, 0.5, 0.5))
    with pytest.raises(ValueError):
        cells_in_polygon([0, 1], [0, 1], [0, 1], [0, 1])


def test_cells_in_triangle_with_boundary_centres():
    centres = [0.0, 1.0, 2.0, 3.0]
    rows, cols = cells_in_polygon(centres, centres, [0.0, 0.0, 3.0], [0.0, 3.0, 0.0])
    # Strictly inside x > 0, y > 0, x + y < 3 is only (1, 1). Centres on the
    # x = 0 leg with y > 0 count as inside (the apex (0, 3) through the vertex
    # nudge); centres on y = 0 and on x + y = 3 are outside.
    assert list(zip(rows.tolist(), cols.tolist())) == [(1, 0), (1, 1), (2, 0), (3, 0)]


def test_cells_in_triangle_interior_matches_half_planes():
    centres = np.arange(4.0)
    px = [-0.5, -0.5, 3.0]
    py = [-0.5, 3.0, -0.5]
    rows, cols = cells_in_polygon(centres, centres, px, py)
    expected = [(r, c) for r in range(4) for c in range(4) if c + r <= 2]
    assert list(zip(rows.tolist(), cols.tolist())) == expected
    assert expected == [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (2, 0)]


def test_cells_in_polygon_uses_column_as_x():
    rows_c = np.array([10.0, 20.0, 30.0])    # y
    cols_c = np.array([100.0, 200.0])        # x
    rows, cols = cells_in_polygon(rows_c, cols_c, [150, 250, 250, 150], [5, 5, 25, 25])
    assert rows.tolist() == [0, 1]
    assert cols.tolist() == [1, 1]


def test_polygon_outside_grid_returns_empty():
    rows, cols = cells_in_polygon(np.arange(5.0), np.arange(5.0), [10, 11, 11], [10, 10, 11])
    assert rows.size == 0 and cols.size == 0
    assert rows.dtype.kind == "i"


def test_grid_axes_must_be_vectors():
    with pytest.raises(ValueError):
        cells_in_polygon(np.zeros((2, 2)), np.arange(3.0), SQUARE_X, SQUARE_Y)


def test_cells_in_polygon_agrees_with_point_test():
    rng = np.random.default_rng(3)
    angles = np.sort(rng.uniform(0, 2 * np.pi, 9))
    radii = rng.uniform(2.0, 5.0, 9)
    px = 5 + radii * np.cos(angles)
    py = 5 + radii * np.sin(angles)
    centres = np.arange(0.25, 10, 0.5)
    rows, cols = cells_in_polygon(centres, centres, px, py)
    selected = set(zip(rows.tolist(), cols.tolist()))
    for r, yc in enumerate(centres):
        for c, xc in enumerate(centres):
            assert ((r, c) in selected) == point_in_polygon(px, py, (xc, yc))


def test_arc_distance():
    assert arc_distance(0.0, 0.0, 0.0, 90.0) == pytest.approx(90.0)
    assert arc_distance(90.0, 0.0, -90.0, 0.0) == pytest.approx(180.0)
    d = arc_distance(10.0, 20.0, np.array([10.0, 10.0]), np.array([20.0, 21.0]))
    assert d[0] == pytest.approx(0.0, abs=1e-5)
    assert d[1] == pytest.approx(np.cos(np.radians(10.0)), rel=1e-3)
