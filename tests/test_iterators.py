from step_traversability.iterators import circle_cells, grid_cells
from step_traversability.models import GridSpec

SPEC = GridSpec(0.0, 0.0, 1.0, W=5, H=5)


def test_grid_cells_cover_every_cell_once():
    cells = list(grid_cells(SPEC))
    assert len(cells) == 25
    assert len(set(cells)) == 25
    assert cells[:2] == [(0, 0), (0, 1)]


def test_circle_unit_radius_is_a_plus():
    center = SPEC.rc_to_xy(2, 2)
    cells = list(circle_cells(SPEC, center, 1.0))
    assert set(cells) == {(2, 2), (1, 2), (3, 2), (2, 1), (2, 3)}
    # row-major over the bounding box
    assert cells == [(1, 2), (2, 1), (2, 2), (2, 3), (3, 2)]


def test_circle_covers_3x3_block():
    center = SPEC.rc_to_xy(2, 2)
    cells = set(circle_cells(SPEC, center, 1.5))
    assert cells == {(r, c) for r in (1, 2, 3) for c in (1, 2, 3)}


def test_circle_small_radius_is_center_only():
    assert list(circle_cells(SPEC, SPEC.rc_to_xy(3, 1), 0.1)) == [(3, 1)]


def test_circle_clipped_at_corner():
    cells = set(circle_cells(SPEC, SPEC.rc_to_xy(0, 0), 1.0))
    assert cells == {(0, 0), (0, 1), (1, 0)}


def test_circle_outside_grid_is_empty():
    assert list(circle_cells(SPEC, (50.0, 50.0), 2.0)) == []
    assert list(circle_cells(SPEC, (-3.0, 2.5), 1.0)) == []


def test_circle_centered_off_grid_reaches_edge():
    # row 2 has center y = 2.5; column 0 center x = 0.5, one meter away
    assert list(circle_cells(SPEC, (-0.5, 2.5), 1.0)) == [(2, 0)]
