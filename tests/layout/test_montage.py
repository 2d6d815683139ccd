"""
Tests for layout.montage

Test Coverage:
- plan_montage(): grid dimensions, row-major placement
- fit_inside(): aspect-preserving fit, both up and down
- Validation of columns and empty input
"""
import pytest

from collage_toolkit.errors import ContractViolationError, OutOfRangeError
from collage_toolkit.layout import plan_montage
from collage_toolkit.layout.montage import fit_inside


def test_five_tiles_in_two_columns():
    plan = plan_montage([(1200, 800)] * 5, columns=2, cell=(1200, 800))

    assert (plan.columns, plan.rows) == (2, 3)
    assert plan.canvas_size == (2400, 2400)
    assert [t.offset for t in plan.tiles] == [
        (0, 0), (1200, 0), (0, 800), (1200, 800), (0, 1600),
    ]


def test_columns_capped_at_tile_count():
    plan = plan_montage([(600, 400)] * 2, columns=4, cell=(600, 400))

    assert plan.columns == 2
    assert plan.canvas_size == (1200, 400)


def test_tile_is_fitted_and_centered_in_cell():
    plan = plan_montage([(1200, 800), (567, 850)], columns=2, cell=(1200, 800))

    portrait = plan.tiles[1]
    assert portrait.size == (534, 800)
    assert portrait.offset == (1200 + (1200 - 534) // 2, 0)


def test_fit_inside_upscales_small_tiles():
    assert fit_inside((300, 200), (1200, 800)) == (1200, 800)


def test_fit_inside_example():
    assert fit_inside((800, 1200), (600, 400)) == (267, 400)


def test_invalid_columns_rejected():
    with pytest.raises(OutOfRangeError):
        plan_montage([(10, 10)], columns=0, cell=(10, 10))


def test_empty_tiles_rejected():
    with pytest.raises(ContractViolationError):
        plan_montage([], columns=2, cell=(10, 10))
