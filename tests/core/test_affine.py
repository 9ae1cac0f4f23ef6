from __future__ import annotations

import math

import numpy as np
import pytest

from engine.core import affine


def test_rotation_is_counter_clockwise_with_y_up() -> None:
    m = affine.rotation(math.pi / 2)
    x, y = affine.apply(m, 1.0, 0.0)
    assert x == pytest.approx(0.0, abs=1e-12)
    assert y == pytest.approx(1.0)


def test_composition_applies_right_to_left() -> None:
    # translate → scale の順に右から掛けると、点には scale が先に効く
    m = affine.translation(10.0, 5.0) @ affine.scaling(2.0, -1.0)
    assert affine.apply(m, 1.0, 1.0) == (12.0, 4.0)


def test_invert_round_trip() -> None:
    m = affine.translation(3.0, -4.0) @ affine.rotation(0.3) @ affine.scaling(2.0, 2.0)
    np.testing.assert_allclose(affine.invert(m) @ m, affine.identity(), atol=1e-12)


def test_singular_matrix_raises() -> None:
    with pytest.raises(np.linalg.LinAlgError):
        affine.invert(affine.scaling(0.0, 1.0))


def test_non_finite_rotation_yields_nan_matrix() -> None:
    m = affine.rotation(math.inf)
    assert np.isnan(m).all()


def test_linear_scale() -> None:
    assert affine.linear_scale(affine.scaling(2.0, -2.0)) == pytest.approx(2.0)
    assert affine.linear_scale(affine.rotation(1.0)) == pytest.approx(1.0)


def test_axis_alignment_and_integer_offset() -> None:
    flip = affine.translation(5.0, 4.0) @ affine.scaling(1.0, -1.0)
    assert affine.is_axis_aligned(flip)
    assert not affine.is_axis_aligned(affine.rotation(0.3))
    assert affine.integer_offset(affine.translation(3.0, -2.0)) == (3, -2)
    assert affine.integer_offset(affine.translation(0.5, 0.0)) is None
    assert affine.integer_offset(flip) is None


def test_apply_points_matches_apply() -> None:
    m = affine.translation(1.0, 2.0) @ affine.rotation(0.5)
    xs = np.array([0.0, 1.0, -2.0])
    ys = np.array([0.0, 3.0, 0.5])
    px, py = affine.apply_points(m, xs, ys)
    for i in range(3):
        ex, ey = affine.apply(m, float(xs[i]), float(ys[i]))
        assert px[i] == pytest.approx(ex)
        assert py[i] == pytest.approx(ey)
