import math

import numpy as np
import pytest
from pytest import approx

from skelload.model.transforms import from_xyz_rpy, inverse, normalize, rotate


def test_inverse_undoes_transform():
    T = from_xyz_rpy((0.3, -1.0, 2.0), (0.1, -0.4, 1.2))
    np.testing.assert_allclose(T @ inverse(T), np.eye(4), atol=1e-12)


def test_yaw_rotates_x_onto_y():
    T = from_xyz_rpy((0.0, 0.0, 0.0), (0.0, 0.0, math.pi / 2))
    assert rotate(T, (1.0, 0.0, 0.0)) == approx((0.0, 1.0, 0.0), abs=1e-12)


def test_normalize_rejects_zero_vector():
    assert normalize((0.0, 3.0, 4.0)) == approx((0.0, 0.6, 0.8))
    with pytest.raises(ValueError):
        normalize((0.0, 0.0, 0.0))
