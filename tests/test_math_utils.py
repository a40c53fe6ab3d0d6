import math
import unittest

import numpy as np
from parameterized import parameterized

from core.math_utils import (
    RotationOrder,
    axis_angle_quaternion,
    compose_trs,
    compute_fov,
    euler_to_quaternion,
    flip_y,
    normalize_quaternion,
    quaternion_multiply,
)

X = (1.0, 0.0, 0.0)
Y = (0.0, 1.0, 0.0)
Z = (0.0, 0.0, 1.0)


class TestQuaternions(unittest.TestCase):
    def test_single_axis(self):
        q = euler_to_quaternion((0.0, math.pi / 2, 0.0))
        s = math.sqrt(0.5)
        self.assertTrue(np.allclose(q, (0.0, s, 0.0, s)))

    @parameterized.expand(
        [
            ("xyz", RotationOrder.XYZ, (X, Y, Z)),
            ("yzx", RotationOrder.YZX, (Y, Z, X)),
            ("zxy", RotationOrder.ZXY, (Z, X, Y)),
            ("xzy", RotationOrder.XZY, (X, Z, Y)),
            ("yxz", RotationOrder.YXZ, (Y, X, Z)),
            ("zyx", RotationOrder.ZYX, (Z, Y, X)),
        ]
    )
    def test_rotation_order(self, _, order, axes):
        angles = {X: 0.3, Y: -0.7, Z: 1.1}
        expected = np.array([0.0, 0.0, 0.0, 1.0])
        for axis in axes:
            expected = quaternion_multiply(axis_angle_quaternion(axis, angles[axis]), expected)

        q = euler_to_quaternion((0.3, -0.7, 1.1), order)
        self.assertTrue(np.allclose(q, expected))
        self.assertAlmostEqual(np.linalg.norm(q), 1.0)

    def test_rotation_order_from_int(self):
        self.assertTrue(np.allclose(
            euler_to_quaternion((0.1, 0.2, 0.3), 5),
            euler_to_quaternion((0.1, 0.2, 0.3), RotationOrder.ZYX),
        ))

    def test_normalize_degenerate(self):
        self.assertTrue(np.allclose(normalize_quaternion((0.0, 0.0, 0.0, 0.0)), (0.0, 0.0, 0.0, 1.0)))

    def test_flip_y(self):
        self.assertTrue(np.allclose(flip_y((0.0, 0.0, 0.0, 1.0)), (0.0, 1.0, 0.0, 0.0)))

        q = euler_to_quaternion((0.2, 0.4, 0.0))
        expected = quaternion_multiply(q, axis_angle_quaternion(Y, math.pi))
        self.assertTrue(np.allclose(flip_y(q), expected))


class TestMatrices(unittest.TestCase):
    def test_compose_trs(self):
        rotation = axis_angle_quaternion(Z, math.pi / 2)
        m = compose_trs((1.0, 2.0, 3.0), rotation, (2.0, 2.0, 2.0))

        p = np.array([1.0, 0.0, 0.0, 1.0]) @ m
        self.assertTrue(np.allclose(p, (1.0, 4.0, 3.0, 1.0)))
        self.assertTrue(np.allclose(m[3, :3], (1.0, 2.0, 3.0)))

    def test_identity(self):
        m = compose_trs((0.0, 0.0, 0.0), (0.0, 0.0, 0.0, 1.0), (1.0, 1.0, 1.0))
        self.assertTrue(np.allclose(m, np.identity(4)))


class TestFov(unittest.TestCase):
    @parameterized.expand(
        [
            (24.0, 24.0, math.degrees(2.0 * math.atan(0.5))),
            (36.0, 18.0, 90.0),
            (36.0, 0.0, 0.0),
        ]
    )
    def test_compute_fov(self, aperture, focal_length, expected):
        self.assertAlmostEqual(compute_fov(aperture, focal_length), expected, places=6)


if __name__ == "__main__":
    unittest.main()
