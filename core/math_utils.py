#!/usr/bin/env python3
"""
Math Utilities Module
Quaternion, Euler and matrix helpers shared by the extractors.

Quaternions are numpy arrays in (x, y, z, w) order. Matrices follow the
host's row-vector convention: translation lives in the last row.
"""

import math
from enum import IntEnum

import numpy as np

INCH_TO_MILLIMETER = 25.4
RAD_TO_DEG = 180.0 / math.pi


class RotationOrder(IntEnum):
    """Euler rotation orders, numbered like the host's rotateOrder enum

    XYZ means X is applied first, then Y, then Z.
    """
    XYZ = 0
    YZX = 1
    ZXY = 2
    XZY = 3
    YXZ = 4
    ZYX = 5

    @property
    def axes(self) -> str:
        return self.name.lower()


def identity_quaternion() -> np.ndarray:
    return np.array([0.0, 0.0, 0.0, 1.0])


def normalize_quaternion(q) -> np.ndarray:
    """Normalize a quaternion; degenerate input becomes identity"""
    q = np.asarray(q, dtype=np.float64)
    norm = np.linalg.norm(q)
    if norm < 1e-12:
        return identity_quaternion()
    return q / norm


def quaternion_multiply(a, b) -> np.ndarray:
    """Hamilton product a * b (b is applied first)"""
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return np.array([
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
        aw * bw - ax * bx - ay * by - az * bz,
    ])


def axis_angle_quaternion(axis, angle: float) -> np.ndarray:
    """Quaternion rotating by angle (radians) around a unit axis"""
    half = angle * 0.5
    s = math.sin(half)
    return np.array([axis[0] * s, axis[1] * s, axis[2] * s, math.cos(half)])


_AXES = {
    'x': (1.0, 0.0, 0.0),
    'y': (0.0, 1.0, 0.0),
    'z': (0.0, 0.0, 1.0),
}


def euler_to_quaternion(euler, order=RotationOrder.XYZ) -> np.ndarray:
    """Convert Euler angles (radians) to a quaternion

    Args:
        euler: (rx, ry, rz) in radians
        order: RotationOrder, first letter applied first

    Returns:
        np.ndarray: normalized (x, y, z, w) quaternion
    """
    order = RotationOrder(order)
    angles = dict(zip('xyz', (float(euler[0]), float(euler[1]), float(euler[2]))))
    result = identity_quaternion()
    for axis in order.axes:
        q = axis_angle_quaternion(_AXES[axis], angles[axis])
        result = quaternion_multiply(q, result)
    return normalize_quaternion(result)


def flip_y(q) -> np.ndarray:
    """Post-rotate by 180 degrees around Y

    Aligns the host's -Z looking cameras and lights with a +Z forward convention.
    """
    return normalize_quaternion(quaternion_multiply(q, (0.0, 1.0, 0.0, 0.0)))


def quaternion_to_matrix3(q) -> np.ndarray:
    """Column-vector 3x3 rotation matrix for a quaternion"""
    x, y, z, w = normalize_quaternion(q)
    return np.array([
        [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - z * w), 2.0 * (x * z + y * w)],
        [2.0 * (x * y + z * w), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - x * w)],
        [2.0 * (x * z - y * w), 2.0 * (y * z + x * w), 1.0 - 2.0 * (x * x + y * y)],
    ])


def compose_trs(position, rotation, scale) -> np.ndarray:
    """Compose a row-vector 4x4 matrix (p' = p * S * R * T)"""
    m = np.identity(4)
    m[:3, :3] = np.diag(np.asarray(scale, dtype=np.float64)) @ quaternion_to_matrix3(rotation).T
    m[3, :3] = np.asarray(position, dtype=np.float64)
    return m


def compute_fov(aperture: float, focal_length: float) -> float:
    """Field of view in degrees from aperture and focal length (same units)"""
    if focal_length <= 0.0:
        return 0.0
    return 2.0 * math.atan(aperture / (2.0 * focal_length)) * RAD_TO_DEG
