from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

Vector3 = Tuple[float, float, float]


def identity() -> np.ndarray:
    return np.eye(4, dtype=float)


def rpy_to_matrix(rpy: Sequence[float]) -> np.ndarray:
    """Rotation for extrinsic roll (X), pitch (Y), yaw (Z): Rz * Ry * Rx."""

    roll, pitch, yaw = rpy
    cr, sr = math.cos(roll), math.sin(roll)
    cp, sp = math.cos(pitch), math.sin(pitch)
    cy, sy = math.cos(yaw), math.sin(yaw)
    Rx = np.array([[1, 0, 0], [0, cr, -sr], [0, sr, cr]], dtype=float)
    Ry = np.array([[cp, 0, sp], [0, 1, 0], [-sp, 0, cp]], dtype=float)
    Rz = np.array([[cy, -sy, 0], [sy, cy, 0], [0, 0, 1]], dtype=float)
    return Rz @ Ry @ Rx


def from_xyz_rpy(xyz: Sequence[float], rpy: Sequence[float]) -> np.ndarray:
    T = identity()
    T[:3, :3] = rpy_to_matrix(rpy)
    T[:3, 3] = np.asarray(xyz, dtype=float)
    return T


def inverse(T: np.ndarray) -> np.ndarray:
    """SE(3) inverse using the block structure."""

    R = T[:3, :3]
    t = T[:3, 3]
    inv = identity()
    inv[:3, :3] = R.T
    inv[:3, 3] = -R.T @ t
    return inv


def rotate(T: np.ndarray, vector: Sequence[float]) -> Vector3:
    rotated = T[:3, :3] @ np.asarray(vector, dtype=float)
    return tuple(float(v) for v in rotated)  # type: ignore[return-value]


def translation(T: np.ndarray) -> Vector3:
    return tuple(float(v) for v in T[:3, 3])  # type: ignore[return-value]


def normalize(vector: Sequence[float]) -> Vector3:
    arr = np.asarray(vector, dtype=float)
    norm = float(np.linalg.norm(arr))
    if norm < 1e-12:
        raise ValueError(f"Cannot normalize zero-length vector {tuple(vector)!r}")
    return tuple(float(v) for v in arr / norm)  # type: ignore[return-value]
