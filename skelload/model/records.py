from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from .transforms import Vector3, identity

RIGID = "rigid"
SOFT = "soft"


@dataclass(slots=True, frozen=True)
class Inertial:
    mass: float
    com: Vector3 = (0.0, 0.0, 0.0)
    inertia: Tuple[float, float, float, float, float, float] | None = None  # ixx, ixy, ixz, iyy, iyz, izz


@dataclass(slots=True, frozen=True)
class Geometry:
    type: str
    size: Vector3 | None = None
    radius: float | None = None
    length: float | None = None
    filename: str | None = None


@dataclass(slots=True, frozen=True, eq=False)
class Shape:
    """A visual or collision shape expressed in its link frame."""

    geometry: Geometry
    transform: np.ndarray = field(default_factory=identity)
    name: str | None = None


@dataclass(slots=True, frozen=True, eq=False)
class SoftShape:
    """Deformable-body parameters of a soft link.

    ``type`` is one of ``box``, ``ellipsoid`` or ``cylinder``; ``resolution``
    holds the shape's discretisation (box frags, or slices/stacks[/rings]).
    """

    type: str
    total_mass: float
    size: Vector3 | None = None
    radius: float | None = None
    height: float | None = None
    resolution: Tuple[int, ...] = ()
    transform: np.ndarray = field(default_factory=identity)
    kv: float = 0.0
    ke: float = 0.0
    damping: float = 0.0


@dataclass(slots=True, frozen=True, eq=False)
class LinkRecord:
    name: str
    initial_transform: np.ndarray = field(default_factory=identity)
    inertial: Inertial | None = None
    visuals: Tuple[Shape, ...] = ()
    collisions: Tuple[Shape, ...] = ()
    kind: str = RIGID
    soft: SoftShape | None = None
    gravity: bool = True


@dataclass(slots=True, frozen=True)
class JointAxis:
    xyz: Vector3 = (0.0, 0.0, 1.0)
    lower: float = float("-inf")
    upper: float = float("inf")
    damping: float = 0.0


@dataclass(slots=True, frozen=True, eq=False)
class JointRecord:
    """A parsed joint, keyed in the registry by ``child_name``.

    ``parent_name`` may be empty or ``"world"`` to attach the child directly
    as a tree root.
    """

    name: str
    type: str
    parent_name: str
    child_name: str
    child_to_joint: np.ndarray = field(default_factory=identity)
    parent_to_joint: np.ndarray = field(default_factory=identity)
    axes: Tuple[JointAxis, ...] = ()
    pitch: float = 0.0
