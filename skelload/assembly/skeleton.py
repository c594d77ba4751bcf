from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Tuple

import numpy as np

from skelload.model.records import Inertial, JointAxis, Shape, SoftShape
from skelload.model.transforms import identity

try:  # pragma: no cover - optional import for graph export only
    import networkx as nx
except ModuleNotFoundError:  # pragma: no cover
    nx = None  # type: ignore[assignment]


class JointType(str, Enum):
    WELD = "weld"
    REVOLUTE = "revolute"
    PRISMATIC = "prismatic"
    SCREW = "screw"
    UNIVERSAL = "universal"
    BALL = "ball"
    TRANSLATIONAL = "translational"
    FREE = "free"

    @property
    def dofs(self) -> int:
        return _JOINT_DOFS[self]

    @property
    def axis_count(self) -> int:
        """Number of explicit axes the joint type is parameterised by."""

        return _JOINT_AXES.get(self, 0)


_JOINT_DOFS = {
    JointType.WELD: 0,
    JointType.REVOLUTE: 1,
    JointType.PRISMATIC: 1,
    JointType.SCREW: 1,
    JointType.UNIVERSAL: 2,
    JointType.BALL: 3,
    JointType.TRANSLATIONAL: 3,
    JointType.FREE: 6,
}

_JOINT_AXES = {
    JointType.REVOLUTE: 1,
    JointType.PRISMATIC: 1,
    JointType.SCREW: 1,
    JointType.UNIVERSAL: 2,
}


class LinkKind(str, Enum):
    RIGID = "rigid"
    SOFT = "soft"


@dataclass(slots=True, frozen=True, eq=False)
class Joint:
    """A joint connecting ``parent_index`` (or nothing) to ``child_index``."""

    name: str
    type: JointType
    parent_index: int | None
    child_index: int
    parent_to_joint: np.ndarray = field(default_factory=identity)
    child_to_joint: np.ndarray = field(default_factory=identity)
    axes: Tuple[JointAxis, ...] = ()
    pitch: float = 0.0

    @property
    def dofs(self) -> int:
        return self.type.dofs

    @property
    def is_root(self) -> bool:
        return self.parent_index is None


@dataclass(slots=True, frozen=True, eq=False)
class BodyNode:
    """A body of a :class:`Skeleton`.

    ``parent_index`` and ``joint_index`` index into the owning skeleton's
    ``bodies`` and ``joints``; the body never holds its parent directly.
    """

    name: str
    index: int
    parent_index: int | None
    joint_index: int
    kind: LinkKind
    world_transform: np.ndarray
    inertial: Inertial | None = None
    visuals: Tuple[Shape, ...] = ()
    collisions: Tuple[Shape, ...] = ()
    soft: SoftShape | None = None
    gravity: bool = True

    @property
    def is_soft(self) -> bool:
        return self.kind is LinkKind.SOFT


class Skeleton:
    """Ordered forest of bodies, each attached through exactly one joint.

    Bodies are stored in creation order, which is also a valid
    parent-before-child traversal order.
    """

    def __init__(self, name: str = "", *, mobile: bool = True) -> None:
        self.name = name
        self.mobile = mobile
        self._bodies: List[BodyNode] = []
        self._joints: List[Joint] = []
        self._by_name: Dict[str, int] = {}
        self._children: Dict[int, List[int]] = {}
        self._frozen = False

    def __len__(self) -> int:
        return len(self._bodies)

    def __repr__(self) -> str:
        return f"Skeleton(name={self.name!r}, bodies={len(self._bodies)})"

    @property
    def bodies(self) -> Tuple[BodyNode, ...]:
        return tuple(self._bodies)

    @property
    def joints(self) -> Tuple[Joint, ...]:
        return tuple(self._joints)

    @property
    def body_names(self) -> Tuple[str, ...]:
        return tuple(body.name for body in self._bodies)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def num_dofs(self) -> int:
        return sum(joint.dofs for joint in self._joints)

    def freeze(self) -> None:
        self._frozen = True

    def next_index(self) -> int:
        return len(self._bodies)

    def attach(self, joint: Joint, body: BodyNode) -> BodyNode:
        """Append ``body`` and its parent ``joint``; the only mutation point."""

        if self._frozen:
            raise RuntimeError(f"Skeleton {self.name!r} is frozen")
        index = len(self._bodies)
        if body.index != index or joint.child_index != index or body.joint_index != index:
            raise ValueError(
                f"Body {body.name!r} must be created with index {index}"
            )
        if body.name in self._by_name:
            raise ValueError(f"Body {body.name!r} already exists in {self.name!r}")
        if body.parent_index is not None and not 0 <= body.parent_index < index:
            raise ValueError(
                f"Parent of body {body.name!r} must be created before it"
            )
        self._bodies.append(body)
        self._joints.append(joint)
        self._by_name[body.name] = index
        self._children[index] = []
        if body.parent_index is not None:
            self._children[body.parent_index].append(index)
        return body

    def has_body(self, name: str) -> bool:
        return name in self._by_name

    def body(self, name: str) -> BodyNode:
        try:
            return self._bodies[self._by_name[name]]
        except KeyError:
            raise KeyError(f"Body {name!r} not found") from None

    def find_body(self, name: str) -> BodyNode | None:
        index = self._by_name.get(name)
        return None if index is None else self._bodies[index]

    def parent_joint(self, body: BodyNode) -> Joint:
        return self._joints[body.joint_index]

    def parent_of(self, body: BodyNode) -> BodyNode | None:
        if body.parent_index is None:
            return None
        return self._bodies[body.parent_index]

    def children_of(self, body: BodyNode) -> Tuple[BodyNode, ...]:
        return tuple(self._bodies[i] for i in self._children.get(body.index, ()))

    def roots(self) -> Tuple[BodyNode, ...]:
        return tuple(body for body in self._bodies if body.parent_index is None)

    def descendants(self) -> Iterator[BodyNode]:
        """Depth-first traversal of every tree, roots in creation order."""

        stack = list(reversed(self.roots()))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(self.children_of(node)))

    def to_networkx(self):
        """Convert the forest to a NetworkX `DiGraph`."""

        if nx is None:  # pragma: no cover - depends on optional extra
            raise RuntimeError(
                "networkx is not available; install the graph dependencies."
            )
        graph = nx.DiGraph(name=self.name)
        for body in self._bodies:
            graph.add_node(body.name, kind=body.kind.value)
        for joint in self._joints:
            if joint.parent_index is None:
                continue
            graph.add_edge(
                self._bodies[joint.parent_index].name,
                self._bodies[joint.child_index].name,
                joint=joint.name,
                type=joint.type.value,
            )
        return graph
