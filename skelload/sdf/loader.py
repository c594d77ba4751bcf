from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple

import numpy as np

from skelload.config import DEFAULT_LOADER_CONFIG, LoaderConfig
from skelload.model.records import (
    RIGID,
    SOFT,
    Geometry,
    Inertial,
    JointAxis,
    JointRecord,
    LinkRecord,
    Shape,
    SoftShape,
)
from skelload.model.transforms import Vector3, from_xyz_rpy, identity, inverse, rotate

logger = logging.getLogger(__name__)

# SDF joint type names that differ from the canonical joint type names.
_JOINT_TYPE_ALIASES = {
    "fixed": "weld",
    "revolute2": "universal",
}

DEFAULT_GRAVITY: Vector3 = (0.0, 0.0, -9.81)
DEFAULT_TIME_STEP = 0.001
PLANE_THICKNESS = 0.001


@dataclass(slots=True, frozen=True, eq=False)
class ModelDescription:
    """Records extracted from one ``<model>`` element."""

    name: str
    static: bool
    frame: np.ndarray
    links: Tuple[LinkRecord, ...]
    joints: Tuple[JointRecord, ...]

    @property
    def link_names(self) -> Tuple[str, ...]:
        return tuple(link.name for link in self.links)

    @property
    def joint_names(self) -> Tuple[str, ...]:
        return tuple(joint.name for joint in self.joints)


@dataclass(slots=True, frozen=True)
class WorldDescription:
    name: str
    gravity: Vector3
    time_step: float
    models: Tuple[ModelDescription, ...]


def _text(element: ET.Element, tag: str) -> str | None:
    child = element.find(tag)
    if child is None or child.text is None:
        return None
    return child.text.strip()


def _parse_floats(raw: str, count: int, what: str) -> Tuple[float, ...]:
    parts = [p for p in raw.strip().split() if p]
    if len(parts) != count:
        raise ValueError(f"Expected {count} components in {what}, got {raw!r}")
    return tuple(float(p) for p in parts)


def _get_float(element: ET.Element, tag: str, default: float | None = None) -> float:
    raw = _text(element, tag)
    if raw is None:
        if default is None:
            raise ValueError(f"Missing element <{tag}> in <{element.tag}>")
        return default
    return float(raw)


def _get_bool(element: ET.Element, tag: str, default: bool) -> bool:
    raw = _text(element, tag)
    if raw is None:
        return default
    lowered = raw.lower()
    if lowered in ("1", "true"):
        return True
    if lowered in ("0", "false"):
        return False
    raise ValueError(f"Invalid boolean {raw!r} in <{tag}>")


def _get_vector3(element: ET.Element, tag: str, default: Vector3 | None = None) -> Vector3:
    raw = _text(element, tag)
    if raw is None:
        if default is None:
            raise ValueError(f"Missing element <{tag}> in <{element.tag}>")
        return default
    return _parse_floats(raw, 3, f"<{tag}>")  # type: ignore[return-value]


def _parse_pose(element: ET.Element) -> np.ndarray:
    """Return the ``<pose>`` child as a 4x4 transform (identity when absent)."""

    raw = _text(element, "pose")
    if raw is None:
        return identity()
    x, y, z, roll, pitch, yaw = _parse_floats(raw, 6, "<pose>")
    return from_xyz_rpy((x, y, z), (roll, pitch, yaw))


def _parse_geometry(element: ET.Element, base_dir: Path | None) -> Geometry | None:
    if (box := element.find("box")) is not None:
        return Geometry(type="box", size=_get_vector3(box, "size"))
    if (sphere := element.find("sphere")) is not None:
        return Geometry(type="sphere", radius=_get_float(sphere, "radius"))
    if (cylinder := element.find("cylinder")) is not None:
        return Geometry(
            type="cylinder",
            radius=_get_float(cylinder, "radius"),
            length=_get_float(cylinder, "length"),
        )
    if (plane := element.find("plane")) is not None:
        raw = _text(plane, "size") or "1 1"
        sx, sy = _parse_floats(raw, 2, "<size>")
        return Geometry(type="plane", size=(sx, sy, PLANE_THICKNESS))
    if (mesh := element.find("mesh")) is not None:
        uri = _text(mesh, "uri")
        if uri is None:
            raise ValueError("Mesh geometry is missing <uri>")
        filename = str(base_dir / uri) if base_dir is not None else uri
        return Geometry(
            type="mesh",
            filename=filename,
            size=_get_vector3(mesh, "scale", (1.0, 1.0, 1.0)),
        )
    return None


def _parse_shapes(link_el: ET.Element, tag: str, base_dir: Path | None) -> Tuple[Shape, ...]:
    shapes = []
    for shape_el in link_el.findall(tag):
        geometry_el = shape_el.find("geometry")
        geometry = _parse_geometry(geometry_el, base_dir) if geometry_el is not None else None
        if geometry is None:
            logger.warning(
                "Skipping <%s> %r of link %r: unsupported or missing geometry",
                tag,
                shape_el.attrib.get("name"),
                link_el.attrib.get("name"),
            )
            continue
        shapes.append(
            Shape(
                geometry=geometry,
                transform=_parse_pose(shape_el),
                name=shape_el.attrib.get("name"),
            )
        )
    return tuple(shapes)


def _parse_inertial(element: ET.Element | None) -> Inertial | None:
    if element is None:
        return None
    mass = _get_float(element, "mass", 1.0)
    com = tuple(float(v) for v in _parse_pose(element)[:3, 3])
    inertia = None
    if (moi := element.find("inertia")) is not None:
        inertia = (
            _get_float(moi, "ixx", 0.0),
            _get_float(moi, "ixy", 0.0),
            _get_float(moi, "ixz", 0.0),
            _get_float(moi, "iyy", 0.0),
            _get_float(moi, "iyz", 0.0),
            _get_float(moi, "izz", 0.0),
        )
    return Inertial(mass=mass, com=com, inertia=inertia)  # type: ignore[arg-type]


def _parse_soft_shape(element: ET.Element, link_name: str) -> SoftShape:
    total_mass = _get_float(element, "total_mass")
    transform = _parse_pose(element)
    geometry = element.find("geometry")
    if geometry is None:
        raise ValueError(f"<soft_shape> of link {link_name!r} has no <geometry>")

    kwargs = dict(
        total_mass=total_mass,
        transform=transform,
        kv=_get_float(element, "kv", 0.0),
        ke=_get_float(element, "ke", 0.0),
        damping=_get_float(element, "damp", 0.0),
    )
    if (box := geometry.find("box")) is not None:
        frags = _parse_floats(_text(box, "frags") or "1 1 1", 3, "<frags>")
        return SoftShape(
            type="box",
            size=_get_vector3(box, "size"),
            resolution=tuple(int(f) for f in frags),
            **kwargs,
        )
    if (ellipsoid := geometry.find("ellipsoid")) is not None:
        return SoftShape(
            type="ellipsoid",
            size=_get_vector3(ellipsoid, "size"),
            resolution=(
                int(_get_float(ellipsoid, "num_slices")),
                int(_get_float(ellipsoid, "num_stacks")),
            ),
            **kwargs,
        )
    if (cylinder := geometry.find("cylinder")) is not None:
        return SoftShape(
            type="cylinder",
            radius=_get_float(cylinder, "radius"),
            height=_get_float(cylinder, "height"),
            resolution=(
                int(_get_float(cylinder, "num_slices")),
                int(_get_float(cylinder, "num_stacks")),
                int(_get_float(cylinder, "num_rings")),
            ),
            **kwargs,
        )
    raise ValueError(f"Unknown soft shape for link {link_name!r}")


def _parse_link(element: ET.Element, frame: np.ndarray, base_dir: Path | None) -> LinkRecord:
    name = element.attrib.get("name", "")
    soft_el = element.find("soft_shape")
    soft = _parse_soft_shape(soft_el, name) if soft_el is not None else None
    return LinkRecord(
        name=name,
        initial_transform=frame @ _parse_pose(element),
        inertial=_parse_inertial(element.find("inertial")),
        visuals=_parse_shapes(element, "visual", base_dir),
        collisions=_parse_shapes(element, "collision", base_dir),
        kind=SOFT if soft is not None else RIGID,
        soft=soft,
        gravity=_get_bool(element, "gravity", True),
    )


def _parse_axis(element: ET.Element, parent_model_frame: np.ndarray) -> JointAxis:
    xyz = _get_vector3(element, "xyz", (0.0, 0.0, 1.0))
    if _get_bool(element, "use_parent_model_frame", False):
        xyz = rotate(parent_model_frame, xyz)
    lower, upper, damping = float("-inf"), float("inf"), 0.0
    if (limit := element.find("limit")) is not None:
        lower = _get_float(limit, "lower", lower)
        upper = _get_float(limit, "upper", upper)
    if (dynamics := element.find("dynamics")) is not None:
        damping = _get_float(dynamics, "damping", damping)
    return JointAxis(xyz=xyz, lower=lower, upper=upper, damping=damping)


def _parse_joint(
    element: ET.Element,
    link_frames: Dict[str, np.ndarray],
    model_frame: np.ndarray,
) -> JointRecord:
    name = element.attrib.get("name", "")
    joint_type = element.attrib.get("type", "").lower()
    joint_type = _JOINT_TYPE_ALIASES.get(joint_type, joint_type)

    parent = _text(element, "parent")
    if parent is None:
        raise ValueError(f"Joint {name!r} is missing its <parent> link")
    child = _text(element, "child") or ""

    parent_world = link_frames.get(parent, identity())
    child_world = link_frames.get(child, identity())
    child_to_joint = _parse_pose(element)
    joint_world = child_world @ child_to_joint
    parent_to_joint = inverse(parent_world) @ joint_world
    parent_model_frame = inverse(joint_world) @ model_frame

    axes = tuple(
        _parse_axis(axis_el, parent_model_frame)
        for tag in ("axis", "axis2")
        if (axis_el := element.find(tag)) is not None
    )
    return JointRecord(
        name=name,
        type=joint_type,
        parent_name=parent,
        child_name=child,
        child_to_joint=child_to_joint,
        parent_to_joint=parent_to_joint,
        axes=axes,
        pitch=_get_float(element, "thread_pitch", 0.0),
    )


def read_model_element(element: ET.Element, base_dir: Path | None = None) -> ModelDescription:
    frame = _parse_pose(element)
    links = tuple(_parse_link(link_el, frame, base_dir) for link_el in element.findall("link"))

    link_frames: Dict[str, np.ndarray] = {}
    for link in links:
        link_frames.setdefault(link.name, link.initial_transform)

    joints = tuple(
        _parse_joint(joint_el, link_frames, frame) for joint_el in element.findall("joint")
    )
    return ModelDescription(
        name=element.attrib.get("name", ""),
        static=_get_bool(element, "static", False),
        frame=frame,
        links=links,
        joints=joints,
    )


def read_world_element(element: ET.Element, base_dir: Path | None = None) -> WorldDescription:
    gravity = DEFAULT_GRAVITY
    time_step = DEFAULT_TIME_STEP
    if (physics := element.find("physics")) is not None:
        time_step = _get_float(physics, "max_step_size", time_step)
        gravity = _get_vector3(physics, "gravity", gravity)
    # SDF 1.5 moved <gravity> up to the world element.
    gravity = _get_vector3(element, "gravity", gravity)
    return WorldDescription(
        name=element.attrib.get("name", ""),
        gravity=gravity,
        time_step=time_step,
        models=tuple(read_model_element(m, base_dir) for m in element.findall("model")),
    )


def _load_sdf_root(path: Path | str, config: LoaderConfig) -> Tuple[ET.Element, Path]:
    resolved = Path(path).expanduser().resolve()
    if not resolved.is_file():
        raise FileNotFoundError(f"SDF file {resolved} does not exist")
    root = ET.parse(resolved).getroot()
    if root.tag != "sdf":
        raise ValueError(f"Expected root <sdf> element, got <{root.tag}>")
    version = root.attrib.get("version", "")
    if version not in config.sdf_versions:
        raise ValueError(
            f"The file format of {resolved} is not SDF "
            + " or ".join(config.sdf_versions)
            + f" (got {version!r})"
        )
    return root, resolved.parent


def load_sdf_model(
    path: Path | str, config: LoaderConfig = DEFAULT_LOADER_CONFIG
) -> ModelDescription:
    """Read the first ``<model>`` of an SDF document."""

    root, base_dir = _load_sdf_root(path, config)
    model = root.find("model")
    if model is None:
        raise ValueError(f"No <model> element found in {path}")
    return read_model_element(model, base_dir)


def load_sdf_world(
    path: Path | str, config: LoaderConfig = DEFAULT_LOADER_CONFIG
) -> WorldDescription:
    root, base_dir = _load_sdf_root(path, config)
    world = root.find("world")
    if world is None:
        raise ValueError(f"No <world> element found in {path}")
    return read_world_element(world, base_dir)


def read_sdf_document(
    path: Path | str, config: LoaderConfig = DEFAULT_LOADER_CONFIG
) -> ModelDescription | WorldDescription:
    """Read the ``<world>`` of an SDF document, or its first ``<model>`` when it has none."""

    root, base_dir = _load_sdf_root(path, config)
    world = root.find("world")
    if world is not None:
        return read_world_element(world, base_dir)
    model = root.find("model")
    if model is not None:
        return read_model_element(model, base_dir)
    raise ValueError(f"No <world> or <model> element found in {path}")
