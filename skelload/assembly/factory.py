"""Materialize a joint record and its child link as a skeleton pair."""

from __future__ import annotations

import logging
from typing import Tuple

from skelload.model.records import JointAxis, JointRecord, LinkRecord
from skelload.model.transforms import normalize

from .diagnostics import (
    INVALID_SOFT_BODY,
    MISSING_JOINT_AXIS,
    UNSUPPORTED_JOINT_TYPE,
    UNSUPPORTED_LINK_KIND,
    DiagnosticLog,
)
from .skeleton import BodyNode, Joint, JointType, LinkKind, Skeleton

logger = logging.getLogger(__name__)


def create_pair(
    skeleton: Skeleton,
    parent: BodyNode | None,
    joint: JointRecord,
    link: LinkRecord,
    diagnostics: DiagnosticLog,
) -> BodyNode:
    """Attach ``link`` to ``parent`` through ``joint`` and return the new body.

    Raises :class:`AssemblyError` for an unsupported link kind or joint type.
    Nothing is attached to ``skeleton`` unless both halves can be built.
    """

    kind = _resolve_link_kind(link, diagnostics)
    joint_type = _resolve_joint_type(joint, diagnostics)
    axes = _resolve_axes(joint, joint_type, diagnostics)

    index = skeleton.next_index()
    parent_index = parent.index if parent is not None else None
    new_joint = Joint(
        name=joint.name,
        type=joint_type,
        parent_index=parent_index,
        child_index=index,
        parent_to_joint=joint.parent_to_joint,
        child_to_joint=joint.child_to_joint,
        axes=axes,
        pitch=joint.pitch if joint_type is JointType.SCREW else 0.0,
    )
    body = BodyNode(
        name=link.name,
        index=index,
        parent_index=parent_index,
        joint_index=index,
        kind=kind,
        world_transform=link.initial_transform,
        inertial=link.inertial,
        visuals=link.visuals,
        collisions=link.collisions,
        soft=link.soft if kind is LinkKind.SOFT else None,
        gravity=link.gravity,
    )
    logger.debug(
        "Creating %s joint %r -> %s body %r (parent %r)",
        joint_type.value,
        joint.name,
        kind.value,
        link.name,
        parent.name if parent is not None else None,
    )
    return skeleton.attach(new_joint, body)


def _resolve_link_kind(link: LinkRecord, diagnostics: DiagnosticLog) -> LinkKind:
    try:
        kind = LinkKind(link.kind or LinkKind.RIGID.value)
    except ValueError:
        raise diagnostics.fatal(
            UNSUPPORTED_LINK_KIND,
            f"Unsupported link type {link.kind!r} for link {link.name!r}.",
            link.name,
            kind=link.kind,
        ) from None
    if kind is LinkKind.SOFT and link.soft is None:
        raise diagnostics.fatal(
            INVALID_SOFT_BODY,
            f"Soft link {link.name!r} has no soft shape parameters.",
            link.name,
        )
    return kind


def _resolve_joint_type(joint: JointRecord, diagnostics: DiagnosticLog) -> JointType:
    try:
        return JointType(joint.type)
    except ValueError:
        raise diagnostics.fatal(
            UNSUPPORTED_JOINT_TYPE,
            f"Unsupported joint type {joint.type!r} for joint {joint.name!r}.",
            joint.name,
            type=joint.type,
        ) from None


def _resolve_axes(
    joint: JointRecord, joint_type: JointType, diagnostics: DiagnosticLog
) -> Tuple[JointAxis, ...]:
    needed = joint_type.axis_count
    axes = list(joint.axes[:needed])
    if len(axes) < needed:
        diagnostics.warning(
            MISSING_JOINT_AXIS,
            f"Joint {joint.name!r} of type {joint_type.value!r} needs {needed} "
            f"axis definition(s) but has {len(axes)}; defaulting to +Z.",
            joint.name,
        )
        axes.extend(JointAxis() for _ in range(needed - len(axes)))

    resolved = []
    for axis in axes:
        try:
            xyz = normalize(axis.xyz)
        except ValueError:
            diagnostics.warning(
                MISSING_JOINT_AXIS,
                f"Joint {joint.name!r} has a zero-length axis; defaulting to +Z.",
                joint.name,
            )
            xyz = (0.0, 0.0, 1.0)
        resolved.append(
            JointAxis(xyz=xyz, lower=axis.lower, upper=axis.upper, damping=axis.damping)
        )
    return tuple(resolved)
