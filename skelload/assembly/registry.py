from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

from skelload.model.records import JointRecord, LinkRecord

from .diagnostics import (
    DUPLICATE_CHILD_CLAIM,
    DUPLICATE_LINK_NAME,
    JOINT_MISSING_CHILD,
    Diagnostic,
    DiagnosticLog,
)


@dataclass(slots=True, frozen=True)
class Registry:
    """Name-keyed view of the records of one model.

    ``joints_by_child`` is keyed by the child link name, so each link has at
    most one incoming joint. Both mappings keep input order.
    """

    links_by_name: Dict[str, LinkRecord]
    joints_by_child: Dict[str, JointRecord]
    diagnostics: Tuple[Diagnostic, ...]


def build_registry(
    links: Iterable[LinkRecord], joints: Iterable[JointRecord]
) -> Registry:
    log = DiagnosticLog()

    links_by_name: Dict[str, LinkRecord] = {}
    for link in links:
        if link.name in links_by_name:
            log.warning(
                DUPLICATE_LINK_NAME,
                f"Duplicate link name {link.name!r}; every link must have a "
                "unique name, keeping the first one.",
                link.name,
            )
            continue
        links_by_name[link.name] = link

    joints_by_child: Dict[str, JointRecord] = {}
    for joint in joints:
        if not joint.child_name:
            log.warning(
                JOINT_MISSING_CHILD,
                f"Joint {joint.name!r} does not have a valid child link and "
                "will not be added to the skeleton.",
                joint.name,
            )
            continue
        claimed = joints_by_child.get(joint.child_name)
        if claimed is not None:
            log.warning(
                DUPLICATE_CHILD_CLAIM,
                f"Joint {joint.name!r} claims link {joint.child_name!r} as its "
                f"child, but it is already claimed by joint {claimed.name!r}; "
                f"discarding {joint.name!r}.",
                joint.name,
                child=joint.child_name,
                claimed_by=claimed.name,
            )
            continue
        joints_by_child[joint.child_name] = joint

    return Registry(
        links_by_name=links_by_name,
        joints_by_child=joints_by_child,
        diagnostics=log.freeze(),
    )
