"""Assemble link and joint records into a :class:`Skeleton`.

Joints are consumed from a worklist keyed by child link name. A joint whose
parent body does not exist yet defers to the pending joint that creates that
parent; the deferred joints form an explicit chain so a cyclic chain of
parent references is reported instead of looping forever. A parent link that
no joint creates is attached to the world through a synthesized free joint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Set, Tuple

from skelload.config import DEFAULT_ASSEMBLY_CONFIG, AssemblyConfig
from skelload.model.records import JointRecord, LinkRecord

from .diagnostics import (
    CYCLIC_PARENT_REFERENCE,
    ERROR,
    MISSING_CHILD_LINK,
    MISSING_PARENT_LINK,
    SYNTHESIZED_ROOT_JOINT,
    WARNING,
    AssemblyError,
    Diagnostic,
    DiagnosticLog,
)
from .factory import create_pair
from .registry import Registry, build_registry
from .skeleton import BodyNode, JointType, Skeleton

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class AssemblyResult:
    """Outcome of one assembly: a skeleton, or the error that prevented it."""

    skeleton: Skeleton | None
    diagnostics: Tuple[Diagnostic, ...]
    error: Diagnostic | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.skeleton is not None

    @property
    def warnings(self) -> Tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == WARNING)

    @property
    def errors(self) -> Tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == ERROR)

    def unwrap(self) -> Skeleton:
        if self.error is not None:
            raise AssemblyError(self.error)
        if self.skeleton is None:
            raise RuntimeError("Assembly produced neither a skeleton nor an error")
        return self.skeleton


def assemble_skeleton(
    links: Iterable[LinkRecord],
    joints: Iterable[JointRecord],
    *,
    name: str = "",
    mobile: bool = True,
    config: AssemblyConfig = DEFAULT_ASSEMBLY_CONFIG,
) -> AssemblyResult:
    registry = build_registry(links, joints)
    diagnostics = DiagnosticLog()
    diagnostics.extend(registry.diagnostics)
    skeleton = Skeleton(name, mobile=mobile)

    builder = _TreeBuilder(registry, skeleton, diagnostics, config)
    try:
        builder.run()
    except AssemblyError as exc:
        logger.debug("Discarding partial skeleton %r after %s", name, exc.code)
        return AssemblyResult(
            skeleton=None, diagnostics=diagnostics.freeze(), error=exc.diagnostic
        )

    skeleton.freeze()
    return AssemblyResult(skeleton=skeleton, diagnostics=diagnostics.freeze())


class _TreeBuilder:
    def __init__(
        self,
        registry: Registry,
        skeleton: Skeleton,
        diagnostics: DiagnosticLog,
        config: AssemblyConfig,
    ) -> None:
        self.links = registry.links_by_name
        self.pending: Dict[str, JointRecord] = dict(registry.joints_by_child)
        self.skeleton = skeleton
        self.diagnostics = diagnostics
        self.config = config

    def run(self) -> None:
        while self.pending:
            self._resolve(next(iter(self.pending.values())))

        if self.config.attach_unjointed_links:
            for link in self.links.values():
                if not self.skeleton.has_body(link.name):
                    self._attach_root(link)

    def _is_world(self, parent_name: str) -> bool:
        return not parent_name or parent_name == self.config.world_name

    def _resolve(self, start: JointRecord) -> None:
        """Create ``start`` after every pending joint it depends on."""

        chain: List[JointRecord] = [start]
        waiting: Set[str] = {start.child_name}
        while chain:
            current = chain[-1]
            parent_name = current.parent_name
            parent: BodyNode | None = None

            if self._is_world(parent_name):
                parent = None
            elif self.skeleton.has_body(parent_name):
                parent = self.skeleton.body(parent_name)
            elif parent_name in self.pending:
                if parent_name in waiting:
                    raise self.diagnostics.fatal(
                        CYCLIC_PARENT_REFERENCE,
                        f"Joint {current.name!r} requests link {parent_name!r} as "
                        "its parent, but that link depends on "
                        f"{current.child_name!r} through a cycle of joints: "
                        + " -> ".join(j.name for j in chain),
                        parent_name,
                        joints=[j.name for j in chain],
                    )
                dependency = self.pending[parent_name]
                logger.debug(
                    "Joint %r waits for joint %r to create link %r",
                    current.name,
                    dependency.name,
                    parent_name,
                )
                chain.append(dependency)
                waiting.add(parent_name)
                continue
            elif parent_name in self.links:
                self._attach_root(self.links[parent_name])
                continue
            else:
                raise self.diagnostics.fatal(
                    MISSING_PARENT_LINK,
                    f"Could not find link {parent_name!r} requested as parent of "
                    f"joint {current.name!r}.",
                    parent_name,
                    joint=current.name,
                )

            child = self.links.get(current.child_name)
            if child is None:
                raise self.diagnostics.fatal(
                    MISSING_CHILD_LINK,
                    f"Could not find link {current.child_name!r} requested as "
                    f"child of joint {current.name!r}.",
                    current.child_name,
                    joint=current.name,
                )

            create_pair(self.skeleton, parent, current, child, self.diagnostics)
            del self.pending[current.child_name]
            chain.pop()
            waiting.discard(current.child_name)

    def _attach_root(self, link: LinkRecord) -> BodyNode:
        joint = JointRecord(
            name=self.config.root_joint_name,
            type=JointType.FREE.value,
            parent_name="",
            child_name=link.name,
            parent_to_joint=link.initial_transform,
        )
        self.diagnostics.info(
            SYNTHESIZED_ROOT_JOINT,
            f"Link {link.name!r} has no parent joint; attaching it to the world "
            f"with free joint {joint.name!r}.",
            link.name,
        )
        return create_pair(self.skeleton, None, joint, link, self.diagnostics)
