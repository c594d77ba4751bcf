from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(slots=True, frozen=True)
class AssemblyConfig:
    """Options for turning link and joint records into a skeleton.

    ``world_name`` is the parent name that attaches a joint directly to the
    world. Links left without any joint are given a free ``root_joint_name``
    joint when ``attach_unjointed_links`` is set.
    """

    world_name: str = "world"
    root_joint_name: str = "root"
    attach_unjointed_links: bool = True


@dataclass(slots=True, frozen=True)
class LoaderConfig:
    sdf_versions: Tuple[str, ...] = ("1.4", "1.5")
    assembly: AssemblyConfig = field(default_factory=AssemblyConfig)


DEFAULT_ASSEMBLY_CONFIG = AssemblyConfig()
DEFAULT_LOADER_CONFIG = LoaderConfig()
