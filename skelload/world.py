from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from skelload.assembly import AssemblyResult, Diagnostic, Skeleton, assemble_skeleton
from skelload.config import DEFAULT_LOADER_CONFIG, LoaderConfig
from skelload.model.transforms import Vector3
from skelload.sdf import ModelDescription, load_sdf_model, load_sdf_world

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class World:
    """Skeletons assembled from the models of an SDF ``<world>``."""

    name: str
    gravity: Vector3
    time_step: float
    skeletons: Tuple[Skeleton, ...]
    diagnostics: Tuple[Diagnostic, ...]
    failed_models: Tuple[str, ...] = ()

    def skeleton(self, name: str) -> Skeleton:
        for skeleton in self.skeletons:
            if skeleton.name == name:
                return skeleton
        raise KeyError(f"Skeleton {name!r} not found")


def assemble_model(
    model: ModelDescription, config: LoaderConfig = DEFAULT_LOADER_CONFIG
) -> AssemblyResult:
    return assemble_skeleton(
        model.links,
        model.joints,
        name=model.name,
        mobile=not model.static,
        config=config.assembly,
    )


def load_skeleton(
    path: Path | str, config: LoaderConfig = DEFAULT_LOADER_CONFIG
) -> AssemblyResult:
    """Load the first model of an SDF file and assemble its skeleton."""

    return assemble_model(load_sdf_model(path, config), config)


def load_world(path: Path | str, config: LoaderConfig = DEFAULT_LOADER_CONFIG) -> World:
    description = load_sdf_world(path, config)
    skeletons = []
    diagnostics = []
    failed = []
    for model in description.models:
        result = assemble_model(model, config)
        diagnostics.extend(result.diagnostics)
        if result.ok:
            skeletons.append(result.unwrap())
        else:
            logger.error(
                "Skipping model %r of world %r: %s",
                model.name,
                description.name,
                result.error.message if result.error else "unknown error",
            )
            failed.append(model.name)
    return World(
        name=description.name,
        gravity=description.gravity,
        time_step=description.time_step,
        skeletons=tuple(skeletons),
        diagnostics=tuple(diagnostics),
        failed_models=tuple(failed),
    )
