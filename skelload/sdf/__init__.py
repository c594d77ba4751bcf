"""Extraction of link and joint records from SDF documents."""

from .loader import (
    ModelDescription,
    WorldDescription,
    load_sdf_model,
    load_sdf_world,
    read_model_element,
    read_sdf_document,
    read_world_element,
)

__all__ = [
    "ModelDescription",
    "WorldDescription",
    "load_sdf_model",
    "load_sdf_world",
    "read_model_element",
    "read_sdf_document",
    "read_world_element",
]
