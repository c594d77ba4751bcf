"""Format-independent link and joint records."""

from .records import (
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

__all__ = [
    "Geometry",
    "Inertial",
    "JointAxis",
    "JointRecord",
    "LinkRecord",
    "RIGID",
    "SOFT",
    "Shape",
    "SoftShape",
]
