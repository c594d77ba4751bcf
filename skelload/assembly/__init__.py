"""Kinematic tree assembly from link and joint records."""

from .assembler import AssemblyResult, assemble_skeleton
from .diagnostics import AssemblyError, Diagnostic, DiagnosticLog
from .factory import create_pair
from .registry import Registry, build_registry
from .skeleton import BodyNode, Joint, JointType, LinkKind, Skeleton

__all__ = [
    "AssemblyError",
    "AssemblyResult",
    "BodyNode",
    "Diagnostic",
    "DiagnosticLog",
    "Joint",
    "JointType",
    "LinkKind",
    "Registry",
    "Skeleton",
    "assemble_skeleton",
    "build_registry",
    "create_pair",
]
