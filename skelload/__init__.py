"""
skelload package root.

Loads SDF models into link/joint records and assembles them into kinematic
skeletons for rigid-body simulation.
"""

from importlib.metadata import version, PackageNotFoundError


def __getattr__(name: str) -> str:
    if name == "__version__":
        try:
            return version("skelload")
        except PackageNotFoundError:
            return "0.0.0"
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["__version__"]
