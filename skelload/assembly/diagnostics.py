from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple

logger = logging.getLogger(__name__)

INFO = "info"
WARNING = "warning"
ERROR = "error"

# Recoverable: the offending record is discarded or defaulted.
DUPLICATE_LINK_NAME = "duplicate_link_name"
JOINT_MISSING_CHILD = "joint_missing_child"
DUPLICATE_CHILD_CLAIM = "duplicate_child_claim"
MISSING_JOINT_AXIS = "missing_joint_axis"
SYNTHESIZED_ROOT_JOINT = "synthesized_root_joint"

# Fatal: assembly stops and no skeleton is produced.
MISSING_PARENT_LINK = "missing_parent_link"
MISSING_CHILD_LINK = "missing_child_link"
CYCLIC_PARENT_REFERENCE = "cyclic_parent_reference"
UNSUPPORTED_LINK_KIND = "unsupported_link_kind"
UNSUPPORTED_JOINT_TYPE = "unsupported_joint_type"
INVALID_SOFT_BODY = "invalid_soft_body"

_LOG_LEVELS = {
    INFO: logging.INFO,
    WARNING: logging.WARNING,
    ERROR: logging.ERROR,
}


@dataclass(slots=True, frozen=True)
class Diagnostic:
    severity: str
    code: str
    message: str
    name: str
    details: Dict[str, Any] = field(default_factory=dict, compare=False)


class AssemblyError(Exception):
    """Raised when a skeleton cannot be assembled from its records."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic

    @property
    def code(self) -> str:
        return self.diagnostic.code

    @property
    def name(self) -> str:
        return self.diagnostic.name


class DiagnosticLog:
    """Ordered collection of diagnostics produced by a single assembly."""

    def __init__(self) -> None:
        self._entries: List[Diagnostic] = []

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(
        self,
        severity: str,
        code: str,
        message: str,
        name: str,
        **details: Any,
    ) -> Diagnostic:
        diagnostic = Diagnostic(
            severity=severity, code=code, message=message, name=name, details=details
        )
        self._entries.append(diagnostic)
        logger.log(_LOG_LEVELS.get(severity, logging.ERROR), "[%s] %s", code, message)
        return diagnostic

    def info(self, code: str, message: str, name: str, **details: Any) -> Diagnostic:
        return self.add(INFO, code, message, name, **details)

    def warning(self, code: str, message: str, name: str, **details: Any) -> Diagnostic:
        return self.add(WARNING, code, message, name, **details)

    def fatal(self, code: str, message: str, name: str, **details: Any) -> AssemblyError:
        """Record an error diagnostic and return the exception to raise for it."""

        return AssemblyError(self.add(ERROR, code, message, name, **details))

    def extend(self, diagnostics: Tuple[Diagnostic, ...]) -> None:
        self._entries.extend(diagnostics)

    def by_code(self, code: str) -> Tuple[Diagnostic, ...]:
        return tuple(d for d in self._entries if d.code == code)

    def freeze(self) -> Tuple[Diagnostic, ...]:
        return tuple(self._entries)
