"""Type definitions for compat-lint."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ViolationKind(str, Enum):
    """How a restricted export was reached."""

    DIRECT = "direct"
    NAMESPACE_ACCESS = "namespace-access"
    DESTRUCTURE = "destructure"


_MESSAGES = {
    ViolationKind.DIRECT: 'Importing {symbol} from "{module}" is not allowed.',
    ViolationKind.NAMESPACE_ACCESS: 'Accessing {symbol} from "{module}" is not allowed.',
    ViolationKind.DESTRUCTURE: 'Destructuring {symbol} from "{module}" is not allowed.',
}


@dataclass(frozen=True)
class Violation:
    """Single use of a restricted export.

    ``symbol`` is always the name exported by ``module``, never a local alias.
    ``line`` and ``column`` are 1-based.
    """

    kind: ViolationKind
    symbol: str
    module: str
    line: int
    column: int

    @property
    def message(self) -> str:
        """Human-readable description of the violation."""
        return _MESSAGES[self.kind].format(symbol=self.symbol, module=self.module)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "symbol": self.symbol,
            "module": self.module,
            "line": self.line,
            "column": self.column,
            "message": self.message,
        }


@dataclass
class FileResult:
    """Violations found in a single file."""

    file_path: str
    violations: list[Violation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file_path,
            "violations": [v.to_dict() for v in self.violations],
        }


@dataclass(frozen=True)
class FileError:
    """A file whose analysis or attribution failed.

    Attribution failures (``resolution``, ``manifest``) keep the violations
    that could not be assigned to a package.
    """

    file_path: str
    kind: str  # read | syntax | resolution | manifest
    message: str
    violations: tuple[Violation, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file_path,
            "kind": self.kind,
            "message": self.message,
            "violations": [v.to_dict() for v in self.violations],
        }


@dataclass(frozen=True, order=True)
class PackageIdentity:
    """Package name and version; the same name may appear at several versions."""

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass
class PackageResult:
    """Files of one package (name and version) that contain violations."""

    identity: PackageIdentity
    files: list[FileResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.identity.name,
            "version": self.identity.version,
            "files": [f.to_dict() for f in self.files],
        }


@dataclass
class LinterResult:
    """Outcome of a run, packages sorted by name then version."""

    packages: list[PackageResult]
    is_compliant: bool
    errors: list[FileError] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "packages": [p.to_dict() for p in self.packages],
            "isCompliant": self.is_compliant,
            "errors": [e.to_dict() for e in self.errors],
        }
