from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from result import Result

from dirsize.models.enums import ErrorCause, NodeKind


ProgressCallback = Callable[[str, int, int], None]
CancelCheck = Callable[[], bool]


@dataclass(slots=True, frozen=True)
class Entry:
    """One line of the report: an immediate child of the scan root."""

    name: str
    path: str
    kind: NodeKind
    size_bytes: int

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY


@dataclass(slots=True, frozen=True)
class ScanError:
    """A node that could not be read.  Never fatal to the scan."""

    path: str
    cause: ErrorCause
    message: str

    @classmethod
    def from_exception(cls, path: str, exc: OSError) -> ScanError:
        return cls(path=path, cause=ErrorCause.from_exception(exc), message=exc.strerror or str(exc))


@dataclass(slots=True, frozen=True)
class WalkResult:
    size_bytes: int
    errors: tuple[ScanError, ...] = ()


@dataclass(slots=True)
class ScanStats:
    files: int = 0
    directories: int = 0
    symlinks: int = 0
    errors: int = 0

    def merge(self, other: ScanStats) -> None:
        self.files += other.files
        self.directories += other.directories
        self.symlinks += other.symlinks
        self.errors += other.errors


@dataclass(slots=True, frozen=True)
class ScanReport:
    root: str
    entries: list[Entry]
    errors: list[ScanError] = field(default_factory=list)
    stats: ScanStats = field(default_factory=ScanStats)

    @property
    def total_bytes(self) -> int:
        return sum(entry.size_bytes for entry in self.entries)


class RootErrorCode(str, Enum):
    NOT_FOUND = "not_found"
    NOT_DIRECTORY = "not_directory"
    ROOT_STAT_FAILED = "root_stat_failed"
    ROOT_LIST_FAILED = "root_list_failed"
    CANCELLED = "cancelled"


@dataclass(slots=True, frozen=True)
class RootError:
    code: RootErrorCode
    path: str
    message: str


ScanResult = Result[ScanReport, RootError]
