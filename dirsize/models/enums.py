from __future__ import annotations

import errno
from enum import Enum


class NodeKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class ErrorCause(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    IO_ERROR = "io_error"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")

    @classmethod
    def from_exception(cls, exc: OSError) -> ErrorCause:
        if isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM):
            return cls.PERMISSION_DENIED
        # A node replaced by a file mid-scan fails with ENOTDIR; both mean "vanished".
        if isinstance(exc, (FileNotFoundError, NotADirectoryError)) or exc.errno in (errno.ENOENT, errno.ENOTDIR):
            return cls.NOT_FOUND
        return cls.IO_ERROR


class UnitBase(str, Enum):
    BINARY = "binary"
    DECIMAL = "decimal"

    @property
    def multiplier(self) -> int:
        return 1024 if self is UnitBase.BINARY else 1000

    @property
    def units(self) -> tuple[str, ...]:
        return _UNITS[self]


_UNITS: dict[UnitBase, tuple[str, ...]] = {
    UnitBase.BINARY: ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB"),
    UnitBase.DECIMAL: ("B", "kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"),
}


class Rounding(str, Enum):
    HALF_EVEN = "half_even"
    HALF_UP = "half_up"
