from __future__ import annotations

import os
import stat as statmod
from dataclasses import dataclass
from typing import Protocol


@dataclass(slots=True, frozen=True)
class StatResult:
    is_dir: bool
    is_symlink: bool
    size: int


@dataclass(slots=True, frozen=True)
class DirItem:
    """One child of a listed directory.

    ``info`` holds the child's lstat result, or the ``OSError`` raised while
    stat'ing it (removed mid-listing, permission denied, I/O error).
    """

    name: str
    path: str
    info: StatResult | OSError


class FileSystem(Protocol):
    def expanduser(self, path: str) -> str: ...

    def absolute(self, path: str) -> str: ...

    def exists(self, path: str) -> bool: ...

    def stat(self, path: str) -> StatResult: ...

    def lstat(self, path: str) -> StatResult: ...

    def scandir(self, path: str) -> list[DirItem]: ...

    def read_text(self, path: str) -> str: ...


def _from_os_stat(st: os.stat_result) -> StatResult:
    return StatResult(
        is_dir=statmod.S_ISDIR(st.st_mode),
        is_symlink=statmod.S_ISLNK(st.st_mode),
        size=st.st_size,
    )


class OsFileSystem:
    """FileSystem backed by the host OS.  Only ``stat`` follows symlinks."""

    def expanduser(self, path: str) -> str:
        return os.path.expanduser(path)

    def absolute(self, path: str) -> str:
        return os.path.abspath(path)

    def exists(self, path: str) -> bool:
        return os.path.lexists(path)

    def stat(self, path: str) -> StatResult:
        return _from_os_stat(os.stat(path))

    def lstat(self, path: str) -> StatResult:
        return _from_os_stat(os.lstat(path))

    def scandir(self, path: str) -> list[DirItem]:
        items: list[DirItem] = []
        with os.scandir(path) as it:
            for entry in it:
                info: StatResult | OSError
                try:
                    info = _from_os_stat(entry.stat(follow_symlinks=False))
                except OSError as exc:
                    info = exc
                items.append(DirItem(name=entry.name, path=entry.path, info=info))
        return items

    def read_text(self, path: str) -> str:
        with open(path, encoding="utf-8") as f:
            return f.read()


DEFAULT_FS: FileSystem = OsFileSystem()
