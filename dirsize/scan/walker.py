"""Recursive size measurement for a single filesystem node.

Symlinks are sized by ``lstat`` and never descended into, so the traversal
always sees a tree and terminates even when a link points at an ancestor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from dirsize.models.scan import CancelCheck, ScanError, WalkResult
from dirsize.services.fs import DEFAULT_FS, FileSystem

log = logging.getLogger(__name__)


@dataclass(slots=True)
class DirListing:
    """Contents of one directory: summed leaf sizes plus subdirectories still to visit."""

    file_bytes: int = 0
    files: int = 0
    symlinks: int = 0
    subdirs: list[str] = field(default_factory=list)
    errors: list[ScanError] = field(default_factory=list)


ListingCallback = Callable[[str, DirListing], None]


def read_dir(path: str, fs: FileSystem = DEFAULT_FS) -> DirListing:
    """List *path* once.  Raises ``OSError`` if the directory itself cannot be listed."""
    listing = DirListing()
    for item in fs.scandir(path):
        st = item.info
        if isinstance(st, OSError):
            log.debug("cannot stat %s: %s", item.path, st)
            listing.errors.append(ScanError.from_exception(item.path, st))
            continue
        if st.is_dir:
            listing.subdirs.append(item.path)
            continue
        listing.file_bytes += st.size
        if st.is_symlink:
            listing.symlinks += 1
        else:
            listing.files += 1
    return listing


def walk(
    path: str,
    fs: FileSystem = DEFAULT_FS,
    on_listing: ListingCallback | None = None,
    cancel_check: CancelCheck | None = None,
) -> WalkResult:
    """Return the apparent size of *path* and every node under it that failed to read.

    A directory that cannot be listed contributes zero and one error; its
    siblings are still visited.  An explicit stack keeps deep trees clear of
    the recursion limit.  If *cancel_check* fires, the partial total so far is
    returned and the caller decides what to do with it.
    """
    try:
        st = fs.lstat(path)
    except OSError as exc:
        log.debug("cannot stat %s: %s", path, exc)
        return WalkResult(0, (ScanError.from_exception(path, exc),))
    if not st.is_dir:
        return WalkResult(st.size)

    total = 0
    errors: list[ScanError] = []
    stack = [path]
    while stack:
        if cancel_check is not None and cancel_check():
            break
        current = stack.pop()
        try:
            listing = read_dir(current, fs)
        except OSError as exc:
            log.debug("cannot list %s: %s", current, exc)
            errors.append(ScanError.from_exception(current, exc))
            continue
        total += listing.file_bytes
        errors.extend(listing.errors)
        stack.extend(listing.subdirs)
        if on_listing is not None:
            on_listing(current, listing)
    return WalkResult(total, tuple(errors))
