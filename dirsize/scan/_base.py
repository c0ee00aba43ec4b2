# Scanner base class: root validation and top-level aggregation.
#
# Architecture:
#   ScannerBase uses the Template Method pattern.  The base class resolves the
#   root, lists its immediate children, turns files into Entries directly and
#   hands the top-level directories to the subclass's _measure hook, which
#   returns one WalkResult per directory in the same order.  The base class
#   then assembles Entries in discovery order and merges all errors.
#
# Failure model:
#   Only the root is fatal (missing, not a directory, unlistable).  Everything
#   below the root degrades to a zero contribution plus a ScanError.

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod

from result import Err, Ok

from dirsize.models.enums import NodeKind
from dirsize.models.scan import (
    CancelCheck,
    Entry,
    ProgressCallback,
    RootError,
    RootErrorCode,
    ScanError,
    ScanReport,
    ScanResult,
    ScanStats,
    WalkResult,
)
from dirsize.services.fs import DEFAULT_FS, FileSystem

log = logging.getLogger(__name__)

PROGRESS_EVERY = 100


def resolve_root(path: str, fs: FileSystem) -> str | RootError:
    """Validate and resolve a scan root path.

    Returns the resolved absolute path, or a ``RootError`` on failure.
    """
    expanded = fs.expanduser(path)
    if not fs.exists(expanded):
        return RootError(
            code=RootErrorCode.NOT_FOUND,
            path=expanded,
            message="Path does not exist",
        )

    resolved = fs.absolute(expanded)
    # The root may be a symlink to a directory; nodes below it are only lstat'ed.
    try:
        root_stat = fs.stat(resolved)
    except OSError as exc:
        return RootError(
            code=RootErrorCode.ROOT_STAT_FAILED,
            path=resolved,
            message=f"Cannot stat root: {exc}",
        )
    if not root_stat.is_dir:
        return RootError(
            code=RootErrorCode.NOT_DIRECTORY,
            path=resolved,
            message="Path is not a directory",
        )
    return resolved


class Progress:
    """Throttled progress reporting shared by all workers of one scan.

    Counts are only used for display, so callers add them once per directory.
    """

    __slots__ = ("_callback", "_lock", "_files", "_dirs")

    def __init__(self, callback: ProgressCallback | None) -> None:
        self._callback = callback
        self._lock = threading.Lock()
        self._files = 0
        self._dirs = 0

    def advance(self, path: str, files: int, dirs: int) -> None:
        if self._callback is None:
            return
        with self._lock:
            prev_total = self._files + self._dirs
            self._files += files
            self._dirs += dirs
            f, d = self._files, self._dirs
        # Fires when the running count crosses a PROGRESS_EVERY boundary.
        if (f + d) // PROGRESS_EVERY > prev_total // PROGRESS_EVERY:
            self._callback(path, f, d)


class ScannerBase(ABC):
    """Template Method base for scanners.

    Subclasses implement ``_measure`` (how to total a batch of top-level
    directories); this class handles root validation, the top-level listing,
    cancellation, and assembling the report.
    """

    def __init__(self, workers: int = 1, fs: FileSystem = DEFAULT_FS) -> None:
        self._workers = max(1, workers)
        self._fs = fs

    @property
    def workers(self) -> int:
        return self._workers

    @abstractmethod
    def _measure(
        self,
        dirs: list[str],
        stats: ScanStats,
        progress: Progress,
        is_cancelled: CancelCheck,
    ) -> list[WalkResult]:
        """Return one ``WalkResult`` per path in *dirs*, in the same order.

        Implementations add their counts to *stats* before returning.
        """

    def scan(
        self,
        path: str,
        progress_callback: ProgressCallback | None = None,
        cancel_check: CancelCheck | None = None,
    ) -> ScanResult:
        resolved = resolve_root(path, self._fs)
        if isinstance(resolved, RootError):
            return Err(resolved)
        resolved_root = resolved

        try:
            items = self._fs.scandir(resolved_root)
        except OSError as exc:
            return Err(
                RootError(
                    code=RootErrorCode.ROOT_LIST_FAILED,
                    path=resolved_root,
                    message=f"Cannot list root: {exc}",
                )
            )

        cancelled = threading.Event()

        def _is_cancelled() -> bool:
            # Once set, later checks skip the caller's callback.
            if cancelled.is_set():
                return True
            if cancel_check is not None and cancel_check():
                cancelled.set()
                return True
            return False

        stats = ScanStats(directories=1)
        errors: list[ScanError] = []
        # Top-level entries in discovery order; directories are filled in after _measure.
        slots: list[Entry | None] = []
        pending: list[tuple[int, str, str]] = []

        for item in items:
            st = item.info
            if isinstance(st, OSError):
                log.debug("cannot stat %s: %s", item.path, st)
                errors.append(ScanError.from_exception(item.path, st))
                slots.append(Entry(name=item.name, path=item.path, kind=NodeKind.FILE, size_bytes=0))
                continue
            if st.is_dir:
                pending.append((len(slots), item.name, item.path))
                slots.append(None)
                continue
            if st.is_symlink:
                stats.symlinks += 1
            else:
                stats.files += 1
            slots.append(Entry(name=item.name, path=item.path, kind=NodeKind.FILE, size_bytes=st.size))

        progress = Progress(progress_callback)
        progress.advance(resolved_root, stats.files + stats.symlinks, 1)

        results = self._measure([p for _, _, p in pending], stats, progress, _is_cancelled)

        if cancelled.is_set():
            return Err(
                RootError(
                    code=RootErrorCode.CANCELLED,
                    path=resolved_root,
                    message="Scan cancelled",
                )
            )

        for (slot, name, dir_path), result in zip(pending, results, strict=True):
            slots[slot] = Entry(name=name, path=dir_path, kind=NodeKind.DIRECTORY, size_bytes=result.size_bytes)
            errors.extend(result.errors)

        entries = [entry for entry in slots if entry is not None]
        stats.errors = len(errors)
        log.info(
            "scanned %s: %d entries, %d files, %d directories, %d errors",
            resolved_root,
            len(entries),
            stats.files,
            stats.directories,
            stats.errors,
        )
        return Ok(ScanReport(root=resolved_root, entries=entries, errors=errors, stats=stats))
