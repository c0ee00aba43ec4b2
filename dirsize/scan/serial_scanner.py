from __future__ import annotations

from typing import override

from dirsize.models.scan import CancelCheck, ScanStats, WalkResult
from dirsize.scan._base import Progress, ScannerBase
from dirsize.scan.walker import DirListing, walk
from dirsize.services.fs import DEFAULT_FS, FileSystem


class SerialScanner(ScannerBase):
    """Single-threaded depth-first scan: one ``walk`` per top-level directory."""

    def __init__(self, fs: FileSystem = DEFAULT_FS) -> None:
        super().__init__(workers=1, fs=fs)

    @override
    def _measure(
        self,
        dirs: list[str],
        stats: ScanStats,
        progress: Progress,
        is_cancelled: CancelCheck,
    ) -> list[WalkResult]:
        def on_listing(path: str, listing: DirListing) -> None:
            stats.files += listing.files
            stats.symlinks += listing.symlinks
            stats.directories += 1
            progress.advance(path, listing.files + listing.symlinks, 1)

        results: list[WalkResult] = []
        for path in dirs:
            if is_cancelled():
                break
            results.append(walk(path, self._fs, on_listing=on_listing, cancel_check=is_cancelled))
        # Pad so the base class can still zip results when cancelled early.
        results.extend(WalkResult(0) for _ in range(len(dirs) - len(results)))
        return results
