from __future__ import annotations

from typing import Protocol

from dirsize.models.scan import CancelCheck, ProgressCallback, ScanResult
from dirsize.scan._base import ScannerBase, resolve_root
from dirsize.scan.serial_scanner import SerialScanner
from dirsize.scan.threaded_scanner import ThreadedScanner
from dirsize.scan.walker import read_dir, walk
from dirsize.services.fs import DEFAULT_FS, FileSystem

SCANNER_NAMES = ("auto", "serial", "threaded")


class Scanner(Protocol):
    def scan(
        self,
        path: str,
        progress_callback: ProgressCallback | None = None,
        cancel_check: CancelCheck | None = None,
    ) -> ScanResult: ...


def default_scanner(workers: int = 4, fs: FileSystem = DEFAULT_FS) -> ScannerBase:
    """Return the threaded scanner when more than one worker is requested, else the serial one."""
    if workers > 1:
        return ThreadedScanner(workers=workers, fs=fs)
    return SerialScanner(fs=fs)


def create_scanner(name: str, workers: int = 4, fs: FileSystem = DEFAULT_FS) -> ScannerBase:
    """Create a scanner by name.

    Valid names: ``auto``, ``serial``, ``threaded``.
    Raises ``ValueError`` for unknown names.
    """
    if name == "auto":
        return default_scanner(workers=workers, fs=fs)
    if name == "serial":
        return SerialScanner(fs=fs)
    if name == "threaded":
        return ThreadedScanner(workers=workers, fs=fs)
    msg = f"Unknown scanner: {name}. Use: {', '.join(SCANNER_NAMES)}."
    raise ValueError(msg)


def scan(
    root_path: str = ".",
    workers: int = 4,
    fs: FileSystem = DEFAULT_FS,
    progress_callback: ProgressCallback | None = None,
    cancel_check: CancelCheck | None = None,
) -> ScanResult:
    """Measure every immediate entry of *root_path*.

    ``Ok(ScanReport)`` carries the entries and the non-fatal errors;
    ``Err(RootError)`` means the root itself could not be read.
    """
    return default_scanner(workers=workers, fs=fs).scan(root_path, progress_callback, cancel_check)


__all__ = [
    "SCANNER_NAMES",
    "Scanner",
    "ScannerBase",
    "SerialScanner",
    "ThreadedScanner",
    "create_scanner",
    "default_scanner",
    "read_dir",
    "resolve_root",
    "scan",
    "walk",
]
