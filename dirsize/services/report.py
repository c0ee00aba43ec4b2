from __future__ import annotations

from collections.abc import Iterable

from dirsize.models.enums import Rounding, UnitBase
from dirsize.models.scan import Entry, ScanError
from dirsize.services.formatting import format_bytes

TOTAL_LABEL = "Total"


def sort_entries(entries: Iterable[Entry]) -> list[Entry]:
    """Ascending by size; equal sizes fall back to name so output is reproducible."""
    return sorted(entries, key=lambda e: (e.size_bytes, e.name))


def printable(text: str) -> str:
    """Replace undecodable bytes smuggled in as surrogates (os.fsdecode) with U+FFFD."""
    try:
        raw = text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        # Surrogates outside the escape range cannot map back to bytes.
        raw = text.encode("utf-8", "replace")
    return raw.decode("utf-8", "replace")


def display_name(entry: Entry) -> str:
    name = printable(entry.name)
    return f"{name}/" if entry.is_dir else name


def format_error(error: ScanError) -> str:
    return f"  {printable(error.path)}: {error.cause.label} ({printable(error.message)})"


def _split_size(size: int, base: UnitBase, rounding: Rounding) -> tuple[str, str]:
    number, _, unit = format_bytes(size, base, rounding).rpartition(" ")
    return number, unit


def format_report(
    entries: Iterable[Entry],
    errors: Iterable[ScanError] = (),
    *,
    base: UnitBase = UnitBase.BINARY,
    rounding: Rounding = Rounding.HALF_EVEN,
    show_total: bool = False,
) -> list[str]:
    ordered = sort_entries(entries)
    rows = [(display_name(entry), entry.size_bytes) for entry in ordered]
    if show_total:
        rows.append((TOTAL_LABEL, sum(entry.size_bytes for entry in ordered)))

    cells = [(name, *_split_size(size, base, rounding)) for name, size in rows]
    name_width = max((len(name) for name, _, _ in cells), default=0)
    number_width = max((len(number) for _, number, _ in cells), default=0)
    lines = [f"{name.ljust(name_width)}  {number.rjust(number_width)} {unit}" for name, number, unit in cells]

    failed = sorted(errors, key=lambda e: e.path)
    if failed:
        if lines:
            lines.append("")
        noun = "path" if len(failed) == 1 else "paths"
        lines.append(f"{len(failed)} {noun} could not be fully read:")
        lines.extend(format_error(error) for error in failed)
    return lines
