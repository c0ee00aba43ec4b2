from __future__ import annotations

from dirsize.models.enums import ErrorCause, Rounding, UnitBase
from dirsize.services.report import display_name, format_report, printable, sort_entries
from tests.factories import make_dir, make_error, make_file


class TestSortEntries:
    def test_ascending_by_size(self) -> None:
        entries = [make_file("big", 300), make_file("small", 1), make_dir("mid", 20)]
        assert [e.name for e in sort_entries(entries)] == ["small", "mid", "big"]

    def test_ties_broken_by_name(self) -> None:
        entries = [make_file("zeta", 5), make_dir("alpha", 5), make_file("mu", 5)]
        assert [e.name for e in sort_entries(entries)] == ["alpha", "mu", "zeta"]

    def test_idempotent(self) -> None:
        entries = [make_file("b", 2), make_file("a", 2), make_file("c", 1)]
        once = sort_entries(entries)
        assert sort_entries(once) == once


class TestDisplayName:
    def test_directory_gets_trailing_slash(self) -> None:
        assert display_name(make_dir("src")) == "src/"
        assert display_name(make_file("README")) == "README"


class TestFormatReport:
    def test_lines_sorted_and_aligned(self) -> None:
        entries = [make_dir("c", 10000), make_file("b", 2500), make_file("a", 500)]
        assert format_report(entries) == [
            "a   500.000 B",
            "b     2.441 KiB",
            "c/    9.766 KiB",
        ]

    def test_zero_size(self) -> None:
        assert format_report([make_file("empty", 0)]) == ["empty  0.000 B"]

    def test_total_line(self) -> None:
        lines = format_report([make_file("a", 512), make_file("b", 512)], show_total=True)
        assert lines[-1] == "Total    1.000 KiB"
        assert lines[0].startswith("a ")

    def test_decimal_base(self) -> None:
        lines = format_report([make_file("a", 1000)], base=UnitBase.DECIMAL)
        assert lines == ["a  1.000 kB"]

    def test_rounding_passed_through(self) -> None:
        entries = [make_file("a", 1_000_500)]
        assert format_report(entries, base=UnitBase.DECIMAL, rounding=Rounding.HALF_UP) == ["a  1.001 MB"]

    def test_error_section_after_entries(self) -> None:
        errors = [
            make_error("/r/zz"),
            make_error("/r/aa/gone", ErrorCause.NOT_FOUND, "No such file or directory"),
        ]
        lines = format_report([make_file("a", 1)], errors)
        assert lines == [
            "a  1.000 B",
            "",
            "2 paths could not be fully read:",
            "  /r/aa/gone: not found (No such file or directory)",
            "  /r/zz: permission denied (Permission denied)",
        ]

    def test_single_error_without_entries(self) -> None:
        lines = format_report([], [make_error("/r/x")])
        assert lines == ["1 path could not be fully read:", "  /r/x: permission denied (Permission denied)"]

    def test_empty(self) -> None:
        assert format_report([]) == []


class TestUndecodableNames:
    def test_surrogate_escaped_name_replaced(self) -> None:
        lines = format_report([make_file("bad\udcffname", 2)])
        assert lines == ["bad\ufffdname  2.000 B"]
        lines[0].encode("utf-8")

    def test_directory_name_keeps_slash(self) -> None:
        assert display_name(make_dir("d\udce9j\udce0")) == "d\ufffdj\ufffd/"

    def test_error_path_replaced(self) -> None:
        lines = format_report([], [make_error("/r/x\udcff")])
        assert lines[-1] == "  /r/x\ufffd: permission denied (Permission denied)"

    def test_unpaired_surrogate_does_not_raise(self) -> None:
        assert printable("a\ud800b") == "a?b"
