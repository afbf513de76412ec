# =============================================================================
# test_scanner.py - Scan Session Tests
# =============================================================================
# Tests for file scanning, directory traversal, counters and report output.
#
# Test coverage includes:
#   - Source file selection by suffix
#   - Recursive and non-recursive directory handling
#   - Path errors (reported, never fatal)
#   - Line counting independent of options
#   - Report and summary formatting
#   - Repeatability of a scan
# =============================================================================

import errno
from pathlib import Path

import pytest

from kernelscan.errors import ScanPathError
from kernelscan.scanner import FileReport, ScanOptions, ScanSession, ScanStats


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """
    A small driver tree:

        drivers/
            a.c        two messages
            b.h        one message
            notes.txt  ignored
            sub/
                c.cpp  one message, one call without a string
    """
    root = tmp_path / "drivers"
    sub = root / "sub"
    sub.mkdir(parents=True)

    (root / "a.c").write_text(
        "/* driver a */\n"
        "static int probe(void)\n"
        "{\n"
        '\tdev_err(dev, "probe " "failed\\n");\n'
        '\tpr_info("ok");\n'
        "}\n"
    )
    (root / "b.h").write_text('#define X 1\nprintk(KERN_INFO "b");\n')
    (root / "notes.txt").write_text('printk("not C");\n')
    (sub / "c.cpp").write_text('pr_debug(x);\nprintf("c %d\\n", 1);\n')
    return root


def scan_all(paths, **options) -> tuple[ScanSession, list[FileReport]]:
    session = ScanSession(ScanOptions(**options))
    reports = list(session.scan_paths([str(p) for p in paths]))
    return session, reports


# =============================================================================
# File Selection
# =============================================================================

class TestFileSelection:
    """Test which files are scanned."""

    def test_single_file(self, source_tree):
        """A .c file is scanned and reported."""
        path = source_tree / "a.c"
        session, reports = scan_all([path])
        assert len(reports) == 1
        assert reports[0].path == str(path)
        assert [s.text for s in reports[0].statements] == [
            'dev_err(dev, "probe failed\\n")',
            'pr_info("ok")',
        ]
        assert session.stats.files == 1

    @pytest.mark.parametrize("name", ["x.c", "x.h", "x.cpp"])
    def test_source_suffixes(self, tmp_path, name):
        """.c, .h and .cpp files are scanned."""
        path = tmp_path / name
        path.write_text('printk("m");\n')
        session, reports = scan_all([path])
        assert session.stats.files == 1
        assert session.stats.statements == 1

    @pytest.mark.parametrize("name", ["x.txt", "x.cc", "x.hpp", "Makefile", "x.c.orig"])
    def test_other_files_ignored(self, tmp_path, name):
        """Other files are neither scanned nor counted."""
        path = tmp_path / name
        path.write_text('printk("m");\n')
        session, reports = scan_all([path])
        assert reports == []
        assert session.stats == ScanStats(0, 0, 0)

    def test_custom_extensions(self, tmp_path):
        """The suffix list can be configured."""
        path = tmp_path / "x.cc"
        path.write_text('printk("m");\n')
        session, reports = scan_all([path], extensions=(".cc",))
        assert session.stats.files == 1

    def test_file_without_matches_is_counted(self, tmp_path):
        """Files with no statements still count as scanned."""
        path = tmp_path / "empty.c"
        path.write_text("int main(void)\n{\n\treturn 0;\n}\n")
        session, reports = scan_all([path])
        assert session.stats.files == 1
        assert session.stats.lines == 4
        assert reports[0].format() == ""

    def test_invalid_utf8_is_tolerated(self, tmp_path):
        """Undecodable bytes do not stop the scan."""
        path = tmp_path / "latin.c"
        path.write_bytes(b'/* caf\xe9 */\nprintk("ok");\n')
        session, reports = scan_all([path])
        assert [s.text for s in reports[0].statements] == ['printk("ok")']

    def test_undecodable_bytes_are_kept(self, tmp_path):
        """Bytes that do not decode survive into the message text."""
        path = tmp_path / "latin.c"
        path.write_bytes(b'printk("caf\xe9");\n')
        _, reports = scan_all([path])
        statement = reports[0].statements[0]
        assert statement.messages == ("caf\udce9",)
        assert statement.text.encode("utf-8", "surrogateescape") == b'printk("caf\xe9")'


# =============================================================================
# Directories
# =============================================================================

class TestDirectories:
    """Test directory traversal."""

    def test_directory_skipped_without_recursive(self, source_tree):
        """Directories are skipped unless recursive is set."""
        session, reports = scan_all([source_tree])
        assert reports == []
        assert session.stats.files == 0
        assert session.errors == []

    def test_recursive_scan(self, source_tree):
        """Recursive scans descend in sorted order."""
        session, reports = scan_all([source_tree], recursive=True)
        assert [Path(r.path).name for r in reports] == ["a.c", "b.h", "c.cpp"]
        assert session.stats.files == 3
        assert session.stats.statements == 4

    def test_recursive_line_count(self, source_tree):
        """Lines scanned covers only the scanned files."""
        session, _ = scan_all([source_tree], recursive=True)
        expected = sum(
            p.read_text().count("\n")
            for p in source_tree.rglob("*")
            if p.suffix in (".c", ".h", ".cpp")
        )
        assert session.stats.lines == expected


# =============================================================================
# Path Errors
# =============================================================================

class TestPathErrors:
    """Test that inaccessible paths are reported and skipped."""

    def test_missing_path(self, tmp_path):
        """A missing path is recorded, not raised."""
        missing = tmp_path / "nope.c"
        session, reports = scan_all([missing])
        assert reports == []
        assert len(session.errors) == 1
        error = session.errors[0]
        assert isinstance(error, ScanPathError)
        assert error.errno == errno.ENOENT
        assert str(error).startswith(f"Cannot stat {missing}, errno={errno.ENOENT} (")

    def test_missing_path_does_not_stop_run(self, tmp_path, source_tree):
        """Scanning continues with the remaining paths."""
        session, reports = scan_all([tmp_path / "nope.c", source_tree / "a.c"])
        assert len(session.errors) == 1
        assert len(reports) == 1
        assert session.stats.files == 1

    def test_error_is_logged(self, tmp_path, caplog):
        """Path errors are logged at ERROR level."""
        scan_all([tmp_path / "nope.c"])
        assert any(
            r.levelname == "ERROR" and "Cannot stat" in r.getMessage()
            for r in caplog.records
        )


# =============================================================================
# Counters
# =============================================================================

class TestCounters:
    """Test the session counters."""

    SOURCE = (
        "// comment line\n"
        'printk("a\\n"\n'
        '       "b");\n'
        "#define LONG_MACRO(x) \\\n"
        "\tdo { } while (0)\n"
        "/* multi\n"
        "   line */\n"
        "char *s = \"x\\\ny\";\n"
    )

    @pytest.mark.parametrize("escape_strip", [False, True])
    def test_lines_equal_newlines(self, tmp_path, escape_strip):
        """Lines scanned equals the newline count, whatever the options."""
        first = tmp_path / "one.c"
        second = tmp_path / "two.h"
        first.write_text(self.SOURCE)
        second.write_text("a\n\n\nb")
        session, _ = scan_all([first, second], escape_strip=escape_strip)
        assert session.stats.lines == self.SOURCE.count("\n") + 3

    def test_counters_accumulate(self):
        """Counters add up over several sources."""
        session = ScanSession()
        session.scan_source('printk("a");\n', "a.c")
        session.scan_source('printk("b");\nprintk("c");\n', "b.c")
        assert session.stats == ScanStats(files=2, lines=3, statements=3)

    def test_repeatable(self, source_tree):
        """Scanning the same tree twice gives identical output and counts."""
        outputs = []
        for _ in range(2):
            session, reports = scan_all([source_tree], recursive=True, escape_strip=True)
            text = "".join(r.format() for r in reports) + session.stats.format()
            outputs.append((text, session.stats))
        assert outputs[0] == outputs[1]


# =============================================================================
# Report Formatting
# =============================================================================

class TestFormatting:
    """Test the text output."""

    def test_file_report_format(self):
        """Source header, one line per statement, then a blank line."""
        session = ScanSession()
        report = session.scan_source('dev_err("A" "B");\npr_warn("w");\n', "x.c")
        assert report.format() == 'Source: x.c\ndev_err("AB")\npr_warn("w")\n\n'

    def test_empty_report_format(self):
        """A file without statements prints nothing."""
        assert FileReport("x.c").format() == ""

    def test_summary_format(self):
        """Blank line, then the three summary lines."""
        stats = ScanStats(files=2, lines=10, statements=3)
        assert stats.format() == (
            "\n2 files scanned\n10 lines scanned\n3 statements found\n"
        )

    def test_escape_strip_in_report(self, source_tree):
        """Escape stripping changes the reported text."""
        _, reports = scan_all([source_tree / "a.c"], escape_strip=True)
        assert reports[0].statements[0].text == 'dev_err(dev, "probe failed")'
