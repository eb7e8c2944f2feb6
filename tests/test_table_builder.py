"""Tests for StatusTableBuilder"""
import pytest

from git_dir_status.exceptions import ParseError
from git_dir_status.formatters import display_width
from git_dir_status.models.status import FastForward
from git_dir_status.services.table_builder import StatusTableBuilder


@pytest.fixture
def builder():
    return StatusTableBuilder()


class TestWellFormedOutput:
    """Test parsing of records as the status script writes them."""

    def test_two_records(self, builder, status_output):
        """Test the table holds exactly the reported paths."""
        snapshot = builder.parse(status_output)

        assert set(snapshot.table) == {"/repo/a", "/repo/b"}
        a = snapshot.table["/repo/a"]
        assert (a.branch, a.remote, a.fast_forward) == ("main", "origin", FastForward.TRUE)
        b = snapshot.table["/repo/b"]
        assert (b.branch, b.remote, b.fast_forward) == ("dev", "origin", FastForward.FALSE)

    def test_widths_are_maximum_per_field(self, builder, status_output):
        """Test widths follow the widest value of each field."""
        widths = builder.parse(status_output).widths

        assert widths.branch == display_width("main")
        assert widths.remote == display_width("origin")
        assert widths.fast_forward == display_width("false")

    def test_widths_match_every_record(self, builder):
        """Test widths equal the maximum over all records for every field."""
        raw = "".join(
            f"path /r/{i}\nbranch {'x' * i}\nremote {'y' * (7 - i)}\nff {ff}\n\n"
            for i, ff in enumerate(["true", "missing", "false", "true"], start=1)
        )
        snapshot = builder.parse(raw)

        for name in ("branch", "remote", "fast_forward"):
            expected = max(display_width(r.field_text(name)) for r in snapshot.table.values())
            assert snapshot.widths[name] == expected

    def test_wide_characters_count_cells(self, builder):
        """Test non-ASCII names are measured in terminal cells."""
        snapshot = builder.parse("path /r/x\nbranch 機能\nremote origin\nff true\n\n")
        assert snapshot.widths.branch == 4

    def test_last_record_without_blank_line(self, builder):
        """Test the final record is kept without a trailing blank line."""
        snapshot = builder.parse("path /r/x\nbranch main\nremote origin\nff true")
        assert "/r/x" in snapshot.table

    def test_empty_output(self, builder):
        """Test no records gives an empty table with zero widths."""
        snapshot = builder.parse("")
        assert len(snapshot) == 0
        assert snapshot.widths.to_dict() == {"branch": 0, "remote": 0, "fast_forward": 0}

    def test_table_is_read_only(self, builder, status_output):
        """Test the table cannot be modified after construction."""
        snapshot = builder.parse(status_output)
        with pytest.raises(TypeError):
            snapshot.table["/repo/c"] = snapshot.table["/repo/a"]


class TestPermissiveParsing:
    """Test tolerance for incomplete and unexpected records."""

    def test_unknown_keys_are_ignored(self, builder):
        snapshot = builder.parse("path /r/x\nbranch main\nupstream-sha abc123\nff true\n\n")
        assert snapshot.table["/r/x"].branch == "main"

    def test_missing_fields_default_to_empty(self, builder):
        """Test absent fields become empty strings and ff becomes missing."""
        record = builder.parse("path /r/x\n\n").table["/r/x"]
        assert record.branch == ""
        assert record.remote == ""
        assert record.fast_forward == FastForward.MISSING

    def test_key_without_value(self, builder):
        """Test a detached HEAD record with empty branch and remote."""
        record = builder.parse("path /r/x\nbranch \nremote\nff missing\n\n").table["/r/x"]
        assert record.branch == ""
        assert record.remote == ""

    def test_unknown_fast_forward_value(self, builder):
        record = builder.parse("path /r/x\nff maybe\n\n").table["/r/x"]
        assert record.fast_forward == FastForward.MISSING

    def test_duplicate_paths_last_wins(self, builder):
        """Test a repeated path keeps the last record and its widths."""
        raw = (
            "path /r/x\nbranch a-very-long-branch\nff true\n\n"
            "path /r/x/\nbranch dev\nff false\n\n"
        )
        snapshot = builder.parse(raw)

        assert list(snapshot.table) == ["/r/x"]
        assert snapshot.table["/r/x"].branch == "dev"
        assert snapshot.widths.branch == 3

    def test_trailing_slash_is_normalized(self, builder):
        snapshot = builder.parse("path /r/x/\nbranch main\n\n")
        assert snapshot.lookup("/r/x") is snapshot.lookup("/r/x/")

    def test_paths_with_spaces(self, builder):
        snapshot = builder.parse("path /r/my project\nbranch main\n\n")
        assert "/r/my project" in snapshot.table

    def test_extra_blank_lines_and_crlf(self, builder):
        snapshot = builder.parse("\n\npath /r/x\r\nbranch main\r\n\r\n\n\npath /r/y\n\n")
        assert set(snapshot.table) == {"/r/x", "/r/y"}
        assert snapshot.table["/r/x"].branch == "main"


class TestMalformedOutput:
    """Test input that is not a record sequence."""

    def test_line_without_key(self, builder):
        raw = "path /r/x\n: garbage\n\n"
        with pytest.raises(ParseError) as exc_info:
            builder.parse(raw)
        assert exc_info.value.raw_text == raw
        assert exc_info.value.line_number == 2

    def test_record_without_path(self, builder):
        with pytest.raises(ParseError, match="without a path"):
            builder.parse("branch main\nff true\n\n")

    def test_relative_path(self, builder):
        with pytest.raises(ParseError, match="not absolute"):
            builder.parse("path repo/a\nbranch main\n\n")

    def test_shell_error_text(self, builder):
        """Test stray diagnostics on stdout are rejected."""
        with pytest.raises(ParseError):
            builder.parse("fatal: not a git repository (or any of the parent directories)\n")


class TestAsyncBuild:
    """Test the asynchronous entry point."""

    async def test_build_returns_snapshot(self, builder, status_output):
        snapshot = await builder.build(status_output)
        assert set(snapshot.table) == {"/repo/a", "/repo/b"}

    async def test_build_raises_parse_error(self, builder):
        with pytest.raises(ParseError):
            await builder.build("Not A Record\n")
