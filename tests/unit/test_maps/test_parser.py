"""
Unit tests for maps line parsing.
"""

import pytest

from procmem.maps.parser import parse_map_line, parse_map_lines, read_map_listing
from procmem.models.regions import ANONYMOUS_PATH
from procmem.validation import AddressOverflowError, MapFormatError, ProcfsError


@pytest.mark.unit
class TestParseMapLine:
    """Test cases for parse_map_line."""

    def test_file_backed_line(self):
        region = parse_map_line("00400000-00401000 r-xp 00000000 08:01 123 /bin/cat")

        assert region.start == 0x400000
        assert region.end == 0x401000
        assert region.readable is True
        assert region.path == "/bin/cat"
        assert region.size == 4096

    def test_line_without_path_is_anonymous(self):
        region = parse_map_line("00600000-00601000 rw-p 00000000 00:00 0 ")

        assert region.start == 0x600000
        assert region.end == 0x601000
        assert region.readable is True
        assert region.path == ANONYMOUS_PATH == "anonymous"
        assert region.is_anonymous

    def test_non_readable_line(self):
        region = parse_map_line("7f0000000000-7f0000001000 ---p 00000000 00:00 0")

        assert region.readable is False
        assert region.size == 0x1000

    def test_write_only_is_not_readable(self):
        assert parse_map_line("1000-2000 -w-p 00000000 00:00 0").readable is False

    def test_bracketed_pseudo_path_is_kept_verbatim(self):
        region = parse_map_line("7ffd1000-7ffd3000 rw-p 00000000 00:00 0 [stack]")
        assert region.path == "[stack]"

    def test_only_sixth_field_is_used_as_path(self):
        region = parse_map_line(
            "7f1000000000-7f1000001000 r--p 00000000 08:01 77 /tmp/lib.so (deleted)"
        )
        assert region.path == "/tmp/lib.so"

    def test_trailing_newline_is_ignored(self):
        region = parse_map_line("00400000-00401000 r-xp 00000000 08:01 123 /bin/cat\n")
        assert region.path == "/bin/cat"

    def test_size_matches_hex_difference(self):
        region = parse_map_line("7f3a1c000000-7f3a1c021000 rw-p 00000000 00:00 0")
        assert region.size == 0x7F3A1C021000 - 0x7F3A1C000000

    def test_overflowed_bound_is_minus_one(self):
        region = parse_map_line(
            "ffffffffff600000-ffffffffff601000 --xp 00000000 00:00 0 [vsyscall]"
        )

        assert region.start == -1
        assert region.end == -1
        assert region.start_address.overflowed
        assert not region.is_size_determinate
        with pytest.raises(AddressOverflowError):
            region.size

    def test_only_end_overflows(self):
        region = parse_map_line("7fffffffffff0000-8000000000000000 r--p 00000000 00:00 0")

        assert region.start == 0x7FFFFFFFFFFF0000
        assert region.end == -1
        assert not region.is_size_determinate

    @pytest.mark.parametrize(
        "line",
        [
            "00400000 r-xp 00000000 08:01 123 /bin/cat",
            "00400000-00401000-00402000 r-xp 00000000 08:01 123 /bin/cat",
            "00400000-",
        ],
    )
    def test_address_field_must_have_two_tokens(self, line):
        with pytest.raises(MapFormatError):
            parse_map_line(line)

    def test_line_without_permissions_is_fatal(self):
        with pytest.raises(MapFormatError):
            parse_map_line("00400000-00401000")

    def test_non_hex_address_is_fatal(self):
        with pytest.raises(MapFormatError) as exc_info:
            parse_map_line("0040zz00-00401000 r-xp 00000000 08:01 123 /bin/cat")
        assert "0040zz00" in str(exc_info.value)


@pytest.mark.unit
class TestParseMapLines:
    """Test cases for parse_map_lines and read_map_listing."""

    def test_preserves_order_and_skips_blank_lines(self):
        lines = [
            "00400000-00401000 r-xp 00000000 08:01 123 /bin/cat",
            "",
            "   ",
            "00600000-00601000 rw-p 00000000 00:00 0",
        ]
        regions = list(parse_map_lines(lines))

        assert [r.path for r in regions] == ["/bin/cat", "anonymous"]

    def test_stops_at_malformed_line(self):
        regions = parse_map_lines(["00400000-00401000 r-xp 0 0 0 /bin/cat", "garbage r"])

        assert next(regions).path == "/bin/cat"
        with pytest.raises(MapFormatError):
            next(regions)

    def test_read_map_listing(self, temp_dir):
        maps = temp_dir / "maps"
        maps.write_text(
            "00400000-00401000 r-xp 00000000 08:01 123 /bin/cat\n"
            "00600000-00601000 rw-p 00000000 00:00 0\n"
        )

        lines = read_map_listing(maps)

        assert lines == [
            "00400000-00401000 r-xp 00000000 08:01 123 /bin/cat",
            "00600000-00601000 rw-p 00000000 00:00 0",
        ]

    def test_read_missing_listing_is_procfs_error(self, temp_dir):
        with pytest.raises(ProcfsError) as exc_info:
            read_map_listing(temp_dir / "missing" / "maps")
        assert exc_info.value.path.endswith("maps")
