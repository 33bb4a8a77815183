"""
Tests for the procmem command-line interface.
"""

import json
from datetime import datetime, timezone
from unittest.mock import patch

import polars as pl
import pytest
import toml

from procmem.cli.main import build_parser, main_cli
from procmem.memory import aggregate_process

CAT_TEXT_LINE = "00400000-00401000 r-xp 00000000 08:01 123 /bin/cat"
ANON_LINE = "00600000-00601000 rw-p 00000000 00:00 0 "
VSYSCALL_LINE = "ffffffffff600000-ffffffffff601000 r-xp 00000000 00:00 0 [vsyscall]"


@pytest.fixture
def cli_config(temp_dir, cat_process, sample_config_data):
    """A config file pointing at the fake procfs, with the root check disabled."""
    sample_config_data["general"]["proc_root"] = str(cat_process.root)
    sample_config_data["general"]["require_root"] = False
    path = temp_dir / "cli_config.toml"
    with open(path, "w") as f:
        toml.dump({"monitor": sample_config_data}, f)
    return path


@pytest.mark.unit
class TestArgumentParsing:
    """Test cases for the argument parser."""

    def test_name_or_pid_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_name_and_pid_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--name", "cat", "--pid", "1"])

    def test_defaults(self):
        args = build_parser().parse_args(["-n", "cat"])

        assert args.name == "cat"
        assert args.chunks is False
        assert args.output is None
        assert args.no_root_check is False


@pytest.mark.integration
class TestMainCli:
    """End-to-end runs of main_cli against a fake procfs."""

    def test_sample_by_name(self, cli_config, capsys):
        main_cli(["--config", str(cli_config), "--name", "cat"])

        out = capsys.readouterr().out
        assert "for pid 4242" in out
        assert "/bin/cat" in out
        assert out.splitlines()[-1].split() == ["8192", "8.0", "Total"]

    def test_sample_by_pid(self, cli_config, capsys):
        main_cli(["--config", str(cli_config), "--pid", "4242", "--top", "1"])

        out = capsys.readouterr().out
        assert "... 1 more mappings" in out

    def test_chunks_mode(self, cli_config, capsys):
        main_cli(["--config", str(cli_config), "--name", "cat", "--chunks"])

        out = capsys.readouterr().out
        assert "/bin/cat (1 chunks)" in out
        assert "anonymous (1 chunks)" in out

    def test_output_json(self, cli_config, temp_dir):
        output = temp_dir / "out" / "cat.json"

        main_cli(
            ["--config", str(cli_config), "-n", "cat", "-o", str(output), "--format", "json"]
        )

        data = json.loads(output.read_text())
        assert data["pid"] == 4242
        assert data["sizes"] == {"/bin/cat": 4096, "anonymous": 4096, "Total": 8192}

    def test_output_parquet(self, cli_config, temp_dir):
        output = temp_dir / "cat.parquet"

        main_cli(["--config", str(cli_config), "-n", "cat", "-o", str(output)])

        df = pl.read_parquet(output)
        assert df["path"].to_list() == ["/bin/cat", "anonymous", "Total"]

    def test_proc_root_flag_overrides_config(self, cli_config, temp_dir):
        empty_root = temp_dir / "empty_proc"
        empty_root.mkdir()

        with pytest.raises(SystemExit) as exc_info:
            main_cli(
                ["--config", str(cli_config), "-n", "cat", "--proc-root", str(empty_root)]
            )

        assert exc_info.value.code == 2

    def test_process_not_found(self, cli_config):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(cli_config), "--name", "no-such-process"])

        assert exc_info.value.code == 2

    def test_unknown_pid(self, cli_config):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(cli_config), "--pid", "999999"])

        assert exc_info.value.code == 2

    def test_non_root_refused(self, sample_config_data, cat_process, temp_dir):
        sample_config_data["general"]["proc_root"] = str(cat_process.root)
        path = temp_dir / "strict.toml"
        with open(path, "w") as f:
            toml.dump({"monitor": sample_config_data}, f)

        with patch("procmem.system.privileges.psutil.Process") as mock_process:
            mock_process.return_value.uids.return_value.effective = 1000
            with pytest.raises(SystemExit) as exc_info:
                main_cli(["--config", str(path), "--name", "cat"])

        assert exc_info.value.code == 3

    def test_no_root_check_flag(self, cat_process, sample_config_data, temp_dir, capsys):
        sample_config_data["general"]["proc_root"] = str(cat_process.root)
        path = temp_dir / "strict.toml"
        with open(path, "w") as f:
            toml.dump({"monitor": sample_config_data}, f)

        with patch("procmem.system.privileges.psutil.Process") as mock_process:
            mock_process.return_value.uids.return_value.effective = 1000
            main_cli(["--config", str(path), "--name", "cat", "--no-root-check"])

        assert "Total" in capsys.readouterr().out
        mock_process.return_value.uids.assert_not_called()

    @pytest.mark.parametrize(
        "extra",
        [["--pid", "abc"], ["--pid", "0"], ["--name", "  "], ["-n", "cat", "--top", "0"]],
    )
    def test_invalid_arguments(self, cli_config, extra):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(cli_config), *extra])

        assert exc_info.value.code == 4

    def test_missing_proc_root(self, cli_config, temp_dir):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(
                ["--config", str(cli_config), "-n", "cat", "--proc-root", str(temp_dir / "nope")]
            )

        assert exc_info.value.code == 4

    def test_invalid_config(self, temp_dir):
        path = temp_dir / "bad.toml"
        path.write_text('[monitor.general]\nlog_level = "LOUD"\n')

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(path), "--name", "cat"])

        assert exc_info.value.code == 4

    def test_missing_config(self, temp_dir):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(temp_dir / "nope.toml"), "--name", "cat"])

        assert exc_info.value.code == 4

    def test_malformed_maps_exits_with_environment_code(self, cli_config, cat_process):
        cat_process.add_process(5000, "broken", maps_lines=["not a maps line"])

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(cli_config), "--name", "broken"])

        assert exc_info.value.code == 1

    def test_chunks_output_keeps_indeterminate_regions(self, cli_config, cat_process, temp_dir):
        cat_process.add_process(
            4300,
            "vcat",
            maps_lines=[CAT_TEXT_LINE, ANON_LINE, VSYSCALL_LINE],
            memory={0x400000: b"T" * 0x1000, 0x600000: b"A" * 0x1000},
        )
        entered = []

        def timed_aggregate(*args, **kwargs):
            entered.append(datetime.now(timezone.utc))
            return aggregate_process(*args, **kwargs)

        chunks_out = temp_dir / "chunks.json"
        sizes_out = temp_dir / "sizes.json"
        with patch("procmem.cli.main.aggregate_process", side_effect=timed_aggregate):
            main_cli(
                ["--config", str(cli_config), "-n", "vcat", "--chunks",
                 "-o", str(chunks_out), "--format", "json"]
            )
        main_cli(["--config", str(cli_config), "-n", "vcat", "-o", str(sizes_out), "--format", "json"])

        chunks = json.loads(chunks_out.read_text())
        sizes = json.loads(sizes_out.read_text())
        assert chunks["indeterminate_regions"] == 1
        assert chunks["indeterminate_regions"] == sizes["indeterminate_regions"]
        assert chunks["sizes"] == sizes["sizes"]
        assert datetime.fromisoformat(chunks["sample_time"]) <= entered[0]

    def test_process_exiting_before_maps_read(self, cli_config, cat_process):
        (cat_process.root / "4242" / "maps").unlink()

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(cli_config), "--pid", "4242"])

        assert exc_info.value.code == 2
