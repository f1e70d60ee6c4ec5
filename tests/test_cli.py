import json
from pathlib import Path
from unittest.mock import AsyncMock

import click
import pytest
from click.testing import CliRunner
from eth_utils import to_checksum_address

from ethlogfilter.cli import cli, parse
from ethlogfilter.core.config import Config
from ethlogfilter.core.errors import FetchError
from ethlogfilter.core.query import FilterQuery

from conftest import ADDR_A, ADDR_B, H1, H2, H3, TOPIC_1, TOPIC_2


@pytest.fixture
def node(monkeypatch, mock_provider):
    """Replace the node client with `mock_provider` for the whole pipeline."""
    dial = AsyncMock(return_value=mock_provider)
    monkeypatch.setattr("ethlogfilter.orchestration.orchestrator.dial", dial)
    mock_provider.dial = dial
    return mock_provider


def test_parse_range_and_address():
    cfg = parse(["--node-url", "http://n:8545", "--from-block", "100", "--to-block", "200", "-a", ADDR_A])
    assert cfg == Config(node_url="http://n:8545", from_block=100, to_block=200, addresses=[ADDR_A])


def test_parse_defaults_are_zero():
    assert parse([]) == Config.empty()


def test_parse_repeated_and_comma_separated_lists():
    cfg = parse(["-a", f"{ADDR_A},{ADDR_B}", "--topics", TOPIC_1, "--topics", TOPIC_2, "-x", H1])
    assert cfg.addresses == [ADDR_A, ADDR_B]
    assert cfg.topics == [TOPIC_1, TOPIC_2]
    assert cfg.tx_hashes == [H1]


def test_parse_several_values_after_one_flag():
    assert parse(["-a", ADDR_A, ADDR_B]).addresses == [ADDR_A, ADDR_B]

    cfg = parse(["-x", H1, H2, "-n", "http://n"])
    assert cfg.tx_hashes == [H1, H2]
    assert cfg.node_url == "http://n"


def test_parse_mixes_list_forms():
    cfg = parse(["--topics", TOPIC_1, TOPIC_2, "-a", ADDR_A, "-a", ADDR_B, "-x", f"{H1},{H2}", H3, "-v"])
    assert cfg.topics == [TOPIC_1, TOPIC_2]
    assert cfg.addresses == [ADDR_A, ADDR_B]
    assert cfg.tx_hashes == [H1, H2, H3]
    assert cfg.verbose is True


def test_parse_cli_only_flags():
    cfg = parse(["-v", "-c", "/etc/e.yaml", "-o", "/tmp/o.json", "-b", "0x96"])
    assert cfg.verbose is True
    assert cfg.config_file_path == "/etc/e.yaml"
    assert cfg.output_file == "/tmp/o.json"
    assert cfg.log_block == 150


@pytest.mark.parametrize(
    "argv",
    [
        ["--from-block", "abc"],
        ["--to-block", "-1"],
        ["-a", "0x1234"],
        ["--topics", ADDR_A],
        ["--no-such-flag"],
    ],
)
def test_parse_rejects_malformed_arguments(argv):
    with pytest.raises(click.UsageError):
        parse(argv)


def test_malformed_arguments_exit_with_usage():
    result = CliRunner().invoke(cli, ["-a", "not-hex"])
    assert result.exit_code == 2
    assert "Usage:" in result.stderr


def test_cli_only_run(node, write_config, make_log):
    node.filter_logs.return_value = [make_log(H1)]
    config = write_config("")

    result = CliRunner().invoke(
        cli,
        ["-c", str(config), "--node-url", "http://n:8545", "--from-block", "100", "--to-block", "200", "-a", ADDR_A],
    )

    assert result.exit_code == 0, result.output
    node.dial.assert_awaited_once_with("http://n:8545")
    node.filter_logs.assert_awaited_once_with(FilterQuery(from_block=100, to_block=200, addresses=[ADDR_A], topics=None))
    node.aclose.assert_awaited_once()
    assert result.stdout.endswith("\n")
    assert [log["transactionHash"] for log in json.loads(result.stdout)] == [H1]


def test_several_addresses_after_one_flag_run(node, write_config):
    config = write_config("node_url: http://f:8545\n")

    result = CliRunner().invoke(cli, ["-c", str(config), "-a", ADDR_A, ADDR_B])

    assert result.exit_code == 0, result.output
    node.filter_logs.assert_awaited_once_with(FilterQuery(addresses=[ADDR_A, ADDR_B]))


def test_file_values_with_cli_node_override(node, write_config):
    config = write_config("node_url: http://f:8545\nfrom_block: 10\n")

    result = CliRunner().invoke(cli, ["-c", str(config), "--node-url", "http://c:8545"])

    assert result.exit_code == 0, result.output
    node.dial.assert_awaited_once_with("http://c:8545")
    node.filter_logs.assert_awaited_once_with(FilterQuery(from_block=10))
    assert json.loads(result.stdout) == []


def test_tx_hash_post_filter(node, write_config, make_log):
    node.filter_logs.return_value = [make_log(H1), make_log(H2), make_log(H3)]
    config = write_config(f"node_url: http://f:8545\ntx_hashes: ['{H2}']\n")

    result = CliRunner().invoke(cli, ["-c", str(config)])

    assert result.exit_code == 0, result.output
    assert [log["transactionHash"] for log in json.loads(result.stdout)] == [H2]


def test_output_file_mirrors_stdout(node, write_config, make_log, tmp_path: Path):
    node.filter_logs.return_value = [make_log(H1), make_log(H2)]
    config = write_config("node_url: http://f:8545\n")
    out = tmp_path / "out.json"

    result = CliRunner().invoke(cli, ["-c", str(config), "-o", str(out)])

    assert result.exit_code == 0, result.output
    assert out.read_bytes() == result.stdout_bytes


def test_output_file_failure_is_a_warning(node, write_config, tmp_path: Path):
    config = write_config("node_url: http://f:8545\n")

    result = CliRunner().invoke(cli, ["-c", str(config), "-o", str(tmp_path / "no" / "out.json")])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == []
    assert "failed to write JSON output" in result.stderr


def test_verbose_lines_precede_json(node, write_config):
    config = write_config(f"node_url: http://f:8545\naddresses: ['{ADDR_A}']\nverbose: false\n")

    result = CliRunner().invoke(cli, ["-c", str(config), "-v", "--topics", TOPIC_1])

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0] == f"Filter addresses [{to_checksum_address(ADDR_A)}]"
    assert lines[1] == f"Filter topics [{TOPIC_1}]"
    assert lines[2] == "Filter txHashes []"
    assert json.loads(lines[3]) == []


def test_verbose_in_file_is_ignored(node, write_config):
    config = write_config("node_url: http://f:8545\nverbose: true\n")

    result = CliRunner().invoke(cli, ["-c", str(config)])

    assert result.exit_code == 0, result.output
    assert result.stdout == "[]\n"


def test_missing_config_file_is_fatal(node, tmp_path: Path):
    result = CliRunner().invoke(cli, ["-c", str(tmp_path / "none.yaml"), "-n", "http://n:8545"])

    assert result.exit_code == 1
    assert "read config failed" in result.stderr
    node.dial.assert_not_awaited()


def test_default_config_path_is_used(node, monkeypatch, tmp_path: Path):
    config_dir = tmp_path / ".config" / "ethlogfilter"
    config_dir.mkdir(parents=True)
    (config_dir / "config.yaml").write_text("node_url: http://home:8545\n")
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

    result = CliRunner().invoke(cli, [])

    assert result.exit_code == 0, result.output
    node.dial.assert_awaited_once_with("http://home:8545")


def test_fetch_error_is_fatal(node, write_config):
    node.filter_logs.side_effect = FetchError("failed to filterLogs: boom")
    config = write_config("node_url: http://f:8545\n")

    result = CliRunner().invoke(cli, ["-c", str(config)])

    assert result.exit_code == 1
    assert result.stdout == ""
    assert "failed to filterLogs: boom" in result.stderr


def test_missing_node_url_is_fatal(write_config):
    config = write_config("from_block: 1\n")

    result = CliRunner().invoke(cli, ["-c", str(config)])

    assert result.exit_code == 1
    assert "no node URL" in result.stderr
