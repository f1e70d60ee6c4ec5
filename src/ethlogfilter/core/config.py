"""Config schema and CLI-over-file overlay.

`FIELDS` is the single declaration both parsers work from: the click options
of the CLI and the YAML key mapping of the config loader are derived from it,
so identical keys always resolve to identical fields.

Zero values mean "unset": "" for strings, [] for lists, 0 for block numbers.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Literal

from eth_utils import decode_hex, is_0x_prefixed
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

UINT64_MAX = 2**64 - 1
ADDRESS_SIZE = 20
WORD_SIZE = 32

FieldKind = Literal["path", "flag", "url", "hex_list", "block"]


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldSpec:
    """One tunable: where it may come from and how it is parsed."""

    name: str
    flags: tuple[str, ...]
    kind: FieldKind
    help: str
    metavar: str | None = None
    file_key: str | None = None  # None => CLI only
    hex_size: int = 0  # expected byte length for hex_list fields

    @property
    def cli_only(self) -> bool:
        return self.file_key is None


FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(
        "config_file_path",
        ("-c", "--config"),
        "path",
        "Config file to read",
        metavar="FILE",
    ),
    FieldSpec(
        "verbose",
        ("-v", "--verbose"),
        "flag",
        "Verbose output (CLI arg only, placing this in config file won't work)",
    ),
    FieldSpec(
        "output_file",
        ("-o", "--outfile"),
        "path",
        "Write JSON output to this file",
        metavar="FILE",
    ),
    FieldSpec(
        "node_url",
        ("-n", "--node-url"),
        "url",
        "HTTP or WS URL of an Ethereum node",
        metavar="NODE_URL",
        file_key="node_url",
    ),
    FieldSpec(
        "addresses",
        ("-a", "--addresses"),
        "hex_list",
        "Contract addresses (OR)",
        metavar="ADDR",
        file_key="addresses",
        hex_size=ADDRESS_SIZE,
    ),
    FieldSpec(
        "topics",
        ("--topics",),
        "hex_list",
        "Log topics matched at position 0 (OR)",
        metavar="TOPIC",
        file_key="topics",
        hex_size=WORD_SIZE,
    ),
    FieldSpec(
        "tx_hashes",
        ("-x", "--tx-hashes"),
        "hex_list",
        "Transaction hashes (OR)",
        metavar="HASH",
        file_key="tx_hashes",
        hex_size=WORD_SIZE,
    ),
    FieldSpec(
        "from_block",
        ("-f", "--from-block"),
        "block",
        "Filter from block",
        metavar="FROM_BLOCK",
        file_key="from_block",
    ),
    FieldSpec(
        "to_block",
        ("-t", "--to-block"),
        "block",
        "Filter to block",
        metavar="TO_BLOCK",
        file_key="to_block",
    ),
    FieldSpec(
        "log_block",
        ("-b", "--block"),
        "block",
        "Filter logs from this block (overwrites FROM_BLOCK and TO_BLOCK)",
        metavar="LOG_BLOCK",
        file_key="block",
    ),
)


def field_spec(name: str) -> FieldSpec:
    """Return the schema entry for a Config field name."""
    for spec in FIELDS:
        if spec.name == name:
            return spec
    raise KeyError(name)


def file_keys() -> dict[str, str]:
    """Map YAML keys to Config field names (CLI-only fields excluded)."""
    return {spec.file_key: spec.name for spec in FIELDS if spec.file_key is not None}


def cli_only_fields() -> tuple[str, ...]:
    return tuple(spec.name for spec in FIELDS if spec.cli_only)


# ---------------------------------------------------------------------------
# Value parsers (shared by the YAML loader and the CLI)
# ---------------------------------------------------------------------------


def normalize_hex(value: Any, size: int) -> str:
    """Validate a 0x-prefixed hex string of exactly `size` bytes; return it lowercased."""
    if not isinstance(value, str) or not is_0x_prefixed(value):
        raise ValueError(f"{value!r} is not a 0x-prefixed hex string")
    try:
        raw = decode_hex(value)
    except ValueError as e:
        raise ValueError(f"{value!r} is not valid hex: {e}") from e
    if len(raw) != size:
        raise ValueError(f"{value!r} is {len(raw)} bytes, expected {size}")
    return value.lower()


def split_hex_values(values: Iterable[str]) -> list[str]:
    """Flatten repeated and comma-separated CLI values into one list."""
    out: list[str] = []
    for v in values:
        out.extend(part.strip() for part in v.split(",") if part.strip())
    return out


def parse_block_number(value: Any) -> int:
    """Parse a block number given as int, decimal string or hex quantity."""
    if isinstance(value, bool):
        raise ValueError("block number cannot be boolean")
    if isinstance(value, str):
        raw = value.strip()
        try:
            value = int(raw, 16) if raw.lower().startswith("0x") else int(raw, 10)
        except ValueError as e:
            raise ValueError(f"{raw!r} is not a block number") from e
    if not isinstance(value, int):
        raise ValueError(f"{value!r} is not a block number")
    if not 0 <= value <= UINT64_MAX:
        raise ValueError(f"block number {value} is outside [0, {UINT64_MAX}]")
    return value


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class Config(BaseModel):
    """Every tunable of a run. Built from the file and from argv, then merged."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    config_file_path: str = ""
    verbose: bool = False
    output_file: str = ""

    node_url: str = ""
    addresses: list[str] = []
    topics: list[str] = []
    tx_hashes: list[str] = []
    from_block: int = 0
    to_block: int = 0
    log_block: int = 0

    @field_validator("config_file_path", "output_file", "node_url", mode="before")
    @classmethod
    def _none_as_empty_str(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("addresses", "topics", "tx_hashes", mode="before")
    @classmethod
    def _hex_list(cls, v: Any, info: ValidationInfo) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple)):
            raise ValueError("expected a list of hex strings")
        size = field_spec(info.field_name).hex_size
        return [normalize_hex(item, size) for item in v]

    @field_validator("from_block", "to_block", "log_block", mode="before")
    @classmethod
    def _block(cls, v: Any) -> int:
        return 0 if v is None else parse_block_number(v)

    @classmethod
    def empty(cls) -> Config:
        """Return the all-zero config."""
        return cls()


# ---------------------------------------------------------------------------
# Overlay
# ---------------------------------------------------------------------------


def resolve(file_cfg: Config | None, cli_cfg: Config | None) -> Config:
    """Overlay `cli_cfg` on `file_cfg`: a CLI field wins when it is non-zero.

    - verbose, config_file_path, output_file: CLI value, always.
    - node_url: CLI if non-empty, else file.
    - addresses, topics, tx_hashes: whole CLI list if non-empty, else file list.
    - from_block, to_block, log_block: CLI if non-zero, else file.
    """
    file_cfg = file_cfg or Config.empty()
    cli_cfg = cli_cfg or Config.empty()

    return Config(
        config_file_path=cli_cfg.config_file_path,
        verbose=cli_cfg.verbose,
        output_file=cli_cfg.output_file,
        node_url=cli_cfg.node_url or file_cfg.node_url,
        addresses=list(cli_cfg.addresses or file_cfg.addresses),
        topics=list(cli_cfg.topics or file_cfg.topics),
        tx_hashes=list(cli_cfg.tx_hashes or file_cfg.tx_hashes),
        from_block=cli_cfg.from_block or file_cfg.from_block,
        to_block=cli_cfg.to_block or file_cfg.to_block,
        log_block=cli_cfg.log_block or file_cfg.log_block,
    )
