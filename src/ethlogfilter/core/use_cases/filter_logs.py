from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from eth_utils import to_checksum_address

from ethlogfilter.core.config import Config
from ethlogfilter.core.errors import FetchError, MarshalError
from ethlogfilter.core.interfaces import ILogsProvider
from ethlogfilter.core.models import LogRecord
from ethlogfilter.core.query import FilterQuery, build


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


@dataclass(kw_only=True)
class FilterLogsOutput:
    """Result of one run: the query sent, what came back and what was kept."""

    query: FilterQuery
    fetched: int
    logs: list[LogRecord]
    payload: str


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


async def fetch(client: ILogsProvider, query: FilterQuery) -> list[LogRecord]:
    """Run the single eth_getLogs call; every failure becomes FetchError."""
    try:
        return await client.filter_logs(query)
    except FetchError:
        raise
    except Exception as e:
        raise FetchError(f"failed to filterLogs: {type(e).__name__}: {e}") from e


def filter_by_tx_hashes(logs: Sequence[LogRecord], tx_hashes: Iterable[str]) -> list[LogRecord]:
    """Keep logs whose transaction hash is in `tx_hashes` (case-insensitive).

    An empty `tx_hashes` keeps everything.
    """
    wanted = {h.lower() for h in tx_hashes}
    if not wanted:
        return list(logs)
    return [log for log in logs if log.tx_hash.lower() in wanted]


def marshal_logs(logs: Sequence[LogRecord]) -> str:
    """Serialize logs as a compact JSON array."""
    try:
        return json.dumps([log.to_json_obj() for log in logs], separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise MarshalError(f"failed to marshal event logs to json: {e}") from e


def describe_filter(cfg: Config) -> list[str]:
    """Operator-facing summary of the decoded filter, one line per dimension."""
    addresses = [to_checksum_address(a) for a in cfg.addresses]
    return [
        f"Filter addresses [{' '.join(addresses)}]",
        f"Filter topics [{' '.join(cfg.topics)}]",
        f"Filter txHashes [{' '.join(cfg.tx_hashes)}]",
    ]


# ---------------------------------------------------------------------------
# Use case
# ---------------------------------------------------------------------------


async def run_filter_logs_use_case(*, config: Config, logs_provider: ILogsProvider) -> FilterLogsOutput:
    """Build the query, fetch, post-filter and serialize.

    Depends only on `ILogsProvider`; does not open or close the client.
    """
    query = build(config)
    logs = await fetch(logs_provider, query)
    kept = filter_by_tx_hashes(logs, config.tx_hashes)
    return FilterLogsOutput(
        query=query,
        fetched=len(logs),
        logs=kept,
        payload=marshal_logs(kept),
    )
