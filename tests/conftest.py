from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from ethlogfilter.core.models import LogRecord

ADDR_A = "0x" + "ab" * 20
ADDR_B = "0x" + "cd" * 20
TOPIC_1 = "0x" + "11" * 32
TOPIC_2 = "0x" + "22" * 32
H1 = "0x" + "a1" * 32
H2 = "0x" + "b2" * 32
H3 = "0x" + "c3" * 32


def raw_log(tx_hash: str = H1, *, block: int = 100, log_index: int = 0, address: str = ADDR_A) -> dict[str, Any]:
    """One eth_getLogs result element, as a node renders it."""
    return {
        "address": address,
        "topics": [TOPIC_1],
        "data": "0x" + "00" * 31 + "64",
        "blockNumber": hex(block),
        "transactionHash": tx_hash,
        "transactionIndex": "0x0",
        "blockHash": "0x" + "ee" * 32,
        "logIndex": hex(log_index),
        "removed": False,
    }


@pytest.fixture
def make_log() -> Callable[..., LogRecord]:
    def factory(tx_hash: str = H1, **kwargs: Any) -> LogRecord:
        return LogRecord.from_rpc(raw_log(tx_hash, **kwargs))

    return factory


@pytest.fixture
def mock_provider():
    provider = AsyncMock()
    provider.filter_logs = AsyncMock(return_value=[])
    provider.aclose = AsyncMock()
    return provider


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    def writer(text: str, name: str = "config.yaml") -> Path:
        path = tmp_path / name
        path.write_text(text)
        return path

    return writer
