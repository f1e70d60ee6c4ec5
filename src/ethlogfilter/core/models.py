"""Log record as returned by eth_getLogs.

`LogRecord` keeps the node's own hex rendering of every value and serializes
back with the node's field names, in the order nodes emit them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# (attribute, JSON key) in upstream order
_JSON_FIELDS: tuple[tuple[str, str], ...] = (
    ("address", "address"),
    ("topics", "topics"),
    ("data", "data"),
    ("block_number", "blockNumber"),
    ("transaction_hash", "transactionHash"),
    ("transaction_index", "transactionIndex"),
    ("block_hash", "blockHash"),
    ("block_timestamp", "blockTimestamp"),
    ("log_index", "logIndex"),
    ("removed", "removed"),
)

# Only emitted when the node sent them
_OPTIONAL_KEYS = frozenset({"blockTimestamp"})


@dataclass(slots=True, frozen=True)
class LogRecord:
    """One matched log, minimally validated."""

    address: str
    topics: tuple[str, ...]
    data: str
    block_number: str | None
    transaction_hash: str
    transaction_index: str | None
    block_hash: str | None
    log_index: str | None
    removed: bool = False
    block_timestamp: str | None = None

    @property
    def tx_hash(self) -> str:
        return self.transaction_hash

    @classmethod
    def from_rpc(cls, raw: Any) -> LogRecord:
        """Build a record from one element of the eth_getLogs result array."""
        if not isinstance(raw, dict):
            raise ValueError(f"log entry is not an object: {raw!r}")
        try:
            address = raw["address"]
            tx_hash = raw["transactionHash"]
        except KeyError as e:
            raise ValueError(f"log entry is missing {e.args[0]!r}") from e
        topics = raw.get("topics") or []
        if not isinstance(topics, list):
            raise ValueError(f"log topics is not a list: {topics!r}")
        return cls(
            address=str(address),
            topics=tuple(str(t) for t in topics),
            data=str(raw.get("data") or "0x"),
            block_number=raw.get("blockNumber"),
            transaction_hash=str(tx_hash),
            transaction_index=raw.get("transactionIndex"),
            block_hash=raw.get("blockHash"),
            log_index=raw.get("logIndex"),
            removed=bool(raw.get("removed", False)),
            block_timestamp=raw.get("blockTimestamp"),
        )

    def to_json_obj(self) -> dict[str, Any]:
        """Return a JSON-ready dict keyed and ordered like the node's response."""
        out: dict[str, Any] = {}
        for attr, key in _JSON_FIELDS:
            value = getattr(self, attr)
            if key in _OPTIONAL_KEYS and value is None:
                continue
            out[key] = list(value) if attr == "topics" else value
        return out
