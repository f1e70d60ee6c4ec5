"""Map an effective Config onto an eth_getLogs filter.

A bound of 0 and an empty list are emitted as *absent*: the node treats a
missing bound as its own default ("earliest"/"latest"), whereas an explicit 0
would pin the query to the genesis block.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ethlogfilter.core.config import Config


def to_hex_block(x: int) -> str:
    """Return a 0x-prefixed hex block number."""
    return hex(x)


@dataclass(frozen=True)
class FilterQuery:
    """Server-side log selector. `None` means "do not constrain"."""

    from_block: int | None = None
    to_block: int | None = None
    addresses: tuple[str, ...] | None = None
    topics: tuple[tuple[str, ...], ...] | None = None

    def __post_init__(self) -> None:
        # list inputs are stored as tuples
        if self.addresses is not None:
            object.__setattr__(self, "addresses", tuple(self.addresses))
        if self.topics is not None:
            object.__setattr__(self, "topics", tuple(tuple(position) for position in self.topics))

    def to_params(self) -> dict[str, Any]:
        """Render the JSON-RPC filter object, omitting absent keys."""
        params: dict[str, Any] = {}
        if self.from_block is not None:
            params["fromBlock"] = to_hex_block(self.from_block)
        if self.to_block is not None:
            params["toBlock"] = to_hex_block(self.to_block)
        if self.addresses is not None:
            params["address"] = list(self.addresses)
        if self.topics is not None:
            params["topics"] = [list(position) for position in self.topics]
        return params


def choose_block(from_block: int, to_block: int, log_block: int) -> tuple[int, int]:
    """Use `log_block` as both bounds if it is set."""
    if log_block == 0:
        return from_block, to_block
    return log_block, log_block


def choose_block_number(b: int) -> int | None:
    return None if b == 0 else b


def choose_addresses(addresses: list[str]) -> tuple[str, ...] | None:
    return tuple(addresses) if addresses else None


def choose_topics(topics: list[str]) -> tuple[tuple[str, ...], ...] | None:
    """Put every topic at position 0: match any of them as the first topic."""
    return (tuple(topics),) if topics else None


def build(cfg: Config) -> FilterQuery:
    """Build the node filter query for an effective config."""
    from_block, to_block = choose_block(cfg.from_block, cfg.to_block, cfg.log_block)
    return FilterQuery(
        from_block=choose_block_number(from_block),
        to_block=choose_block_number(to_block),
        addresses=choose_addresses(cfg.addresses),
        topics=choose_topics(cfg.topics),
    )
