from __future__ import annotations

from typing import Protocol, runtime_checkable

from ethlogfilter.core.models import LogRecord
from ethlogfilter.core.query import FilterQuery


# ---------------------------------------------------------------------------
# ILogsProvider
# ---------------------------------------------------------------------------

@runtime_checkable
class ILogsProvider(Protocol):
    """
    Abstract source of EVM logs for one filter query.

    Domain expectations:
    - It returns LogRecord objects in the order the source produced them.
    - It hides the underlying transport (HTTP, websocket, in-memory).
    - Any failure surfaces as FetchError.
    """

    async def filter_logs(self, query: FilterQuery) -> list[LogRecord]:
        """
        Return every log matching `query`.

        Implementations:
        - RPC-based (`RPC` class, http(s) or ws(s))
        - In-memory provider for testing
        """
        ...

    async def aclose(self) -> None:
        """Release the underlying transport."""
        ...
