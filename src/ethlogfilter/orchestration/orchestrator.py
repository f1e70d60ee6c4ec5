"""Wire the concrete node client to the filter-logs use case.

`run_filter_logs(...)` dials the node named in the effective config (unless a
provider is injected), runs the use case and releases the client it dialed.
An injected provider stays owned by the caller.
"""

from __future__ import annotations

from ethlogfilter.clients.rpc import dial
from ethlogfilter.core.config import Config
from ethlogfilter.core.interfaces import ILogsProvider
from ethlogfilter.core.use_cases.filter_logs import FilterLogsOutput, run_filter_logs_use_case


async def run_filter_logs(
    config: Config,
    *,
    logs_provider: ILogsProvider | None = None,
) -> FilterLogsOutput:
    """Run one query against the node. Raises EthLogFilterError subclasses."""
    if logs_provider is not None:
        return await run_filter_logs_use_case(config=config, logs_provider=logs_provider)

    rpc = await dial(config.node_url)
    try:
        return await run_filter_logs_use_case(config=config, logs_provider=rpc)
    finally:
        await rpc.aclose()
