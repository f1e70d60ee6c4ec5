"""Error kinds raised by the log filter pipeline.

Library code raises these; the CLI turns them into exit codes.
"""

from __future__ import annotations


class EthLogFilterError(Exception):
    """Base class for every fatal (or reportable) error of a run."""


class HomeDirUnavailable(EthLogFilterError):
    """The user home directory could not be determined."""


class ConfigReadError(EthLogFilterError):
    """The config file does not exist or cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"read config failed: {path}: {reason}")


class ConfigParseError(EthLogFilterError):
    """The config file is not valid YAML or holds invalid values."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"parse config failed: {path}: {reason}")


class MissingNodeURL(EthLogFilterError):
    """Neither the CLI nor the config file provided a node URL."""


class ClientDialError(EthLogFilterError):
    """The node client could not be constructed for the given URL."""


class FetchError(EthLogFilterError):
    """eth_getLogs failed (transport, node-side or decoding error)."""


class MarshalError(EthLogFilterError):
    """The retained logs could not be serialized to JSON."""


class OutputFileWriteError(EthLogFilterError):
    """Writing the JSON mirror file failed. Reported, never fatal."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"failed to write JSON output to file {path}: {reason}")
