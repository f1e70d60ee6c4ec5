from __future__ import annotations

from .core.config import FIELDS, Config, resolve
from .core.errors import EthLogFilterError
from .core.models import LogRecord
from .core.query import FilterQuery, build

__version__ = "0.1.0"

__all__ = [
    "Config",
    "FIELDS",
    "resolve",
    "FilterQuery",
    "build",
    "LogRecord",
    "EthLogFilterError",
]
