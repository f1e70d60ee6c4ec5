"""Core data models, configuration schema, query building and errors.

This package provides:
- Config schema and overlay (Config, FIELDS, resolve)
- Filter query builder (FilterQuery, build)
- Log record model (LogRecord)
- Error kinds (EthLogFilterError and subclasses)
"""

from ethlogfilter.core.config import FIELDS, Config, FieldSpec, resolve
from ethlogfilter.core.models import LogRecord
from ethlogfilter.core.query import FilterQuery, build

__all__ = [
    "Config",
    "FIELDS",
    "FieldSpec",
    "resolve",
    "FilterQuery",
    "build",
    "LogRecord",
]
