"""File-system components: config file reader and JSON output writer.

This package provides:
- load / default_config_path: YAML config reader
- emit / write_output_file: stdout JSON emitter with optional file mirror
"""

from ethlogfilter.storage.config_file import default_config_path, load
from ethlogfilter.storage.output import emit, write_output_file

__all__ = [
    "default_config_path",
    "load",
    "emit",
    "write_output_file",
]
