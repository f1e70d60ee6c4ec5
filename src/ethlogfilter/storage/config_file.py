"""YAML config file reader.

Keys are mapped onto `Config` fields through the shared schema; CLI-only
fields (`verbose`, `config_file_path`, `output_file`) and unknown keys are
dropped while decoding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ethlogfilter.core.config import Config, file_keys
from ethlogfilter.core.errors import ConfigParseError, ConfigReadError, HomeDirUnavailable

CONFIG_DIR = Path(".config") / "ethlogfilter"
CONFIG_NAME = "config.yaml"


class _HexPreservingLoader(yaml.SafeLoader):
    """SafeLoader that keeps `0x...` scalars as strings.

    YAML 1.1 resolves unquoted hex as int, which would drop the leading zeros
    of addresses and hashes.
    """


def _construct_int(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> Any:
    value = str(node.value)
    if value.lstrip("+-").lower().startswith("0x"):
        return value
    return loader.construct_yaml_int(node)


_HexPreservingLoader.add_constructor("tag:yaml.org,2002:int", _construct_int)


def default_config_path() -> Path:
    """Return `<home>/.config/ethlogfilter/config.yaml`."""
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as e:
        raise HomeDirUnavailable(f"failed to get config location in user's homedir: {e}") from e
    return home / CONFIG_DIR / CONFIG_NAME


def decode(doc: Any) -> Config:
    """Turn a decoded YAML document into a Config (raises ValueError/ValidationError)."""
    if doc is None:
        return Config.empty()
    if not isinstance(doc, dict):
        raise ValueError(f"top level must be a mapping, got {type(doc).__name__}")
    keys = file_keys()
    values = {keys[k]: v for k, v in doc.items() if k in keys}
    return Config.model_validate(values)


def load(path: str | Path) -> Config:
    """Read the YAML config at `path`."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigReadError(str(p), str(e)) from e

    try:
        doc = yaml.load(text, Loader=_HexPreservingLoader)
    except yaml.YAMLError as e:
        raise ConfigParseError(str(p), str(e)) from e

    try:
        return decode(doc)
    except (ValidationError, ValueError) as e:
        raise ConfigParseError(str(p), str(e)) from e
