"""
Configuration Loader (``printshop_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into a ``ShopConfig``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid values or unknown keys  -> ``ValueError`` from ``ShopConfig``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from printshop_config.schema import ShopConfig


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_config(path: Path | str) -> ShopConfig:
    """
    Parse the ``shop`` section of a YAML file into a ShopConfig.

    A document without a top-level ``shop`` key is read as the section
    itself.
    """
    data = load_yaml_file(Path(path))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    section = data.get("shop", data)
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ValueError(f"{path}: 'shop' must be a mapping")
    return ShopConfig.from_dict(dict(section))
