"""
printshop_config -- single public entrypoint for shop configuration.

Responsibility:
    Provides ``get_active_config()``, the way services obtain a
    ``ShopConfig`` at runtime.  Services accept a ``ShopConfig`` in their
    constructor and fall back to this function when none is given.

Architecture position:
    Configuration -- sits beside ``printshop_kernel`` and below
    ``printshop_modules``.  The kernel MUST NEVER import from
    ``printshop_config``.

Failure modes:
    - ``FileNotFoundError`` -- the selected YAML file does not exist.
    - ``ValueError`` -- invalid settings.
"""

from __future__ import annotations

import os
from pathlib import Path

from printshop_config.loader import load_config, load_yaml_file
from printshop_config.schema import ShopConfig
from printshop_kernel.logging_config import get_logger

_logger = get_logger("config")

_DEFAULT_CONFIG_FILE = Path(__file__).parent / "defaults" / "shop.yaml"

CONFIG_ENV_VAR = "PRINTSHOP_CONFIG"


def get_active_config(path: Path | str | None = None) -> ShopConfig:
    """
    Load the active ShopConfig.

    Resolution order: explicit ``path``, then the ``PRINTSHOP_CONFIG``
    environment variable, then the bundled ``defaults/shop.yaml``.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or _DEFAULT_CONFIG_FILE
    config = load_config(path)
    _logger.info(
        "shop_config_loaded",
        extra={"path": str(path), "shrink_policy": config.shrink_policy},
    )
    return config


__all__ = [
    "CONFIG_ENV_VAR",
    "ShopConfig",
    "get_active_config",
    "load_config",
    "load_yaml_file",
]
