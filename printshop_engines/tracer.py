"""
printshop_engines.tracer -- ENGINE_TRACE records for pure calculators.

``@traced_engine`` wraps an engine call and, after it returns, logs one
debug record naming the engine, its version, how long it took and a short
fingerprint of the inputs.  Two calls with equal inputs share a
fingerprint, so a figure on an invoice can be tied back to the exact
calculation that produced it.

Engines stay pure: the decorator only logs.

Usage:
    @traced_engine("discount", "1.0", fingerprint_fields=("balance", "discount"))
    def evaluate(self, *, balance, discount):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import time
from collections.abc import Callable, Iterator
from enum import Enum
from typing import Any

from printshop_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")


def _canonicalize(value: Any) -> str:
    """Stable text for a fingerprint input.  Dataclasses expand to their fields."""
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _canonicalize(
            {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        )
    if isinstance(value, dict):
        return "{" + ",".join(
            f"{k}:{_canonicalize(v)}" for k, v in sorted(value.items())
        ) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    return str(value)


def compute_input_fingerprint(fields: tuple[str, ...], kwargs: dict[str, Any]) -> str:
    """First 16 hex chars of SHA-256 over ``name=value`` pairs, in ``fields`` order."""
    canonical = "|".join(f"{name}={_canonicalize(kwargs.get(name))}" for name in fields)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorate an engine entry point.

    Only keyword arguments are fingerprinted; engines declare their inputs
    keyword-only where tracing matters.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            # One-shot iterators are materialized so the engine and the
            # fingerprint see the same values.
            for name in fingerprint_fields:
                if isinstance(kwargs.get(name), Iterator):
                    kwargs[name] = tuple(kwargs[name])
            started = time.monotonic()
            result = func(*args, **kwargs)
            _logger.debug(
                "ENGINE_TRACE",
                extra={
                    "trace_type": "ENGINE_TRACE",
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": (
                        compute_input_fingerprint(fingerprint_fields, kwargs)
                        if fingerprint_fields else ""
                    ),
                    "duration_ms": round((time.monotonic() - started) * 1000, 2),
                    "function": func.__qualname__,
                },
            )
            return result

        return wrapper

    return decorator
