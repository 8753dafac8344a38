"""Database layer - engine, base classes, and money helpers."""

from printshop_kernel.db.base import UUID, Base, TrackedBase, UUIDString
from printshop_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    session_scope,
)
from printshop_kernel.db.types import ZERO, round_money, to_decimal

__all__ = [
    "init_engine_from_url",
    "get_engine",
    "get_session",
    "session_scope",
    "create_tables",
    "Base",
    "TrackedBase",
    "UUIDString",
    "UUID",
    "ZERO",
    "round_money",
    "to_decimal",
]
