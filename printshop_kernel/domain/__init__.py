"""Pure domain value objects shared by every module (zero I/O)."""

from printshop_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from printshop_kernel.domain.workflow import Guard, Transition, Workflow

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "Guard",
    "Transition",
    "Workflow",
]
