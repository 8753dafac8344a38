"""
Canonical workflow types (``printshop_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects for workflow state machines.  Used by the invoicing and
fulfillment modules so that Guard, Transition, and Workflow are defined once,
and so that every state machine is an explicit transition table rather than
string comparisons scattered across call sites.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
* ``(from_state, action)`` resolves to at most one transition.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Guard:
    """A condition that must be satisfied before a transition fires.

    Contract: frozen, descriptive only.
    Non-goals: does not evaluate the condition -- the owning service does.
    """
    name: str
    description: str


@dataclass(frozen=True)
class Transition:
    """A valid state transition in a workflow."""
    from_state: str
    to_state: str
    action: str
    guard: Guard | None = None


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a document lifecycle.

    Contract: frozen; ``transitions`` reference only states in ``states``.
    ``terminal_states`` are states with no outgoing transitions.
    """
    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.initial_state not in self.states:
            raise ValueError(
                f"{self.name}: initial state {self.initial_state!r} not in states"
            )
        seen: set[tuple[str, str]] = set()
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(
                    f"{self.name}: transition {t.from_state}->{t.to_state} "
                    f"references an unknown state"
                )
            key = (t.from_state, t.action)
            if key in seen:
                raise ValueError(
                    f"{self.name}: ambiguous action {t.action!r} from {t.from_state!r}"
                )
            seen.add(key)

    def resolve(self, from_state: str, action: str) -> Transition | None:
        """The transition fired by ``action`` in ``from_state``, if any."""
        for t in self.transitions:
            if t.from_state == from_state and t.action == action:
                return t
        return None

    def transitions_between(self, from_state: str, to_state: str) -> tuple[Transition, ...]:
        """Every transition from ``from_state`` that lands in ``to_state``."""
        return tuple(
            t for t in self.transitions
            if t.from_state == from_state and t.to_state == to_state
        )

    def is_terminal(self, state: str) -> bool:
        return state in self.terminal_states
