# fsm_graph/model.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Transition:
    """One outgoing edge: `input_value => final_state [output]`."""

    input_value: str
    final_state: str
    output: Optional[str] = None


@dataclass(frozen=True)
class FromState:
    """A source state and its outgoing transitions, in declaration order."""

    initial_state: str
    transitions: tuple[Transition, ...] = ()


@dataclass(frozen=True)
class StateMachineDef:
    name: str
    initial_state: str
    transitions: tuple[FromState, ...] = ()

    def source_states(self) -> list[str]:
        """Distinct source states in first-declared order."""
        seen: dict[str, None] = {}
        for from_state in self.transitions:
            seen.setdefault(from_state.initial_state, None)
        return list(seen)
