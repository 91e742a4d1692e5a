# fsm_graph/validate.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple

from .model import StateMachineDef

Severity = Literal["error", "warning"]


@dataclass(frozen=True)
class ValidationIssue:
    """Structured lint finding for callers that want more than strings."""

    severity: Severity
    code: str
    message: str
    path: str = ""
    hint: Optional[str] = None


@dataclass(frozen=True)
class ValidateConfig:
    """Lint configuration.

    Nothing here changes what gets rendered: dangling targets and an
    undeclared initial state are legal. The lint only reports them.
    """

    ignore: set[str] = field(default_factory=set)
    escalate: set[str] = field(default_factory=set)


def validate_machine_issues(
    fsm: StateMachineDef, cfg: Optional[ValidateConfig] = None
) -> list[ValidationIssue]:
    """Return structured lint issues for a parsed state machine."""

    cfg = cfg or ValidateConfig()
    issues: list[ValidationIssue] = []

    def emit(
        severity: Severity,
        code: str,
        message: str,
        path: str = "",
        hint: Optional[str] = None,
    ) -> None:
        if code in cfg.ignore:
            return
        final_severity: Severity = (
            "error" if (severity == "warning" and code in cfg.escalate) else severity
        )
        issues.append(
            ValidationIssue(
                severity=final_severity,
                code=code,
                message=message,
                path=path,
                hint=hint,
            )
        )

    sources = fsm.source_states()
    if fsm.initial_state not in sources:
        emit(
            "warning",
            "W_INITIAL_STATE_UNDECLARED",
            f"{fsm.name}: initial state {fsm.initial_state!r} has no outgoing transitions",
            path=f"/{fsm.name}/initial_state",
        )

    first_group: dict[str, int] = {}
    seen_inputs: dict[tuple[str, str], int] = {}
    for group_i, from_state in enumerate(fsm.transitions):
        src = from_state.initial_state
        if src in first_group:
            emit(
                "warning",
                "W_SOURCE_REDECLARED",
                f"{fsm.name}: state {src!r} heads more than one transition group",
                path=f"/{fsm.name}/transitions/{group_i}",
                hint=(
                    f"merge into the group at index {first_group[src]}; identical "
                    "edges from later groups are dropped"
                ),
            )
        else:
            first_group[src] = group_i

        for t_i, transition in enumerate(from_state.transitions):
            key = (src, transition.input_value)
            if key in seen_inputs:
                emit(
                    "warning",
                    "W_INPUT_REDECLARED",
                    f"{fsm.name}: input {transition.input_value!r} from state {src!r} "
                    "is declared more than once",
                    path=f"/{fsm.name}/transitions/{group_i}/{t_i}",
                )
            else:
                seen_inputs[key] = group_i

    return issues


def validate_machine(
    fsm: StateMachineDef, cfg: Optional[ValidateConfig] = None
) -> Tuple[list[str], list[str]]:
    """Return lint results as `(errors, warnings)` message lists."""
    issues = validate_machine_issues(fsm, cfg)
    errors = [iss.message for iss in issues if iss.severity == "error"]
    warnings = [iss.message for iss in issues if iss.severity == "warning"]
    return errors, warnings
