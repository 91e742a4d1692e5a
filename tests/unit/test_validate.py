from typing import Optional

from fsm_graph.dsl.parser import parse_state_machine
from fsm_graph.dsl.tokens import tokenize
from fsm_graph.validate import ValidateConfig, validate_machine, validate_machine_issues


def lint(src: str, cfg: Optional[ValidateConfig] = None):
    return validate_machine_issues(parse_state_machine(tokenize(src)), cfg)


def test_clean_machine_has_no_issues():
    assert lint("M(A) A(x) => B, B(y) => Sink") == []


def test_undeclared_initial_state_is_a_warning_only():
    issues = lint("M(Start) A(x) => B")
    assert [(i.severity, i.code) for i in issues] == [("warning", "W_INITIAL_STATE_UNDECLARED")]
    assert issues[0].path == "/M/initial_state"


def test_redeclared_source_and_input():
    issues = lint("M(A) A(x) => B, A(x) => C")
    assert [i.code for i in issues] == ["W_SOURCE_REDECLARED", "W_INPUT_REDECLARED"]
    assert issues[0].hint is not None
    assert issues[1].path == "/M/transitions/1/0"


def test_ignore_and_escalate():
    src = "M(Start) A(x) => B, A => { x => C }"
    cfg = ValidateConfig(ignore={"W_SOURCE_REDECLARED"}, escalate={"W_INPUT_REDECLARED"})
    issues = lint(src, cfg)
    assert [(i.severity, i.code) for i in issues] == [
        ("warning", "W_INITIAL_STATE_UNDECLARED"),
        ("error", "W_INPUT_REDECLARED"),
    ]


def test_validate_machine_splits_messages():
    fsm = parse_state_machine(tokenize("M(Start) A(x) => B"))
    errors, warnings = validate_machine(fsm)
    assert errors == []
    assert warnings == ["M: initial state 'Start' has no outgoing transitions"]
