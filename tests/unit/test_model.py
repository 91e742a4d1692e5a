from fsm_graph.model import FromState, StateMachineDef, Transition


def test_source_states_are_distinct_in_declaration_order():
    fsm = StateMachineDef(
        name="M",
        initial_state="A",
        transitions=(
            FromState("B", (Transition("x", "A"),)),
            FromState("A", (Transition("y", "Sink"),)),
            FromState("B", (Transition("z", "A"),)),
        ),
    )
    assert fsm.source_states() == ["B", "A"]


def test_transition_equality_and_defaults():
    t = Transition("x", "B", "Out")
    assert t == Transition("x", "B", "Out")
    assert FromState("A").transitions == ()
