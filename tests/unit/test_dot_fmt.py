from fsm_graph.dot_fmt import dot_attrs, dot_edge, dot_node, dot_text


def test_dot_text_escapes_quotes_backslashes_and_newlines():
    assert dot_text('a "b" \\ c\nd') == 'a \\"b\\" \\\\ c\\nd'


def test_attrs_quote_labels_and_non_identifiers():
    assert dot_attrs([("label", "x"), ("style", "solid"), ("color", "#ff0000"), ("minlen", 2)]) == (
        ' [label="x", style=solid, color="#ff0000", minlen=2]'
    )
    assert dot_attrs([]) == ""


def test_node_and_edge_lines():
    assert dot_node("input:A:O:B", [("shape", "cds")]) == '  "input:A:O:B" [shape=cds];'
    assert dot_edge("A", "B") == '  "A" -> "B";'
