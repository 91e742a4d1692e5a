from pathlib import Path

import pytest

from fsm_graph.config import RenderOptions, ToolConfig, load_config


def write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "fsm_graph.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_no_path_yields_defaults():
    cfg = load_config(None)
    assert cfg == ToolConfig()
    assert cfg.render.edge_styles == ("solid", "dashed", "dotted", "bold")
    assert cfg.extract.tag == "state_machine"
    assert cfg.output.suffix == ".dot"


def test_empty_file_yields_defaults(tmp_path):
    assert load_config(write(tmp_path, "")) == ToolConfig()


def test_sections_override_defaults(tmp_path):
    path = write(
        tmp_path,
        """
render:
  rankdir: TB
  edge_styles: [solid, bold]
  grid_min_labels: 6
  legend: false
extract:
  tag: fsm
  attribute_keywords: [derive]
output:
  suffix: .gv
validate:
  escalate: [W_INPUT_REDECLARED]
""",
    )
    cfg = load_config(path)

    assert cfg.render == RenderOptions(
        rankdir="TB", edge_styles=("solid", "bold"), grid_min_labels=6, legend=False
    )
    assert cfg.extract.tag == "fsm"
    assert cfg.extract.attribute_keywords == ("derive",)
    assert cfg.output.suffix == ".gv"
    assert cfg.validate.escalate == {"W_INPUT_REDECLARED"}


@pytest.mark.parametrize(
    "text, exc, message",
    [
        ("- just\n- a list\n", TypeError, "Top-level YAML must be a mapping"),
        ("colors: {}\n", ValueError, "unknown section"),
        ("render:\n  shape: box\n", ValueError, "unknown key render.shape"),
        ("render: [1]\n", TypeError, "section 'render' must be a mapping"),
        ("render:\n  minlen: two\n", TypeError, "render.minlen must be an integer"),
        ("render:\n  legend: 1\n", TypeError, "render.legend must be a boolean"),
        ("render:\n  edge_styles: []\n", ValueError, "edge_styles must not be empty"),
        ("output:\n  suffix: 3\n", TypeError, "output.suffix must be a string"),
        ("render: [unclosed\n", ValueError, "Failed to parse YAML"),
    ],
)
def test_invalid_config(tmp_path, text, exc, message):
    with pytest.raises(exc, match=message):
        load_config(write(tmp_path, text))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")
