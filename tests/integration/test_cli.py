from pathlib import Path

import pytest

from fsm_graph.cli import main

FIXTURE_DIR = Path(__file__).resolve().parents[1] / "fixtures" / "diagrams"


@pytest.mark.integration
def test_cli_writes_one_dot_file_per_block(tmp_path, capsys):
    main([str(FIXTURE_DIR / "circuit_breaker.rs"), "--out-dir", str(tmp_path)])

    out_file = tmp_path / "CircuitBreaker.dot"
    assert out_file.read_text(encoding="utf-8") == (
        FIXTURE_DIR / "CircuitBreaker.dot"
    ).read_text(encoding="utf-8")
    assert capsys.readouterr().out == f"Wrote {out_file}\n"


@pytest.mark.integration
def test_cli_malformed_block_does_not_stop_siblings(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(FIXTURE_DIR / "two_machines.rs"), "--out-dir", str(tmp_path)])

    assert excinfo.value.code == 2
    assert sorted(p.name for p in tmp_path.iterdir()) == ["Door.dot", "Light.dot"]

    err = capsys.readouterr().err
    assert "expected `=>`, found `{ ... }` group" in err
    assert "1 of 3 block(s) failed" in err


@pytest.mark.integration
def test_cli_stdout_and_config(tmp_path, capsys):
    source = tmp_path / "pump.rs"
    source.write_text("fsm! { Pump(Idle) Idle(start) => Running }\n", encoding="utf-8")
    config = tmp_path / "fsm_graph.yaml"
    config.write_text("extract:\n  tag: fsm\nrender:\n  rankdir: TB\n", encoding="utf-8")

    main([str(source), "--config", str(config), "--stdout", "--no-legend"])

    out = capsys.readouterr().out
    assert out.startswith('digraph "graph" {\n  rankdir="TB";\n')
    assert "cluster_legend" not in out
    assert '"Idle" -> "Running" [label="start", style=solid, minlen=2];' in out
    assert list(tmp_path.glob("*.dot")) == []


@pytest.mark.integration
def test_cli_strict_skips_blocks_with_warnings(tmp_path, capsys):
    source = tmp_path / "m.rs"
    source.write_text("state_machine! { M(Start) A(x) => B }\n", encoding="utf-8")

    with pytest.raises(SystemExit):
        main([str(source), "--out-dir", str(tmp_path), "--strict"])
    assert not (tmp_path / "M.dot").exists()
    assert "warning:" in capsys.readouterr().err

    # Without --strict the warning is reported and the diagram still written.
    main([str(source), "--out-dir", str(tmp_path)])
    assert (tmp_path / "M.dot").exists()


@pytest.mark.integration
def test_cli_reports_unreadable_input(tmp_path, capsys):
    source = tmp_path / "bad.rs"
    source.write_text("state_machine! { M(A) \n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main([str(source)])
    assert excinfo.value.code == 2
    assert "unclosed `{`" in capsys.readouterr().err

    with pytest.raises(SystemExit):
        main([str(tmp_path / "missing.rs")])


@pytest.mark.integration
def test_cli_without_blocks_warns(tmp_path, capsys):
    source = tmp_path / "empty.rs"
    source.write_text("fn main() {}\n", encoding="utf-8")

    main([str(source), "--out-dir", str(tmp_path)])
    assert "no `state_machine!` blocks found" in capsys.readouterr().err
