# fsm_graph/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from .builder import build_diagram
from .config import ToolConfig, load_config
from .dsl.extract import DslBlock, extract_blocks
from .dsl.parser import GrammarError, parse_state_machine
from .dsl.tokens import LexError
from .logging_config import setup_logging
from .validate import validate_machine
from .writer import output_path, write_dot

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsm-graph",
        description=(
            "Render every `state_machine!` block in a source file as a Graphviz "
            "DOT diagram."
        ),
    )
    parser.add_argument("source", type=Path, help="Host source file to scan")
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=Path("."),
        help="Directory for generated <name>.dot files (default: current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional YAML configuration (render/extract/output/validate sections)",
    )
    parser.add_argument(
        "--tag",
        type=str,
        default=None,
        help="Macro name that introduces a block (default: state_machine)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Do not write a diagram for a block that has lint warnings.",
    )
    parser.add_argument(
        "--no-legend",
        action="store_true",
        help="Omit the legend subgraph from generated diagrams",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print DOT source to stdout instead of writing files",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log per-edge decisions to stderr",
    )
    return parser


def _effective_config(args: argparse.Namespace) -> ToolConfig:
    cfg = load_config(args.config)
    if args.tag:
        cfg = replace(cfg, extract=replace(cfg.extract, tag=args.tag))
    if args.no_legend:
        cfg = replace(cfg, render=replace(cfg.render, legend=False))
    return cfg


def _process_block(block: DslBlock, cfg: ToolConfig, args: argparse.Namespace) -> bool:
    """Parse, lint, render and emit one block. Returns False if it failed."""
    try:
        fsm = parse_state_machine(block.tokens, cfg.extract.attribute_keywords)
    except GrammarError as e:
        print(f"error: {block.name}: {e}", file=sys.stderr)
        return False

    errors, warnings = validate_machine(fsm, cfg.validate)
    for warning in warnings:
        print(f"warning: {block.name}: {warning}", file=sys.stderr)
    if errors or (args.strict and warnings):
        for error in errors:
            print(f"error: {block.name}: {error}", file=sys.stderr)
        print(f"error: {block.name}: skipped {fsm.name!r}", file=sys.stderr)
        return False

    name, dot = build_diagram(fsm, cfg.render)
    if args.stdout:
        sys.stdout.write(dot)
        return True

    path = output_path(args.out_dir, name, cfg.output.suffix)
    try:
        write_dot(path, dot)
    except OSError as e:
        print(f"error: failed to write {path}: {e}", file=sys.stderr)
        return False
    print(f"Wrote {path}")
    return True


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entrypoint."""
    args = _build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    try:
        cfg = _effective_config(args)
    except (OSError, ValueError, TypeError) as e:
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        raise SystemExit(2)

    try:
        text = args.source.read_text(encoding="utf-8")
        blocks = extract_blocks(text, tag=cfg.extract.tag, source_name=str(args.source))
    except (OSError, UnicodeDecodeError, LexError) as e:
        print(f"error: {args.source}: {e}", file=sys.stderr)
        raise SystemExit(2)

    if not blocks:
        print(f"warning: no `{cfg.extract.tag}!` blocks found in {args.source}", file=sys.stderr)
        return

    logger.debug("found %d block(s) in %s", len(blocks), args.source)
    failed = 0
    for block in blocks:
        if not _process_block(block, cfg, args):
            failed += 1

    if failed:
        print(f"error: {failed} of {len(blocks)} block(s) failed", file=sys.stderr)
        raise SystemExit(2)


if __name__ == "__main__":
    main()
