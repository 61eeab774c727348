from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from .catalog import Preset, available_presets, load_preset
from .config import GrammarConfig, GrammarFileError, parse_grammar_file
from .drawing import Drawing
from .interpreter import Interpreter
from .svg import render_ascii, to_svg, write_svg

LOG = logging.getLogger(__name__)


def _load_config(args: argparse.Namespace) -> GrammarConfig:
    if args.grammar is not None:
        return parse_grammar_file(args.grammar)
    return load_preset(args.preset).config


def grow(config: GrammarConfig, generations: int) -> tuple[Interpreter, Drawing, List[str]]:
    """Run the interpreter until generation ``generations`` has been rendered.

    Returns the interpreter, the drawing of the last rendered snapshot and
    every rendered snapshot in order.
    """
    grammar, painter = Preset(config).build()
    snapshots: List[str] = []

    def meaning(generation: str) -> None:
        snapshots.append(generation)
        painter(generation)

    interpreter = Interpreter(grammar, meaning)
    for _ in range(max(generations, 0) + 1):
        interpreter.interpret()
    LOG.debug("Rendered %d generations of %s", len(snapshots), config.name)
    return interpreter, painter.drawing, snapshots


def _list_presets() -> None:
    for name in available_presets():
        preset = load_preset(name)
        print(f"{name:<16} {preset.title} (generations={preset.config.generations})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lindenmayer", description="Grow and render Lindenmayer systems.")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--preset", default=None, help="Name of a bundled preset grammar.")
    source.add_argument("--grammar", type=Path, default=None, help="Path to a TOML grammar file.")
    parser.add_argument("--generations", type=int, default=None,
                        help="Generation to render. Defaults to the grammar's own setting.")
    parser.add_argument("--format", choices=("text", "ascii", "svg", "json"), default="text",
                        help="Choose the output format.")
    parser.add_argument("--output", type=Path, default=None, help="Write SVG output to this file.")
    parser.add_argument("--list", action="store_true", help="List bundled presets and exit.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        _list_presets()
        return 0
    if args.preset is None and args.grammar is None:
        parser.error("one of --preset or --grammar is required")
    if args.generations is not None and args.generations < 0:
        parser.error("--generations must be >= 0")

    try:
        config = _load_config(args)
        generations = args.generations if args.generations is not None else config.generations
        interpreter, drawing, snapshots = grow(config, generations)

        if args.format == "text":
            for number, snapshot in enumerate(snapshots):
                print(f"{number}: {snapshot}")
        elif args.format == "ascii":
            print(render_ascii(drawing))
        elif args.format == "svg":
            if args.output is not None:
                path = write_svg(drawing, args.output, title=config.title)
                print(f"Wrote {path}", file=sys.stderr)
            else:
                sys.stdout.write(to_svg(drawing, title=config.title))
        else:
            payload = {
                "name": config.name,
                "title": config.title,
                "generation": generations,
                "length": len(snapshots[-1]),
                "string": snapshots[-1],
                "symbols": list(interpreter.grammar.symbols),
                "rules": [str(rule) for rule in interpreter.grammar.rules],
            }
            print(json.dumps(payload, indent=2))
    except GrammarFileError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except KeyError as exc:
        print(f"error: {exc.args[0]}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
