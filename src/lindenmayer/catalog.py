"""Preset grammars shipped with the package.

Each preset lives in ``lindenmayer/presets/<name>.toml`` and pairs a grammar
with the turtle settings that give its symbols meaning.
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from typing import Any, Dict, List, Tuple

from .config import GrammarConfig, build_grammar, parse_grammar_text
from .drawing import TurtlePainter
from .interpreter import Interpreter
from .lsystem import Grammar

PRESET_PACKAGE = "lindenmayer"
PRESET_DIR = "presets"


@dataclass(frozen=True)
class Preset:
    config: GrammarConfig

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def title(self) -> str:
        return self.config.title

    def build(self) -> Tuple[Grammar, TurtlePainter]:
        """Return a fresh grammar at generation 0 and its meaning function."""
        return build_grammar(self.config), TurtlePainter(self.config.render)

    def interpreter(self) -> Interpreter:
        grammar, painter = self.build()
        return Interpreter(grammar, painter)


def _preset_files() -> Dict[str, Any]:
    root = resources.files(PRESET_PACKAGE).joinpath(PRESET_DIR)
    return {
        entry.name[: -len(".toml")]: entry
        for entry in root.iterdir()
        if entry.is_file() and entry.name.endswith(".toml")
    }


def available_presets() -> List[str]:
    return sorted(_preset_files())


def load_preset(name: str) -> Preset:
    files = _preset_files()
    entry = files.get(name)
    if entry is None:
        raise KeyError(f"Unknown preset '{name}'. Available: {', '.join(sorted(files))}")
    text = entry.read_text(encoding="utf-8")
    return Preset(config=parse_grammar_text(text, name, source=f"preset '{name}'"))
