"""Lindenmayer system grammars, evolution and turtle rendering."""

from .catalog import Preset, available_presets, load_preset
from .config import GrammarConfig, GrammarFileError, RenderConfig, build_grammar, parse_grammar_file
from .drawing import Drawing, TurtlePainter
from .interpreter import Interpreter
from .lsystem import Grammar, Rule

__all__ = [
    "Drawing",
    "Grammar",
    "GrammarConfig",
    "GrammarFileError",
    "Interpreter",
    "Preset",
    "RenderConfig",
    "Rule",
    "TurtlePainter",
    "available_presets",
    "build_grammar",
    "load_preset",
    "parse_grammar_file",
]
