from __future__ import annotations

from typing import Callable

from .lsystem import Grammar

MeaningFunction = Callable[[str], None]


class Interpreter:
    """Feeds successive generations of a grammar to a meaning function.

    Each ``interpret()`` renders the generation the grammar held before the
    call, so the rendered string always trails the grammar by one step.
    """

    def __init__(self, grammar: Grammar, meaning_function: MeaningFunction) -> None:
        self.grammar = grammar
        self.meaning_function = meaning_function

    def interpret(self) -> None:
        generation = self.grammar.current_generation
        self.grammar.evolve()
        self.meaning_function(generation)
