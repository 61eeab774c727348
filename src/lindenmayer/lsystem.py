from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    """A production ``predecessor => successor``."""

    predecessor: str
    successor: str

    def __str__(self) -> str:
        return f"{self.predecessor} => {self.successor}"

    @classmethod
    def parse(cls, text: str) -> "Rule":
        value = text.strip()
        if "=>" in value:
            lhs, rhs = value.split("=>", 1)
        elif "=" in value:
            lhs, rhs = value.split("=", 1)
        else:
            raise ValueError(f"Rule '{text}' has no '=>' separator.")
        lhs = lhs.strip()
        if len(lhs) == 3 and lhs[0] == lhs[-1] and lhs[0] in "\"'":
            lhs = lhs[1]
        rhs = rhs.strip()
        if len(lhs) != 1:
            raise ValueError(f"Rule '{text}' must have a single-symbol predecessor.")
        if not rhs:
            raise ValueError(f"Rule '{text}' has an empty successor.")
        return cls(predecessor=lhs, successor=rhs)


class Grammar:
    """Symbol set, rule set and the current generation of an L-system.

    Evolution rewrites every symbol in parallel: each symbol is replaced by
    the successors of all rules whose predecessor matches it, concatenated
    in rule insertion order. Symbols without a rule are copied unchanged.
    """

    def __init__(
        self,
        symbols: Optional[Iterable[str]] = None,
        rules: Optional[Iterable[Rule]] = None,
        axiom: str = "",
    ) -> None:
        self._symbols: List[str] = list(symbols) if symbols is not None else []
        self._rules: List[Rule] = list(rules) if rules is not None else []
        self._current = axiom
        self._generation = 0

    @classmethod
    def empty(cls) -> "Grammar":
        return cls()

    @property
    def symbols(self) -> Tuple[str, ...]:
        return tuple(self._symbols)

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return tuple(self._rules)

    @property
    def current_generation(self) -> str:
        return self._current

    @property
    def generation_number(self) -> int:
        return self._generation

    def add_symbol(self, symbol: str) -> None:
        self._symbols.append(symbol)

    def add_rule(self, rule: Rule) -> None:
        for existing in self._rules:
            if existing == rule:
                LOG.debug("Ignoring duplicate rule %s", rule)
                return
        self._rules.append(rule)

    def change_axiom(self, axiom: str) -> bool:
        """Replace the current string if every character is a known symbol.

        Returns ``False`` and leaves the grammar untouched otherwise.
        """
        for char in axiom:
            if char not in self._symbols:
                LOG.debug("Rejected axiom %r: symbol %r is not registered", axiom, char)
                return False
        self._current = axiom
        return True

    def rules_for(self, symbol: str) -> List[Rule]:
        return [rule for rule in self._rules if rule.predecessor == symbol]

    def evolve(self) -> None:
        next_parts: List[str] = []
        for symbol in self._current:
            matched = False
            for rule in self._rules:
                if rule.predecessor == symbol:
                    next_parts.append(rule.successor)
                    matched = True
            if not matched:
                next_parts.append(symbol)
        self._current = "".join(next_parts)
        self._generation += 1

    def projected_length(self, generations: int, limit: Optional[int] = None) -> int:
        """Length of the string ``generations`` evolutions from now, without building it.

        Works on per-symbol counts. Stops early and returns the first length
        above ``limit`` when one is given.
        """
        growth: Dict[str, Dict[str, int]] = {}
        for rule in self._rules:
            produced = growth.setdefault(rule.predecessor, {})
            for char in rule.successor:
                produced[char] = produced.get(char, 0) + 1
        counts: Dict[str, int] = {}
        for char in self._current:
            counts[char] = counts.get(char, 0) + 1
        length = len(self._current)
        for _ in range(max(generations, 0)):
            next_counts: Dict[str, int] = {}
            for char, count in counts.items():
                for produced_char, produced_count in growth.get(char, {char: 1}).items():
                    next_counts[produced_char] = next_counts.get(produced_char, 0) + count * produced_count
            counts = next_counts
            length = sum(counts.values())
            if limit is not None and length > limit:
                break
        return length

    def expand(self, generations: int) -> str:
        for _ in range(max(generations, 0)):
            self.evolve()
        return self._current

    def __repr__(self) -> str:
        return (
            f"Grammar(symbols={self._symbols!r}, rules=[{', '.join(map(str, self._rules))}], "
            f"generation={self._generation}, length={len(self._current)})"
        )
