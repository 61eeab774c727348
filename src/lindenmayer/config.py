from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for 3.10
    import tomli as tomllib  # type: ignore[no-redef]

from .lsystem import Grammar, Rule


class GrammarFileError(ValueError):
    pass


# action -> required numeric parameters
ACTIONS: Mapping[str, Tuple[str, ...]] = {
    "draw": (),
    "move": (),
    "left": (),
    "right": (),
    "push": (),
    "pop": (),
    "noop": (),
    "translate": ("dx", "dy"),
    "dot": ("radius",),
}


@dataclass(frozen=True)
class Command:
    action: str
    params: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class RenderConfig:
    angle: float = 90.0
    step: float = 10.0
    step_scale: float = 1.0
    heading: float = 90.0
    commands: Mapping[str, Command] = field(default_factory=dict)


@dataclass(frozen=True)
class GrammarConfig:
    name: str
    title: str
    symbols: Tuple[str, ...]
    rules: Tuple[Rule, ...]
    axiom: str
    generations: int
    render: RenderConfig
    path: Optional[Path] = None


def _parse_symbols(raw: Any, source: str) -> Tuple[str, ...]:
    if isinstance(raw, str):
        return tuple(raw)
    if not isinstance(raw, list):
        raise GrammarFileError(f"grammar.symbols must be a string or a list: {source}")
    symbols: List[str] = []
    for entry in raw:
        symbol = str(entry)
        if len(symbol) != 1:
            raise GrammarFileError(f"Symbol '{symbol}' must be a single character: {source}")
        symbols.append(symbol)
    return tuple(symbols)


def _parse_rules(raw: Any, source: str) -> Tuple[Rule, ...]:
    rules: List[Rule] = []
    if isinstance(raw, list):
        for entry in raw:
            try:
                rules.append(Rule.parse(str(entry)))
            except ValueError as exc:
                raise GrammarFileError(f"{exc} ({source})") from exc
        return tuple(rules)
    if isinstance(raw, Mapping):
        for symbol, entry in raw.items():
            predecessor = str(symbol)
            if len(predecessor) != 1:
                raise GrammarFileError(f"Rule key '{predecessor}' must be a single character: {source}")
            successors = entry if isinstance(entry, list) else [entry]
            for successor in successors:
                value = str(successor).strip()
                if not value:
                    raise GrammarFileError(f"Empty successor for symbol '{predecessor}': {source}")
                rules.append(Rule(predecessor=predecessor, successor=value))
        return tuple(rules)
    raise GrammarFileError(f"grammar.rules must be a list or a table: {source}")


def _parse_command(symbol: str, entry: Any, source: str) -> Command:
    if isinstance(entry, str):
        action, params_raw = entry, {}
    elif isinstance(entry, Mapping):
        action = str(entry.get("type", ""))
        params_raw = {key: value for key, value in entry.items() if key != "type"}
    else:
        raise GrammarFileError(f"Command for '{symbol}' must be a string or a table: {source}")
    required = ACTIONS.get(action)
    if required is None:
        raise GrammarFileError(f"Unknown command '{action}' for symbol '{symbol}': {source}")
    params: Dict[str, float] = {}
    for key in required:
        value = params_raw.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise GrammarFileError(f"Command '{action}' for '{symbol}' needs numeric '{key}': {source}")
        params[key] = float(value)
    return Command(action=action, params=params)


def _parse_render(raw: Any, source: str) -> RenderConfig:
    if raw is None:
        return RenderConfig()
    if not isinstance(raw, Mapping):
        raise GrammarFileError(f"[render] must be a table: {source}")
    commands_raw = raw.get("commands", {})
    if not isinstance(commands_raw, Mapping):
        raise GrammarFileError(f"[render.commands] must be a table: {source}")
    commands = {str(symbol): _parse_command(str(symbol), entry, source) for symbol, entry in commands_raw.items()}
    try:
        render = RenderConfig(
            angle=float(raw.get("angle", 90.0)),
            step=float(raw.get("step", 10.0)),
            step_scale=float(raw.get("step_scale", 1.0)),
            heading=float(raw.get("heading", 90.0)),
            commands=commands,
        )
    except (TypeError, ValueError) as exc:
        raise GrammarFileError(f"Invalid [render] value: {exc} ({source})") from exc
    if render.step <= 0:
        raise GrammarFileError(f"render.step must be positive: {source}")
    return render


def parse_grammar_document(data: Mapping[str, Any], name: str, source: str = "<string>") -> GrammarConfig:
    grammar_raw = data.get("grammar")
    if not isinstance(grammar_raw, Mapping):
        raise GrammarFileError(f"Grammar file must contain [grammar] section: {source}")
    axiom = str(grammar_raw.get("axiom", "")).strip()
    if not axiom:
        raise GrammarFileError(f"Grammar file missing axiom: {source}")
    if "rules" not in grammar_raw:
        raise GrammarFileError(f"Grammar file missing rules: {source}")
    rules = _parse_rules(grammar_raw["rules"], source)
    if "symbols" in grammar_raw:
        symbols = _parse_symbols(grammar_raw["symbols"], source)
    else:
        # Alphabet inferred from everything the grammar mentions, in order of appearance.
        seen: Dict[str, None] = {}
        for text in [axiom] + [rule.predecessor + rule.successor for rule in rules]:
            for char in text:
                seen.setdefault(char, None)
        symbols = tuple(seen)
    unknown = sorted({char for char in axiom if char not in symbols})
    if unknown:
        raise GrammarFileError(f"Axiom '{axiom}' uses unregistered symbols: {', '.join(unknown)} ({source})")
    generations = grammar_raw.get("generations", 1)
    if isinstance(generations, bool) or not isinstance(generations, int) or generations < 0:
        raise GrammarFileError(f"grammar.generations must be a non-negative integer: {source}")
    return GrammarConfig(
        name=name,
        title=str(grammar_raw.get("name", name)),
        symbols=symbols,
        rules=rules,
        axiom=axiom,
        generations=generations,
        render=_parse_render(data.get("render"), source),
    )


def parse_grammar_text(text: str, name: str, source: str = "<string>") -> GrammarConfig:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise GrammarFileError(f"Malformed TOML in {source}: {exc}") from exc
    return parse_grammar_document(data, name, source)


def parse_grammar_file(path: str | Path) -> GrammarConfig:
    grammar_path = Path(path)
    if not grammar_path.exists():
        raise FileNotFoundError(f"Grammar file not found: {grammar_path}")
    with grammar_path.open("rb") as handle:
        try:
            data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise GrammarFileError(f"Malformed TOML in {grammar_path}: {exc}") from exc
    config = parse_grammar_document(data, grammar_path.stem, str(grammar_path))
    return replace(config, path=grammar_path)


def build_grammar(config: GrammarConfig) -> Grammar:
    grammar = Grammar.empty()
    for symbol in config.symbols:
        grammar.add_symbol(symbol)
    for rule in config.rules:
        grammar.add_rule(rule)
    if not grammar.change_axiom(config.axiom):
        unknown = sorted({char for char in config.axiom if char not in config.symbols})
        raise GrammarFileError(
            f"Axiom '{config.axiom}' of '{config.name}' uses unregistered symbols: {', '.join(unknown)}"
        )
    return grammar
