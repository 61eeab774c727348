from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

from .config import RenderConfig

Point = Tuple[float, float]


@dataclass(frozen=True)
class TurtleState:
    x: float
    y: float
    heading: float


@dataclass(frozen=True)
class Dot:
    center: Point
    radius: float


@dataclass
class Drawing:
    segments: List[Tuple[Point, Point]] = field(default_factory=list)
    dots: List[Dot] = field(default_factory=list)
    generation: str = ""

    def is_empty(self) -> bool:
        return not self.segments and not self.dots

    def points(self) -> Iterator[Point]:
        for start, end in self.segments:
            yield start
            yield end
        for dot in self.dots:
            x, y = dot.center
            yield (x - dot.radius, y - dot.radius)
            yield (x + dot.radius, y + dot.radius)


class TurtlePainter:
    """Meaning function that turns a generation string into a :class:`Drawing`.

    Each call replaces :attr:`drawing` with the figure for the given string.
    Symbols without a configured command are skipped, which is how
    placeholder symbols (``X`` in most plant grammars) stay invisible.
    """

    def __init__(self, render: RenderConfig) -> None:
        self._render = render
        self.drawing = Drawing()
        self.frames = 0

    def __call__(self, generation: str) -> None:
        self.drawing = self.paint(generation)
        self.frames += 1

    def paint(self, generation: str) -> Drawing:
        render = self._render
        drawing = Drawing(generation=generation)
        state = TurtleState(x=0.0, y=0.0, heading=render.heading)
        # The step length is not part of the pushed state: decay carries across branches.
        step = render.step
        stack: List[TurtleState] = []

        for symbol in generation:
            command = render.commands.get(symbol)
            if command is None:
                continue
            action = command.action
            if action in ("draw", "move"):
                rad = math.radians(state.heading)
                end = (state.x + step * math.cos(rad), state.y + step * math.sin(rad))
                if action == "draw":
                    drawing.segments.append(((state.x, state.y), end))
                    step *= render.step_scale
                state = TurtleState(x=end[0], y=end[1], heading=state.heading)
            elif action == "left":
                state = TurtleState(state.x, state.y, state.heading + render.angle)
            elif action == "right":
                state = TurtleState(state.x, state.y, state.heading - render.angle)
            elif action == "push":
                stack.append(state)
            elif action == "pop":
                if stack:
                    state = stack.pop()
            elif action == "translate":
                # (dx, dy) is expressed in the turtle's frame; heading 90 is the world frame.
                rad = math.radians(state.heading - 90.0)
                dx, dy = command.params["dx"], command.params["dy"]
                state = TurtleState(
                    x=state.x + dx * math.cos(rad) - dy * math.sin(rad),
                    y=state.y + dx * math.sin(rad) + dy * math.cos(rad),
                    heading=state.heading,
                )
            elif action == "dot":
                drawing.dots.append(Dot(center=(state.x, state.y), radius=command.params["radius"]))
        return drawing
