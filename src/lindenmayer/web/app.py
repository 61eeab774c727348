from __future__ import annotations

import argparse
import threading
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse, Response
import uvicorn

from ..catalog import Preset, available_presets, load_preset
from ..interpreter import Interpreter
from ..lsystem import Grammar
from ..main import grow
from ..svg import to_svg

# Longest generation string the service will build; growth is exponential.
MAX_LENGTH = 250_000


class Session:
    """An interpreter for one preset, stepped one generation per request."""

    def __init__(self, preset: Preset, max_length: int) -> None:
        grammar, painter = preset.build()
        self._max_length = max_length
        self.rendered_generation = -1
        self.rendered_length = 0

        def meaning(generation: str) -> None:
            self.rendered_generation += 1
            self.rendered_length = len(generation)
            painter(generation)

        self.interpreter = Interpreter(grammar, meaning)

    def step(self) -> Dict[str, object]:
        _check_length(self.interpreter.grammar, 1, self._max_length)
        self.interpreter.interpret()
        return {
            "rendered_generation": self.rendered_generation,
            "grammar_generation": self.interpreter.grammar.generation_number,
            "length": self.rendered_length,
        }


class SessionManager:
    def __init__(self, max_length: int) -> None:
        self._max_length = max_length
        self._sessions: Dict[str, Session] = {}
        # Handlers run in the threadpool; sessions are mutated under this lock.
        self._lock = threading.Lock()

    def step(self, name: str) -> Dict[str, object]:
        with self._lock:
            session = self._sessions.get(name)
            if session is None:
                session = Session(_preset_or_404(name), self._max_length)
                self._sessions[name] = session
            return session.step()

    def reset(self, name: str) -> None:
        _preset_or_404(name)
        with self._lock:
            self._sessions.pop(name, None)


def _preset_or_404(name: str) -> Preset:
    try:
        return load_preset(name)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=exc.args[0]) from exc


def _check_length(grammar: Grammar, generations: int, max_length: int) -> None:
    length = grammar.projected_length(generations, limit=max_length)
    if length > max_length:
        raise HTTPException(
            status_code=422,
            detail=f"Generation would exceed {max_length} symbols; request fewer generations.",
        )


def create_app(max_length: int = MAX_LENGTH) -> FastAPI:
    manager = SessionManager(max_length)

    app = FastAPI(title="Lindenmayer", version="0.1.0")

    def resolve(name: str, generations: Optional[int]) -> tuple[Preset, int]:
        preset = _preset_or_404(name)
        target = generations if generations is not None else preset.config.generations
        grammar, _ = preset.build()
        _check_length(grammar, target, max_length)
        return preset, target

    @app.get("/api/presets")
    def list_presets() -> JSONResponse:
        presets = [load_preset(name) for name in available_presets()]
        return JSONResponse(
            [
                {"name": preset.name, "title": preset.title, "generations": preset.config.generations}
                for preset in presets
            ]
        )

    @app.get("/api/presets/{name}")
    def get_preset(name: str, generations: Optional[int] = Query(None, ge=0)) -> JSONResponse:
        preset, target = resolve(name, generations)
        grammar, _ = preset.build()
        string = grammar.expand(target)
        return JSONResponse(
            {
                "name": preset.name,
                "title": preset.title,
                "symbols": list(grammar.symbols),
                "rules": [str(rule) for rule in grammar.rules],
                "axiom": preset.config.axiom,
                "generation": grammar.generation_number,
                "length": len(string),
                "string": string,
            }
        )

    @app.get("/api/presets/{name}/svg")
    def get_preset_svg(name: str, generations: Optional[int] = Query(None, ge=0)) -> Response:
        preset, target = resolve(name, generations)
        _, drawing, _ = grow(preset.config, target)
        return Response(content=to_svg(drawing, title=preset.title), media_type="image/svg+xml")

    @app.post("/api/presets/{name}/step")
    def step_preset(name: str) -> JSONResponse:
        return JSONResponse(manager.step(name))

    @app.post("/api/presets/{name}/reset")
    def reset_preset(name: str) -> JSONResponse:
        manager.reset(name)
        return JSONResponse({"name": name, "reset": True})

    return app


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Serve bundled L-system presets over HTTP.")
    parser.add_argument("--host", default="127.0.0.1", help="Host interface to bind.")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")
    parser.add_argument("--max-length", type=int, default=MAX_LENGTH,
                        help="Longest generation string the service will build.")
    args = parser.parse_args(argv)

    app = create_app(max_length=args.max_length)
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
