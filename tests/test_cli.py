import json
from pathlib import Path

import pytest

from lindenmayer.main import main


class TestCLI:
    def test_text_prints_every_generation(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--preset", "ball", "--generations", "3"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out == ["0: A", "1: AB", "2: ABBC", "3: ABBCBCAC"]

    def test_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--preset", "ball", "--generations", "2", "--format", "json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["name"] == "ball"
        assert payload["generation"] == 2
        assert payload["string"] == "ABBC"
        assert payload["length"] == 4
        assert payload["rules"] == ["A => AB", "B => BC", "C => AC"]

    def test_svg_to_file(self, tmp_path: Path) -> None:
        out = tmp_path / "koch.svg"
        assert main(["--preset", "quadratic_koch", "--generations", "1", "--format", "svg", "--output", str(out)]) == 0
        assert "<line" in out.read_text(encoding="utf-8")

    def test_svg_to_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--preset", "tree", "--generations", "1", "--format", "svg"]) == 0
        assert "<svg" in capsys.readouterr().out

    def test_ascii(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--preset", "contained_koch", "--generations", "0", "--format", "ascii"]) == 0
        assert "#" in capsys.readouterr().out

    def test_grammar_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "algae.toml"
        path.write_text('[grammar]\naxiom = "A"\nsymbols = "AB"\nrules = ["A => AB", "B => A"]\n', encoding="utf-8")
        assert main(["--grammar", str(path), "--generations", "3"]) == 0
        assert capsys.readouterr().out.splitlines()[-1] == "3: ABAAB"

    def test_default_generations_from_grammar(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--preset", "ball"]) == 0
        assert len(capsys.readouterr().out.splitlines()) == 5

    def test_list(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--list"]) == 0
        out = capsys.readouterr().out
        assert "quadratic_koch" in out
        assert "Quadratic Koch island" in out

    def test_unknown_preset(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--preset", "fern"]) == 2
        assert "Unknown preset 'fern'" in capsys.readouterr().err

    def test_missing_grammar_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--grammar", str(tmp_path / "missing.toml")]) == 2
        assert "not found" in capsys.readouterr().err

    def test_invalid_grammar_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "bad.toml"
        path.write_text('[grammar]\naxiom = "AZ"\nsymbols = "A"\nrules = ["A => AA"]\n', encoding="utf-8")
        assert main(["--grammar", str(path)]) == 2
        assert "unregistered symbols" in capsys.readouterr().err

    def test_source_required(self) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2

    def test_negative_generations(self) -> None:
        with pytest.raises(SystemExit):
            main(["--preset", "ball", "--generations", "-1"])
