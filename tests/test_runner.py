from __future__ import annotations

from pathlib import Path

import pytest

from rjg.engine import Generator
from rjg.io import JsonlWriter
from rjg.runner import run_generation
from rjg.utils.errors import UndefinedVariableError


def test_run_writes_and_echoes_in_order(tmp_path: Path) -> None:
    path = tmp_path / "out.jsonl"
    echoed: list[str] = []
    gen = Generator()
    with JsonlWriter(path) as writer:
        n = run_generation(gen, {"id": "$i"}, 3, writer, echo=echoed.append)
    assert n == 3
    assert echoed == ['{"id":0}', '{"id":1}', '{"id":2}']
    assert path.read_text(encoding="utf-8").splitlines() == echoed


def test_run_aborts_on_first_error(tmp_path: Path) -> None:
    path = tmp_path / "out.jsonl"
    gen = Generator({"ok": 1})
    template = {"$oneof": ["$ok"]}
    with JsonlWriter(path) as writer:
        run_generation(gen, template, 2, writer)
    assert writer.count == 2

    template = {"v": {"$str": ["$i", "$missing"]}}
    with pytest.raises(UndefinedVariableError):
        with JsonlWriter(path) as writer:
            run_generation(gen, template, 2, writer)
    assert writer.count == 0
    assert path.read_text(encoding="utf-8") == ""


def test_zero_count(tmp_path: Path) -> None:
    with JsonlWriter(tmp_path / "out.jsonl") as writer:
        assert run_generation(Generator(), "$i", 0, writer) == 0
    assert writer.count == 0


def test_negative_count(tmp_path: Path) -> None:
    with JsonlWriter(tmp_path / "out.jsonl") as writer:
        with pytest.raises(ValueError):
            run_generation(Generator(), "$i", -1, writer)
