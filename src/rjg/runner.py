"""Iteration driver.

Runs the engine once per requested iteration, in order, writing each result
before echoing it.  The first :class:`~rjg.utils.errors.GenerationError`
aborts the whole run; lines already written stay on disk.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .engine import Generator, Node
from .io import JsonlWriter
from .utils.logging import get_logger

logger = get_logger(__name__)


def run_generation(
    generator: Generator,
    template: Node | Any,
    count: int,
    writer: JsonlWriter,
    *,
    echo: Callable[[str], None] | None = None,
) -> int:
    """Generate ``count`` documents into ``writer``; return how many were written."""

    if count < 0:
        raise ValueError("count must be >= 0")
    for index, value in enumerate(generator.iter_generate(template, count)):
        line = writer.write(value)
        logger.debug("iteration %d: %d bytes", index, len(line))
        if echo is not None:
            echo(line)
    return count


__all__ = ["run_generation"]
