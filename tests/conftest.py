from __future__ import annotations

from collections.abc import Iterable

import pytest


class ScriptedSource:
    """RandomSource double returning pre-recorded draws.

    ``randint`` pops integers, clamped into the requested range so a script
    can say "first choice" with 0 and "last choice" with a large number.
    """

    def __init__(self, ints: Iterable[int] = (), bools: Iterable[bool] = ()) -> None:
        self.ints = list(ints)
        self.bools = list(bools)
        self.calls: list[tuple[int, int]] = []

    def randint(self, low: int, high: int) -> int:
        self.calls.append((low, high))
        value = self.ints.pop(0) if self.ints else low
        return max(low, min(high, value))

    def randbool(self) -> bool:
        return self.bools.pop(0) if self.bools else False

    def for_iteration(self, index: int) -> ScriptedSource:
        return self


@pytest.fixture
def scripted() -> type[ScriptedSource]:
    return ScriptedSource
