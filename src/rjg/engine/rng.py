"""Randomness sources for the resolution engine.

Every random draw the engine makes goes through a :class:`RandomSource`, which
is threaded through :class:`~rjg.engine.resolver.GenerationContext`.  Two
implementations are provided:

``SystemRandomSource``
    A single shared :class:`random.Random`, seeded from the OS.  Draws are
    serialized with a lock so one instance can be shared between threads.

``SeededRandomSource``
    Reproducible output.  Each iteration gets its own :class:`random.Random`
    derived from SHA-256 over a namespace, the seed text and the iteration
    index, so iteration ``i`` can be regenerated in isolation and iterations
    can be partitioned across workers without sharing state.
"""

from __future__ import annotations

import hashlib
import random
import threading
from typing import Final, Protocol, runtime_checkable

_NS_ITERATION: Final = b"rjg/v1/iteration"


@runtime_checkable
class RandomSource(Protocol):
    """Interface the engine uses for every random draw."""

    def randint(self, low: int, high: int) -> int:
        """Return a uniform integer in ``[low, high]``."""

        ...

    def randbool(self) -> bool:
        """Return ``True`` or ``False`` with equal probability."""

        ...

    def for_iteration(self, index: int) -> RandomSource:
        """Return the source to use while generating iteration ``index``."""

        ...


class SystemRandomSource:
    """Process-wide, non-reproducible randomness."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._lock = threading.Lock()

    def randint(self, low: int, high: int) -> int:
        with self._lock:
            return self._rng.randint(low, high)

    def randbool(self) -> bool:
        with self._lock:
            return self._rng.getrandbits(1) == 1

    def for_iteration(self, index: int) -> SystemRandomSource:
        return self


class _IterationSource:
    """Unshared source bound to a single iteration."""

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    def randint(self, low: int, high: int) -> int:
        return self._rng.randint(low, high)

    def randbool(self) -> bool:
        return self._rng.getrandbits(1) == 1

    def for_iteration(self, index: int) -> _IterationSource:
        return self


class SeededRandomSource:
    """Reproducible randomness derived from a seed string."""

    def __init__(self, seed: str) -> None:
        self.seed = seed
        self._fallback: _IterationSource | None = None

    def rng_for(self, index: int) -> random.Random:
        """Derive the :class:`random.Random` for iteration ``index``."""

        data = _NS_ITERATION + self.seed.encode("utf-8") + b"/" + str(index).encode("ascii")
        digest = hashlib.sha256(data).digest()
        return random.Random(int.from_bytes(digest, "big"))

    def for_iteration(self, index: int) -> _IterationSource:
        return _IterationSource(self.rng_for(index))

    # Direct draws outside of an iteration use a stream bound to index -1.

    def _direct(self) -> _IterationSource:
        if self._fallback is None:
            self._fallback = self.for_iteration(-1)
        return self._fallback

    def randint(self, low: int, high: int) -> int:
        return self._direct().randint(low, high)

    def randbool(self) -> bool:
        return self._direct().randbool()


def random_source(seed: str | None = None) -> RandomSource:
    """Return a seeded source when ``seed`` is given, else the system source."""

    if seed is None:
        return SystemRandomSource()
    return SeededRandomSource(seed)


__all__ = [
    "RandomSource",
    "SystemRandomSource",
    "SeededRandomSource",
    "random_source",
]
