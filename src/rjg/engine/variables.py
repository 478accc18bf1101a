"""User variable store.

Variables are supplied as ``name -> text`` pairs.  Each text is parsed as JSON
on its own; text that is not valid JSON is kept as a plain string and a
warning is logged, so ``--var name=Alice`` and ``--var name='"Alice"'`` both
work.  Parsed values are compiled with the same prefix as the template, which
lets a variable contain directives or refer to other variables.

The store is built once before generation starts and never mutated.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from rjg.utils.logging import get_logger

from .nodes import DEFAULT_PREFIX, Node, loads_json, parse_template

logger = get_logger(__name__)


class VariableStore(Mapping[str, Node]):
    """Read-only mapping of variable names (unprefixed) to compiled values."""

    def __init__(
        self,
        values: Mapping[str, Any] | None = None,
        *,
        prefix: str = DEFAULT_PREFIX,
    ) -> None:
        raw = dict(values or {})
        self.prefix = prefix
        self._raw = MappingProxyType(raw)
        self._nodes = MappingProxyType(
            {name: parse_template(value, prefix=prefix) for name, value in raw.items()}
        )

    @classmethod
    def from_text(
        cls,
        pairs: Mapping[str, str] | Iterable[tuple[str, str]],
        *,
        prefix: str = DEFAULT_PREFIX,
    ) -> VariableStore:
        """Build a store by JSON-parsing each value, falling back to the raw text."""

        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        values: dict[str, Any] = {}
        for name, text in items:
            try:
                values[name] = loads_json(text)
            except ValueError as exc:
                logger.warning(
                    "Failed to parse variable %r as JSON, storing as string: %s", name, exc
                )
                values[name] = text
        return cls(values, prefix=prefix)

    def raw(self, name: str) -> Any:
        """Return the parsed (uncompiled) value of ``name``."""

        return self._raw[name]

    def __getitem__(self, name: str) -> Node:
        return self._nodes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"VariableStore({dict(self._raw)!r}, prefix={self.prefix!r})"


def parse_assignments(items: Iterable[str]) -> list[tuple[str, str]]:
    """Split ``key=value`` strings on the first ``=``.

    Raises
    ------
    ValueError
        If an item has no ``=`` or the key is empty.
    """

    pairs: list[tuple[str, str]] = []
    for item in items:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Invalid variable assignment {item!r}, expected key=value")
        pairs.append((key, value))
    return pairs


__all__ = ["VariableStore", "parse_assignments"]
