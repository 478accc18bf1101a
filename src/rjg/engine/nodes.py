"""Compiled template tree.

A template arrives as a plain JSON value (``dict``/``list``/``str``/number/
``bool``/``None``).  :func:`parse_template` classifies every node once, up
front, into an immutable tagged tree so resolution never has to guess what an
object means:

- a string starting with the prefix is a :class:`DirectiveCall` when the rest
  is a registered directive name, otherwise a :class:`VariableRef`;
- an object holding exactly one directive key is a :class:`DirectiveCall`
  (any literal keys beside it are ignored, with a warning);
- an object holding two or more directive keys is rejected;
- every other object is a :class:`PlainObject`;
- arrays become :class:`ArrayNode`.  A plain array is data and is emitted
  as-is, so only the raw list is kept; its elements are compiled only when
  the array is a directive's parameter list (`$str`, `$obj`, `$oneof`).

The same tree is reused, read-only, for every iteration.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

from rjg.utils.errors import TemplateError
from rjg.utils.logging import get_logger

from .registry import is_directive

DEFAULT_PREFIX = "$"

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Literal:
    """Null, boolean, number or non-prefixed string."""

    value: Any


@dataclass(frozen=True, slots=True)
class ArrayNode:
    """JSON array.

    ``raw`` is emitted verbatim when the array appears as ordinary template
    data.  ``items`` holds the compiled elements and is only filled in when
    the array is a directive's parameter list.
    """

    raw: list[Any]
    items: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class PlainObject:
    """Object whose keys and values are resolved individually."""

    entries: tuple[tuple[Node, Node], ...]

    def get(self, name: str) -> Node | None:
        """Return the value stored under the literal key ``name``."""

        for key, value in self.entries:
            if isinstance(key, Literal) and key.value == name:
                return value
        return None


@dataclass(frozen=True, slots=True)
class DirectiveCall:
    """Invocation of a registered directive.

    ``bare`` is true for the string form (``"$bool"``), which carries no
    parameters, and false for the single-key object form.
    """

    name: str
    token: str
    params: Node | None
    bare: bool = False


@dataclass(frozen=True, slots=True)
class VariableRef:
    """Prefixed string that names a user variable."""

    name: str
    token: str


Node = Union[Literal, ArrayNode, PlainObject, DirectiveCall, VariableRef]


def _strip(token: str, prefix: str) -> str | None:
    if token.startswith(prefix):
        return token[len(prefix) :]
    return None


def _parse_string(value: str, prefix: str) -> Node:
    name = _strip(value, prefix)
    if name is None:
        return Literal(value)
    if is_directive(name):
        return DirectiveCall(name=name, token=value, params=None, bare=True)
    return VariableRef(name=name, token=value)


def _parse_object(value: dict[str, Any], prefix: str) -> Node:
    directive_keys = [
        key for key in value if (name := _strip(key, prefix)) is not None and is_directive(name)
    ]
    if len(directive_keys) > 1:
        raise TemplateError(
            "object mixes several directives: " + ", ".join(repr(k) for k in directive_keys)
        )
    if directive_keys:
        key = directive_keys[0]
        if len(value) > 1:
            ignored = [k for k in value if k != key]
            logger.warning(
                "Ignoring keys %s next to directive %r",
                ", ".join(repr(k) for k in ignored),
                key,
            )
        return DirectiveCall(
            name=key[len(prefix) :],
            token=key,
            params=_parse_params(value[key], prefix),
        )
    entries = tuple(
        (_parse_string(key, prefix), parse_template(val, prefix=prefix))
        for key, val in value.items()
    )
    return PlainObject(entries)


def _parse_params(value: Any, prefix: str) -> Node:
    if isinstance(value, (list, tuple)):
        raw = list(value)
        return ArrayNode(raw=raw, items=tuple(parse_template(v, prefix=prefix) for v in raw))
    return parse_template(value, prefix=prefix)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def loads_json(text: str) -> Any:
    """Parse strict JSON; ``NaN`` and ``Infinity`` are rejected."""

    return json.loads(text, parse_constant=_reject_constant)


def parse_template(value: Any, *, prefix: str = DEFAULT_PREFIX) -> Node:
    """Compile a JSON value into a template tree.

    Parameters
    ----------
    value:
        Result of :func:`json.loads` (or an equivalent Python structure).
    prefix:
        Marker that distinguishes directive and variable tokens.

    Raises
    ------
    TemplateError
        If an object holds more than one directive key, a key is not a
        string, or ``value`` is not JSON-like.
    """

    if not prefix:
        raise ValueError("prefix must be a non-empty string")
    if isinstance(value, str):
        return _parse_string(value, prefix)
    if isinstance(value, dict):
        for key in value:
            if not isinstance(key, str):
                raise TemplateError(f"object keys must be strings, got {key!r}")
        return _parse_object(value, prefix)
    if isinstance(value, (list, tuple)):
        return ArrayNode(raw=list(value))
    if value is None or isinstance(value, (bool, int, float)):
        return Literal(value)
    raise TemplateError(f"unsupported template value of type {type(value).__name__}")


def load_template(text: str, *, prefix: str = DEFAULT_PREFIX) -> Node:
    """Parse JSON ``text`` and compile it with :func:`parse_template`."""

    try:
        value = loads_json(text)
    except ValueError as exc:
        raise TemplateError(f"invalid JSON template: {exc}") from exc
    return parse_template(value, prefix=prefix)


__all__ = [
    "DEFAULT_PREFIX",
    "Literal",
    "ArrayNode",
    "PlainObject",
    "DirectiveCall",
    "VariableRef",
    "Node",
    "parse_template",
    "load_template",
    "loads_json",
]
