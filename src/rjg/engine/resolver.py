"""Template resolution engine.

:func:`resolve` walks a compiled template (see :mod:`rjg.engine.nodes`) and
returns a fresh JSON-like value with every directive and variable replaced.
Resolution for one iteration depends only on the template, the variable
store, the iteration index and the draws taken from the context's
:class:`~rjg.engine.rng.RandomSource`; nothing survives between iterations.

Rules, by node kind:

- plain objects resolve every key and value; keys must resolve to strings;
- directive calls dispatch to the handler registered in ``_HANDLERS``;
- variable references resolve the stored value recursively, failing on an
  unknown name or on a reference cycle;
- literals and plain arrays are returned unchanged.  Arrays are only walked
  element by element when they are a directive's parameters (``$str``,
  ``$obj``, ``$oneof``).

Errors raise :class:`~rjg.utils.errors.GenerationError` subclasses and gather
a context trail on the way out; nothing is recovered locally.
"""

from __future__ import annotations

import copy
import json
import string
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from rjg.utils.errors import (
    GenerationError,
    InvalidBoundError,
    MalformedParametersError,
    NonStringKeyError,
    UndefinedVariableError,
    VariableCycleError,
)

from .nodes import (
    DEFAULT_PREFIX,
    ArrayNode,
    DirectiveCall,
    Literal,
    Node,
    PlainObject,
    VariableRef,
    parse_template,
)
from .registry import INT_RANGES
from .rng import RandomSource, SystemRandomSource
from .variables import VariableStore


@dataclass(frozen=True)
class GenerationContext:
    """State shared by every resolution call of one iteration."""

    index: int
    variables: Mapping[str, Node] = field(default_factory=dict)
    rng: RandomSource = field(default_factory=SystemRandomSource)
    prefix: str = DEFAULT_PREFIX
    visiting: tuple[str, ...] = ()

    def entering(self, name: str) -> GenerationContext:
        """Return a context marking variable ``name`` as being resolved."""

        if name in self.visiting:
            chain = [self.prefix + n for n in (*self.visiting, name)]
            raise VariableCycleError(chain)
        return GenerationContext(
            index=self.index,
            variables=self.variables,
            rng=self.rng,
            prefix=self.prefix,
            visiting=(*self.visiting, name),
        )


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def _as_int(value: Any) -> int | None:
    """Return ``value`` as an integer, truncating floats; ``None`` otherwise."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        try:
            return int(value)
        except (OverflowError, ValueError):
            return None
    return None


def stringify(value: Any) -> str:
    """Render a resolved value the way ``$str`` concatenates it."""

    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def _literal_number(params: PlainObject, key: str, directive: str) -> int:
    node = params.get(key)
    if node is None:
        raise InvalidBoundError(directive, f"missing {key!r}")
    value = _as_int(node.value) if isinstance(node, Literal) else None
    if value is None:
        raise InvalidBoundError(directive, f"{key!r} must be a number")
    return value


def _param_list(call: DirectiveCall) -> tuple[Node, ...]:
    if not isinstance(call.params, ArrayNode):
        raise MalformedParametersError(call.token, "requires a list of values")
    if not call.params.items:
        raise MalformedParametersError(call.token, "requires a non-empty list")
    return call.params.items


def _pick(items: tuple[Node, ...], ctx: GenerationContext) -> Node:
    return items[ctx.rng.randint(0, len(items) - 1)]


# ---------------------------------------------------------------------------
# Directive handlers
# ---------------------------------------------------------------------------


def _int(call: DirectiveCall, ctx: GenerationContext) -> int:
    if not isinstance(call.params, PlainObject):
        raise MalformedParametersError(call.token, "requires a {min, max} object")
    low = _literal_number(call.params, "min", call.token)
    high = _literal_number(call.params, "max", call.token)
    if low > high:
        raise InvalidBoundError(call.token, f"min ({low}) is greater than max ({high})")
    return ctx.rng.randint(low, high)


def _str(call: DirectiveCall, ctx: GenerationContext) -> str:
    if isinstance(call.params, ArrayNode):
        return "".join(stringify(resolve(item, ctx)) for item in call.params.items)
    if call.params is None:
        raise MalformedParametersError(call.token, "requires a list or a value yielding a list")
    result = resolve(call.params, ctx)
    if not isinstance(result, list):
        raise MalformedParametersError(
            call.token, f"expected a list but got {type(result).__name__}"
        )
    return "".join(stringify(item) for item in result)


def _arr(call: DirectiveCall, ctx: GenerationContext) -> list[Any]:
    if not isinstance(call.params, PlainObject):
        raise MalformedParametersError(call.token, "requires a {len, val} object")
    len_node = call.params.get("len")
    if len_node is None:
        raise InvalidBoundError(call.token, "missing 'len'")
    try:
        length = _as_int(resolve(len_node, ctx))
    except GenerationError as exc:
        raise exc.add_context("len")
    if length is None:
        raise InvalidBoundError(call.token, "'len' must resolve to an integer")
    if length < 0:
        raise InvalidBoundError(call.token, f"'len' must not be negative, got {length}")
    val = call.params.get("val")
    if val is None:
        raise MalformedParametersError(call.token, "missing 'val'")
    result = []
    for n in range(length):
        try:
            result.append(resolve(val, ctx))
        except GenerationError as exc:
            raise exc.add_context(f"[{n}]")
    return result


def _obj(call: DirectiveCall, ctx: GenerationContext) -> Any:
    chosen = _pick(_param_list(call), ctx)
    if not isinstance(chosen, PlainObject) and not (
        isinstance(chosen, DirectiveCall) and not chosen.bare
    ):
        raise MalformedParametersError(call.token, "must contain a list of objects")
    return resolve(chosen, ctx)


def _oneof(call: DirectiveCall, ctx: GenerationContext) -> Any:
    return resolve(_pick(_param_list(call), ctx), ctx)


def _option(call: DirectiveCall, ctx: GenerationContext) -> Any:
    if call.params is None or call.params == Literal(None):
        raise MalformedParametersError(call.token, "requires a value")
    # A one-element pick always lands on the value itself.
    return resolve(_pick((call.params,), ctx), ctx)


def _index(call: DirectiveCall, ctx: GenerationContext) -> int:
    return ctx.index


def _ranged(call: DirectiveCall, ctx: GenerationContext) -> int:
    low, high = INT_RANGES[call.name]
    return ctx.rng.randint(low, high)


def _bool(call: DirectiveCall, ctx: GenerationContext) -> bool:
    return ctx.rng.randbool()


def _alpha(call: DirectiveCall, ctx: GenerationContext) -> str:
    letters = string.ascii_lowercase if ctx.rng.randbool() else string.ascii_uppercase
    return letters[ctx.rng.randint(0, 25)]


Handler = Callable[[DirectiveCall, GenerationContext], Any]

_HANDLERS: dict[str, Handler] = {
    "int": _int,
    "str": _str,
    "arr": _arr,
    "obj": _obj,
    "oneof": _oneof,
    "option": _option,
    "i": _index,
    "bool": _bool,
    "alpha": _alpha,
    **{name: _ranged for name in INT_RANGES},
}


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _resolve_object(node: PlainObject, ctx: GenerationContext) -> dict[str, Any]:
    generated: dict[str, Any] = {}
    for key_node, value_node in node.entries:
        label = key_node.value if isinstance(key_node, Literal) else key_node.token
        try:
            key = resolve(key_node, ctx)
            if not isinstance(key, str):
                raise NonStringKeyError(label, key)
            generated[key] = resolve(value_node, ctx)
        except GenerationError as exc:
            raise exc.add_context(f"key {label!r}")
    return generated


def _resolve_variable(node: VariableRef, ctx: GenerationContext) -> Any:
    stored = ctx.variables.get(node.name)
    if stored is None:
        raise UndefinedVariableError(node.token)
    inner = ctx.entering(node.name)
    try:
        return resolve(stored, inner)
    except VariableCycleError:
        raise
    except GenerationError as exc:
        raise exc.add_context(f"variable {node.token!r}")


def resolve(node: Node, ctx: GenerationContext) -> Any:
    """Resolve ``node`` into a concrete JSON-like value.

    Raises
    ------
    GenerationError
        Subclass describing the first failure encountered.
    """

    if isinstance(node, PlainObject):
        return _resolve_object(node, ctx)
    if isinstance(node, DirectiveCall):
        try:
            return _HANDLERS[node.name](node, ctx)
        except GenerationError as exc:
            raise exc.add_context(f"directive {node.token!r}")
    if isinstance(node, VariableRef):
        return _resolve_variable(node, ctx)
    if isinstance(node, ArrayNode):
        return copy.deepcopy(node.raw)
    return node.value


# ---------------------------------------------------------------------------
# Generator facade
# ---------------------------------------------------------------------------


class Generator:
    """Bind a variable store, randomness source and prefix for repeated runs.

    Parameters
    ----------
    variables:
        A :class:`VariableStore`, a mapping of already-parsed values, or
        ``None`` for no variables.
    rng:
        Randomness source; defaults to :class:`SystemRandomSource`.
    prefix:
        Directive/variable marker, ``"$"`` by default.
    """

    def __init__(
        self,
        variables: VariableStore | Mapping[str, Any] | None = None,
        *,
        rng: RandomSource | None = None,
        prefix: str = DEFAULT_PREFIX,
    ) -> None:
        if isinstance(variables, VariableStore):
            if variables.prefix != prefix:
                raise ValueError(
                    f"variable store prefix {variables.prefix!r} does not match {prefix!r}"
                )
            store = variables
        else:
            store = VariableStore(variables, prefix=prefix)
        self.variables = store
        self.rng: RandomSource = rng if rng is not None else SystemRandomSource()
        self.prefix = prefix

    def compile(self, template: Any) -> Node:
        """Compile a raw JSON value with this generator's prefix."""

        return parse_template(template, prefix=self.prefix)

    def context(self, index: int) -> GenerationContext:
        return GenerationContext(
            index=index,
            variables=self.variables,
            rng=self.rng.for_iteration(index),
            prefix=self.prefix,
        )

    def generate(self, index: int, template: Any) -> Any:
        """Resolve ``template`` for iteration ``index``.

        ``template`` may be a compiled node or a raw JSON value; raw values
        are compiled on every call, so callers looping over many iterations
        should :meth:`compile` once.
        """

        if index < 0:
            raise ValueError("iteration index must be >= 0")
        node = template if isinstance(template, _NODE_TYPES) else self.compile(template)
        return resolve(node, self.context(index))

    def iter_generate(self, template: Any, count: int, *, start: int = 0) -> Iterator[Any]:
        """Yield results for iterations ``start .. start + count - 1`` in order."""

        node = template if isinstance(template, _NODE_TYPES) else self.compile(template)
        for index in range(start, start + count):
            yield self.generate(index, node)


_NODE_TYPES = (Literal, ArrayNode, PlainObject, DirectiveCall, VariableRef)


__all__ = ["GenerationContext", "Generator", "resolve", "stringify"]
