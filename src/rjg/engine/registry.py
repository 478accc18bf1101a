"""Directive registry.

The set of directives is fixed: this module is a lookup table describing each
reserved name and the shape of parameters it accepts.  The resolution engine
owns the behaviour; the registry is consulted when a template is compiled to
decide whether a prefixed token is a directive or a variable reference.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class ParamShape(Enum):
    """Parameter shapes accepted by directives."""

    NONE = "none"  # "$bool"
    BOUNDS = "bounds"  # {"min": 1, "max": 6}
    ARRAY_SPEC = "array_spec"  # {"len": 3, "val": ...}
    LIST = "list"  # [a, b, c]
    VALUE = "value"  # any single value
    LIST_OR_VALUE = "list_or_value"  # $str


@dataclass(frozen=True, slots=True)
class DirectiveSpec:
    """Static description of a directive."""

    name: str
    params: ParamShape
    description: str


_SPECS = (
    DirectiveSpec("int", ParamShape.BOUNDS, "uniform integer in [min, max]"),
    DirectiveSpec(
        "str",
        ParamShape.LIST_OR_VALUE,
        "concatenate resolved values into a string",
    ),
    DirectiveSpec("arr", ParamShape.ARRAY_SPEC, "array of len values resolved from val"),
    DirectiveSpec("obj", ParamShape.LIST, "one object picked from a list"),
    DirectiveSpec("oneof", ParamShape.LIST, "one value picked from a list"),
    DirectiveSpec("option", ParamShape.VALUE, "the value, resolved"),
    DirectiveSpec("i", ParamShape.NONE, "current iteration index"),
    DirectiveSpec("u8", ParamShape.NONE, "unsigned 8-bit integer"),
    DirectiveSpec("u16", ParamShape.NONE, "unsigned 16-bit integer"),
    DirectiveSpec("u32", ParamShape.NONE, "unsigned 32-bit integer"),
    DirectiveSpec("i8", ParamShape.NONE, "signed 8-bit integer"),
    DirectiveSpec("i16", ParamShape.NONE, "signed 16-bit integer"),
    DirectiveSpec("i32", ParamShape.NONE, "signed 32-bit integer"),
    DirectiveSpec("i64", ParamShape.NONE, "signed 64-bit integer"),
    DirectiveSpec("digit", ParamShape.NONE, "integer in [0, 9]"),
    DirectiveSpec("bool", ParamShape.NONE, "true or false"),
    DirectiveSpec("alpha", ParamShape.NONE, "one ASCII letter, either case"),
)

DIRECTIVES: MappingProxyType[str, DirectiveSpec] = MappingProxyType(
    {spec.name: spec for spec in _SPECS}
)

# Inclusive ranges for the fixed-width integer directives.
INT_RANGES: MappingProxyType[str, tuple[int, int]] = MappingProxyType(
    {
        "u8": (0, 2**8 - 1),
        "u16": (0, 2**16 - 1),
        "u32": (0, 2**32 - 1),
        "i8": (-(2**7), 2**7 - 1),
        "i16": (-(2**15), 2**15 - 1),
        "i32": (-(2**31), 2**31 - 1),
        "i64": (-(2**63), 2**63 - 1),
        "digit": (0, 9),
    }
)


def is_directive(name: str) -> bool:
    """Return ``True`` when ``name`` (without prefix) is a reserved directive."""

    return name in DIRECTIVES


def get_directive(name: str) -> DirectiveSpec | None:
    """Return the spec for ``name``, or ``None`` when it is not a directive."""

    return DIRECTIVES.get(name)


def all_directives() -> list[DirectiveSpec]:
    """Return every directive in declaration order."""

    return list(DIRECTIVES.values())


__all__ = [
    "ParamShape",
    "DirectiveSpec",
    "DIRECTIVES",
    "INT_RANGES",
    "is_directive",
    "get_directive",
    "all_directives",
]
