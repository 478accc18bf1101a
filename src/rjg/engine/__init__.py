"""Template resolution engine: compiled templates, directives, variables and randomness."""

from .nodes import (
    DEFAULT_PREFIX,
    ArrayNode,
    DirectiveCall,
    Literal,
    Node,
    PlainObject,
    VariableRef,
    load_template,
    parse_template,
)
from .registry import DIRECTIVES, DirectiveSpec, ParamShape, all_directives, is_directive
from .resolver import GenerationContext, Generator, resolve, stringify
from .rng import RandomSource, SeededRandomSource, SystemRandomSource, random_source
from .variables import VariableStore, parse_assignments

__all__ = [
    "DEFAULT_PREFIX",
    "ArrayNode",
    "DirectiveCall",
    "Literal",
    "Node",
    "PlainObject",
    "VariableRef",
    "load_template",
    "parse_template",
    "DIRECTIVES",
    "DirectiveSpec",
    "ParamShape",
    "all_directives",
    "is_directive",
    "GenerationContext",
    "Generator",
    "resolve",
    "stringify",
    "RandomSource",
    "SeededRandomSource",
    "SystemRandomSource",
    "random_source",
    "VariableStore",
    "parse_assignments",
]
