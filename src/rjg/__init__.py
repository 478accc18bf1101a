"""Random JSON generator.

Synthesizes JSON documents from a template with embedded ``$`` directives and
user supplied variables.  See :mod:`rjg.engine` for the resolution engine and
:mod:`rjg.cli` for the command line entry point.
"""

__version__ = "0.1.0"
