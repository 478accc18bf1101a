"""Reading templates and writing generated documents.

Templates are read as plain text; generated documents are written as JSON
Lines, one compact document per line.  This package performs no template
interpretation, see :mod:`rjg.engine` for that.
"""

from .jsonl import JsonlWriter, dumps
from .readers import read_template_file

__all__ = ["JsonlWriter", "dumps", "read_template_file"]
