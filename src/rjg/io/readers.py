"""Template file reader."""

from __future__ import annotations

import os
from pathlib import Path


def read_template_file(path: str | os.PathLike[str], *, encoding: str = "utf-8-sig") -> str:
    """Return the contents of ``path``.

    The default ``utf-8-sig`` encoding strips a leading byte-order mark, which
    :func:`json.loads` would otherwise reject.
    """

    return Path(path).read_text(encoding=encoding)


__all__ = ["read_template_file"]
