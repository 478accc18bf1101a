"""JSON Lines writer.

:class:`JsonlWriter` appends one serialized document per line and flushes
after every write so that a run aborted by a later error keeps whatever was
already produced.  Directories required to store the file are created
automatically.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from types import TracebackType
from typing import IO, Any


def dumps(value: Any, *, sort_keys: bool = True) -> str:
    """Serialize ``value`` as compact, single-line JSON."""

    return json.dumps(
        value, separators=(",", ":"), ensure_ascii=False, sort_keys=sort_keys, allow_nan=False
    )


class JsonlWriter:
    """Context manager writing documents to a ``.jsonl`` file.

    Parameters
    ----------
    path:
        Destination file; truncated on open.
    encoding:
        Output encoding.  Defaults to UTF-8 without a byte-order mark.
    sort_keys:
        Emit object keys in sorted order.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        *,
        encoding: str = "utf-8",
        sort_keys: bool = True,
    ) -> None:
        self.path = Path(path)
        self.encoding = encoding
        self.sort_keys = sort_keys
        self.count = 0
        self._fh: IO[str] | None = None

    def __enter__(self) -> JsonlWriter:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = open(self.path, "w", encoding=self.encoding, newline="\n")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def write(self, value: Any) -> str:
        """Write ``value`` as one line and return the serialized text."""

        if self._fh is None:
            raise RuntimeError("JsonlWriter is not open")
        line = dumps(value, sort_keys=self.sort_keys)
        self._fh.write(line + "\n")
        self._fh.flush()
        self.count += 1
        return line

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None


__all__ = ["JsonlWriter", "dumps"]
