"""File utilities for JSON snapshot storage."""

import contextlib
import json
import os
import pathlib
import tempfile
from typing import Any, Generator, TextIO, Union


@contextlib.contextmanager
def atomic_write(path: Union[str, pathlib.Path]) -> Generator[TextIO, None, None]:
    """Context manager that replaces ``path`` only if the block succeeds.

    Writes go to a temporary file in the same directory, which is moved over
    ``path`` on exit. If the block raises, the temporary file is removed and
    the original file is left untouched.

    Args:
        path: Destination file

    Yields:
        Text file handle to write to

    Example:
        with atomic_write("data/users.json") as f:
            f.write("[]")
    """
    path = pathlib.Path(path)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise


def write_json(path: Union[str, pathlib.Path], data: Any) -> None:
    """Atomically write ``data`` as indented JSON."""
    with atomic_write(path) as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
