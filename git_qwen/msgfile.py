"""Commit Message File - the one temporary file a run owns.

The file is removed in a `finally` as soon as it exists, so every way out
of the `with` block (success, pipeline error, Ctrl-C, a forwarded SIGTERM)
deletes it. SIGKILL cannot be intercepted and will leave it behind.
"""

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from git_qwen.errors import TempFileIOFailure
from git_qwen.output import print_warning

PREFIX = 'COMMIT_EDITMSG-'
SUFFIX = '.gitcommit'  # lets editors pick git commit highlighting


@contextmanager
def message_file(content: str, directory: str | os.PathLike | None = None) -> Iterator[Path]:
    """Create a uniquely named file holding content and yield its path."""
    try:
        fd, name = tempfile.mkstemp(prefix=PREFIX, suffix=SUFFIX, dir=directory)
    except OSError as e:
        raise TempFileIOFailure(f"Failed to create temporary file: {e}")

    path = Path(name)
    try:
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            raise TempFileIOFailure(f"Failed to write {path}: {e}")
        yield path
    finally:
        _remove(path)


def read_message(path: Path) -> str:
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            return f.read()
    except OSError as e:
        raise TempFileIOFailure(f"Failed to read edited message: {e}")


def write_message(path: Path, content: str) -> None:
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        raise TempFileIOFailure(f"Failed to write {path}: {e}")


def _remove(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        # Report it so temp files don't silently accumulate
        print_warning(f"Could not delete temp file {path}: {e}")
