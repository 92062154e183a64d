import fcntl
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


def lock_path_for(path: Path) -> Path:
    """Sidecar lock file. Its path stays stable when the guarded file is renamed."""
    return path.with_name(path.name + ".lock")


@contextmanager
def exclusive_lock(lock_path: Path) -> Iterator[None]:
    """
    Hold an advisory exclusive lock (flock) for the duration of the block.

    flock locks belong to the open file description, so threads of one
    process exclude each other as well as separate processes do.
    """
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with open(lock_path, "a") as handle:
        fcntl.flock(handle, fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(handle, fcntl.LOCK_UN)
