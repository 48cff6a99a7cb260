#!/usr/bin/env python3
# Local filesystem helpers for svn working copies

# Import Python standard modules
from pathlib import Path
from typing import BinaryIO
import os
import shutil


def delete_recursively(path) -> bool:
    """
    Best-effort recursive delete of a file or directory tree

    Each entry is removed on its own; a failure on one child does not stop the removal of its siblings

    Returns True only if every file and directory was removed,
    False if the path didn't exist, or if any removal failed
    """

    path = Path(path)

    # Check for symlinks first, so we remove the link, not the tree it points to
    if not path.exists() and not path.is_symlink():
        return False

    if path.is_symlink() or not path.is_dir():
        return _remove(path, os.remove)

    result = True

    try:
        children = list(path.iterdir())
    except OSError:
        children = []
        result = False

    for child in children:
        result &= delete_recursively(child)

    result &= _remove(path, os.rmdir)

    return result


def _remove(path: Path, remove_function) -> bool:

    try:

        remove_function(path)
        return True

    except PermissionError:

        # svn marks its pristine copies read-only, so make them writable and try once more
        try:
            os.chmod(path, 0o700 if path.is_dir() else 0o600)
            remove_function(path)
            return True
        except OSError:
            return False

    except OSError:
        return False


def copy_stream(source: BinaryIO, target_path) -> int:
    """
    Drain the source stream into the file at target_path, overwriting it

    Flushes and syncs the file before returning, so the bytes are on disk before an svn commit reads them

    Returns the number of bytes written
    """

    with open(target_path, "wb") as target_file:

        shutil.copyfileobj(source, target_file)
        target_file.flush()
        os.fsync(target_file.fileno())

        return target_file.tell()
