"""Platform abstraction layer."""

from .files import CopyError, atomic_write_text, copy_file, remove_tree
from .process import ProcessError, run

__all__ = [
    # files
    "CopyError",
    "atomic_write_text",
    "copy_file",
    "remove_tree",
    # process
    "ProcessError",
    "run",
]
