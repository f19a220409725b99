"""Module discovery and loading from the filesystem."""
import os
from pathlib import Path
from typing import Set

from .errors import LoadError
from ..utils import logger


# Tool state directories that hold downloaded copies of other modules
EXCLUDED_DIRS = {'.terraform', '.git', '.terragrunt-cache'}


def list_modules(root: str | Path, extension: str = ".tf") -> Set[Path]:
    """Find every directory under `root` that directly contains a config file.

    Args:
        root: Directory to walk recursively
        extension: Configuration file extension, including the dot

    Returns:
        Set of module directories (root included when it holds config files)

    Raises:
        LoadError: If root is missing or any directory cannot be listed
    """
    root = Path(root)
    if not root.is_dir():
        raise LoadError(root, "no such directory")

    def _raise(err: OSError):
        raise LoadError(err.filename or root, err.strerror or str(err))

    directories = set()
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames[:] = [d for d in dirnames if d not in EXCLUDED_DIRS]
        if any(Path(name).suffix == extension for name in filenames):
            module = Path(dirpath)
            logger.debug(f"Visited: {module}")
            directories.add(module)

    return directories


def load_module(path: str | Path, extension: str = ".tf") -> bytes:
    """Concatenate all config files of one module directory (not recursive).

    Files are read in name order and each is prefixed with a newline.

    Args:
        path: Module directory
        extension: Configuration file extension, including the dot

    Returns:
        Combined source bytes (empty when the directory has no config files)

    Raises:
        LoadError: If the directory or a file cannot be read
    """
    path = Path(path)
    try:
        entries = sorted(path.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise LoadError(path, e.strerror or str(e)) from e

    out = bytearray()
    for file_path in entries:
        if file_path.suffix != extension or file_path.is_dir():
            continue
        try:
            data = file_path.read_bytes()
        except OSError as e:
            raise LoadError(file_path, e.strerror or str(e)) from e
        out += b'\n'
        out += data

    return bytes(out)
