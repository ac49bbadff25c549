"""
Directory enumeration for the merge pipeline.

**Conceptual**: Finds the work to do. The root directory's immediate
subdirectories each become one merged output, and within each subdirectory
every `.csv` file (case-insensitive extension, non-recursive) contributes rows.

**Ordering**: Both listings are sorted by path so that runs are reproducible
regardless of the order the operating system returns directory entries in.
The first file of each sorted listing defines the canonical header, so this
order is part of the output contract, not just cosmetics.

**Errors**: Failing to list a directory at all is fatal (DirectoryListingError).
Individual entries whose type cannot be determined (dangling symlinks, stat
failures) are skipped.
"""

from pathlib import Path
from typing import Iterable


class DirectoryListingError(OSError):
    """
    Raised when a directory cannot be listed (missing, not a directory,
    permission denied). The message names the offending path.
    """

    def __init__(self, path: Path, error: OSError):
        super().__init__(f"Failed to list directory '{path}'. Error: {error}")
        self.path = path


def is_csv_file(path: Path) -> bool:
    """True if the file extension is `csv`, compared case-insensitively."""
    return path.suffix.lower() == ".csv"


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def _list_entries(directory: Path) -> list[Path]:
    try:
        return list(directory.iterdir())
    except OSError as e:
        raise DirectoryListingError(directory, e) from e


def list_subdirectories(root: Path | str, exclude: Iterable[Path] = ()) -> list[Path]:
    """
    List the immediate subdirectories of `root`, sorted by path.

    Args:
        root: Directory to scan.
        exclude: Directories to leave out. Compared after resolving, so
                 `./_out` and an absolute path to the same place both match.

    Returns:
        Sorted list of subdirectory paths.

    Raises:
        DirectoryListingError: If `root` cannot be listed.
    """
    root = Path(root)
    excluded = {Path(p).resolve() for p in exclude}

    subdirs = [
        entry for entry in _list_entries(root)
        if _is_dir(entry) and entry.resolve() not in excluded
    ]
    return sorted(subdirs)


def list_csv_files(directory: Path | str) -> list[Path]:
    """
    List the regular `.csv` files directly inside `directory`, sorted by path.

    Raises:
        DirectoryListingError: If `directory` cannot be listed.
    """
    directory = Path(directory)
    csv_files = [
        entry for entry in _list_entries(directory)
        if _is_file(entry) and is_csv_file(entry)
    ]
    return sorted(csv_files)
