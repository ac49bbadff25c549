"""
Per-directory merge workflow.

**Conceptual**: Each immediate subdirectory of the root is merged into one
output file named after it. A directory moves through these states:

    Enumerating -> HeaderEstablished -> Merging(file i of n) -> Flushed -> Promoted

  1. Enumerating: list the directory's `.csv` files in sorted order. None
     found -> skip with a notice on stdout.
  2. HeaderEstablished: the first file's header (BOM stripped) becomes the
     canonical header. Empty -> skip with a warning on stderr.
  3. Merging: for every file (the first included), build a column mapping,
     report header differences on stderr, and stream each row through the
     mapping into the temp output.
  4. Flushed / Promoted: handled by `atomic_csv_writer`; the temp file is
     renamed onto `<output_dir>/<directory name>.csv`.

**Errors**: Anything that stops a directory from being merged correctly
(unlistable directory, unreadable or malformed CSV, write or rename failure)
is raised as MergeError and aborts the whole run. Header differences, empty
directories and empty headers are reported and never raised.

Directories, files and rows are processed strictly one after another.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from src.config.settings import MergeSettings
from src.data.discovery import DirectoryListingError, list_csv_files, list_subdirectories
from src.data.headers import compare_headers, describe_header_diff
from src.data.io import CsvReadError, atomic_csv_writer, iter_csv_rows, read_csv_header
from src.data.mapping import build_column_mapping, map_row

STATUS_WRITTEN = "written"
STATUS_SKIPPED_NO_CSV = "skipped_no_csv"
STATUS_SKIPPED_EMPTY_HEADER = "skipped_empty_header"


class MergeError(Exception):
    """
    Raised when a merge run must abort.

    The message names the operation that failed and the path involved, e.g.
    "read row 'data/sales/feb.csv': ...".
    """


@dataclass
class DirectoryMergeResult:
    """
    Outcome of merging one subdirectory.

    Attributes:
        directory: The source subdirectory.
        status: One of STATUS_WRITTEN, STATUS_SKIPPED_NO_CSV,
                STATUS_SKIPPED_EMPTY_HEADER.
        output_path: Final output file (None when skipped).
        files_merged: Number of input files whose rows were written.
        rows_written: Number of data rows written (header excluded).
    """
    directory: Path
    status: str
    output_path: Optional[Path] = None
    files_merged: int = 0
    rows_written: int = 0

    @property
    def written(self) -> bool:
        return self.status == STATUS_WRITTEN


@dataclass
class MergeSummary:
    """Results of a whole run, in processing order."""
    output_dir: Path
    results: list[DirectoryMergeResult] = field(default_factory=list)

    @property
    def written(self) -> list[DirectoryMergeResult]:
        return [r for r in self.results if r.written]

    @property
    def skipped(self) -> list[DirectoryMergeResult]:
        return [r for r in self.results if not r.written]

    @property
    def total_rows(self) -> int:
        return sum(r.rows_written for r in self.results)


def prepare_output_dir(output_dir: Path | str) -> Path:
    """
    Create the output directory (and parents) if needed.

    Returns:
        The output directory as an absolute path.

    Raises:
        MergeError: If the directory cannot be created.
    """
    output_dir = Path(output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise MergeError(f"create output dir '{output_dir}': {e}") from e
    return output_dir.resolve()


def _merge_file(
    path: Path,
    canonical: list[str],
    writer,
    delimiter: str,
    encoding: str,
) -> int:
    rows = iter_csv_rows(path, delimiter=delimiter, encoding=encoding)
    try:
        try:
            file_header = next(rows)
        except OSError as e:
            raise MergeError(f"open '{path}': {e}") from e
        except CsvReadError as e:
            raise MergeError(f"read header '{path}': {e}") from e

        diff = compare_headers(canonical, file_header)
        if diff is not None:
            print(describe_header_diff(path, diff), file=sys.stderr)

        mapping = build_column_mapping(canonical, file_header)
        count = 0
        while True:
            try:
                row = next(rows)
            except StopIteration:
                break
            except CsvReadError as e:
                raise MergeError(f"read row '{path}': {e}") from e
            writer.writerow(map_row(row, mapping))
            count += 1
        return count
    finally:
        rows.close()


def merge_directory(
    directory: Path | str,
    output_dir: Path | str,
    delimiter: str = ",",
    encoding: str = "utf-8",
) -> DirectoryMergeResult:
    """
    Merge every `.csv` file directly inside `directory` into one output.

    **Functionally**:
      - Output path is `<output_dir>/<directory name>.csv`; `output_dir` must
        already exist (see prepare_output_dir).
      - The first file (sorted by path) supplies the canonical header, which
        is written once as the first output row.
      - Rows follow in file order, then row order, each realigned to the
        canonical header: missing columns and short rows give empty cells,
        extra columns are dropped.

    Args:
        directory: Subdirectory whose CSV files are merged.
        output_dir: Existing directory receiving the merged file.
        delimiter: Delimiter for reading inputs and writing the output.
        encoding: Text encoding for inputs and output.

    Returns:
        DirectoryMergeResult describing what happened.

    Raises:
        MergeError: If listing, reading, writing or renaming fails.
    """
    directory = Path(directory)
    output_dir = Path(output_dir)
    name = directory.name

    try:
        csv_files = list_csv_files(directory)
    except DirectoryListingError as e:
        raise MergeError(f"reading '{directory}': {e}") from e

    if not csv_files:
        print(f"Skipping '{name}': no CSV files")
        return DirectoryMergeResult(directory=directory, status=STATUS_SKIPPED_NO_CSV)

    first = csv_files[0]
    try:
        canonical = read_csv_header(first, delimiter=delimiter, encoding=encoding)
    except (OSError, CsvReadError) as e:
        raise MergeError(f"read header '{first}': {e}") from e

    if not canonical:
        print(
            f"WARNING: Empty header in '{first}'; skipping directory '{name}'",
            file=sys.stderr,
        )
        return DirectoryMergeResult(directory=directory, status=STATUS_SKIPPED_EMPTY_HEADER)

    output_path = output_dir / f"{name}.csv"
    rows_written = 0

    try:
        with atomic_csv_writer(output_path, delimiter=delimiter, encoding=encoding) as writer:
            writer.writerow(canonical)
            for path in csv_files:
                rows_written += _merge_file(path, canonical, writer, delimiter, encoding)
    except OSError as e:
        raise MergeError(f"write '{output_path}': {e}") from e

    print(f"Wrote: {output_path}")
    return DirectoryMergeResult(
        directory=directory,
        status=STATUS_WRITTEN,
        output_path=output_path,
        files_merged=len(csv_files),
        rows_written=rows_written,
    )


def merge_all(settings: MergeSettings) -> MergeSummary:
    """
    Merge every immediate subdirectory of `settings.root_dir`.

    **Process**:
      1. Resolve the root directory (must exist).
      2. Create the output directory.
      3. List subdirectories in sorted order, leaving out the output
         directory itself so re-runs never merge previous outputs.
      4. Merge each subdirectory in turn.

    Returns:
        MergeSummary with one result per subdirectory, in processing order.

    Raises:
        MergeError: On the first fatal failure; earlier outputs stay in place.
    """
    try:
        root = settings.root_dir.resolve(strict=True)
    except OSError as e:
        raise MergeError(f"root_dir '{settings.root_dir}': {e}") from e

    output_dir = prepare_output_dir(settings.output_dir)
    summary = MergeSummary(output_dir=output_dir)

    try:
        subdirs = list_subdirectories(root, exclude=[output_dir])
    except DirectoryListingError as e:
        raise MergeError(f"listing '{root}': {e}") from e

    if not subdirs:
        print(f"No subdirectories under {root}", file=sys.stderr)
        return summary

    for directory in subdirs:
        result = merge_directory(
            directory,
            output_dir,
            delimiter=settings.delimiter,
            encoding=settings.encoding,
        )
        summary.results.append(result)

    return summary
