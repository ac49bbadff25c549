"""
CSV readers and writers for the merge pipeline.

**Conceptual**: This module is the *only* I/O boundary for CSV data in the
system. Orchestration code never opens CSV files itself; it streams rows out
of `iter_csv_rows` and writes them through `atomic_csv_writer`. Keeping I/O
here means there is one place that decides:
  - How input files are decoded (encoding, delimiter, field size).
  - How a leading byte-order mark on the header is handled.
  - How parse failures are reported (CsvReadError with path and line).
  - How outputs are written (temp file, flush, fsync, atomic rename).

**Streaming**: Files are read one row at a time. Memory use is bounded by the
largest row, not the largest file.

**Atomic outputs**: Outputs are written to `<name>.csv.tmp` in the same
directory and promoted with `os.replace` only after every row is written and
flushed to disk. The final path therefore either does not exist, keeps its
previous contents, or holds a complete merge. If anything fails mid-write,
the temp file is left where it is for inspection and the final path is not
touched. The rename stays atomic because the temp file is always a sibling
of the output; a filesystem without atomic rename semantics (some network
mounts) weakens this guarantee.
"""

import csv
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from src.data.headers import strip_bom

# Cells of any size are valid; the default limit is 128 KiB.
# Capped at the C long range, which sys.maxsize exceeds on Windows.
csv.field_size_limit(min(sys.maxsize, 2**31 - 1))


class CsvReadError(Exception):
    """
    Raised when an input file cannot be decoded or parsed as CSV.

    **Usage**: The merge aborts on this error; the message carries the file
    path and the line number where parsing stopped so the input can be fixed.
    """

    def __init__(self, path: Path, line_number: int, error: Exception):
        super().__init__(f"Failed to parse CSV '{path}' at line {line_number}. Error: {error}")
        self.path = path
        self.line_number = line_number


def iter_csv_rows(
    path: Path | str,
    delimiter: str = ",",
    encoding: str = "utf-8",
) -> Iterator[list[str]]:
    """
    Stream a CSV file: yield its header, then each data row.

    **Functionally**:
      - The first yielded item is always the header: the first non-blank
        row, with a leading BOM stripped from its first cell. A file with no
        non-blank rows yields `[]` as header.
      - Data rows are yielded as-is (lists of strings), including ragged rows.
      - Blank lines (no cells at all) are skipped everywhere, including
        before the header.
      - Quoting is lenient: text after a closing quote is kept as part of
        the field (`"10"x` reads as `10x`). Only undecodable content raises.

    Args:
        path: CSV file to read.
        delimiter: Field delimiter (default ",").
        encoding: Text encoding (default "utf-8").

    Yields:
        Header row, then data rows.

    Raises:
        OSError: If the file cannot be opened.
        CsvReadError: If the content cannot be decoded or parsed.
    """
    path = Path(path)
    with path.open("r", encoding=encoding, newline="") as handle:
        reader = csv.reader(handle, delimiter=delimiter)
        rows = (row for row in reader if row)
        try:
            yield strip_bom(next(rows, []))
            yield from rows
        except (csv.Error, UnicodeDecodeError) as e:
            raise CsvReadError(path, reader.line_num, e) from e


def read_csv_header(
    path: Path | str,
    delimiter: str = ",",
    encoding: str = "utf-8",
) -> list[str]:
    """
    Read only the header row of a CSV file (BOM stripped).

    Returns:
        List of column names; `[]` for a file with no non-blank rows.

    Raises:
        OSError: If the file cannot be opened.
        CsvReadError: If the header cannot be decoded or parsed.
    """
    rows = iter_csv_rows(path, delimiter=delimiter, encoding=encoding)
    try:
        return next(rows)
    finally:
        rows.close()


def temporary_path_for(output_path: Path | str) -> Path:
    """Temp file path used while writing `output_path` (`<name>.tmp` beside it)."""
    output_path = Path(output_path)
    return output_path.with_name(output_path.name + ".tmp")


@contextmanager
def atomic_csv_writer(
    output_path: Path | str,
    delimiter: str = ",",
    encoding: str = "utf-8",
):
    """
    Write a CSV through a temp file and atomically promote it on success.

    **Functionally**:
      - Opens `temporary_path_for(output_path)` for writing (truncating any
        stale temp file left by an earlier failed run).
      - Yields a `csv.writer` using the given delimiter, minimal quoting and
        `\\n` line endings.
      - On clean exit: flush, fsync, close, then `os.replace` onto
        `output_path`.
      - On exception: close the temp file, leave it in place, and re-raise.
        `output_path` is not modified.

    Example:
        >>> with atomic_csv_writer("out/sales.csv") as writer:
        ...     writer.writerow(["id", "amt"])
        ...     writer.writerow(["1", "10"])
        # out/sales.csv now exists; out/sales.csv.tmp does not

    Raises:
        OSError: If the temp file cannot be created or written, or the
                 rename fails.
    """
    output_path = Path(output_path)
    tmp_path = temporary_path_for(output_path)

    handle = tmp_path.open("w", encoding=encoding, newline="")
    try:
        writer = csv.writer(handle, delimiter=delimiter, lineterminator="\n")
        yield writer
        handle.flush()
        os.fsync(handle.fileno())
    finally:
        handle.close()

    try:
        os.replace(tmp_path, output_path)
    except OSError as e:
        raise OSError(f"Failed to move '{tmp_path}' -> '{output_path}'. Error: {e}") from e
