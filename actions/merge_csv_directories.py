#!/usr/bin/env python3
"""
Merge the CSV files of each subdirectory into one CSV per subdirectory.

**Conceptual**: For every immediate subdirectory D of the root directory, this
script writes <output_dir>/D.csv containing the header of D's first CSV file
(sorted by path) followed by the rows of every CSV file in D, each realigned
to that header.

**Usage**:
    # Merge subdirectories of the current directory into ./_out
    python actions/merge_csv_directories.py

    # Explicit root and output directories
    python actions/merge_csv_directories.py data/exports merged

    # Semicolon-delimited inputs and outputs
    python actions/merge_csv_directories.py data/exports merged ";"

**Configuration**:
    Positional arguments win. Any argument left out falls back to
    CSV_MERGE_ROOT_DIR / CSV_MERGE_OUTPUT_DIR / CSV_MERGE_DELIMITER (from the
    environment or .env), then to the defaults ".", "./_out" and ",".

**Console output**:
    - stdout: one "Wrote: ..." line per output, skip notices, final summary.
    - stderr: header mismatch warnings, column order notices, errors.

**Exit codes**:
    0 - all subdirectories processed
    1 - run aborted (unreadable root, I/O failure, malformed CSV)
    2 - invalid configuration (e.g. bad delimiter)
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path so we can import src modules
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.config.settings import MergeSettings
from src.orchestration.merge import MergeError, merge_all


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Merge the CSV files of each subdirectory into one CSV per subdirectory.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "root_dir",
        nargs="?",
        default=None,
        help="Directory whose immediate subdirectories are merged (default: .)",
    )
    parser.add_argument(
        "output_dir",
        nargs="?",
        default=None,
        help="Directory for merged files, created if missing (default: ./_out)",
    )
    parser.add_argument(
        "delimiter",
        nargs="?",
        default=None,
        help="Single ASCII delimiter character (default: ,)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entrypoint for the merge.

    Steps:
      1. Parse positional arguments
      2. Load settings from environment and apply argument overrides
      3. Merge every subdirectory
      4. Print the summary line

    Returns:
        Process exit code (0 success, 1 aborted run, 2 bad configuration).
    """
    args = build_parser().parse_args(argv)

    try:
        settings = MergeSettings.from_env().with_overrides(
            root_dir=args.root_dir,
            output_dir=args.output_dir,
            delimiter=args.delimiter,
        )
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    try:
        summary = merge_all(settings)
    except MergeError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"All done. Outputs in: {summary.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
