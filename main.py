"""
csv_dir_merge – Main entry point.

Runs the directory merge with the command-line arguments given to this script.
See actions/merge_csv_directories.py for usage.
"""

import sys

from actions.merge_csv_directories import main


if __name__ == "__main__":
    sys.exit(main())
