"""
Configuration settings for the CSV directory merge tool.

**Conceptual**: This module provides a strongly-typed configuration object that
loads from environment variables (via .env files). Settings are validated at
construction time, so a bad delimiter fails the run before any directory is
touched.

**Precedence**: Command-line arguments override environment variables, which
override the built-in defaults. The CLI applies overrides with
`MergeSettings.with_overrides()`, which re-runs validation.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (dev/local environments)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


DEFAULT_ROOT_DIR = "."
DEFAULT_OUTPUT_DIR = "./_out"
DEFAULT_DELIMITER = ","
DEFAULT_ENCODING = "utf-8"


def validate_delimiter(delimiter: str) -> str:
    """
    Check that a delimiter is usable as a single-byte CSV separator.

    **Rules**:
      - Exactly one character (empty strings and multi-character strings
        are rejected rather than silently truncated).
      - ASCII only, so the delimiter is a single byte in any encoding we write.
      - Not the quote character or a line break, which the CSV dialect
        reserves for quoting and record termination.

    Args:
        delimiter: Candidate delimiter string.

    Returns:
        The delimiter, unchanged.

    Raises:
        ValueError: If the delimiter breaks any of the rules above.
    """
    if not delimiter:
        raise ValueError("Delimiter must be a single ASCII character, got an empty string.")
    if len(delimiter) != 1:
        raise ValueError(
            f"Delimiter must be a single ASCII character, got {len(delimiter)} characters: {delimiter!r}"
        )
    if not delimiter.isascii():
        raise ValueError(f"Delimiter must be a single ASCII character, got: {delimiter!r}")
    if delimiter in ('"', "\r", "\n"):
        raise ValueError(
            f"Delimiter cannot be the quote character or a line break, got: {delimiter!r}"
        )
    return delimiter


@dataclass(frozen=True)
class MergeSettings:
    """
    Configuration for a merge run.

    Attributes:
        root_dir: Directory whose immediate subdirectories are merged.
        output_dir: Directory receiving one `<subdirectory>.csv` per merge.
                    Created recursively if it does not exist.
        delimiter: Single ASCII character used both to read inputs and to
                   write outputs (default ",").
        encoding: Text encoding for inputs and outputs (default "utf-8").
                  A leading byte-order mark on the first header cell is
                  stripped regardless.
    """
    root_dir: Path = Path(DEFAULT_ROOT_DIR)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    delimiter: str = DEFAULT_DELIMITER
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self):
        """Validate settings after initialization."""
        validate_delimiter(self.delimiter)
        if not self.encoding:
            raise ValueError(
                "CSV_MERGE_ENCODING must not be empty. "
                "Unset it to fall back to utf-8."
            )
        # Accept plain strings for paths
        object.__setattr__(self, "root_dir", Path(self.root_dir))
        object.__setattr__(self, "output_dir", Path(self.output_dir))

    @classmethod
    def from_env(cls) -> "MergeSettings":
        """
        Load merge settings from environment variables.

        **Environment variables** (all optional):
          - CSV_MERGE_ROOT_DIR: Directory to scan (default ".").
          - CSV_MERGE_OUTPUT_DIR: Output directory (default "./_out").
          - CSV_MERGE_DELIMITER: Delimiter character (default ",").
          - CSV_MERGE_ENCODING: Text encoding (default "utf-8").

        Returns:
            MergeSettings object with values loaded from environment.

        Raises:
            ValueError: If CSV_MERGE_DELIMITER or CSV_MERGE_ENCODING is invalid.

        Usage example:
            >>> # In .env file:
            >>> # CSV_MERGE_DELIMITER=;
            >>>
            >>> settings = MergeSettings.from_env()
            >>> print(settings.delimiter)  # ";"
        """
        return cls(
            root_dir=Path(os.getenv("CSV_MERGE_ROOT_DIR", DEFAULT_ROOT_DIR)),
            output_dir=Path(os.getenv("CSV_MERGE_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)),
            delimiter=os.getenv("CSV_MERGE_DELIMITER", DEFAULT_DELIMITER),
            encoding=os.getenv("CSV_MERGE_ENCODING", DEFAULT_ENCODING),
        )

    def with_overrides(
        self,
        root_dir: Optional[str] = None,
        output_dir: Optional[str] = None,
        delimiter: Optional[str] = None,
    ) -> "MergeSettings":
        """
        Return a copy with any non-None argument replacing the current value.

        Validation runs again on the new object, so an invalid delimiter
        passed on the command line raises ValueError here.
        """
        changes = {}
        if root_dir is not None:
            changes["root_dir"] = Path(root_dir)
        if output_dir is not None:
            changes["output_dir"] = Path(output_dir)
        if delimiter is not None:
            changes["delimiter"] = delimiter
        return dataclasses.replace(self, **changes)
