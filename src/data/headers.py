"""
Header normalization and comparison.

**Conceptual**: Each merged output adopts the header of its directory's first
CSV file as the canonical column order. Every other file's header is compared
against it so that differences can be reported before the rows are realigned.

**Column identity**: Names are compared with plain string equality. There is
no case folding and no whitespace trimming, so "Name", "name" and " Name" are
three different columns. The only normalization applied is removing a UTF-8
byte-order mark from the very start of the first cell, which spreadsheet
tools like to prepend and which would otherwise make the first column of a
BOM-carrying file look different from the same column elsewhere.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

UTF8_BOM = "\ufeff"


def strip_bom(header: Sequence[str]) -> list[str]:
    """
    Return a copy of `header` with one leading BOM removed from the first cell.

    Only the first cell is examined; a BOM anywhere else is left alone.
    """
    cells = list(header)
    if cells and cells[0].startswith(UTF8_BOM):
        cells[0] = cells[0][len(UTF8_BOM):]
    return cells


def _unique_not_in(names: Sequence[str], other: Sequence[str]) -> tuple[str, ...]:
    # Set difference that keeps first-seen order, for stable messages
    other_set = set(other)
    seen = set()
    result = []
    for name in names:
        if name not in other_set and name not in seen:
            seen.add(name)
            result.append(name)
    return tuple(result)


@dataclass(frozen=True)
class HeaderDiff:
    """
    Difference between a file header and the canonical header.

    Attributes:
        missing: Canonical columns the file does not have (these become
                 empty cells in the output).
        extra: File columns the canonical header does not have (these are
               dropped from the output).
    """
    missing: tuple[str, ...]
    extra: tuple[str, ...]

    @property
    def same_columns(self) -> bool:
        """True when only the column order differs."""
        return not self.missing and not self.extra


def compare_headers(canonical: Sequence[str], file_header: Sequence[str]) -> Optional[HeaderDiff]:
    """
    Compare a file header to the canonical header.

    Returns:
        None if the headers are identical (same names, same order).
        Otherwise a HeaderDiff. `missing` is canonical minus file names and
        `extra` is file minus canonical names, each in order of appearance.
        Both are empty when the names match but the order does not.
    """
    if list(canonical) == list(file_header):
        return None
    return HeaderDiff(
        missing=_unique_not_in(canonical, file_header),
        extra=_unique_not_in(file_header, canonical),
    )


def describe_header_diff(path: Path | str, diff: HeaderDiff) -> str:
    """
    Render a HeaderDiff as a one-line console diagnostic.

    Membership differences produce a WARNING; a pure reordering produces an
    INFO line. Either way the file is still merged.
    """
    if diff.same_columns:
        return f"INFO: Column order differs in '{path}'. Reordering to canonical."

    return (
        f"WARNING: Header mismatch in '{path}'. "
        f"Missing: [{', '.join(diff.missing)}] | Extra: [{', '.join(diff.extra)}]. "
        "Columns will be reordered; missing -> empty; extra -> ignored."
    )
