"""
Column mapping and row realignment.

**Conceptual**: Files in one directory may list the same columns in a
different order, leave some out, or carry extras. Rather than looking up
every cell by name, we compute a positional mapping once per file and replay
every row through it:

    canonical:   id   amt
    file header: amt  id   region
    mapping:     [1,  0]            (region has no slot and is dropped)

**Output rows** always have exactly one cell per canonical column. A column
the file does not have, or a row too short to reach the mapped cell (a
"ragged" row), produces an empty string. Short rows are tolerated, never
rejected.
"""

from typing import Optional, Sequence

ColumnMapping = list[Optional[int]]


def build_column_mapping(canonical: Sequence[str], file_header: Sequence[str]) -> ColumnMapping:
    """
    Map each canonical column position to its index in `file_header`.

    Matching is exact string equality. If a name appears more than once in
    the file header, the first occurrence wins.

    Args:
        canonical: Canonical column names, in output order.
        file_header: This file's column names (BOM already stripped).

    Returns:
        List the length of `canonical`; entry i is the source index for
        canonical column i, or None if the file lacks that column.

    Example:
        >>> build_column_mapping(["id", "amt"], ["amt", "id", "region"])
        [1, 0]
        >>> build_column_mapping(["id", "amt"], ["id"])
        [0, None]
    """
    positions: dict[str, int] = {}
    for index, name in enumerate(file_header):
        positions.setdefault(name, index)
    return [positions.get(name) for name in canonical]


def map_row(row: Sequence[str], mapping: ColumnMapping) -> list[str]:
    """
    Realign one data row to canonical column order.

    Example:
        >>> map_row(["30", "3", "west"], [1, 0])
        ['3', '30']
        >>> map_row(["4"], [0, None])
        ['4', '']
        >>> map_row(["5"], [0, 1])  # ragged row
        ['5', '']
    """
    row_length = len(row)
    return [
        row[source] if source is not None and source < row_length else ""
        for source in mapping
    ]
