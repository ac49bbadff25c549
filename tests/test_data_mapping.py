"""
Tests for src/data/mapping.py

Column mappings and row realignment on small hand-written headers and rows.
"""

from src.data.mapping import build_column_mapping, map_row


def test_build_column_mapping_identical_headers():
    """Identical headers map every column to itself."""
    assert build_column_mapping(["id", "amt"], ["id", "amt"]) == [0, 1]


def test_build_column_mapping_reordered():
    """A reordered header maps canonical positions to the new positions."""
    assert build_column_mapping(["id", "amt"], ["amt", "id"]) == [1, 0]


def test_build_column_mapping_missing_column():
    """A canonical column the file lacks maps to None."""
    assert build_column_mapping(["id", "amt"], ["id"]) == [0, None]


def test_build_column_mapping_extra_column_has_no_slot():
    """Extra file columns do not appear in the mapping."""
    mapping = build_column_mapping(["id", "amt"], ["amt", "id", "region"])
    assert mapping == [1, 0]
    assert 2 not in mapping


def test_build_column_mapping_is_case_and_whitespace_sensitive():
    """'Name' never matches 'name' or ' Name'."""
    assert build_column_mapping(["Name"], ["name", " Name", "Name "]) == [None]


def test_build_column_mapping_duplicate_names_use_first_occurrence():
    """When a file repeats a column name, the first occurrence is used."""
    assert build_column_mapping(["id"], ["x", "id", "id"]) == [1]


def test_build_column_mapping_length_matches_canonical():
    """Mapping length always equals canonical length."""
    canonical = ["a", "b", "c", "d"]
    assert len(build_column_mapping(canonical, [])) == 4
    assert len(build_column_mapping(canonical, ["z", "y", "x", "w", "v"])) == 4


def test_map_row_reorders_cells():
    """Cells follow the mapping into canonical order."""
    assert map_row(["30", "3"], [1, 0]) == ["3", "30"]


def test_map_row_drops_extra_cells():
    """Cells of columns without a canonical slot are dropped."""
    assert map_row(["30", "3", "west"], [1, 0]) == ["3", "30"]


def test_map_row_missing_column_gives_empty_cell():
    """An absent column produces an empty string."""
    assert map_row(["4"], [0, None]) == ["4", ""]


def test_map_row_ragged_row_is_padded():
    """A row shorter than its header pads with empty strings instead of failing."""
    mapping = [0, 1, 2]
    assert map_row(["1"], mapping) == ["1", "", ""]
    assert map_row([], mapping) == ["", "", ""]


def test_map_row_output_length_is_canonical_length():
    """Output length depends only on the mapping, never on the row."""
    mapping = [2, None, 0]
    for row in (["a"], ["a", "b"], ["a", "b", "c"], ["a", "b", "c", "d", "e"]):
        assert len(map_row(row, mapping)) == 3


def test_map_row_keeps_cell_values_verbatim():
    """Cell values are copied without trimming or coercion."""
    assert map_row([" 007 ", "1,5"], [0, 1]) == [" 007 ", "1,5"]
