"""Tests for candidate extraction from text and rows."""

from notation_recovery.extractor import LOOSE, NUMBERED, ROWS, candidates_from_rows, extract, scan
from notation_recovery.schema import Side


def _tokens(candidates):
    return [c.token for c in candidates]


class TestNumbered:
    """``<n>. <white> [<black>]`` groups."""

    def test_pairs(self, clean_game):
        extraction = scan(clean_game)
        assert extraction.mode == NUMBERED
        assert _tokens(extraction.candidates) == ["e4", "e5", "Nf3", "Nc6", "Bb5", "a6"]
        assert [c.ply_index for c in extraction.candidates] == [0, 1, 2, 3, 4, 5]
        assert [c.side for c in extraction.candidates[:2]] == [Side.WHITE, Side.BLACK]

    def test_glued_numbers(self):
        assert _tokens(extract("1.e4 e5 2.Nf3")) == ["e4", "e5", "Nf3"]

    def test_invalid_token_dropped_neighbors_kept(self):
        extraction = scan("1. e4 e5 2. Nf3 Nc6 3. Zz9 a6")
        assert _tokens(extraction.candidates) == ["e4", "e5", "Nf3", "Nc6", "a6"]
        assert extraction.candidates[-1].ply_index == 5
        assert extraction.dropped == {4: "Zz9"}

    def test_black_continuation(self):
        candidates = extract("1. e4 1... e5")
        assert [(c.ply_index, c.token) for c in candidates] == [(0, "e4"), (1, "e5")]

    def test_later_duplicate_number_wins(self):
        assert _tokens(extract("1. e4 e5 1. d4 d5")) == ["d4", "d5"]

    def test_move_number_is_kept(self):
        candidates = extract("12. Rad1 Qe7")
        assert [c.ply_index for c in candidates] == [22, 23]
        assert candidates[0].move_number == 12

    def test_annotations_cleaned(self):
        assert _tokens(extract("1. e4! e5?! 2. Nf3, Nc6")) == ["e4", "e5", "Nf3", "Nc6"]


class TestLoose:
    """Fallback scan for move-shaped tokens in reading order."""

    def test_unnumbered_text(self):
        extraction = scan("e4 e5 Nf3 Nc6")
        assert extraction.mode == LOOSE
        assert _tokens(extraction.candidates) == ["e4", "e5", "Nf3", "Nc6"]

    def test_needs_two_tokens(self):
        assert extract("e4") == []

    def test_prose(self):
        assert extract("hello world, nothing to see") == []

    def test_forced_loose_mode(self):
        extraction = scan("5. e4 e5", mode=LOOSE)
        assert [(c.ply_index, c.token) for c in extraction.candidates] == [(0, "e4"), (1, "e5")]


class TestRows:
    """White/Black table rows."""

    def test_headers_case_insensitive(self):
        extraction = candidates_from_rows([{"White": "e4", "Black": "e5"}, {"white": "Nf3", "BLACK": "Nc6"}])
        assert extraction.mode == ROWS
        assert _tokens(extraction.candidates) == ["e4", "e5", "Nf3", "Nc6"]

    def test_empty_rows_skipped(self):
        extraction = candidates_from_rows([{"White": "", "Black": ""}, {"White": "e4", "Black": None}])
        assert [(c.ply_index, c.token) for c in extraction.candidates] == [(0, "e4")]

    def test_cells_normalized(self):
        extraction = candidates_from_rows([{"White": "e4", "Black": "e5"}, {"White": "0-0", "Black": "o-o"}])
        assert _tokens(extraction.candidates)[2:] == ["O-O", "O-O"]

    def test_bad_cell_dropped(self):
        extraction = candidates_from_rows([{"White": "e4", "Black": "Zz"}])
        assert _tokens(extraction.candidates) == ["e4"]
        assert extraction.dropped == {1: "Zz"}
