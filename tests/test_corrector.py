"""Tests for the token corrector."""

from notation_recovery.corrector import candidate_repairs, correct, disambiguations
from notation_recovery.extractor import scan
from notation_recovery.replayer import ReplayState, replay


def _state_after(text):
    extraction = scan(text)
    return replay(extraction.candidates, dropped=extraction.dropped)


class TestCandidateRepairs:
    """Substitutions come back in fixed priority order."""

    def test_file_then_rank(self):
        assert candidate_repairs("Ng5") == ["Na5", "Ng4", "Ng6"]

    def test_source_file_after_destination(self):
        assert candidate_repairs("exd5") == ["cxd5", "exd4", "exd6"]

    def test_rank_stays_on_board(self):
        assert candidate_repairs("a8") == ["g8", "a7"]

    def test_letter_l_for_one(self):
        assert candidate_repairs("Rdl") == ["Rd1"]

    def test_lowercase_piece(self):
        assert candidate_repairs("nf3") == ["nf2", "nf4", "Nf3"]

    def test_nothing_to_try(self):
        assert candidate_repairs("Zz") == []


class TestCorrect:
    """The first repair the position accepts wins."""

    def test_file_confusion(self):
        state = _state_after("1. e4 e5")
        assert correct("Ng3", state) == "Na3"

    def test_rank_shift(self):
        state = _state_after("1. e4 e5")
        assert correct("Nf4", state) == "Nf3"

    def test_lowercase_piece(self):
        state = _state_after("1. e4 e5")
        assert correct("nf3", state) == "Nf3"

    def test_does_not_move_the_position(self):
        state = _state_after("1. e4 e5")
        fen = state.fen
        correct("Ng3", state)
        assert state.fen == fen
        assert len(state.moves) == 2

    def test_unrepairable(self):
        state = _state_after("1. e4 e5")
        assert correct("Qh8", state) is None

    def test_castling_is_never_repaired(self):
        state = _state_after("1. e4 e5")
        assert correct("O-O", state) is None

    def test_ambiguous_rook_move(self, two_rooks_fen):
        assert correct("Rd1", ReplayState(two_rooks_fen)) == "Rad1"

    def test_ambiguous_capture(self, two_rooks_capture_fen):
        assert correct("Rxd4", ReplayState(two_rooks_capture_fen)) == "Raxd4"


def test_disambiguations_need_a_matching_piece(two_rooks_fen):
    state = ReplayState(two_rooks_fen)
    assert list(disambiguations("Nd1", state.oracle)) == []
    assert list(disambiguations("Rd1", state.oracle))[:2] == ["Rad1", "Rbd1"]
