"""Tests for the legality replayer."""

import chess
import pytest

from notation_recovery.errors import MalformedInput
from notation_recovery.extractor import scan
from notation_recovery.replayer import ReplayStatus, board_at, format_canonical, replay
from notation_recovery.schema import CandidateMove

AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"


def _replay_text(text, **kwargs):
    extraction = scan(text)
    return replay(extraction.candidates, dropped=extraction.dropped, **kwargs)


class TestReplay:
    """Moves are accepted in ply order until one cannot be played."""

    def test_clean_game(self, clean_game):
        state = _replay_text(clean_game)
        assert state.status == ReplayStatus.SUCCEEDED
        assert state.failure is None
        assert [m.ply_index for m in state.moves] == [0, 1, 2, 3, 4, 5]
        assert state.canonical_pgn() == clean_game

    def test_fen_tracks_last_move(self, clean_game):
        state = _replay_text(clean_game)
        board = chess.Board()
        for san in ["e4", "e5", "Nf3", "Nc6", "Bb5", "a6"]:
            board.push_san(san)
        assert state.fen == board.fen()
        assert state.moves[-1].fen == board.fen()

    def test_dropped_token_stops_replay(self):
        state = _replay_text("1. e4 e5 2. Nf3 Nc6 3. Zz9 a6")
        assert state.status == ReplayStatus.EXHAUSTED
        assert len(state.moves) == 4
        assert state.failure.ply_index == 4
        assert state.failure.token == "Zz9"
        assert state.failure.reason == "not recognized as a move"

    def test_missing_ply(self):
        candidates = [CandidateMove.at(0, "e4"), CandidateMove.at(1, "e5"), CandidateMove.at(3, "Nc6")]
        state = replay(candidates)
        assert len(state.moves) == 2
        assert state.failure.ply_index == 2
        assert state.failure.token is None
        assert state.failure.reason == "move is missing"

    def test_unrepairable_move(self):
        state = _replay_text("1. e4 e5 2. Qh8 Nc6")
        assert state.status == ReplayStatus.EXHAUSTED
        assert len(state.moves) == 2
        assert state.failure.token == "Qh8"
        assert state.failure.describe().startswith('"Qh8" at move 2 (white)')

    def test_nothing_accepted_past_failure(self):
        state = _replay_text("1. e4 e5 2. Qh8 Nc6 3. Bb5 a6")
        assert all(m.ply_index < state.failure.ply_index for m in state.moves)

    def test_repair_is_flagged(self):
        state = _replay_text("1. e4 e5 2. Nf4")
        move = state.moves[2]
        assert move.san == "Nf3"
        assert move.corrected
        assert move.original_token == "Nf4"
        assert not state.moves[0].corrected

    def test_custom_corrector(self):
        state = _replay_text("1. e4 e5 2. Nf4", corrector=lambda token, state: None)
        assert len(state.moves) == 2
        assert state.failure.token == "Nf4"

    def test_ambiguous_move_disambiguated(self, two_rooks_fen):
        state = replay([CandidateMove.at(0, "Rd1")], starting_fen=two_rooks_fen)
        assert state.status == ReplayStatus.SUCCEEDED
        assert state.moves[0].token == "Rad1"
        assert state.moves[0].san == "Rad1"
        assert state.moves[0].corrected

    def test_black_to_move_start(self):
        candidates = [CandidateMove.at(1, "e5"), CandidateMove.at(2, "Nf3")]
        state = replay(candidates, starting_fen=AFTER_E4)
        assert state.first_ply == 1
        assert state.canonical_pgn() == "1... e5 2. Nf3"

    def test_bad_starting_position(self):
        with pytest.raises(MalformedInput):
            replay([CandidateMove.at(0, "e4")], starting_fen="8/8/8 w")

    def test_no_candidates(self):
        state = replay([])
        assert state.moves == []
        assert state.failure is None


class TestBoardAt:
    """Positions are rebuilt from the accepted-move log."""

    def test_positions(self, clean_game):
        moves = _replay_text(clean_game).moves
        assert board_at(moves, 0).fen() == chess.STARTING_FEN
        assert board_at(moves, 2).fen() == moves[1].fen
        assert board_at(moves, 6).fen() == moves[5].fen

    def test_out_of_range(self, clean_game):
        moves = _replay_text(clean_game).moves
        with pytest.raises(IndexError):
            board_at(moves, 7)


def test_canonical_text_replays_to_same_count():
    state = _replay_text("1. e4 e5 2. Ng3 Nc6 3. Zz9")
    again = _replay_text(format_canonical(state.moves))
    assert again.status == ReplayStatus.SUCCEEDED
    assert [m.san for m in again.moves] == [m.san for m in state.moves]
