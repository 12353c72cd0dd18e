"""Tests for the move token shape check."""

import pytest

from notation_recovery.validator import clean_token, is_castling, is_plausible


class TestIsPlausible:
    """Shape-only validation, no board access."""

    @pytest.mark.parametrize(
        "token",
        ["e4", "Nf3", "exd5", "Qh4+", "Qxf7#", "e8=Q", "e8Q", "Nbd7", "R1a3", "Qh4xe1", "nf3", "O-O", "O-O-O", "O-O+"],
    )
    def test_accepts_move_shapes(self, token):
        assert is_plausible(token)

    @pytest.mark.parametrize("token", ["", "x", "e", "Zz9", "hello", "1-0", "e9", "i4", "Nf", "e8=K", "..."])
    def test_rejects_non_moves(self, token):
        assert not is_plausible(token)


class TestCleanToken:
    """Edge punctuation and annotations are trimmed before the shape check."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("e4!?", "e4"),
            ("Nf3,", "Nf3"),
            ("(Bb5)", "Bb5"),
            ("exd6e.p.", "exd6"),
            ("0-0", "O-O"),
            ("Qxf7#!!", "Qxf7#"),
        ],
    )
    def test_clean(self, raw, expected):
        assert clean_token(raw) == expected


def test_is_castling():
    assert is_castling("O-O")
    assert is_castling("O-O-O#")
    assert not is_castling("Ke1")
