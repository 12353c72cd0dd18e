"""Legal-move oracle backed by python-chess.

One ``MoveOracle`` belongs to exactly one replay run. It is the only place
that talks to the rules engine; nothing in this package re-implements move
legality.
"""

from typing import List, Optional

import chess

from .errors import IllegalMove, MalformedInput

PIECE_TYPES = {
    "K": chess.KING,
    "Q": chess.QUEEN,
    "R": chess.ROOK,
    "B": chess.BISHOP,
    "N": chess.KNIGHT,
}

SAN_ERRORS = (chess.InvalidMoveError, chess.IllegalMoveError, chess.AmbiguousMoveError)


class MoveOracle:
    def __init__(self, fen: Optional[str] = None):
        try:
            self._board = chess.Board(fen) if fen else chess.Board()
        except ValueError as e:
            raise MalformedInput(f"Invalid starting position: {e}") from e

    @property
    def fen(self) -> str:
        return self._board.fen()

    @property
    def starts_with_black(self) -> bool:
        return not self._board.move_stack and self._board.turn == chess.BLACK

    def probe(self, token: str) -> Optional[chess.Move]:
        """Parse ``token`` in the current position without playing it."""
        try:
            move = self._board.parse_san(token)
        except SAN_ERRORS:
            return None
        # parse_san also understands null moves; those are never chess moves here.
        return move if move else None

    def explain(self, token: str) -> str:
        """Human-readable reason the rules engine refuses ``token``."""
        try:
            self._board.parse_san(token)
        except chess.AmbiguousMoveError as e:
            return f"ambiguous move: {e}"
        except chess.IllegalMoveError as e:
            return f"illegal move: {e}"
        except chess.InvalidMoveError as e:
            return f"invalid notation: {e}"
        return "not a move"

    def apply(self, token: str) -> str:
        """Play ``token`` and return it rendered as standard notation."""
        move = self.probe(token)
        if move is None:
            raise IllegalMove(token, self.explain(token))
        san = self._board.san(move)
        self._board.push(move)
        return san

    def legal_moves_to(self, piece: str, square: str) -> List[chess.Move]:
        """Legal moves of the side to move that bring a ``piece`` to ``square``."""
        piece_type = PIECE_TYPES[piece.upper()]
        target = chess.parse_square(square)
        return [
            move for move in self._board.legal_moves
            if move.to_square == target and self._board.piece_type_at(move.from_square) == piece_type
        ]

    def result(self) -> str:
        """Game result implied by the position, ``*`` while the game is still open."""
        if self._board.is_checkmate():
            return "0-1" if self._board.turn == chess.WHITE else "1-0"
        if self._board.is_stalemate() or self._board.is_insufficient_material():
            return "1/2-1/2"
        return "*"

    def board(self) -> chess.Board:
        """A copy of the current position; the oracle's own board is never shared."""
        return self._board.copy()
