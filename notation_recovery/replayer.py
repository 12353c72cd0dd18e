"""Replay candidate moves against the rules engine, one ply at a time.

``ReplayState`` is the single source of truth for a run: it owns the oracle
and the accepted-move log. The position is always the one reached by playing
the logged tokens in order from the starting position.
"""

import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

import chess

from .corrector import correct
from .errors import IllegalMove
from .oracle import MoveOracle
from .schema import AcceptedMove, CandidateMove, ReplayFailure

log = logging.getLogger(__name__)


class ReplayStatus(str, Enum):
    EMPTY = "empty"
    REPLAYING = "replaying"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


class ReplayState:
    def __init__(self, starting_fen: Optional[str] = None):
        self.starting_fen = starting_fen
        self.oracle = MoveOracle(starting_fen)
        self.first_ply = 1 if self.oracle.starts_with_black else 0
        self.moves: List[AcceptedMove] = []
        self.status = ReplayStatus.EMPTY
        self.failure: Optional[ReplayFailure] = None

    @property
    def next_ply(self) -> int:
        return self.first_ply + len(self.moves)

    @property
    def fen(self) -> str:
        return self.oracle.fen

    def accept(self, token: str, original: Optional[str] = None) -> AcceptedMove:
        san = self.oracle.apply(token)
        move = AcceptedMove(
            ply_index=self.next_ply,
            token=token,
            san=san,
            fen=self.oracle.fen,
            corrected=original is not None,
            original_token=original,
        )
        self.moves.append(move)
        return move

    def fail(self, ply_index: int, token: Optional[str], reason: str) -> None:
        self.status = ReplayStatus.EXHAUSTED
        self.failure = ReplayFailure(ply_index=ply_index, token=token, reason=reason)
        log.info("Replay stopped at ply %d: %s", ply_index, self.failure.describe())

    def canonical_pgn(self) -> str:
        return format_canonical(self.moves)


Corrector = Callable[[str, ReplayState], Optional[str]]


def replay(
    candidates: Iterable[CandidateMove],
    dropped: Optional[Dict[int, str]] = None,
    starting_fen: Optional[str] = None,
    corrector: Optional[Corrector] = None,
) -> ReplayState:
    """Replay ``candidates`` in ply order until they run out or one cannot be repaired.

    A ply that is missing from the candidate stream stops the replay there; the
    token the validator dropped for that ply, if any, is reported as the culprit.
    """
    corrector = corrector or correct
    dropped = dropped or {}
    state = ReplayState(starting_fen)

    for candidate in sorted(candidates, key=lambda c: c.ply_index):
        if state.status == ReplayStatus.EMPTY:
            state.status = ReplayStatus.REPLAYING
        expected = state.next_ply
        if candidate.ply_index < expected:
            continue
        if candidate.ply_index > expected:
            token = dropped.get(expected)
            reason = "not recognized as a move" if token else "move is missing"
            state.fail(expected, token, reason)
            return state

        if state.oracle.probe(candidate.token) is not None:
            state.accept(candidate.token)
            continue

        reason = state.oracle.explain(candidate.token)
        repaired = corrector(candidate.token, state)
        if repaired is None:
            state.fail(expected, candidate.token, reason)
            return state
        try:
            state.accept(repaired, original=candidate.token)
        except IllegalMove as e:
            state.fail(expected, candidate.token, str(e))
            return state
        log.debug("Corrected %r to %r at ply %d", candidate.token, repaired, expected)

    state.status = ReplayStatus.SUCCEEDED
    return state


def format_canonical(moves: Iterable[AcceptedMove]) -> str:
    """Move-numbered notation built only from accepted moves."""
    parts: List[str] = []
    for index, move in enumerate(moves):
        number = move.ply_index // 2 + 1
        if move.ply_index % 2 == 0:
            parts.append(f"{number}. {move.san}")
        elif index == 0:
            parts.append(f"{number}... {move.san}")
        else:
            parts.append(move.san)
    return " ".join(parts)


def board_at(moves: List[AcceptedMove], ply: int, starting_fen: Optional[str] = None) -> chess.Board:
    """Position after the first ``ply`` accepted moves, rebuilt from the log."""
    if ply < 0 or ply > len(moves):
        raise IndexError(f"ply {ply} outside 0..{len(moves)}")
    oracle = MoveOracle(starting_fen)
    for move in moves[:ply]:
        oracle.apply(move.san)
    return oracle.board()
