"""Recover validated, replayable chess games from noisy notation."""

from .corrector import correct
from .errors import CollaboratorFailure, IllegalMove, MalformedInput, NotationError
from .extractor import candidates_from_rows, extract, scan
from .normalizer import normalize, normalize_castling
from .replayer import ReplayState, board_at, format_canonical, replay
from .schema import (
    AcceptedMove,
    CandidateMove,
    CompleteOutcome,
    ParseOutcome,
    PartialOutcome,
    RejectedOutcome,
    RejectionKind,
    ReplayFailure,
    Side,
)
from .services import build_pgn, parse_csv, parse_image, parse_recognized_text, parse_rows, parse_text
from .stripper import strip
from .validator import is_plausible

__version__ = "1.0.0"

__all__ = [
    "normalize", "normalize_castling", "strip", "is_plausible",
    "extract", "scan", "candidates_from_rows",
    "replay", "ReplayState", "board_at", "format_canonical", "correct",
    "parse_text", "parse_rows", "parse_csv", "parse_recognized_text", "parse_image", "build_pgn",
    "Side", "CandidateMove", "AcceptedMove", "ReplayFailure",
    "CompleteOutcome", "PartialOutcome", "RejectedOutcome", "ParseOutcome", "RejectionKind",
    "NotationError", "MalformedInput", "IllegalMove", "CollaboratorFailure",
]
