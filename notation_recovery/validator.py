"""Shape-only checks for move tokens. No board state is consulted here."""

import re
from typing import Optional

from .normalizer import normalize_castling

CASTLING_TOKENS = ("O-O", "O-O-O")
FILES = "abcdefgh"
RANKS = "12345678"

MOVE_TOKEN_RE = re.compile(
    r"(?P<piece>[KQRBNkqrbn])?"
    r"(?P<from_file>[a-h])?"
    r"(?P<from_rank>[1-8])?"
    r"(?P<capture>x)?"
    r"(?P<dest>[a-h][1-8])"
    r"(?:=?(?P<promotion>[NBRQ]))?"
    r"(?P<check>[+#]*)"
)
ANNOTATION_RE = re.compile(r"[!?]+")
EN_PASSANT_RE = re.compile(r"(?<=[1-8])\s*e\.?p\.?$")
EDGE_PUNCTUATION = ".,;:()[]{}\"'`"


def clean_token(token: str) -> str:
    """Drop punctuation and annotation glyphs around a token."""
    cleaned = token.strip().strip(EDGE_PUNCTUATION)
    cleaned = EN_PASSANT_RE.sub("", cleaned)
    cleaned = ANNOTATION_RE.sub("", cleaned)
    cleaned = cleaned.strip().strip(EDGE_PUNCTUATION)
    return normalize_castling(cleaned)


def is_castling(token: str) -> bool:
    """True for O-O or O-O-O, with or without a check mark."""
    return token.rstrip("+#") in CASTLING_TOKENS


def match_token(token: str) -> Optional[re.Match]:
    """Named-group match of a non-castling move token, or None."""
    return MOVE_TOKEN_RE.fullmatch(token)


def is_plausible(token: str) -> bool:
    """Whether ``token`` has the shape of a chess move."""
    if not token or len(token) < 2:
        return False
    if is_castling(token):
        return True
    return match_token(token) is not None

