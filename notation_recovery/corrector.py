"""Repair tokens the rules engine rejected.

Two families of repair are tried, in this order, and the first candidate the
oracle accepts in the current position wins:

1. Disambiguation: a piece move like ``Rd1`` or ``Rxd1`` gets a file
   (``a``..``h``) and then a rank (``1``..``8``) inserted after the piece
   letter, modelling a lost ``Rad1`` / ``R1xd1`` qualifier.
2. Single substitutions of glyphs that are easy to misread on a scoresheet,
   in the priority order of ``candidate_repairs``.

The corrector only probes the oracle. Accepting a repair, and so changing the
position, is left to the replayer.
"""

import re
from typing import Iterator, List, Optional

from .validator import FILES, RANKS, is_castling, match_token

PIECE_MOVE_RE = re.compile(r"(?P<piece>[KQRBN])(?P<capture>x?)(?P<dest>[a-h][1-8])(?P<check>[+#]*)")

# Destination/source file pairs that handwriting and OCR confuse.
FILE_CONFUSIONS = {"a": "g", "g": "a", "b": "h", "h": "b", "c": "e", "e": "c"}
# Lowercase piece letters that cannot be read as a pawn file.
LOWERCASE_PIECES = "nrqk"


def disambiguations(token: str, oracle) -> Iterator[str]:
    """``token`` with a file, then a rank, inserted after the piece letter."""
    match = PIECE_MOVE_RE.fullmatch(token)
    if not match:
        return
    piece, capture, dest, check = match.group("piece", "capture", "dest", "check")
    if not oracle.legal_moves_to(piece, dest):
        return
    for qualifier in FILES + RANKS:
        yield f"{piece}{qualifier}{capture}{dest}{check}"


def _replace_at(token: str, index: int, char: str) -> str:
    return token[:index] + char + token[index + 1:]


def candidate_repairs(token: str) -> List[str]:
    """Substitution candidates for ``token`` in fixed priority order.

    1. destination file swapped with its look-alike (a/g, b/h, c/e),
       then the same for an explicit source file;
    2. destination rank one lower, then one higher;
    3. letter ``l`` read as the digit ``1``;
    4. a lowercase piece letter (n, r, q, k) upper-cased.
    """
    repairs: List[str] = []
    match = match_token(token)
    if match:
        dest_at = match.start("dest")
        for index in (dest_at, match.start("from_file")):
            if index >= 0 and token[index] in FILE_CONFUSIONS:
                repairs.append(_replace_at(token, index, FILE_CONFUSIONS[token[index]]))

        rank = int(token[dest_at + 1])
        for shifted in (rank - 1, rank + 1):
            if 1 <= shifted <= 8:
                repairs.append(_replace_at(token, dest_at + 1, str(shifted)))

    if "l" in token:
        repairs.append(token.replace("l", "1"))

    if token and token[0] in LOWERCASE_PIECES:
        repairs.append(token[0].upper() + token[1:])

    unique: List[str] = []
    for repair in repairs:
        if repair != token and repair not in unique:
            unique.append(repair)
    return unique


def correct(token: str, state) -> Optional[str]:
    """Return the first repair of ``token`` that is legal in ``state``'s position."""
    if is_castling(token):
        return None
    oracle = state.oracle
    for candidate in disambiguations(token, oracle):
        if oracle.probe(candidate) is not None:
            return candidate
    for candidate in candidate_repairs(token):
        if oracle.probe(candidate) is not None:
            return candidate
    return None
