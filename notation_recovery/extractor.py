"""Candidate extraction: turn normalized text or table rows into candidate moves."""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from .normalizer import normalize
from .schema import CandidateMove
from .validator import clean_token, is_plausible

log = logging.getLogger(__name__)

NUMBERED = "numbered"
LOOSE = "loose"
ROWS = "rows"

_NOT_A_MOVE_NUMBER = r"(?!\d+\s*\.)"
NUMBERED_PAIR_RE = re.compile(
    r"(?<![\w.])(?P<number>\d{1,3})(?P<dots>(?:\s*\.)+)\s*"
    rf"(?P<first>{_NOT_A_MOVE_NUMBER}\S+)"
    rf"(?:\s+(?P<second>{_NOT_A_MOVE_NUMBER}\S+))?"
)
LOOSE_TOKEN_RE = re.compile(
    r"(?<![A-Za-z])"
    r"(?:O-O-O|O-O|[KQRBN]?[a-h]?[1-8]?x?[a-h][1-8](?:=?[NBRQ])?[+#]?)"
    r"(?![A-Za-z0-9])"
)
MIN_LOOSE_TOKENS = 2


@dataclass
class Extraction:
    """Candidates in ply order plus the tokens the validator threw away."""

    candidates: List[CandidateMove] = field(default_factory=list)
    dropped: Dict[int, str] = field(default_factory=dict)
    mode: str = NUMBERED

    def __bool__(self) -> bool:
        return bool(self.candidates)


class _Collector:
    def __init__(self, mode: str):
        self.mode = mode
        self._moves: Dict[int, CandidateMove] = {}
        self._dropped: Dict[int, str] = {}

    def offer(self, ply_index: int, raw: Optional[str]) -> None:
        if raw is None:
            return
        token = clean_token(raw)
        if not token:
            return
        if is_plausible(token):
            self._moves[ply_index] = CandidateMove.at(ply_index, token)
            self._dropped.pop(ply_index, None)
        else:
            log.debug("Dropping implausible token %r at ply %d", raw, ply_index)
            self._dropped[ply_index] = raw.strip()
            self._moves.pop(ply_index, None)

    def result(self) -> Extraction:
        ordered = [self._moves[ply] for ply in sorted(self._moves)]
        return Extraction(candidates=ordered, dropped=dict(self._dropped), mode=self.mode)


def scan_numbered(text: str) -> Extraction:
    """Read ``<n>. <white> [<black>]`` groups; ``<n>... <black>`` continues a move."""
    collector = _Collector(NUMBERED)
    for match in NUMBERED_PAIR_RE.finditer(text):
        number = int(match.group("number"))
        if number < 1:
            continue
        white_ply = (number - 1) * 2
        if match.group("dots").count(".") >= 2:
            collector.offer(white_ply + 1, match.group("first"))
            continue
        collector.offer(white_ply, match.group("first"))
        collector.offer(white_ply + 1, match.group("second"))
    return collector.result()


def scan_loose(text: str) -> Extraction:
    """Take every move-shaped token in reading order, ignoring move numbers."""
    tokens = [m.group(0) for m in LOOSE_TOKEN_RE.finditer(text)]
    if len(tokens) < MIN_LOOSE_TOKENS:
        return Extraction(mode=LOOSE)
    collector = _Collector(LOOSE)
    for ply_index, token in enumerate(tokens):
        collector.offer(ply_index, token)
    return collector.result()


def scan(text: str, mode: str = "auto") -> Extraction:
    """Numbered scan, falling back to the loose scan when it finds nothing."""
    if mode == LOOSE:
        return scan_loose(text)
    extraction = scan_numbered(text)
    if extraction or mode == NUMBERED:
        return extraction
    log.debug("No numbered move pairs found, falling back to loose token scan")
    return scan_loose(text)


def extract(text: str) -> List[CandidateMove]:
    """Candidate moves of ``text`` in ply order."""
    return scan(text).candidates


def _column(row: Mapping[str, object], name: str) -> Optional[str]:
    for key, value in row.items():
        if key is not None and str(key).strip().lower() == name:
            if value is None:
                return None
            value = str(value).strip()
            return value or None
    return None


def candidates_from_rows(rows: Iterable[Mapping[str, object]]) -> Extraction:
    """Map table rows with White/Black columns onto candidate pairs by row order.

    Header matching is case-insensitive. Rows with both cells empty are skipped
    without consuming a move number.
    """
    collector = _Collector(ROWS)
    move_number = 0
    for row in rows:
        white = _column(row, "white")
        black = _column(row, "black")
        if white is None and black is None:
            continue
        move_number += 1
        white_ply = (move_number - 1) * 2
        collector.offer(white_ply, normalize(white) if white else None)
        collector.offer(white_ply + 1, normalize(black) if black else None)
    return collector.result()
