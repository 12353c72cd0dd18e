"""Canonicalize superficial variants of chess notation text.

``normalize`` is total and idempotent: it never raises and running it twice
gives the same string as running it once.
"""

import re

# Latin O, digit zero, Cyrillic and Greek capital/small O.
_CASTLE_GLYPH = "[0oO\u041e\u043e\u039f\u03bf]"
_HYPHEN = r"\s*-\s*"
_NOT_BEFORE = r"(?<![A-Za-z0-9\-])"
_NOT_AFTER = r"(?![A-Za-z0-9])"

QUEENSIDE_RE = re.compile(
    rf"{_NOT_BEFORE}{_CASTLE_GLYPH}{_HYPHEN}{_CASTLE_GLYPH}{_HYPHEN}{_CASTLE_GLYPH}{_NOT_AFTER}"
)
KINGSIDE_RE = re.compile(
    rf"{_NOT_BEFORE}{_CASTLE_GLYPH}{_HYPHEN}{_CASTLE_GLYPH}(?!{_HYPHEN}{_CASTLE_GLYPH}){_NOT_AFTER}"
)
BARE_QUEENSIDE_RE = re.compile(r"(?<![\w.\-])000(?![\w\-])")
BARE_KINGSIDE_RE = re.compile(r"(?<![\w.\-])00(?![\w\-])")

FENCE_RE = re.compile(r"```[A-Za-z]*[ \t]*")
BOLD_RE = re.compile(r"\*\*")
HEADING_RE = re.compile(r"^[ \t]*(?:#+[ \t]+)+", re.MULTILINE)
HASH_RUN_RE = re.compile(r"#{2,}[ \t]*")

LINE_END_RE = re.compile(r"\r\n?|[\v\f\x1c-\x1e\x85\u2028\u2029]")
HSPACE_RE = re.compile(r"[ \t\x1f]+")
AROUND_NEWLINE_RE = re.compile(r" ?\n[\n ]*")

CHAR_MAP = str.maketrans({
    # Unicode spaces
    "\u00a0": " ", "\u1680": " ", "\u2000": " ", "\u2001": " ",
    "\u2002": " ", "\u2003": " ", "\u2004": " ", "\u2005": " ",
    "\u2006": " ", "\u2007": " ", "\u2008": " ", "\u2009": " ",
    "\u200a": " ", "\u202f": " ", "\u205f": " ", "\u3000": " ",
    # Zero-width
    "\u200b": None, "\u200c": None, "\u200d": None, "\ufeff": None,
    # Dashes, multiplication sign, ellipsis
    "\u2010": "-", "\u2011": "-", "\u2012": "-", "\u2013": "-",
    "\u2014": "-", "\u2212": "-", "\u00d7": "x", "\u2026": "...",
    # Figurine algebraic notation; pawns carry no letter
    "\u2654": "K", "\u2655": "Q", "\u2656": "R", "\u2657": "B", "\u2658": "N", "\u2659": None,
    "\u265a": "K", "\u265b": "Q", "\u265c": "R", "\u265d": "B", "\u265e": "N", "\u265f": None,
})


def normalize_castling(text: str) -> str:
    """Collapse every castling spelling to ``O-O`` or ``O-O-O``."""
    text = QUEENSIDE_RE.sub("O-O-O", text)
    text = KINGSIDE_RE.sub("O-O", text)
    text = BARE_QUEENSIDE_RE.sub("O-O-O", text)
    return BARE_KINGSIDE_RE.sub("O-O", text)


def strip_markup(text: str) -> str:
    """Remove code fences, bold markers and heading markers."""
    previous = None
    while previous != text:
        previous = text
        text = FENCE_RE.sub("", text)
        text = BOLD_RE.sub("", text)
        text = HEADING_RE.sub("", text)
        text = HASH_RUN_RE.sub("", text)
    return text


def collapse_whitespace(text: str) -> str:
    """One space between words, one newline between lines, nothing at the ends."""
    text = HSPACE_RE.sub(" ", text)
    text = AROUND_NEWLINE_RE.sub("\n", text)
    return text.strip()


def normalize(text: str) -> str:
    """Canonical form of raw notation text; total and idempotent."""
    if not text:
        return ""
    text = text.translate(CHAR_MAP)
    text = LINE_END_RE.sub("\n", text)
    # Collapsing whitespace can put a heading marker back at a line start.
    previous = None
    while previous != text:
        previous = text
        text = collapse_whitespace(normalize_castling(strip_markup(text)))
    return text
