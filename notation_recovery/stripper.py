"""Remove PGN structure that is not move content."""

import re

TAG_PAIR_RE = re.compile(r"\[[^\]]*\]")
BRACE_COMMENT_RE = re.compile(r"\{[^}]*\}")
LINE_COMMENT_RE = re.compile(r";[^\n]*")
INNER_VARIATION_RE = re.compile(r"\([^()]*\)")
NAG_RE = re.compile(r"\$\d+")
RESULT_RE = re.compile(r"(?<!\S)(?:1-0|0-1|1/2-1/2|½-½|\*)\s*$")
WHITESPACE_RE = re.compile(r"\s+")


def strip_variations(text: str) -> str:
    """Drop parenthesised variations innermost-first until none are left."""
    previous = None
    while previous != text:
        previous = text
        text = INNER_VARIATION_RE.sub(" ", text)
    return text


def strip(text: str) -> str:
    """Remove PGN tag pairs, comments, variations, NAGs and the trailing result."""
    if not text:
        return ""
    text = TAG_PAIR_RE.sub(" ", text)
    text = BRACE_COMMENT_RE.sub(" ", text)
    text = LINE_COMMENT_RE.sub(" ", text)
    text = strip_variations(text)
    text = NAG_RE.sub(" ", text)
    text = WHITESPACE_RE.sub(" ", text).strip()
    return RESULT_RE.sub("", text).rstrip()
