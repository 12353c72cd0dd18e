import csv
import io
import logging
from datetime import date
from pathlib import Path
from typing import Iterable, Mapping, Optional

import chess.pgn

from . import config, utils
from .errors import CollaboratorFailure, MalformedInput
from .extractor import LOOSE, Extraction, candidates_from_rows, scan
from .normalizer import normalize, normalize_castling
from .recognition import GroqVisionRecollector, Recognizer, Recollector, TesseractRecognizer
from .replayer import ReplayState, ReplayStatus, replay
from .schema import (
    CompleteOutcome,
    ParseOutcome,
    PartialOutcome,
    RecognitionHint,
    RejectedOutcome,
    RejectionKind,
)
from .stripper import strip

log = logging.getLogger(__name__)


# ── Outcome Assembly ─────────────────────────────────────────────────────────

def _rejected(kind: RejectionKind, reason: str, source: str, **extra) -> RejectedOutcome:
    log.info("Rejected %s input (%s): %s", source, kind.value, reason)
    return RejectedOutcome(kind=kind, reason=reason, source=source, **extra)


def _quality_warning(found: int, hint: Optional[RecognitionHint]) -> Optional[str]:
    if hint is None or not hint.total_moves or found >= hint.total_moves:
        return None
    return (
        f"Only {found} of {hint.total_moves} moves could be extracted from the image. "
        "Some moves may be unclear due to handwriting. Consider uploading a clearer image "
        "for complete game analysis."
    )


def assemble(
    state: ReplayState,
    source: str = "text",
    hint: Optional[RecognitionHint] = None,
) -> ParseOutcome:
    """Package a finished replay as a single outcome."""
    common = {
        "source": source,
        "expected_moves": hint.total_moves if hint else None,
        "starting_fen": state.starting_fen,
    }
    found = (len(state.moves) + 1) // 2

    if state.status == ReplayStatus.SUCCEEDED and state.moves:
        return CompleteOutcome(
            moves=list(state.moves),
            canonical_pgn=state.canonical_pgn(),
            result=state.oracle.result(),
            warning=_quality_warning(found, hint),
            **common,
        )

    if state.moves and state.failure is not None:
        return PartialOutcome(
            moves=list(state.moves),
            canonical_pgn=state.canonical_pgn(),
            failure=state.failure,
            result=state.oracle.result(),
            warning=_quality_warning(found, hint),
            **common,
        )

    if state.failure is not None:
        return _rejected(
            RejectionKind.ILLEGAL_MOVE,
            f"Unable to parse notation. Problem detected near {state.failure.describe()}.",
            failure=state.failure,
            **common,
        )
    return _rejected(RejectionKind.MALFORMED_INPUT, "No chess moves found.", **common)


# ── Pipelines ────────────────────────────────────────────────────────────────

def prepare_text(raw: str) -> str:
    """Normalize, strip PGN metadata, then normalize castling again."""
    return normalize_castling(strip(normalize(raw)))


def _replay(extraction: Extraction, starting_fen: Optional[str]) -> ReplayState:
    log.debug("Replaying %d %s candidates", len(extraction.candidates), extraction.mode)
    return replay(extraction.candidates, dropped=extraction.dropped, starting_fen=starting_fen)


def _recover(
    text: str,
    source: str,
    starting_fen: Optional[str] = None,
    hint: Optional[RecognitionHint] = None,
) -> ParseOutcome:
    extraction = scan(text)
    state = _replay(extraction, starting_fen) if extraction else None

    # One lower-confidence retry when structured numbering got us nowhere.
    if extraction.mode != LOOSE and (state is None or not state.moves):
        loose = scan(text, mode=LOOSE)
        if loose:
            log.info("Numbered extraction recovered no moves, retrying with loose token scan")
            loose_state = _replay(loose, starting_fen)
            if state is None or len(loose_state.moves) > len(state.moves):
                state = loose_state

    if state is None:
        return _rejected(
            RejectionKind.MALFORMED_INPUT,
            "Could not detect chess notation. Please use standard algebraic notation.",
            source=source,
        )
    return assemble(state, source=source, hint=hint)


def parse_text(
    raw: Optional[str],
    starting_fen: Optional[str] = None,
    source: str = "text",
    hint: Optional[RecognitionHint] = None,
) -> ParseOutcome:
    """Typed or pasted notation, with or without PGN headers and comments."""
    if raw is None or not raw.strip():
        return _rejected(RejectionKind.MALFORMED_INPUT, "Please paste a valid PGN string.", source=source)
    text = prepare_text(raw)
    if not text:
        return _rejected(RejectionKind.MALFORMED_INPUT, "No move text left after removing PGN metadata.", source=source)
    try:
        return _recover(text, source=source, starting_fen=starting_fen, hint=hint)
    except MalformedInput as e:
        return _rejected(RejectionKind.MALFORMED_INPUT, str(e), source=source)


def parse_recognized_text(text: Optional[str], hint: Optional[RecognitionHint] = None, source: str = "image") -> ParseOutcome:
    """Text an external recognizer read from an image."""
    return parse_text(text, source=source, hint=hint)


def parse_rows(
    rows: Iterable[Mapping[str, object]],
    starting_fen: Optional[str] = None,
    source: str = "rows",
) -> ParseOutcome:
    """Rows with White/Black columns, one move number per non-empty row."""
    extraction = candidates_from_rows(rows)
    if not extraction:
        return _rejected(RejectionKind.MALFORMED_INPUT, "No valid chess moves found in rows.", source=source)
    try:
        state = _replay(extraction, starting_fen)
    except MalformedInput as e:
        return _rejected(RejectionKind.MALFORMED_INPUT, str(e), source=source)
    return assemble(state, source=source)


def parse_csv(text: Optional[str]) -> ParseOutcome:
    """CSV text with White/Black header columns."""
    if text is None or not text.strip():
        return _rejected(RejectionKind.MALFORMED_INPUT, "CSV file is empty.", source="csv")
    try:
        reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
        headers = {(name or "").strip().lower() for name in (reader.fieldnames or [])}
        if not headers & {"white", "black"}:
            return _rejected(
                RejectionKind.MALFORMED_INPUT,
                "CSV needs a White and/or Black column.",
                source="csv",
            )
        rows = list(reader)
    except csv.Error as e:
        return _rejected(RejectionKind.MALFORMED_INPUT, f"CSV parsing error: {e}", source="csv")
    return parse_rows(rows, source="csv")


def _better(first: Optional[ParseOutcome], second: ParseOutcome) -> ParseOutcome:
    if first is None:
        return second
    if second.status == "complete":
        return second
    if first.status == "complete":
        return first
    return first if len(first.moves) > len(second.moves) else second


def parse_image(
    image_path: str,
    recognizer: Optional[Recognizer] = None,
    vision: Optional[Recollector] = None,
    use_vision: bool = config.VISION_FALLBACK_ENABLED,
) -> ParseOutcome:
    """Local recognition first; the vision fallback is asked at most once."""
    if not utils.is_supported_image(image_path):
        return _rejected(
            RejectionKind.MALFORMED_INPUT,
            f"Unsupported image format: {Path(image_path).suffix or '(none)'}",
            source="image",
        )

    recognizer = recognizer or TesseractRecognizer()
    local: Optional[ParseOutcome] = None
    local_error = "Local recognition produced no usable notation."
    try:
        local = parse_recognized_text(recognizer.recognize(image_path), source="ocr")
    except CollaboratorFailure as e:
        log.warning("Local recognition failed: %s", e)
        local_error = str(e)

    if local is not None and local.status == "complete":
        return local
    if not use_vision:
        return local or _rejected(RejectionKind.COLLABORATOR_FAILURE, local_error, source="ocr")

    log.info("Local recognition did not yield a valid game, falling back to vision recollection")
    vision = vision or GroqVisionRecollector()
    try:
        recollection = vision.recollect(image_path)
    except CollaboratorFailure as e:
        if local is not None and local.moves:
            return local
        return _rejected(RejectionKind.COLLABORATOR_FAILURE, str(e), source="vision")

    recollected = parse_recognized_text(recollection.moves, hint=recollection.hint(), source="vision")
    return _better(local if local is not None and local.moves else None, recollected)


# ── PGN Service ──────────────────────────────────────────────────────────────

def build_pgn(
    outcome: ParseOutcome,
    output_path: Optional[str] = None,
    white: str = "?",
    black: str = "?",
    event: str = "Chess Notation Recovery",
    site: str = "?",
    date_str: Optional[str] = None,
    round_str: str = "?",
    result_str: str = "*",
) -> str:
    """
    Build a full PGN from an outcome's accepted moves.
    Corrections and the failure point of a partial outcome become comments.
    Returns the PGN string, and writes it when ``output_path`` is given.
    """
    game = chess.pgn.Game()

    # ── Headers ──
    game.headers["Event"] = event
    game.headers["Site"] = site
    game.headers["Date"] = date_str if date_str else date.today().strftime("%Y.%m.%d")
    game.headers["Round"] = round_str
    game.headers["White"] = white
    game.headers["Black"] = black

    starting_fen = getattr(outcome, "starting_fen", None)
    if starting_fen:
        game.setup(starting_fen)

    # ── Add moves ──
    node = game
    board = game.board()
    for accepted in outcome.moves:
        move = board.parse_san(accepted.san)
        node = node.add_variation(move)
        board.push(move)
        if accepted.corrected:
            node.comment = f"read as {accepted.original_token}"

    if outcome.status == "partial":
        flag = f"[INVALID at {outcome.failure.describe()}]"
        node.comment = (node.comment + " " if node.comment else "") + flag
    elif outcome.status == "rejected":
        game.comment = outcome.reason

    # An explicit result wins over the one implied by the final position
    if result_str not in ("*", "?"):
        game.headers["Result"] = result_str
    else:
        game.headers["Result"] = getattr(outcome, "result", "*")

    pgn_string = str(game)
    if output_path:
        _write_pgn(pgn_string, output_path)
    return pgn_string


def _write_pgn(pgn_string: str, output_path: str) -> None:
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w") as f:
        f.write(pgn_string)
        f.write("\n")
