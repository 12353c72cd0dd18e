import logging
import os
import shutil
import uuid
from pathlib import Path

import uvicorn
from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from . import __version__, config, services
from .schema import ExportRequest, OutcomeResponse, TextRequest, ValidationRequest

log = logging.getLogger(__name__)

app = FastAPI(
    title="Notation Recovery API",
    description="Turns noisy chess notation (text, CSV rows, scoresheet images) into validated, replayable games.",
    version=__version__,
)

# ── Middleware ───────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _respond(outcome) -> OutcomeResponse:
    pgn = services.build_pgn(outcome) if outcome.status != "rejected" else None
    return OutcomeResponse(outcome=outcome, moves_found=outcome.moves_found, pgn=pgn)


async def _read_text(file: UploadFile) -> str:
    return (await file.read()).decode("utf-8", errors="replace")


@app.get("/")
def read_root():
    return {"message": "Notation Recovery API is running. See /docs for the endpoints."}


# ── API Endpoints ────────────────────────────────────────────────────────────

@app.get("/health")
def health_check():
    """Health check endpoint to verify service status."""
    return {
        "status": "healthy",
        "model": config.MODEL_NAME,
        "vision_fallback": config.VISION_FALLBACK_ENABLED,
        "tracing": config.LANGCHAIN_TRACING_V2,
        "project": config.LANGCHAIN_PROJECT,
    }


@app.post("/api/parse", response_model=OutcomeResponse)
async def parse_notation(request: TextRequest):
    """
    1. Receive pasted notation
    2. Normalize, extract, replay and repair
    3. Return the outcome + PGN
    """
    outcome = await run_in_threadpool(services.parse_text, request.text, request.starting_fen)
    return _respond(outcome)


@app.post("/api/validate", response_model=OutcomeResponse)
async def validate_game(request: ValidationRequest):
    """
    1. Receive White/Black move rows
    2. Replay them against the rules
    3. Return the outcome + PGN
    """
    rows = [m.model_dump() for m in request.moves]
    outcome = await run_in_threadpool(services.parse_rows, rows)
    return _respond(outcome)


@app.post("/api/upload", response_model=OutcomeResponse)
async def upload_image(file: UploadFile = File(...)):
    """
    1. Upload Image
    2. Local OCR, then the vision fallback if needed
    3. Return the outcome + PGN
    """
    config.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    suffix = Path(file.filename or "").suffix.lower()
    file_path = config.UPLOAD_DIR / f"{uuid.uuid4().hex}{suffix}"
    try:
        # Save temp file
        with open(file_path, "wb") as buffer:
            shutil.copyfileobj(file.file, buffer)

        log.info("Processing image: %s", file.filename)
        outcome = await run_in_threadpool(services.parse_image, str(file_path))
        return _respond(outcome)

    except OSError as e:
        log.error("Image processing failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        # Cleanup
        if file_path.exists():
            os.remove(file_path)


@app.post("/api/upload-csv", response_model=OutcomeResponse)
async def upload_csv(file: UploadFile = File(...)):
    """Upload a CSV with White/Black columns."""
    text = await _read_text(file)
    outcome = await run_in_threadpool(services.parse_csv, text)
    return _respond(outcome)


@app.post("/api/upload-pgn", response_model=OutcomeResponse)
async def upload_pgn_file(file: UploadFile = File(...)):
    """Upload a PGN (or plain notation) text file."""
    text = await _read_text(file)
    outcome = await run_in_threadpool(services.parse_text, text)
    return _respond(outcome)


@app.post("/api/export")
async def export_pgn(request: ExportRequest):
    """Render an outcome as a full PGN with the given headers."""
    try:
        pgn = services.build_pgn(
            request.outcome,
            white=request.white_player,
            black=request.black_player,
            event=request.event,
            site=request.site,
            date_str=request.date,
            round_str=request.round,
            result_str=request.result,
        )
    except ValueError as e:
        log.warning("Export rejected: %s", e)
        raise HTTPException(status_code=400, detail=f"Outcome does not replay: {e}")
    return {"pgn": pgn}


def run():
    port = int(os.getenv("PORT", 8000))
    logging.basicConfig(level=config.LOG_LEVEL)
    log.info("Starting Notation Recovery API on port %d...", port)
    uvicorn.run("notation_recovery.app:app", host="0.0.0.0", port=port)


if __name__ == "__main__":
    run()
