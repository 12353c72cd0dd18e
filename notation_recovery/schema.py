from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# --- Core Domain Models ---

class Side(str, Enum):
    WHITE = "white"
    BLACK = "black"

    @classmethod
    def of_ply(cls, ply_index: int) -> "Side":
        return cls.WHITE if ply_index % 2 == 0 else cls.BLACK


class CandidateMove(BaseModel):
    model_config = ConfigDict(frozen=True)

    ply_index: int = Field(..., ge=0, description="Zero-based half-move number.")
    side: Side
    token: str = Field(..., description="Post-normalization notation text, not yet legality-checked.")

    @classmethod
    def at(cls, ply_index: int, token: str) -> "CandidateMove":
        return cls(ply_index=ply_index, side=Side.of_ply(ply_index), token=token)

    @property
    def move_number(self) -> int:
        return self.ply_index // 2 + 1


class AcceptedMove(BaseModel):
    model_config = ConfigDict(frozen=True)

    ply_index: int = Field(..., ge=0)
    token: str = Field(..., description="The token the oracle accepted (the repaired one when corrected).")
    san: str = Field(..., description="Standard notation as rendered by the rules engine.")
    fen: str = Field(..., description="Position after the move.")
    corrected: bool = False
    original_token: Optional[str] = Field(None, description="The token as read, when it had to be corrected.")

    @property
    def side(self) -> Side:
        return Side.of_ply(self.ply_index)


class ReplayFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    ply_index: int
    token: Optional[str] = Field(None, description="Offending token, or None when the ply was missing.")
    reason: str

    @property
    def move_number(self) -> int:
        return self.ply_index // 2 + 1

    def describe(self) -> str:
        shown = f'"{self.token}"' if self.token is not None else "missing move"
        return f"{shown} at move {self.move_number} ({Side.of_ply(self.ply_index).value}): {self.reason}"


class RejectionKind(str, Enum):
    MALFORMED_INPUT = "malformed_input"
    ILLEGAL_MOVE = "illegal_move"
    COLLABORATOR_FAILURE = "collaborator_failure"


class RecognitionHint(BaseModel):
    total_moves: Optional[int] = Field(None, ge=0, description="Move pairs the recognizer believes the image holds.")
    confidence: Optional[Literal["high", "medium", "low"]] = None


class VisionRecollection(BaseModel):
    moves: str = Field(..., description="PGN movetext, e.g. '1. e4 e5 2. Nf3 Nc6', or NO_NOTATION_FOUND.")
    total_moves: int = Field(0, ge=0, description="Total number of move pairs visible on the scoresheet.")
    confidence: Literal["high", "medium", "low"] = Field("low", description="How legible the handwriting was.")

    def hint(self) -> RecognitionHint:
        return RecognitionHint(total_moves=self.total_moves or None, confidence=self.confidence)


# --- Parse Outcomes ---

class _OutcomeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str = "text"
    warning: Optional[str] = None
    expected_moves: Optional[int] = None
    starting_fen: Optional[str] = None


class CompleteOutcome(_OutcomeBase):
    status: Literal["complete"] = "complete"
    moves: List[AcceptedMove]
    canonical_pgn: str
    result: str = "*"

    @property
    def moves_found(self) -> int:
        return (len(self.moves) + 1) // 2


class PartialOutcome(_OutcomeBase):
    status: Literal["partial"] = "partial"
    moves: List[AcceptedMove]
    canonical_pgn: str
    failure: ReplayFailure
    result: str = "*"

    @property
    def moves_found(self) -> int:
        return (len(self.moves) + 1) // 2


class RejectedOutcome(_OutcomeBase):
    status: Literal["rejected"] = "rejected"
    kind: RejectionKind
    reason: str
    failure: Optional[ReplayFailure] = None

    @property
    def moves(self) -> List[AcceptedMove]:
        return []

    @property
    def moves_found(self) -> int:
        return 0


ParseOutcome = Annotated[
    Union[CompleteOutcome, PartialOutcome, RejectedOutcome],
    Field(discriminator="status"),
]


# --- API Request/Response Models ---

class TextRequest(BaseModel):
    text: str
    starting_fen: Optional[str] = None


class MoveRequest(BaseModel):
    move_number: Optional[int] = None
    white: Optional[str] = None
    black: Optional[str] = None


class ValidationRequest(BaseModel):
    moves: List[MoveRequest]


class ExportRequest(BaseModel):
    outcome: ParseOutcome
    white_player: str = "?"
    black_player: str = "?"
    event: str = "Chess Notation Recovery"
    site: str = "?"
    date: Optional[str] = None
    round: str = "?"
    result: str = "*"


class OutcomeResponse(BaseModel):
    outcome: ParseOutcome
    moves_found: int
    pgn: Optional[str] = None
