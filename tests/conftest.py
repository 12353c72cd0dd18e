"""Shared pytest fixtures used across the test suite."""

from pathlib import Path

import pytest

from notation_recovery.errors import CollaboratorFailure
from notation_recovery.schema import VisionRecollection

CLEAN_GAME = "1. e4 e5 2. Nf3 Nc6 3. Bb5 a6"


class FakeRecognizer:
    """Local recognizer that returns canned text or raises."""

    def __init__(self, text: str = "", error: Exception = None):
        self.text = text
        self.error = error
        self.calls = 0

    def recognize(self, image_path: str) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text


class FakeVision:
    """Vision fallback that returns a canned recollection or raises."""

    def __init__(self, moves: str = "", total_moves: int = 0, error: Exception = None):
        self.recollection = VisionRecollection(moves=moves, total_moves=total_moves, confidence="medium")
        self.error = error
        self.calls = 0

    def recollect(self, image_path: str) -> VisionRecollection:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.recollection


@pytest.fixture
def clean_game() -> str:
    return CLEAN_GAME


@pytest.fixture
def image_path(tmp_path: Path) -> str:
    path = tmp_path / "scoresheet.png"
    path.write_bytes(b"not really a png")
    return str(path)


@pytest.fixture
def collaborator_down() -> CollaboratorFailure:
    return CollaboratorFailure("service unavailable")


@pytest.fixture
def two_rooks_fen() -> str:
    """Rooks on a1 and f1 can both reach d1."""
    return "4k3/8/8/8/8/8/8/R4RK1 w - - 0 1"


@pytest.fixture
def two_rooks_capture_fen() -> str:
    """Rooks on a4 and h4 can both capture on d4."""
    return "4k3/8/8/8/R2p3R/8/8/4K3 w - - 0 1"


@pytest.fixture
def make_recognizer():
    return FakeRecognizer


@pytest.fixture
def make_vision():
    return FakeVision
