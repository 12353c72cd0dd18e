"""External recognition collaborators.

Both collaborators turn an image into text. Neither one parses chess: the
orchestrator feeds whatever they return back into the normal pipeline.
"""

import logging
from typing import Protocol

import pytesseract
from langchain_core.messages import HumanMessage, SystemMessage
from langsmith import traceable
from PIL import Image

from . import config, prompts, utils
from .errors import CollaboratorFailure
from .schema import VisionRecollection

log = logging.getLogger(__name__)


class Recognizer(Protocol):
    def recognize(self, image_path: str) -> str:
        ...


class Recollector(Protocol):
    def recollect(self, image_path: str) -> VisionRecollection:
        ...


class TesseractRecognizer:
    """Local OCR restricted to the characters chess notation uses."""

    def __init__(self, whitelist: str = config.TESSERACT_WHITELIST, page_segmentation: int = 6):
        if config.TESSERACT_CMD:
            pytesseract.pytesseract.tesseract_cmd = config.TESSERACT_CMD
        self.tesseract_config = f"--psm {page_segmentation} -c tessedit_char_whitelist={whitelist}"

    def recognize(self, image_path: str) -> str:
        try:
            with Image.open(image_path) as image:
                return pytesseract.image_to_string(image.convert("RGB"), config=self.tesseract_config)
        except (OSError, pytesseract.TesseractError) as e:
            raise CollaboratorFailure(f"Local recognition failed: {e}") from e


class GroqVisionRecollector:
    """Remote vision fallback: one structured-output call per image."""

    def __init__(self, llm=None):
        self._llm = llm

    def _structured_llm(self):
        llm = self._llm or utils.create_llm()
        return llm.with_structured_output(VisionRecollection).with_config({"run_name": "recollect_moves"})

    @traceable
    def recollect(self, image_path: str) -> VisionRecollection:
        """
        Send the scoresheet image to the vision model once.
        Returns the recollected movetext with a move-count hint and a confidence tier.
        """
        try:
            image_uri = utils.image_data_uri(image_path)
        except OSError as e:
            raise CollaboratorFailure(f"Could not read image: {e}") from e

        messages = [
            SystemMessage(content=prompts.SYSTEM_PROMPT),
            HumanMessage(
                content=[
                    {"type": "text", "text": prompts.USER_PROMPT},
                    {
                        "type": "image_url",
                        "image_url": {"url": image_uri},
                    },
                ]
            ),
        ]

        try:
            result: VisionRecollection = self._structured_llm().invoke(messages)
        except Exception as e:
            log.error("Vision recollection failed: %s", e)
            raise CollaboratorFailure(f"AI vision processing failed: {e}") from e

        moves = (result.moves or "").strip()
        if moves == prompts.NO_NOTATION_FOUND or len(moves) < config.MIN_VISION_TEXT_LENGTH:
            raise CollaboratorFailure(
                "Could not detect chess notation in image. Please ensure the image is clear "
                "and contains standard algebraic notation."
            )
        return result
