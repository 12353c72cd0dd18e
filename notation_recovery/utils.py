import base64
from pathlib import Path
from typing import Optional

from langchain_groq import ChatGroq

from . import config


def is_supported_image(image_path: str) -> bool:
    """Whether the file suffix is an image type the recognizers accept."""
    return Path(image_path).suffix.lower() in config.SUPPORTED_EXTENSIONS


def image_data_uri(image_path: str) -> str:
    """Inline an image file as a ``data:`` URI for a multimodal chat message."""
    media_type = config.SUPPORTED_EXTENSIONS.get(Path(image_path).suffix.lower(), "image/jpeg")
    payload = base64.b64encode(Path(image_path).read_bytes()).decode("ascii")
    return f"data:{media_type};base64,{payload}"


def create_llm(model: Optional[str] = None) -> ChatGroq:
    """Groq chat model used for the vision fallback; deterministic sampling."""
    return ChatGroq(model_name=model or config.MODEL_NAME, temperature=0)
