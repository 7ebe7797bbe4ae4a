"""
Interface for OCR extraction capabilities.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Protocol


@dataclass
class OcrExtraction:
    """Raw OCR output: provider field names mapped to text, plus a 0.0-1.0 confidence."""

    fields: Dict[str, Any] = field(default_factory=dict)
    confidence: float = 0.0


class OcrExtractor(Protocol):
    """Interface for OCR provider adapters."""

    provider: str

    async def extract(self, image_bytes: bytes, content_type: str) -> OcrExtraction:
        ...
