"""
OCR adapter for an HTTP extraction service.

POSTs the image as multipart and expects ``{"fields": {...}, "confidence": 0.87}``
(``data``/``result`` and ``ocr_confidence`` are accepted as older spellings).
"""

import logging
import math
from typing import Any, Optional

import httpx

from recruitment.services.ocr.base import OcrExtraction

logger = logging.getLogger(__name__)


class HttpOcrExtractor:
    provider = "http"

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: float = 15.0):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    async def extract(self, image_bytes: bytes, content_type: str) -> OcrExtraction:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        files = {"file": ("document", image_bytes, content_type)}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(f"{self.base_url}/extract/ktp", files=files, headers=headers)
            response.raise_for_status()
            body = response.json()
        return self._parse(body)

    @staticmethod
    def _parse(body: Any) -> OcrExtraction:
        if not isinstance(body, dict):
            raise ValueError("ocr_response_not_object")
        fields = body.get("fields") or body.get("data") or body.get("result") or {}
        if not isinstance(fields, dict):
            fields = {}
        confidence = body.get("confidence")
        if confidence is None:
            confidence = body.get("ocr_confidence", fields.get("confidence", 0.0))
        try:
            confidence = float(confidence)
        except (TypeError, ValueError):
            logger.warning("OCR response carried a non-numeric confidence: %r", confidence)
            confidence = 0.0
        if not math.isfinite(confidence):
            logger.warning("OCR response carried a non-finite confidence: %r", confidence)
            confidence = 0.0
        return OcrExtraction(fields=fields, confidence=confidence)
