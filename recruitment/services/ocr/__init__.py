"""OCR extraction adapters and KTP field handling."""

from recruitment.services.ocr.base import OcrExtraction, OcrExtractor
from recruitment.services.ocr.http_extractor import HttpOcrExtractor
from recruitment.services.ocr.ktp_fields import map_ktp_to_form, normalize_ocr_fields

__all__ = [
    "OcrExtraction",
    "OcrExtractor",
    "HttpOcrExtractor",
    "map_ktp_to_form",
    "normalize_ocr_fields",
]
