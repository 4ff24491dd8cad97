from .scorecard_extractor import (
    extract_scorecard,
    extract_scorecard_async,
    ExtractionResult,
    StrategySummary,
)
from .gemini_readers import (
    GeminiDocumentReader,
    GeminiHandwritingReader,
    GeminiLayoutClassifier,
    GeminiVisionReader,
)

__all__ = [
    "extract_scorecard",
    "extract_scorecard_async",
    "ExtractionResult",
    "StrategySummary",
    "GeminiDocumentReader",
    "GeminiHandwritingReader",
    "GeminiLayoutClassifier",
    "GeminiVisionReader",
]
