import pytest
from unittest.mock import AsyncMock

from models import LayoutAnalysis, LayoutType
from extraction.collaborators import NullLayoutClassifier, ScorecardImage
from extraction.layout import describe_layout, probe_layout

IMAGE = ScorecardImage(data=b"\xff\xd8\xff", mime_type="image/jpeg")


def _classifier(**kwargs):
    classifier = AsyncMock()
    classifier.classify = AsyncMock(**kwargs)
    return classifier


@pytest.mark.asyncio
async def test_confident_layout_is_used():
    layout = LayoutAnalysis(hole_count=18, layout_type=LayoutType.STANDARD_18, confidence=0.9)
    result = await probe_layout(_classifier(return_value=layout), IMAGE)
    assert result == layout


@pytest.mark.asyncio
async def test_classifier_error_falls_back_to_default():
    result = await probe_layout(_classifier(side_effect=RuntimeError("boom")), IMAGE)
    assert result == LayoutAnalysis.default()


@pytest.mark.asyncio
async def test_low_confidence_falls_back_to_default():
    layout = LayoutAnalysis(hole_count=18, confidence=0.4)
    assert await probe_layout(_classifier(return_value=layout), IMAGE) == LayoutAnalysis.default()


@pytest.mark.asyncio
async def test_odd_hole_count_falls_back_to_default():
    layout = LayoutAnalysis(hole_count=12, confidence=0.9)
    assert await probe_layout(_classifier(return_value=layout), IMAGE) == LayoutAnalysis.default()


@pytest.mark.asyncio
async def test_null_classifier_reports_default():
    result = await probe_layout(NullLayoutClassifier(), IMAGE)
    assert result.hole_count == 9
    assert result.row_oriented
    assert result.confidence == 0.3


def test_describe_layout():
    text = describe_layout(LayoutAnalysis(
        hole_count=18,
        layout_type=LayoutType.SPLIT_9_9,
        has_summary_columns=True,
        has_initial_columns=True,
        confidence=0.8,
    ))
    assert "18 holes" in text
    assert "OUT, IN and TOTAL" in text
    assert "initials" in text
    assert "columns" not in describe_layout(LayoutAnalysis.default()).lower()
