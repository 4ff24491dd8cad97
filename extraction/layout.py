import logging

from models import LayoutAnalysis, LayoutType
from extraction.collaborators import LayoutClassifier, ScorecardImage
from extraction.config import DEFAULT_SETTINGS, ReconcileSettings

logger = logging.getLogger(__name__)

VALID_LAYOUT_HOLE_COUNTS = (9, 18)

_LAYOUT_GUIDANCE = {
    LayoutType.STANDARD_18: "Standard 18-hole card: holes 1-9 then 10-18 in one row.",
    LayoutType.STANDARD_9: "Single 9-hole card.",
    LayoutType.SPLIT_9_9: "Front and back nine are printed as two separate tables.",
    LayoutType.COMPACT: "Compact card with narrow cells; read each digit carefully.",
    LayoutType.PLAYER_PER_PAGE: "One player per card.",
}


async def probe_layout(
    classifier: LayoutClassifier,
    image: ScorecardImage,
    settings: ReconcileSettings = DEFAULT_SETTINGS,
) -> LayoutAnalysis:
    """Classify the card, falling back to LayoutAnalysis.default() on any doubt. Never raises."""
    try:
        layout = await classifier.classify(image)
    except Exception as e:
        logger.warning("Layout classification failed, using default layout: %s", e)
        return LayoutAnalysis.default()

    if layout.confidence < settings.layout_min_confidence:
        logger.warning(
            "Layout confidence %.2f below %.2f, using default layout",
            layout.confidence, settings.layout_min_confidence,
        )
        return LayoutAnalysis.default()
    if layout.hole_count not in VALID_LAYOUT_HOLE_COUNTS:
        logger.warning("Layout reported %d holes, using default layout", layout.hole_count)
        return LayoutAnalysis.default()

    logger.info(
        "Layout: %s, %d holes (confidence %.2f)",
        layout.layout_type.value, layout.hole_count, layout.confidence,
    )
    return layout


def describe_layout(layout: LayoutAnalysis) -> str:
    """Plain-language layout hints for a vision prompt."""
    lines = [f"This scorecard has {layout.hole_count} holes."]
    guidance = _LAYOUT_GUIDANCE.get(layout.layout_type)
    if guidance:
        lines.append(guidance)
    if layout.has_summary_columns:
        lines.append("OUT, IN and TOTAL columns are subtotals, not holes. Skip them.")
    if layout.has_initial_columns:
        lines.append("A column of player initials sits between holes 9 and 10. Skip it.")
    if not layout.row_oriented:
        lines.append("Players are listed in columns and holes run down the rows.")
    return "\n".join(lines)
