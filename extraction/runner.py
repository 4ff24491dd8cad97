"""Run every strategy concurrently and keep the most plausible scorecard."""

import asyncio
import logging
from pydantic import Field
from typing import Dict, List, Optional, Sequence, Tuple

from models import ExtractedScorecard, LayoutAnalysis
from models.base import BaseGolfModel
from extraction.cleanup import sanitize_scorecard
from extraction.collaborators import LayoutClassifier, ScorecardImage
from extraction.config import DEFAULT_SETTINGS, ReconcileSettings
from extraction.exceptions import (
    AllStrategiesFailedError,
    ExtractionError,
    ExtractionTimeoutError,
)
from extraction.layout import probe_layout
from extraction.strategies import ExtractionStrategy
from extraction.validation import validate_scorecard

logger = logging.getLogger(__name__)


class StrategyResult(BaseGolfModel):
    """A sanitized, validated scorecard from one strategy."""
    scorecard: ExtractedScorecard
    strategy_id: str
    base_confidence: float
    validation_score: float
    penalties: List[str] = Field(default_factory=list)


class RunOutcome(BaseGolfModel):
    """Everything one reconciliation produced: the winner plus the field it beat."""
    best: StrategyResult
    layout: LayoutAnalysis
    results: List[StrategyResult] = Field(default_factory=list)
    failures: Dict[str, str] = Field(default_factory=dict)


def select_best(
    results: Sequence[StrategyResult], settings: ReconcileSettings = DEFAULT_SETTINGS,
) -> StrategyResult:
    """Highest validation score wins. Within `tie_margin` points, the higher prior wins.

    Results are compared in order against the current best, so earlier
    results win exact ties.
    """
    if not results:
        raise ValueError("select_best() needs at least one result")
    best = results[0]
    for current in results[1:]:
        if abs(current.validation_score - best.validation_score) < settings.tie_margin:
            if current.base_confidence > best.base_confidence:
                best = current
        elif current.validation_score > best.validation_score:
            best = current
    return best


class StrategyRunner:
    """Fan out strategies, sanitize and validate what comes back, pick one.

    A failing strategy is logged and excluded; it never cancels the others.
    """

    def __init__(
        self,
        strategies: Sequence[ExtractionStrategy],
        layout_classifier: Optional[LayoutClassifier] = None,
        settings: ReconcileSettings = DEFAULT_SETTINGS,
    ):
        if not strategies:
            raise ValueError("StrategyRunner needs at least one strategy")
        self.strategies = list(strategies)
        self.layout_classifier = layout_classifier
        self.settings = settings

    async def run(self, image: ScorecardImage) -> RunOutcome:
        """Probe the layout, run all strategies and select the best result.

        Raises:
            AllStrategiesFailedError: nothing usable came back.
            ExtractionTimeoutError: the whole run exceeded `timeout_seconds`.
        """
        timeout = self.settings.timeout_seconds
        try:
            return await asyncio.wait_for(self._reconcile(image), timeout=timeout)
        except asyncio.TimeoutError:
            logger.error("Extraction timed out after %ss", timeout)
            raise ExtractionTimeoutError(timeout) from None

    async def _reconcile(self, image: ScorecardImage) -> RunOutcome:
        if self.layout_classifier is not None:
            layout = await probe_layout(self.layout_classifier, image, self.settings)
        else:
            layout = LayoutAnalysis.default()

        results, errors = await self.run_strategies(image, layout)
        if not results:
            logger.error("All strategies failed: %s", {k: str(v) for k, v in errors.items()})
            raise AllStrategiesFailedError(errors)

        for result in results:
            logger.info(
                "%s: validation %.1f, confidence %.2f",
                result.strategy_id, result.validation_score, result.base_confidence,
            )
        best = select_best(results, self.settings)
        logger.info(
            "Selected %s (validation %.1f, confidence %.2f)",
            best.strategy_id, best.validation_score, best.base_confidence,
        )
        return RunOutcome(
            best=best,
            layout=layout,
            results=results,
            failures={k: str(v) for k, v in errors.items()},
        )

    async def run_strategies(
        self, image: ScorecardImage, layout: LayoutAnalysis,
    ) -> Tuple[List[StrategyResult], Dict[str, BaseException]]:
        """Run every strategy concurrently. Returns (usable results, errors by strategy id)."""
        outcomes = await asyncio.gather(
            *(strategy.run(image.clone(), layout.clone()) for strategy in self.strategies),
            return_exceptions=True,
        )

        results: List[StrategyResult] = []
        errors: Dict[str, BaseException] = {}
        for strategy, outcome in zip(self.strategies, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.warning("Strategy %s failed: %s", strategy.strategy_id, outcome)
                errors[strategy.strategy_id] = outcome
                continue

            result = self._evaluate(strategy, outcome, layout)
            if result is None:
                errors[strategy.strategy_id] = ExtractionError(
                    "Scorecard had no holes or no players after cleanup"
                )
                continue
            results.append(result)
        return results, errors

    def _evaluate(
        self, strategy: ExtractionStrategy, scorecard: ExtractedScorecard, layout: LayoutAnalysis,
    ) -> Optional[StrategyResult]:
        cleaned = sanitize_scorecard(scorecard, self.settings)
        if not cleaned.holes or not cleaned.players:
            logger.warning(
                "Strategy %s returned an unusable scorecard (%d holes, %d players)",
                strategy.strategy_id, len(cleaned.holes), len(cleaned.players),
            )
            return None

        report = validate_scorecard(cleaned, layout, self.settings)
        return StrategyResult(
            scorecard=cleaned,
            strategy_id=strategy.strategy_id,
            base_confidence=strategy.base_confidence,
            validation_score=report.score,
            penalties=report.penalties,
        )
