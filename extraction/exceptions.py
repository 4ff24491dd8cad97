"""Exceptions raised by the reconciliation core.

Cell-level problems never raise; they become None scores. Structure-level
problems raise inside a single strategy and are absorbed by the runner. Only
AllStrategiesFailedError and ExtractionTimeoutError reach the caller.
"""

from typing import Dict

USER_REMEDIATION = "Extraction failed, please retry with a clearer image."


class ExtractionError(Exception):
    """Base for all extraction errors."""


class StructureNotFoundError(ExtractionError):
    """No hole columns could be located in the document grid."""


class NoPlayerRowsError(StructureNotFoundError):
    """Hole columns were found but no row qualified as a player."""


class IncompatibleScorecardError(ExtractionError):
    """Two scorecards disagree on hole count or par and cannot be merged."""


class AllStrategiesFailedError(ExtractionError):
    """Every extraction strategy raised or returned an unusable scorecard."""

    def __init__(self, errors: Dict[str, BaseException]):
        self.errors = errors
        detail = "; ".join(
            f"{strategy_id}: {type(err).__name__}" for strategy_id, err in errors.items()
        )
        message = f"No strategy returned a usable result. {USER_REMEDIATION}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class ExtractionTimeoutError(ExtractionError):
    """The whole reconciliation exceeded its time budget."""

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Scorecard extraction did not finish within {timeout_seconds:.0f}s. "
            f"{USER_REMEDIATION}"
        )
