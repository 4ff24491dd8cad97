import os
from pydantic import BaseModel, Field, model_validator
from typing import Dict, Optional

from dotenv import load_dotenv

ENV_PREFIX = "SCORECARD_"
_NON_ENV_FIELDS = {"strategy_priors"}


class ReconcileSettings(BaseModel):
    """Tunable thresholds for the reconciliation core.

    Defaults reproduce the behaviour the extraction rules were calibrated on.
    The relative-notation heuristic in particular is a guess with no known
    false-positive rate, so its thresholds are exposed rather than fixed.
    """

    # --- Notation detection ---
    relative_min_samples: int = Field(6, ge=1)
    relative_max_value: int = Field(3, ge=0)
    relative_mean_threshold: float = Field(2.5, gt=0)
    min_gross_score: int = 1
    max_gross_score: int = 20

    # --- Structure extraction ---
    hole_row_search_depth: int = Field(5, ge=1)
    par_anchor_search_depth: int = Field(15, ge=1)
    par_row_search_after: int = Field(8, ge=1)
    default_par: int = Field(4, ge=3, le=5)
    yardage_floor: int = 18  # hole cells all above this are yardages, not scores

    # --- Merge ---
    gap_fill_max_par_distance: int = Field(7, ge=0)

    # --- Layout probing ---
    layout_min_confidence: float = Field(0.5, ge=0.0, le=1.0)

    # --- Cleanup ---
    min_clean_score: int = 1
    max_clean_score: int = 15

    # --- Validation / selection ---
    unreasonable_par_distance: int = 7
    tie_margin: float = 1.0
    strategy_priors: Dict[str, float] = Field(default_factory=lambda: {
        "handwriting_only": 0.7,
        "structure_only": 0.8,
        "structure_with_handwriting": 0.85,
    })

    # --- Runner ---
    timeout_seconds: Optional[float] = Field(90.0, gt=0)

    @model_validator(mode='after')
    def validate_ranges(self):
        if self.min_gross_score > self.max_gross_score:
            raise ValueError(
                f"min_gross_score ({self.min_gross_score}) > max_gross_score ({self.max_gross_score})"
            )
        if self.min_clean_score > self.max_clean_score:
            raise ValueError(
                f"min_clean_score ({self.min_clean_score}) > max_clean_score ({self.max_clean_score})"
            )
        return self

    def prior_for(self, strategy_id: str) -> float:
        return self.strategy_priors.get(strategy_id, 0.5)

    @classmethod
    def from_env(cls) -> "ReconcileSettings":
        """Build settings, letting SCORECARD_<FIELD> environment variables override defaults.

        e.g. SCORECARD_RELATIVE_MEAN_THRESHOLD=2.0, SCORECARD_TIMEOUT_SECONDS=60
        """
        load_dotenv()
        overrides = {}
        for name in cls.model_fields:
            if name in _NON_ENV_FIELDS:
                continue
            raw = os.environ.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                overrides[name] = raw
        return cls.model_validate(overrides)


DEFAULT_SETTINGS = ReconcileSettings()
