from .candidate import HandwritingRead, HandwritingRequest, RawPlayerRow, StructureCandidate
from .cleanup import is_sequential, sanitize_scorecard
from .collaborators import (
    DocumentStructureReader,
    HandwritingReader,
    LayoutClassifier,
    NullLayoutClassifier,
    ScorecardImage,
    VisionScorecardReader,
)
from .config import DEFAULT_SETTINGS, ReconcileSettings
from .exceptions import (
    AllStrategiesFailedError,
    ExtractionError,
    ExtractionTimeoutError,
    IncompatibleScorecardError,
    NoPlayerRowsError,
    StructureNotFoundError,
)
from .grid import TextGrid
from .layout import describe_layout, probe_layout
from .merge import (
    check_compatibility,
    merge_additional_players,
    merge_handwriting,
    merge_summary,
    tag_scores,
    tag_structural_scores,
)
from .notation import (
    NotationContext,
    classify_notation,
    convert_token,
    detect_notation_style,
    format_score,
    normalize_candidate,
)
from .runner import RunOutcome, StrategyResult, StrategyRunner, select_best
from .strategies import (
    ExtractionStrategy,
    HandwritingOnlyStrategy,
    StructureOnlyStrategy,
    StructureWithHandwritingStrategy,
)
from .structure import extract_structure
from .validation import ValidationReport, validate_scorecard
