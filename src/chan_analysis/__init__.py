# Chan Analysis Module
#
# Structural decomposition of OHLC bars: containment merging, turning
# points, strokes and consolidation zones.

from .types import (
    Bar,
    MergedBar,
    TurningPoint,
    Stroke,
    ConsolidationZone,
    Direction,
    TurningPointType,
)
from .errors import ChanAnalysisError, InsufficientDataError, InvalidOrderingError
from .chan_config import ChanConfig, MergeDirection, MergeRule, ZoneStrategy
from .trace import AnalysisTrace, Rejection, RejectionReason, Stage

# Pipeline stages
from .bar_merger import BarMerger, merge_bars
from .turning_points import TurningPointDetector, detect_turning_points
from .stroke_builder import StrokeBuilder, build_strokes
from .zones import (
    ZoneDetector,
    StaticZoneDetector,
    DynamicZoneDetector,
    ZoneComparison,
    compare_zone_strategies,
    get_zone_detector,
)

# Orchestration
from .analyzer import AnalysisResult, ChanAnalyzer, analyze
from .adapters import dataframe_to_bars, load_bars_csv
