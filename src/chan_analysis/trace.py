"""
Diagnostics collected while the pipeline runs.

Stages accept an optional AnalysisTrace and record every candidate they
reject together with the reason. Passing no trace costs nothing; the stage
results are identical either way.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Stage(Enum):
    MERGE = "merge"
    TURNING_POINTS = "turning_points"
    STROKES = "strokes"
    ZONES = "zones"


class RejectionReason(Enum):
    """Why a candidate was dropped by a stage."""
    # Turning points
    REPEATED_TYPE = "repeated_type"
    # Strokes
    SAME_TYPE = "same_type"
    NO_BREAK = "no_break"
    CONTAINED = "contained"
    TOO_SHORT = "too_short"
    # Zones
    NO_OVERLAP = "no_overlap"
    NOT_INTERSECTING = "not_intersecting"
    TOO_FEW_STROKES = "too_few_strokes"


@dataclass(frozen=True)
class Rejection:
    """
    One rejected candidate.

    Attributes:
        stage: Pipeline stage that rejected it
        position: Candidate position in the stage's input sequence
        reason: Why it was rejected
        anchor: Position of the anchor it was tested against, if any
        detail: Short free-form context (prices, counts)
    """
    stage: Stage
    position: int
    reason: RejectionReason
    anchor: Optional[int] = None
    detail: str = ""


@dataclass
class AnalysisTrace:
    """Collector of rejections across one analysis run."""
    rejections: List[Rejection] = field(default_factory=list)

    def reject(
        self,
        stage: Stage,
        position: int,
        reason: RejectionReason,
        anchor: Optional[int] = None,
        detail: str = "",
    ) -> None:
        self.rejections.append(Rejection(stage, position, reason, anchor, detail))

    def for_stage(self, stage: Stage) -> List[Rejection]:
        return [r for r in self.rejections if r.stage == stage]

    def counts(self, stage: Optional[Stage] = None) -> Dict[str, int]:
        """Rejection counts keyed by reason value."""
        rejections = self.rejections if stage is None else self.for_stage(stage)
        return dict(Counter(r.reason.value for r in rejections))

    def __len__(self) -> int:
        return len(self.rejections)
