"""
Chan Analysis Configuration

Centralized configuration for the merge / turning point / stroke / zone
pipeline. The two integers the downstream consumers care about are
min_stroke_bars and min_zone_strokes; the rest select algorithm variants
and the zone quality filters.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional


class MergeRule(Enum):
    """
    How two bars in a containment relationship are folded together.

    EXTREMUM: UP takes max(high)/max(low), DOWN takes min(high)/min(low).
        Both bounds are pulled toward the extremum of the merge direction.
    ENVELOPE: UP takes max(high)/min(low), DOWN takes min(high)/max(low).
    """
    EXTREMUM = "extremum"
    ENVELOPE = "envelope"


class MergeDirection(Enum):
    """
    How a fold picks its direction when the current bar has none yet.

    TREND: compare the current bar with the previously finalized merged bar
        (UP if its high is higher). Falls back to INCOMING before any bar has
        been finalized.
    INCOMING: compare the incoming bar's high with the current bar's.
    """
    TREND = "trend"
    INCOMING = "incoming"


class ZoneStrategy(Enum):
    """Which consolidation zone detector to run."""
    STATIC = "static"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class ChanConfig:
    """
    All configurable parameters for Chan structure analysis.

    Attributes:
        min_stroke_bars: Minimum merged bars a stroke must span, both
            endpoints included. Default 5.
        min_zone_strokes: Minimum strokes that make a consolidation zone.
            Default 3.
        merge_rule: Containment merge rule. Default EXTREMUM.
        merge_direction: How a fresh fold picks its direction. Default TREND.
        zone_strategy: Zone detector used by ChanAnalyzer. Default DYNAMIC.
        confirm_turning_points: Run the confirmation pass over turning points
            before strokes are built. Default True.
        max_zone_strokes: Cap on strokes a static zone may absorb while
            extending. None (default) means no cap.
        min_zone_height_pct: Zones narrower than this percentage of their
            midpoint are marked invalid. Default 0.3.
        max_zone_duration_bars: Zones spanning more merged bars than this are
            marked invalid. Default 150.
        trace: Collect rejection diagnostics during analysis. Default False.

    Example:
        >>> config = ChanConfig.default()
        >>> config.min_stroke_bars
        5
    """
    min_stroke_bars: int = 5
    min_zone_strokes: int = 3
    merge_rule: MergeRule = MergeRule.EXTREMUM
    merge_direction: MergeDirection = MergeDirection.TREND
    zone_strategy: ZoneStrategy = ZoneStrategy.DYNAMIC
    confirm_turning_points: bool = True
    max_zone_strokes: Optional[int] = None
    min_zone_height_pct: float = 0.3
    max_zone_duration_bars: int = 150
    trace: bool = False

    def __post_init__(self) -> None:
        if self.min_stroke_bars < 1:
            raise ValueError(f"min_stroke_bars must be >= 1, got {self.min_stroke_bars}")
        if self.min_zone_strokes < 1:
            raise ValueError(f"min_zone_strokes must be >= 1, got {self.min_zone_strokes}")
        if self.max_zone_strokes is not None and self.max_zone_strokes < self.min_zone_strokes:
            raise ValueError(
                f"max_zone_strokes ({self.max_zone_strokes}) must be >= "
                f"min_zone_strokes ({self.min_zone_strokes})"
            )
        if self.min_zone_height_pct < 0:
            raise ValueError("min_zone_height_pct must be non-negative")
        if self.max_zone_duration_bars < 0:
            raise ValueError("max_zone_duration_bars must be non-negative")
        # Accept plain strings for the enum fields (CLI / from_dict input)
        if not isinstance(self.merge_rule, MergeRule):
            object.__setattr__(self, "merge_rule", MergeRule(self.merge_rule))
        if not isinstance(self.merge_direction, MergeDirection):
            object.__setattr__(self, "merge_direction", MergeDirection(self.merge_direction))
        if not isinstance(self.zone_strategy, ZoneStrategy):
            object.__setattr__(self, "zone_strategy", ZoneStrategy(self.zone_strategy))

    @classmethod
    def default(cls) -> "ChanConfig":
        """Create a config with default values."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["merge_rule"] = self.merge_rule.value
        data["merge_direction"] = self.merge_direction.value
        data["zone_strategy"] = self.zone_strategy.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChanConfig":
        """Create from dictionary."""
        return cls(
            min_stroke_bars=data.get("min_stroke_bars", 5),
            min_zone_strokes=data.get("min_zone_strokes", 3),
            merge_rule=data.get("merge_rule", MergeRule.EXTREMUM.value),
            merge_direction=data.get("merge_direction", MergeDirection.TREND.value),
            zone_strategy=data.get("zone_strategy", ZoneStrategy.DYNAMIC.value),
            confirm_turning_points=data.get("confirm_turning_points", True),
            max_zone_strokes=data.get("max_zone_strokes"),
            min_zone_height_pct=data.get("min_zone_height_pct", 0.3),
            max_zone_duration_bars=data.get("max_zone_duration_bars", 150),
            trace=data.get("trace", False),
        )

    def with_zone_strategy(self, zone_strategy: ZoneStrategy) -> "ChanConfig":
        """
        Create a new config running a different zone detector.

        Since ChanConfig is frozen, this creates a new instance.
        """
        data = self.to_dict()
        data["zone_strategy"] = ZoneStrategy(zone_strategy).value
        return ChanConfig.from_dict(data)

    def with_merge_rule(self, merge_rule: MergeRule) -> "ChanConfig":
        """Create a new config with a different containment merge rule."""
        data = self.to_dict()
        data["merge_rule"] = MergeRule(merge_rule).value
        return ChanConfig.from_dict(data)

    def with_merge_direction(self, merge_direction: MergeDirection) -> "ChanConfig":
        """Create a new config with a different fold direction inference."""
        data = self.to_dict()
        data["merge_direction"] = MergeDirection(merge_direction).value
        return ChanConfig.from_dict(data)

    def with_thresholds(
        self,
        min_stroke_bars: int = None,
        min_zone_strokes: int = None,
    ) -> "ChanConfig":
        """
        Create a new config with modified stroke / zone minimums.

        Only provided parameters are modified; others keep their current values.
        """
        data = self.to_dict()
        if min_stroke_bars is not None:
            data["min_stroke_bars"] = min_stroke_bars
        if min_zone_strokes is not None:
            data["min_zone_strokes"] = min_zone_strokes
        return ChanConfig.from_dict(data)

    def with_trace(self, trace: bool) -> "ChanConfig":
        """Create a new config with diagnostics collection toggled."""
        data = self.to_dict()
        data["trace"] = trace
        return ChanConfig.from_dict(data)
