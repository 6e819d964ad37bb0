"""
Static-anchor zone detection.

The band is fixed by the first min_strokes strokes of a candidate window:

    ZG (upper) = min(highs of the opening strokes)
    ZD (lower) = max(lows of the opening strokes)

A zone needs ZG > ZD. Later strokes join as long as each one still
intersects [ZD, ZG]; the band itself never moves once it is anchored.
"""

import logging
from typing import Optional, Sequence, Tuple

from ..trace import AnalysisTrace, RejectionReason, Stage
from ..types import ConsolidationZone, Stroke
from .base import DEFAULT_MIN_ZONE_STROKES, ZoneDetector

logger = logging.getLogger(__name__)


class StaticZoneDetector(ZoneDetector):
    """Anchors each zone on its opening strokes and extends it forward."""

    name = "static"

    def __init__(self, max_strokes: Optional[int] = None, **kwargs):
        """
        Args:
            max_strokes: Stop extending once a zone holds this many strokes.
                None extends until the first non-intersecting stroke.
            **kwargs: Validity filters, see ZoneDetector.
        """
        super().__init__(**kwargs)
        self.max_strokes = max_strokes

    def detect(
        self,
        strokes: Sequence[Stroke],
        min_strokes: int = DEFAULT_MIN_ZONE_STROKES,
        trace: Optional[AnalysisTrace] = None,
    ) -> Tuple[ConsolidationZone, ...]:
        self._check_min_strokes(min_strokes)
        zones = []
        i = 0

        while i <= len(strokes) - min_strokes:
            opening = strokes[i:i + min_strokes]
            zg = min(s.high for s in opening)
            zd = max(s.low for s in opening)

            if zg <= zd:
                if trace is not None:
                    trace.reject(Stage.ZONES, i, RejectionReason.NO_OVERLAP,
                                 detail=f"ZG={zg} <= ZD={zd}")
                i += 1
                continue

            if not all(s.intersects(zd, zg) for s in opening):
                if trace is not None:
                    trace.reject(Stage.ZONES, i, RejectionReason.NOT_INTERSECTING,
                                 detail=f"band [{zd}, {zg}]")
                i += 1
                continue

            count = self._extend(strokes, i + min_strokes, min_strokes, zd, zg)
            zones.append(self._make_zone(strokes, i, count, upper=zg, lower=zd,
                                         min_strokes=min_strokes))
            i += count

        logger.debug(f"Static detector found {len(zones)} zones in {len(strokes)} strokes")
        return tuple(zones)

    def _extend(
        self, strokes: Sequence[Stroke], j: int, count: int, zd: float, zg: float
    ) -> int:
        """Number of strokes in the zone after absorbing intersecting followers."""
        while j < len(strokes):
            if self.max_strokes is not None and count >= self.max_strokes:
                break
            if not strokes[j].intersects(zd, zg):
                break
            count += 1
            j += 1
        return count
