"""
Dynamic-boundary zone detection.

Strokes are absorbed one at a time and each one narrows the band:

    UP stroke:   zg = max(zg, stroke.low)    (lower edge rises)
    DOWN stroke: zd = min(zd, stroke.high)   (upper edge falls)

Accumulation stops at the first stroke whose update would push zg above zd.
In this strategy zd is the upper edge and zg the lower one, so the emitted
zone is [zg, zd]. Because zg only rises and zd only falls, the band width
never grows as strokes are added.

An UP stroke whose low sits under zg leaves the band unchanged but may not
touch it at all. The zone therefore keeps the longest run of accepted
strokes that all intersect the band after the run's last stroke.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

from ..trace import AnalysisTrace, RejectionReason, Stage
from ..types import ConsolidationZone, Direction, Stroke
from .base import DEFAULT_MIN_ZONE_STROKES, ZoneDetector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundaryStep:
    """Band state right after the stroke at `position` was accepted."""
    position: int
    zg: Optional[float]
    zd: Optional[float]

    @property
    def width(self) -> Optional[float]:
        if self.zg is None or self.zd is None:
            return None
        return self.zd - self.zg


class DynamicZoneDetector(ZoneDetector):
    """Narrows the band stroke by stroke until the strokes stop overlapping."""

    name = "dynamic"

    def boundary_steps(self, strokes: Sequence[Stroke], start: int) -> Iterator[BoundaryStep]:
        """
        Yield the band after each accepted stroke, beginning at `start`.

        Stops silently at the first rejected stroke or at the end of input.
        """
        zg: Optional[float] = None
        zd: Optional[float] = None

        for j in range(start, len(strokes)):
            stroke = strokes[j]
            if stroke.direction == Direction.UP:
                if zg is None:
                    zg = stroke.low
                else:
                    candidate = max(zg, stroke.low)
                    if zd is not None and candidate > zd:
                        return
                    zg = candidate
            else:
                if zd is None:
                    zd = stroke.high
                else:
                    candidate = min(zd, stroke.high)
                    if zg is not None and candidate < zg:
                        return
                    zd = candidate
            yield BoundaryStep(j, zg, zd)

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
            steps = list(self.boundary_steps(strokes, i))

            if len(steps) < min_strokes:
                if trace is not None:
                    trace.reject(Stage.ZONES, i, RejectionReason.TOO_FEW_STROKES,
                                 detail=f"{len(steps)} < {min_strokes}")
                i += 1
                continue

            count = self._intersecting_count(strokes, i, steps, min_strokes)
            if count is None:
                last = steps[-1]
                reason = (RejectionReason.NO_OVERLAP if not _is_open(last)
                          else RejectionReason.NOT_INTERSECTING)
                if trace is not None:
                    trace.reject(Stage.ZONES, i, reason,
                                 detail=f"zg={last.zg} zd={last.zd}")
                i += 1
                continue

            band = steps[count - 1]
            zones.append(self._make_zone(strokes, i, count, upper=band.zd,
                                         lower=band.zg, min_strokes=min_strokes))
            i += count

        logger.debug(f"Dynamic detector found {len(zones)} zones in {len(strokes)} strokes")
        return tuple(zones)

    @staticmethod
    def _intersecting_count(
        strokes: Sequence[Stroke],
        start: int,
        steps: Sequence[BoundaryStep],
        min_strokes: int,
    ) -> Optional[int]:
        """
        Longest run of accepted strokes that all touch the band they produced.

        The band only narrows, so a shorter run is tested against a band at
        least as wide. None if no run of min_strokes or more qualifies.
        """
        for count in range(len(steps), min_strokes - 1, -1):
            band = steps[count - 1]
            if not _is_open(band):
                continue
            members = strokes[start:start + count]
            if all(s.intersects(band.zg, band.zd) for s in members):
                return count
        return None


def _is_open(step: BoundaryStep) -> bool:
    return step.zg is not None and step.zd is not None and step.zd > step.zg
