"""
Data types and structures for the Skew module.

Provides containers for angle/score samples and for search results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class SkewStatus(Enum):
    """Outcome of an angle search."""

    OK = "OK"
    BLANK_IMAGE = "Blank Image"  # No foreground pixels in the working image
    MAX_AT_SWEEP_EDGE = "Max At Sweep Edge"  # True peak outside the swept range


@dataclass(frozen=True)
class AngleScoreSample:
    """Score of the image sheared at one trial angle (degrees)."""

    angle: float
    score: float


class AngleScoreSeries:
    """
    Ordered sequence of angle/score samples in evaluation order.

    Sweep series are in increasing angle order; refinement series are
    interleaved around the converging center.

    Example:
        >>> series = AngleScoreSeries()
        >>> series.append(-1.0, 10.0)
        >>> series.append(0.0, 30.0)
        >>> series.append(1.0, 20.0)
        >>> series.get_max()
        (30.0, 1)
    """

    def __init__(self) -> None:
        self._samples: List[AngleScoreSample] = []

    def append(self, angle: float, score: float) -> None:
        """Record one evaluated sample."""
        self._samples.append(AngleScoreSample(angle=float(angle), score=float(score)))

    def __len__(self) -> int:
        return len(self._samples)

    def __getitem__(self, index: int) -> AngleScoreSample:
        return self._samples[index]

    def __iter__(self) -> Iterator[AngleScoreSample]:
        return iter(self._samples)

    @property
    def angles(self) -> List[float]:
        """Angles in evaluation order."""
        return [s.angle for s in self._samples]

    @property
    def scores(self) -> List[float]:
        """Scores in evaluation order."""
        return [s.score for s in self._samples]

    def get_max(self) -> Tuple[float, int]:
        """
        Get the largest score and its position (first occurrence on ties).

        Raises:
            ValueError: If the series is empty.
        """
        if not self._samples:
            raise ValueError("Series is empty")
        index = max(range(len(self._samples)), key=lambda i: self._samples[i].score)
        return self._samples[index].score, index

    def get_min(self) -> Tuple[float, int]:
        """
        Get the smallest score and its position (first occurrence on ties).

        Raises:
            ValueError: If the series is empty.
        """
        if not self._samples:
            raise ValueError("Series is empty")
        index = min(range(len(self._samples)), key=lambda i: self._samples[i].score)
        return self._samples[index].score, index

    def fit_max(self) -> Tuple[float, float]:
        """
        Locate the peak by Lagrangian quadratic interpolation.

        A parabola is fitted through the largest sample and its two
        neighbors. If the largest sample is at either end, or the three
        abscissae are degenerate, the largest sample itself is returned.

        Returns:
            Tuple of (peak_score, peak_angle).
        """
        max_score, imax = self.get_max()
        n = len(self._samples)
        if imax == 0 or imax == n - 1:
            return max_score, self._samples[imax].angle

        x1, y1 = self._samples[imax - 1].angle, self._samples[imax - 1].score
        x2, y2 = self._samples[imax].angle, max_score
        x3, y3 = self._samples[imax + 1].angle, self._samples[imax + 1].score

        if x1 == x2 or x1 == x3 or x2 == x3:
            return y2, x2

        c1 = y1 / ((x1 - x2) * (x1 - x3))
        c2 = y2 / ((x2 - x1) * (x2 - x3))
        c3 = y3 / ((x3 - x1) * (x3 - x2))
        a = c1 + c2 + c3
        if a == 0.0:
            # Collinear samples: no curvature to locate a vertex
            return y2, x2

        b = c1 * (x2 + x3) + c2 * (x1 + x3) + c3 * (x1 + x2)
        xmax = b / (2.0 * a)
        ymax = (
            c1 * (xmax - x2) * (xmax - x3)
            + c2 * (xmax - x1) * (xmax - x3)
            + c3 * (xmax - x1) * (xmax - x2)
        )
        return ymax, xmax

    def __repr__(self) -> str:
        return f"AngleScoreSeries(n={len(self._samples)})"


@dataclass
class RefinementResult:
    """
    Output of the interval-halving search.

    Attributes:
        angle: Converged center angle (degrees).
        end_score: Score of the final window peak.
        series: Every evaluated sample, bootstrap included.
        iterations: Number of halving iterations performed.
    """

    angle: float
    end_score: float
    series: AngleScoreSeries = field(default_factory=AngleScoreSeries)
    iterations: int = 0


@dataclass
class SkewEstimate:
    """
    Output of the skew finder.

    Attributes:
        angle: Angle required to deskew, in degrees (clockwise positive).
        confidence: Ratio of max to min score; 0.0 means do not trust.
        max_score: Peak score of the search, None if no search completed.
        status: OK, or the reason the measurement is not valid.
    """

    angle: float = 0.0
    confidence: float = 0.0
    max_score: Optional[float] = None
    status: SkewStatus = SkewStatus.OK

    def is_valid(self) -> bool:
        """Check if an angle was measured (search not short-circuited)."""
        return self.status == SkewStatus.OK

    def is_confident(self, min_confidence: float) -> bool:
        """Check if the measurement is valid and at least min_confidence."""
        return self.is_valid() and self.confidence >= min_confidence

    def get_status_message(self) -> str:
        """Get human-readable description of the result."""
        if self.status == SkewStatus.BLANK_IMAGE:
            return "Image has no foreground pixels; skew not measured"
        if self.status == SkewStatus.MAX_AT_SWEEP_EDGE:
            return "Score maximum at sweep edge; skew not measured"
        return f"Skew angle {self.angle:.3f}° (confidence {self.confidence:.2f})"
