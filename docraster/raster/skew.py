"""
Skew estimation for scanned documents.

Estimates the dominant text-line angle of a black-on-white document with a
discretized Hough transform:

1. Pixels darker than the ink threshold are ink.
2. Only lower edges of ink (ink above non-ink) inside the middle half of the
   rows vote, which keeps the work proportional to the ink perimeter.
3. Each point votes for every candidate angle at distance
   ``d = y*cos(a) - x*sin(a)``, bucketed at unit resolution.
4. The angles of the strongest buckets are averaged.

All working state lives in a HoughAccumulator created per call, so
concurrent estimates on different buffers are independent.
"""

import heapq
import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from docraster.config import SkewDetectionConfig, settings
from docraster.drawing.pixel_buffer import PixelBuffer
from docraster.raster.validation import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class HoughLine:
    """A candidate line: all (x, y) with y*cos(angle) - x*sin(angle) = d."""

    count: int = 0
    """Number of points that voted for the line."""

    index: int = 0
    """Flat index into the accumulator."""

    angle: float = 0.0
    """Line angle in degrees."""


class HoughAccumulator:
    """
    Vote histogram over (distance, angle) for one image.

    Distances are offset by the image width so every bucket index is
    non-negative. The histogram holds ``ceil(2 * (width + height))`` distance
    buckets per angle; the constructor checks that every point of the image
    lands inside it for every configured angle, so voting never writes out
    of range.
    """

    def __init__(self, width: int, height: int, config: SkewDetectionConfig):
        """
        Allocate the accumulator and the per-angle sin/cos tables.

        Args:
            width: Image width.
            height: Image height.
            config: Angle domain settings.

        Raises:
            ValidationError: If the angle domain sends some point outside
                the distance range.
        """
        self.width = width
        self.height = height
        self.angle_steps = config.angle_steps

        self.angles = config.angle_start + np.arange(config.angle_steps) * config.angle_step
        radians = self.angles * math.pi / 180.0
        self._sin = np.sin(radians)
        self._cos = np.cos(radians)

        self.offset = -float(width)
        self.distance_buckets = int(math.ceil(2 * (width + height)))

        low, high = self.index_range()
        if low < 0 or high >= self.distance_buckets:
            raise ValidationError(
                f"Angles {config.angle_start}..{config.angle_stop} map {width}x{height} points to "
                f"distance buckets {low}..{high}, outside 0..{self.distance_buckets - 1}"
            )

        self.votes = np.zeros(self.distance_buckets * self.angle_steps, dtype=np.int64)

    @property
    def shape(self) -> tuple[int, int]:
        """(distance buckets, angle buckets)."""
        return (self.distance_buckets, self.angle_steps)

    def distance_indices(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """
        Distance bucket of each point for each angle.

        Returns:
            ``(len(xs), angle_steps)`` int64 array.
        """
        x = np.asarray(xs, dtype=np.float64)[:, None]
        y = np.asarray(ys, dtype=np.float64)[:, None]
        d = y * self._cos - x * self._sin
        # rint rounds half to even
        return np.rint(d - self.offset).astype(np.int64)

    def index_range(self) -> tuple[int, int]:
        """Smallest and largest distance bucket any pixel of the image can reach."""
        # d is linear in x and y, so its extremes sit on the corners
        xs = np.array([0, self.width - 1, 0, self.width - 1])
        ys = np.array([0, 0, self.height - 1, self.height - 1])
        indices = self.distance_indices(xs, ys)
        return int(indices.min()), int(indices.max())

    def vote(self, xs: np.ndarray, ys: np.ndarray, chunk_size: int = 4096) -> None:
        """
        Add one vote per (point, angle).

        Points are processed in chunks to bound the size of the temporary
        index arrays.
        """
        angle_index = np.arange(self.angle_steps, dtype=np.int64)

        for start in range(0, len(xs), chunk_size):
            d_index = self.distance_indices(xs[start:start + chunk_size], ys[start:start + chunk_size])
            flat = (d_index * self.angle_steps + angle_index).ravel()
            self.votes += np.bincount(flat, minlength=self.votes.size)

    def angle_of(self, index: int) -> float:
        return float(self.angles[index % self.angle_steps])

    def top_lines(self, count: int) -> list[HoughLine]:
        """
        The ``count`` buckets with the most votes, strongest first.

        Ties go to the lower accumulator index. When fewer than ``count``
        buckets hold votes, the list is padded with empty lines at index 0,
        whose angle is the first angle of the domain.
        """
        votes = self.votes
        candidates = np.flatnonzero(votes)

        if candidates.size > count:
            # Narrow down to buckets that can reach the top before ranking
            cut = candidates.size - count
            kth_votes = np.partition(votes[candidates], cut)[cut]
            candidates = candidates[votes[candidates] >= kth_votes]

        best = heapq.nlargest(count, candidates.tolist(), key=lambda i: (votes[i], -i))

        lines = [HoughLine(count=int(votes[i]), index=i, angle=self.angle_of(i)) for i in best]
        while len(lines) < count:
            lines.append(HoughLine(count=0, index=0, angle=self.angle_of(0)))

        return lines


class SkewDetector:
    """
    Estimates the skew angle of a document image.

    The result is the angle, in degrees, at which the text lines run:
    positive when lines descend to the right (y grows downward). Passing it
    to ``rotate`` levels the lines.
    """

    def __init__(self, config: Optional[SkewDetectionConfig] = None):
        """Initialize the detector with configuration."""
        self.config = config or settings.skew

    def candidate_points(self, buffer: PixelBuffer) -> tuple[np.ndarray, np.ndarray]:
        """
        Lower edges of ink in the middle band of rows.

        A point (x, y) is a candidate when it is ink and (x, y + 1) is not.
        Rows ``height // 4`` to ``height * 3 // 4`` are scanned (stopping one
        row short of the bottom), columns 1 to ``width - 2``.

        Returns:
            (xs, ys) arrays of candidate coordinates.
        """
        ink = buffer.luminance() < self.config.ink_threshold
        height, width = ink.shape

        y_min = height // 4
        y_max = min(height * 3 // 4, height - 2)

        if y_max < y_min or width < 3:
            return np.empty(0, dtype=np.int64), np.empty(0, dtype=np.int64)

        band = ink[y_min:y_max + 1, 1:width - 1]
        below = ink[y_min + 1:y_max + 2, 1:width - 1]
        ys, xs = np.nonzero(band & ~below)

        return xs + 1, ys + y_min

    def detect_lines(self, buffer: PixelBuffer) -> list[HoughLine]:
        """
        Run the Hough transform and return the strongest lines.

        Args:
            buffer: Document image.

        Returns:
            ``top_lines`` HoughLine entries, strongest first.
        """
        xs, ys = self.candidate_points(buffer)

        accumulator = HoughAccumulator(buffer.width, buffer.height, self.config)
        accumulator.vote(xs, ys, self.config.chunk_size)

        logger.debug(
            f"Hough transform: {len(xs)} candidate points, "
            f"accumulator {accumulator.shape[0]}x{accumulator.shape[1]}"
        )

        return accumulator.top_lines(self.config.top_lines)

    def estimate(self, buffer: PixelBuffer) -> float:
        """
        Estimate the skew angle of a document image.

        The unweighted mean of the strongest line angles. On sparse images
        with fewer non-empty buckets than ``top_lines``, the padding lines
        pull the mean towards ``angle_start``.

        Args:
            buffer: Document image.

        Returns:
            Skew angle in degrees.
        """
        lines = self.detect_lines(buffer)

        empty = sum(1 for line in lines if line.count == 0)
        if empty:
            logger.debug(
                f"Only {len(lines) - empty} of {len(lines)} lines found; "
                f"{empty} empty slots count as {self.config.angle_start} degrees"
            )

        total = 0.0
        for line in lines:
            total += line.angle

        angle = total / len(lines)
        logger.debug(f"Estimated skew: {angle:.3f} degrees")
        return angle


def estimate_skew(buffer: PixelBuffer, config: Optional[SkewDetectionConfig] = None) -> float:
    """Estimate the skew angle of a buffer with a one-off detector."""
    return SkewDetector(config).estimate(buffer)
