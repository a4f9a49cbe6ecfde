"""
Result types for K-means color extraction.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Tuple

import numpy as np

from .utils import rgb_to_hex


class ConvergenceState(Enum):
    """Terminal state of a K-means run."""
    RUNNING = "running"
    CONVERGED = "converged"


class Cluster(NamedTuple):
    """A centroid paired with the samples currently assigned to it."""
    centroid: np.ndarray  # (3,) int
    members: np.ndarray   # (n, 3) uint8, possibly empty

    @property
    def size(self) -> int:
        return int(self.members.shape[0])


@dataclass
class KMeansRun:
    """Outcome of the assign/update loop."""
    centroids: np.ndarray  # (m, 3) int, one row per non-empty cluster of the last pass
    clusters: List[Cluster]  # clusters from the last assign pass
    iterations: int
    state: ConvergenceState

    @property
    def converged(self) -> bool:
        return self.state is ConvergenceState.CONVERGED


@dataclass(frozen=True)
class ClusterResult:
    """A reportable color cluster with its share of the sampled pixels."""
    color: Tuple[int, int, int]
    pixel_count: int
    percentage: float  # 0-100

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.color)

    @property
    def rgb(self) -> str:
        r, g, b = self.color
        return f"rgb({r}, {g}, {b})"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dictionary."""
        return {
            "color": list(self.color),
            "pixel_count": self.pixel_count,
            "percentage": self.percentage,
            "hex": self.hex,
            "rgb": self.rgb,
        }

    def __str__(self) -> str:
        return (
            f"ClusterResult(color: {self.hex}, "
            f"pixel_count: {self.pixel_count}, "
            f"percentage: {self.percentage:.2f}%)"
        )
