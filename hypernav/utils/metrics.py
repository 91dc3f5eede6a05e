"""
Drift metrics for transported frames.

Repeated float32 arithmetic slowly erodes the frame invariants. The
navigation operations re-normalize on every call; this module measures how
well that holds over many ticks.
"""

import logging
from typing import Dict, List, Optional

import numpy as np

from ..core.frame import HyperboloidFrame
from ..core.math_ops import hyperbolic_distance


logger = logging.getLogger(__name__)


class FrameMetrics:
    """
    Records invariant residuals of a frame over time.

    Args:
        tolerance: Residual above which a sample counts as a violation

    Example:
        >>> metrics = FrameMetrics(tolerance=1e-5)
        >>> frame = HyperboloidFrame()
        >>> for _ in range(100):
        ...     frame.translate((0.0, 0.0, 1.0), 0.1)
        ...     metrics.record(frame)
        >>> metrics.summary()["violations"]
        0
    """

    def __init__(self, tolerance: float = 1e-5):
        self.tolerance = tolerance
        self.history: List[float] = []
        self.worst: Dict[str, float] = {}

        logger.debug(f"Initialized FrameMetrics with tolerance={tolerance}")

    def record(self, frame: HyperboloidFrame) -> float:
        """
        Sample the frame's invariants.

        Returns:
            The largest residual of this sample
        """
        residuals = frame.residuals()
        for name, value in residuals.items():
            self.worst[name] = max(self.worst.get(name, 0.0), value)

        max_residual = max(residuals.values())
        self.history.append(max_residual)

        if max_residual >= self.tolerance:
            logger.warning(f"Frame residual {max_residual:.3e} exceeds tolerance {self.tolerance:.1e}")
        return max_residual

    def summary(self) -> Dict[str, float]:
        """Statistics over all recorded samples."""
        if not self.history:
            return {"num_samples": 0, "max_residual": 0.0, "mean_residual": 0.0,
                    "final_residual": 0.0, "violations": 0}

        history = np.asarray(self.history)
        return {
            "num_samples": len(self.history),
            "max_residual": float(history.max()),
            "mean_residual": float(history.mean()),
            "final_residual": float(history[-1]),
            "violations": int(np.sum(history >= self.tolerance)),
        }

    def worst_invariant(self) -> Optional[str]:
        """Name of the invariant with the largest residual seen so far."""
        if not self.worst:
            return None
        return max(self.worst, key=self.worst.get)

    def reset(self) -> None:
        self.history.clear()
        self.worst.clear()


def frame_distance(a: HyperboloidFrame, b: HyperboloidFrame) -> float:
    """Geodesic distance between the positions of two frames."""
    return hyperbolic_distance(a.translation, b.translation.to(a.dtype)).item()
