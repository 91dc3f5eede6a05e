"""
Utility functions for hyperbolic navigation.

Drift metrics for transported frames and trajectory plots in the
Poincaré ball.
"""

from .metrics import FrameMetrics, frame_distance
from .visualization import plot_trajectory, trajectory_to_ball

__all__ = [
    "FrameMetrics",
    "frame_distance",
    "plot_trajectory",
    "trajectory_to_ball",
]
