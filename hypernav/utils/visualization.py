"""
Visualization utilities for hyperbolic navigation.

Trajectories are drawn in the Poincaré ball, where the unit circle is the
boundary at infinity. Two of the three ball coordinates are plotted; by
default x and z, the horizontal plane of the identity frame.
"""

import logging
from typing import Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt
import matplotlib.patches as patches
import numpy as np
import torch

from ..core.frame import HyperboloidFrame
from ..core.math_ops import to_poincare_ball


logger = logging.getLogger(__name__)

_AXIS_INDEX = {"x": 0, "y": 1, "z": 2}


def trajectory_to_ball(
    path: Union[torch.Tensor, Sequence[HyperboloidFrame]],
) -> np.ndarray:
    """
    Poincaré ball coordinates of a path.

    Args:
        path: Frames, or positions of shape (N, 4)

    Returns:
        Array of shape (N, 3)
    """
    if isinstance(path, torch.Tensor):
        positions = path
    else:
        positions = torch.stack([frame.translation.to(torch.float64) for frame in path])
    return to_poincare_ball(positions.to(torch.float64)).detach().cpu().numpy()


def plot_trajectory(
    path: Union[torch.Tensor, Sequence[HyperboloidFrame]],
    plane: Tuple[str, str] = ("x", "z"),
    figsize: Tuple[int, int] = (8, 8),
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    show_boundary: bool = True,
    show_heading: bool = True,
    **kwargs
):
    """
    Plot a path of positions in the Poincaré disk.

    Args:
        path: Frames, or positions of shape (N, 4)
        plane: Ball coordinates to use as the horizontal and vertical axes
        figsize: Figure size
        title: Plot title
        save_path: Optional path to save the plot
        show_boundary: Whether to draw the boundary circle
        show_heading: Draw the final forward direction when frames are given
        **kwargs: Additional arguments passed to the line plot

    Returns:
        Matplotlib figure
    """
    if plane[0] not in _AXIS_INDEX or plane[1] not in _AXIS_INDEX or plane[0] == plane[1]:
        raise ValueError(f"Plane must name two distinct axes out of x, y, z, got {plane}")
    if len(path) == 0:
        raise ValueError("Cannot plot an empty trajectory")

    points = trajectory_to_ball(path)
    h, v = _AXIS_INDEX[plane[0]], _AXIS_INDEX[plane[1]]

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    if show_boundary:
        circle = patches.Circle((0, 0), 1.0, fill=False, edgecolor='black', linewidth=2)
        ax.add_patch(circle)

    ax.plot(points[:, h], points[:, v], marker='.', **kwargs)
    ax.scatter(points[0, h], points[0, v], c='green', s=60, label='start', zorder=3)
    ax.scatter(points[-1, h], points[-1, v], c='red', s=60, label='end', zorder=3)

    if show_heading and not isinstance(path, torch.Tensor):
        last = path[-1]
        # a short step along forward, projected like the path itself
        ahead = last.copy()
        ahead.translate_forward(0.1)
        tip = trajectory_to_ball([ahead])[0]
        ax.annotate('', xy=(tip[h], tip[v]), xytext=(points[-1, h], points[-1, v]),
                    arrowprops=dict(arrowstyle='->', color='red'))

    ax.set_aspect('equal')
    ax.set_xlim(-1.1, 1.1)
    ax.set_ylim(-1.1, 1.1)
    ax.set_xlabel(plane[0])
    ax.set_ylabel(plane[1])
    ax.legend()

    if title:
        ax.set_title(title)

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info(f"Trajectory plot saved to {save_path}")

    return fig
