"""
Free look orientation, kept apart from the transported frame.

A :class:`LookOrientation` holds a yaw/pitch pair that says where a camera
looks relative to its :class:`~hypernav.core.frame.HyperboloidFrame`. The
two are combined only when a view basis is requested, so look rotations
never accumulate roll error into the frame that is parallel transported
during movement.
"""

import math
from typing import Tuple

import torch

from .frame import HyperboloidFrame
from .math_ops import wrap_angle


HALF_PI = 0.5 * math.pi


def clamp_pitch(pitch: float) -> float:
    """Clamp into ``[−π/2, π/2]``; NaN passes through."""
    if pitch > HALF_PI:
        return HALF_PI
    if pitch < -HALF_PI:
        return -HALF_PI
    return pitch


class LookOrientation:
    """
    Yaw/pitch look offset.

    ``yaw`` is wrapped into ``[0, 2π)``; ``pitch`` is clamped into
    ``[−π/2, π/2]`` so the look direction can never flip over.

    Angles are expressed in the frame's local ``(right, up, forward)``
    coordinates: positive yaw turns forward toward right, positive pitch
    turns forward toward up.

    Args:
        yaw: Initial yaw in radians
        pitch: Initial pitch in radians
    """

    __slots__ = ("yaw", "pitch")

    def __init__(self, yaw: float = 0.0, pitch: float = 0.0):
        self.yaw = wrap_angle(float(yaw))
        self.pitch = clamp_pitch(float(pitch))

    def update(self, delta_yaw: float, delta_pitch: float) -> "LookOrientation":
        """
        Apply incremental yaw/pitch deltas.

        Non-finite deltas propagate as NaN; filtering them is the caller's
        job.
        """
        self.yaw = wrap_angle(self.yaw + delta_yaw)
        self.pitch = clamp_pitch(self.pitch + delta_pitch)
        return self

    def reset(self) -> None:
        self.yaw = 0.0
        self.pitch = 0.0

    def copy(self) -> "LookOrientation":
        return LookOrientation(self.yaw, self.pitch)

    def local_rotation_matrix(self, dtype: torch.dtype = torch.float32, device=None) -> torch.Tensor:
        """
        3×3 rotation in local ``(right, up, forward)`` coordinates.

        Yaw is applied about the up axis, then pitch about the rotated right
        axis, i.e. ``R = R_yaw · R_pitch``. The columns of ``R`` are the
        rotated right, up and forward directions. The rotated right axis
        never gains an up component, so no roll is introduced.
        """
        cy, sy = math.cos(self.yaw), math.sin(self.yaw)
        cp, sp = math.cos(self.pitch), math.sin(self.pitch)

        yaw_matrix = torch.tensor(
            [[cy, 0.0, sy],
             [0.0, 1.0, 0.0],
             [-sy, 0.0, cy]],
            dtype=torch.float64,
        )
        pitch_matrix = torch.tensor(
            [[1.0, 0.0, 0.0],
             [0.0, cp, sp],
             [0.0, -sp, cp]],
            dtype=torch.float64,
        )
        return (yaw_matrix @ pitch_matrix).to(dtype=dtype, device=device)

    def look_direction_local(self, dtype: torch.dtype = torch.float32, device=None) -> torch.Tensor:
        """Rotated forward in local coordinates (third column of the rotation)."""
        return self.local_rotation_matrix(dtype=dtype, device=device)[:, 2]

    def resolve_view_basis(self, frame: HyperboloidFrame) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
        """
        Derive the view directions for ``frame`` without mutating it.

        The frame basis ``[right up forward]`` is treated as a linear map
        from local to ambient tangent space and composed with the local
        rotation: ``[right' up' forward'] = [right up forward] · R``.

        Returns:
            ``(right', up', forward')``, unit tangents at the frame position
        """
        rotation = self.local_rotation_matrix(dtype=frame.dtype, device=frame.device)
        view = frame.basis() @ rotation
        return view[:, 0], view[:, 1], view[:, 2]

    def __repr__(self) -> str:
        return f"LookOrientation(yaw={self.yaw:.4f}, pitch={self.pitch:.4f})"
