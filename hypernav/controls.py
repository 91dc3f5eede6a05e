"""
Per-tick input handling for a hyperbolic camera.

Translates raw input (movement keys, pointer motion, elapsed time) into
calls on the core: a geodesic ``translate`` of the camera frame and an
``update`` of its look orientation. Polling devices is left to the
windowing layer; this module only sees booleans and floats.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import torch

from .camera import HyperbolicCamera
from .config import FrameConfig, HyperNavConfig, NavigationConfig
from .exceptions import InvalidInputError, InvariantViolationError


logger = logging.getLogger(__name__)


@dataclass
class MovementKeys:
    """Which movement directions are held this tick."""
    forward: bool = False
    back: bool = False
    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False

    def movement_vector(self, dtype: torch.dtype = torch.float32) -> torch.Tensor:
        """
        Unit local direction in ``(right, up, forward)`` components.

        Opposing keys cancel. Returns the zero vector when nothing moves.
        """
        vector = torch.tensor(
            [float(self.right) - float(self.left),
             float(self.up) - float(self.down),
             float(self.forward) - float(self.back)],
            dtype=dtype,
        )
        length = torch.linalg.vector_norm(vector)
        if length == 0:
            return vector
        return vector / length


@dataclass
class PointerMotion:
    """Accumulated pointer delta in screen pixels (y grows downward)."""
    dx: float = 0.0
    dy: float = 0.0


def look_deltas(dx: float, dy: float, sensitivity: float, dt: float) -> Tuple[float, float]:
    """
    Convert pointer motion into ``(delta_yaw, delta_pitch)``.

    Moving the pointer right yaws right; moving it down pitches down.
    """
    return dx * sensitivity * dt, -dy * sensitivity * dt


class CameraController:
    """
    Single owner of a camera's per-tick updates.

    Movement is steered by the look orientation: the local movement vector
    is rotated by the look rotation before the frame is translated, so
    "forward" means "where the camera looks".

    Args:
        camera: Camera to drive
        navigation: Speed and sensitivity; defaults when omitted
        frame_checks: Optional invariant checking after each step
    """

    def __init__(
        self,
        camera: HyperbolicCamera,
        navigation: Optional[NavigationConfig] = None,
        frame_checks: Optional[FrameConfig] = None,
    ):
        self.camera = camera
        self.navigation = navigation if navigation is not None else NavigationConfig()
        self.frame_checks = frame_checks if frame_checks is not None else FrameConfig()

    @classmethod
    def from_config(cls, config: HyperNavConfig) -> "CameraController":
        """Controller and camera wired from every section of ``config``."""
        return cls(
            HyperbolicCamera.from_config(config),
            navigation=config.navigation,
            frame_checks=config.frame,
        )

    def step(
        self,
        dt: float,
        keys: Optional[MovementKeys] = None,
        pointer: Optional[PointerMotion] = None,
    ) -> None:
        """Advance the camera by one tick of ``dt`` seconds."""
        if dt < 0:
            raise InvalidInputError("Elapsed time must be non-negative", {"dt": dt})

        frame = self.camera.frame
        look = self.camera.look

        if pointer is not None:
            look.update(*look_deltas(pointer.dx, pointer.dy, self.navigation.look_sensitivity, dt))

        if keys is not None:
            movement = keys.movement_vector(dtype=torch.float64)
            distance = self.navigation.move_speed * dt
            # a zero direction cannot be normalized, so idle ticks skip the translate
            if torch.any(movement != 0) and distance != 0:
                direction = look.local_rotation_matrix(dtype=torch.float64) @ movement
                frame.translate(direction.to(frame.dtype), distance)

        if self.frame_checks.check_invariants:
            self._check_frame()

    def align_up(self, new_up: torch.Tensor) -> None:
        """Re-orthogonalize the camera frame against an external vertical."""
        self.camera.frame.orthogonalize_up(new_up)
        if self.frame_checks.check_invariants:
            self._check_frame()

    def _check_frame(self) -> None:
        residuals = self.camera.frame.residuals()
        worst = max(residuals.values())
        if worst < self.frame_checks.tolerance:
            return

        message = f"Frame drifted past tolerance {self.frame_checks.tolerance:.1e}"
        if self.frame_checks.strict:
            raise InvariantViolationError(message, residuals)
        logger.warning(f"{message}: max residual {worst:.3e}")
