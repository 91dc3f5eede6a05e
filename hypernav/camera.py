"""
Hyperbolic ray-marching camera state.

A :class:`HyperbolicCamera` owns one navigational frame, one look
orientation and the camera settings. Once per tick a renderer calls
:meth:`HyperbolicCamera.prepare` and receives a :class:`PreparedCamera`,
a read-only snapshot of plain numbers: the position, the view basis with
the look orientation applied, and the settings.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

import numpy as np
import torch

from .config import CameraConfig, HyperNavConfig
from .core.frame import HyperboloidFrame
from .core.orientation import LookOrientation
from .exceptions import InvalidInputError


logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PreparedCamera:
    """Render-side camera snapshot, laid out like the shader's camera uniform."""
    position: torch.Tensor
    forward: torch.Tensor
    right: torch.Tensor
    up: torch.Tensor
    aspect_ratio: float
    max_iterations: int
    min_dist: float
    max_dist: float
    tan_fov: float

    def to_array(self) -> np.ndarray:
        """Pack into a flat float32 array: 4 vectors then the 5 scalar settings."""
        vectors = [v.detach().cpu().numpy().astype(np.float32) for v in
                   (self.position, self.forward, self.right, self.up)]
        scalars = np.array(
            [self.aspect_ratio, self.max_iterations, self.min_dist, self.max_dist, self.tan_fov],
            dtype=np.float32,
        )
        return np.concatenate(vectors + [scalars])


class HyperbolicCamera:
    """
    Camera pose, look offset and ray-marching settings.

    Args:
        frame: Navigational frame; identity when omitted
        look: Look orientation; zero when omitted
        settings: Camera settings; defaults when omitted
    """

    def __init__(
        self,
        frame: Optional[HyperboloidFrame] = None,
        look: Optional[LookOrientation] = None,
        settings: Optional[CameraConfig] = None,
    ):
        self.frame = frame if frame is not None else HyperboloidFrame()
        self.look = look if look is not None else LookOrientation()
        self.settings = settings if settings is not None else CameraConfig()

    @classmethod
    def from_config(cls, config: HyperNavConfig) -> "HyperbolicCamera":
        """
        Identity camera built from a loaded configuration.

        The frame is stored in ``config.navigation.dtype``; the camera settings
        are copied so that ``resize`` does not write back into ``config``.
        """
        frame = HyperboloidFrame(dtype=config.navigation.torch_dtype)
        logger.debug(f"Creating camera with {config.navigation.dtype} frame")
        return cls(frame=frame, settings=replace(config.camera))

    def resize(self, width: float, height: float) -> None:
        """Update the aspect ratio after a window resize."""
        if width <= 0 or height <= 0:
            raise InvalidInputError("Viewport size must be positive", {"width": width, "height": height})
        self.settings.aspect_ratio = width / height
        logger.debug(f"Aspect ratio set to {self.settings.aspect_ratio:.4f}")

    def view_basis(self) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
        """``(right, up, forward)`` with the look orientation applied."""
        return self.look.resolve_view_basis(self.frame)

    def prepare(self) -> PreparedCamera:
        """Snapshot the camera for the renderer."""
        right, up, forward = self.view_basis()
        return PreparedCamera(
            position=self.frame.translation.clone(),
            forward=forward.clone(),
            right=right.clone(),
            up=up.clone(),
            aspect_ratio=float(self.settings.aspect_ratio),
            max_iterations=int(self.settings.max_iterations),
            min_dist=float(self.settings.min_dist),
            max_dist=float(self.settings.max_dist),
            tan_fov=float(self.settings.tan_fov),
        )

    def __repr__(self) -> str:
        return f"HyperbolicCamera(frame={self.frame!r}, look={self.look!r})"
