"""
hypernav - navigation in the hyperboloid model of hyperbolic 3-space

This package maintains a point on the hyperboloid together with an
orthonormal tangent frame, moves it along geodesics with parallel transport,
rotates it locally, and re-orthogonalizes it against an external "up". A
separate yaw/pitch look orientation is resolved against the frame only when
a view is requested.

Main components:
- HyperboloidFrame: position + forward/up/right tangent basis
- LookOrientation: free yaw/pitch offset for the view
- HyperbolicCamera / PreparedCamera: per-tick render snapshot
- Renderable / prepare_spheres: scene poses turned into render primitives
- CameraController: keys and pointer motion applied once per tick

Example usage:
    from hypernav import HyperbolicCamera, CameraController, MovementKeys

    camera = HyperbolicCamera()
    controller = CameraController(camera)
    controller.step(1 / 60, keys=MovementKeys(forward=True))
    snapshot = camera.prepare()
"""

# Version information
__version__ = "0.1.0"
__author__ = "hypernav developers"

import logging

from .config import (
    HyperNavConfig,
    NavigationConfig,
    CameraConfig,
    FrameConfig,
    LoggingConfig,
    LogLevel,
    get_default_config,
    load_config,
)

from .exceptions import (
    HyperNavError,
    ConfigurationError,
    ConfigFileNotFoundError,
    InvalidInputError,
    InvariantViolationError,
    ErrorHandler,
    handle_error,
)

from .core import (
    minkowski_inner,
    normalize_position,
    normalize_tangent,
    cosh_sinh,
    geodesic_step,
    parallel_transport,
    project_to_tangent,
    tangent_toward,
    hyperbolic_distance,
    to_poincare_ball,
    Axis,
    HyperboloidFrame,
    LookOrientation,
)

from .camera import HyperbolicCamera, PreparedCamera
from .scene import Sphere, FlatMaterial, Renderable, PreparedSphere, prepare_spheres, stack_spheres
from .controls import MovementKeys, PointerMotion, CameraController, look_deltas

from .utils import FrameMetrics, frame_distance, plot_trajectory


__all__ = [
    # Version info
    "__version__",
    "__author__",

    # Configuration
    "HyperNavConfig",
    "NavigationConfig",
    "CameraConfig",
    "FrameConfig",
    "LoggingConfig",
    "LogLevel",
    "get_default_config",
    "load_config",

    # Exceptions
    "HyperNavError",
    "ConfigurationError",
    "ConfigFileNotFoundError",
    "InvalidInputError",
    "InvariantViolationError",
    "ErrorHandler",
    "handle_error",

    # Geometry
    "minkowski_inner",
    "normalize_position",
    "normalize_tangent",
    "cosh_sinh",
    "geodesic_step",
    "parallel_transport",
    "project_to_tangent",
    "tangent_toward",
    "hyperbolic_distance",
    "to_poincare_ball",
    "Axis",
    "HyperboloidFrame",
    "LookOrientation",

    # Camera and scene
    "HyperbolicCamera",
    "PreparedCamera",
    "Sphere",
    "FlatMaterial",
    "Renderable",
    "PreparedSphere",
    "prepare_spheres",
    "stack_spheres",

    # Input
    "MovementKeys",
    "PointerMotion",
    "CameraController",
    "look_deltas",

    # Utilities
    "FrameMetrics",
    "frame_distance",
    "plot_trajectory",
    "configure_package_logging",
]


# Create package logger
logger = logging.getLogger(__name__)

# Add null handler to prevent logging errors if no handlers are configured
logger.addHandler(logging.NullHandler())

logger.debug(f"hypernav v{__version__} initialized")


def configure_package_logging(level=logging.INFO, format_string=None):
    """
    Configure logging for the entire package.

    Args:
        level: Logging level
        format_string: Optional custom format string
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    package_logger = logging.getLogger(__name__)
    package_logger.setLevel(level)

    # Remove existing handlers
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(format_string))
    package_logger.addHandler(console_handler)

    logger.info(f"Package logging configured at level {logging.getLevelName(level)}")
