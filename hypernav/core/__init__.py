"""
Core geometry for hyperbolic navigation.

This module contains the fundamental building blocks:
- Minkowski algebra on the hyperboloid (normalization, geodesics,
  parallel transport)
- HyperboloidFrame, a position with an orthonormal tangent frame
- LookOrientation, a yaw/pitch offset resolved against a frame on demand
"""

from .math_ops import (
    minkowski_inner,
    minkowski_norm_sq,
    normalize_position,
    normalize_tangent,
    cosh_sinh,
    geodesic_step,
    parallel_transport,
    project_to_tangent,
    tangent_toward,
    hyperbolic_distance,
    to_poincare_ball,
    is_valid_position,
    is_valid_tangent,
    wrap_angle,
)
from .frame import Axis, HyperboloidFrame
from .orientation import LookOrientation, clamp_pitch

__all__ = [
    "minkowski_inner",
    "minkowski_norm_sq",
    "normalize_position",
    "normalize_tangent",
    "cosh_sinh",
    "geodesic_step",
    "parallel_transport",
    "project_to_tangent",
    "tangent_toward",
    "hyperbolic_distance",
    "to_poincare_ball",
    "is_valid_position",
    "is_valid_tangent",
    "wrap_angle",
    "Axis",
    "HyperboloidFrame",
    "LookOrientation",
    "clamp_pitch",
]
