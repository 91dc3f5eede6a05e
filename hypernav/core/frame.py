"""
Hyperboloid frames: a position plus an orthonormal tangent basis.

A :class:`HyperboloidFrame` is the pose of a camera or object in hyperbolic
3-space. It is mutated in place by the navigation operations and must keep
four invariants after every one of them (up to floating-point tolerance):

1. ``⟨translation, translation⟩ = −1``
2. ``⟨v, v⟩ = 1`` for each of forward, up and right
3. each basis vector is Minkowski-orthogonal to ``translation``
4. forward, up and right are pairwise Minkowski-orthogonal

Drift from repeated float32 arithmetic is corrected by re-normalizing the
touched vectors on every mutating call; there is no separate periodic
re-orthogonalization pass.

Frames are not safe to mutate from several threads at once; serialize
updates through a single owner.
"""

import math
import logging
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple, Union

import torch

from .math_ops import (
    geodesic_step,
    minkowski_inner,
    minkowski_norm_sq,
    normalize_position,
    normalize_tangent,
    parallel_transport,
)
from ..exceptions import InvalidInputError


logger = logging.getLogger(__name__)

VectorLike = Union[torch.Tensor, Sequence[float]]


class Axis(Enum):
    """Basis vectors of a frame."""
    FORWARD = "forward"
    UP = "up"
    RIGHT = "right"

    @classmethod
    def coerce(cls, value: Union["Axis", str]) -> "Axis":
        """Accept an Axis or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidInputError(
                f"Unknown axis: {value!r}",
                {"expected": ", ".join(axis.value for axis in cls)},
            ) from None


_DEFAULT_POSE = {
    "translation": (0.0, 0.0, 0.0, 1.0),
    "forward": (0.0, 0.0, -1.0, 0.0),
    "up": (0.0, 1.0, 0.0, 0.0),
    "right": (1.0, 0.0, 0.0, 0.0),
}


class HyperboloidFrame:
    """
    A point on the hyperboloid with an attached orthonormal tangent frame.

    The default value is the hyperboloid origin ``(0, 0, 0, 1)`` with the
    canonical frame ``forward = (0, 0, −1, 0)``, ``up = (0, 1, 0, 0)``,
    ``right = (1, 0, 0, 0)``.

    Local directions are expressed in ``(x, y, z) = (right, up, forward)``
    components.

    Args:
        translation, forward, up, right: Optional 4-vectors; missing ones
            take the identity value. They are stored as given (see
            :meth:`from_pose` for a normalizing constructor).
        dtype: Storage dtype, ``torch.float32`` by default
        device: Storage device

    Example:
        >>> frame = HyperboloidFrame()
        >>> frame.translate((0.0, 0.0, 1.0), 0.5)   # half a unit forward
        >>> frame.yaw(math.pi / 2)                   # turn right in place
        >>> frame.is_valid(atol=1e-5)
        True
    """

    __slots__ = ("translation", "forward", "up", "right")

    def __init__(
        self,
        translation: Optional[VectorLike] = None,
        forward: Optional[VectorLike] = None,
        up: Optional[VectorLike] = None,
        right: Optional[VectorLike] = None,
        dtype: torch.dtype = torch.float32,
        device=None,
    ):
        given = {"translation": translation, "forward": forward, "up": up, "right": right}
        for name, value in given.items():
            if value is None:
                value = _DEFAULT_POSE[name]
            setattr(self, name, _as_vector(value, name, dtype, device))

    @classmethod
    def from_pose(
        cls,
        translation: VectorLike,
        forward: VectorLike,
        up: VectorLike,
        right: VectorLike,
        normalize: bool = True,
        dtype: torch.dtype = torch.float32,
        device=None,
    ) -> "HyperboloidFrame":
        """
        Build a frame from an explicit pose.

        With ``normalize`` the position and each basis vector are rescaled
        onto the hyperboloid / to unit length. Orthogonality is the caller's
        responsibility.
        """
        frame = cls(translation, forward, up, right, dtype=dtype, device=device)
        if normalize:
            frame.translation = normalize_position(frame.translation)
            for axis in Axis:
                setattr(frame, axis.value, normalize_tangent(getattr(frame, axis.value)))
        logger.debug(f"Created frame from pose: {frame!r}")
        return frame

    @property
    def dtype(self) -> torch.dtype:
        return self.translation.dtype

    @property
    def device(self) -> torch.device:
        return self.translation.device

    def copy(self) -> "HyperboloidFrame":
        """Independent copy; frames are plain values with no shared ownership."""
        frame = HyperboloidFrame.__new__(HyperboloidFrame)
        for name in self.__slots__:
            setattr(frame, name, getattr(self, name).clone())
        return frame

    def axis(self, axis: Union[Axis, str]) -> torch.Tensor:
        """Return the basis vector for ``axis``."""
        return getattr(self, Axis.coerce(axis).value)

    def basis(self) -> torch.Tensor:
        """The 4×3 matrix ``[right up forward]`` mapping local to ambient directions."""
        return torch.stack([self.right, self.up, self.forward], dim=-1)

    def local_to_world(self, direction: VectorLike) -> torch.Tensor:
        """Compose ``x·right + y·up + z·forward`` from a local 3-vector (not normalized)."""
        direction = _as_local_direction(direction, self.dtype, self.device)
        return self.basis() @ direction

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def translate_along_axis(self, axis: Union[Axis, str], t: float) -> None:
        """
        Step along a single basis vector, updating only that vector.

        The position moves to ``geodesic_step(p, a, t)`` and the axis ``a``
        becomes ``geodesic_step(a, p, t)``, the geodesic velocity at the new
        position. The other two basis vectors are not touched.

        This is a narrower primitive than :meth:`translate`: on an exactly
        orthonormal frame the untouched vectors happen to stay valid, but
        any drift already present in them is not corrected, so invariant 4
        is not guaranteed afterwards. Use it for inspection ("where does one
        unit forward take me"), and :meth:`translate` for navigation.
        """
        name = Axis.coerce(axis).value
        p = self.translation
        a = getattr(self, name)

        self.translation = normalize_position(geodesic_step(p, a, t))
        setattr(self, name, normalize_tangent(geodesic_step(a, p, t)))

    def translate_forward(self, t: float) -> None:
        self.translate_along_axis(Axis.FORWARD, t)

    def translate_up(self, t: float) -> None:
        self.translate_along_axis(Axis.UP, t)

    def translate_right(self, t: float) -> None:
        self.translate_along_axis(Axis.RIGHT, t)

    def translate(self, local_direction: VectorLike, t: float) -> None:
        """
        Move the frame a distance ``t`` along a local direction.

        The primary, frame-consistent movement operation:

        1. ``v = normalize_tangent(x·right + y·up + z·forward)``
        2. ``translation ← normalize_position(p·cosh t + v·sinh t)``
        3. every basis vector is parallel transported along the same
           geodesic, ``u + ⟨u, v⟩·(v·(cosh t − 1) + p·sinh t)``, and
           re-normalized.

        All four invariants are kept for any ``t``. ``t = 0`` is the
        identity, and ``translate(d, t)`` followed by ``translate(d, −t)``
        returns to the starting frame (the transported direction is the
        geodesic velocity, so the reverse step retraces the same geodesic).

        Precondition: ``local_direction`` must be non-zero.

        Args:
            local_direction: 3-vector in (right, up, forward) components;
                its length is irrelevant
            t: Distance to travel (negative travels backwards)
        """
        v = normalize_tangent(self.local_to_world(local_direction))
        p = self.translation

        self.translation = normalize_position(geodesic_step(p, v, t))
        for axis in Axis:
            transported = parallel_transport(getattr(self, axis.value), p, v, t)
            setattr(self, axis.value, normalize_tangent(transported))

    # ------------------------------------------------------------------
    # Orientation
    # ------------------------------------------------------------------

    def local_rotation(self, axis_pair: Tuple[Union[Axis, str], Union[Axis, str]], theta: float) -> None:
        """
        Rotate two basis vectors within their tangent plane.

        For the pair ``(a, b)``:

            a' = cos θ·a + sin θ·b
            b' = cos θ·b − sin θ·a

        so a positive angle turns ``a`` toward ``b``. ``sin θ`` is computed
        directly, which keeps the sign and makes any signed angle valid.
        """
        first, second = (Axis.coerce(axis) for axis in axis_pair)
        if first is second:
            raise InvalidInputError("Rotation needs two distinct axes", {"axis": first.value})

        cos_theta = math.cos(theta)
        sin_theta = math.sin(theta)
        a = getattr(self, first.value)
        b = getattr(self, second.value)

        setattr(self, first.value, normalize_tangent(cos_theta * a + sin_theta * b))
        setattr(self, second.value, normalize_tangent(cos_theta * b - sin_theta * a))

    def pitch(self, theta: float) -> None:
        """Turn forward toward up."""
        self.local_rotation((Axis.FORWARD, Axis.UP), theta)

    def yaw(self, theta: float) -> None:
        """Turn forward toward right."""
        self.local_rotation((Axis.FORWARD, Axis.RIGHT), theta)

    def roll(self, theta: float) -> None:
        """Turn right toward up."""
        self.local_rotation((Axis.RIGHT, Axis.UP), theta)

    def orthogonalize_up(self, new_up: VectorLike) -> None:
        """
        Replace ``up`` and re-project forward and right around it.

        Minkowski Gram-Schmidt in the order up, forward, right:

            forward' = normalize(forward − ⟨forward, up⟩·up)
            right'   = normalize(right − ⟨right, up⟩·up − ⟨right, forward'⟩·forward')

        The heading is preserved as closely as the new vertical allows.

        Precondition: ``new_up`` is a unit tangent at the current position
        and is not parallel to the current forward.
        """
        new_up = _as_vector(new_up, "new_up", self.dtype, self.device)
        forward = self.forward - minkowski_inner(self.forward, new_up) * new_up
        forward = normalize_tangent(forward)

        right = (
            self.right
            - minkowski_inner(self.right, new_up) * new_up
            - minkowski_inner(self.right, forward) * forward
        )

        self.up = new_up
        self.forward = forward
        self.right = normalize_tangent(right)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def residuals(self) -> Dict[str, float]:
        """
        Absolute error of each invariant, evaluated in float64.

        Keys: ``position``, ``norm_<axis>``, ``ortho_<axis>`` (against the
        translation) and ``ortho_<axis>_<axis>`` for each basis pair.
        """
        p = self.translation.detach().to(torch.float64)
        vectors = {axis.value: getattr(self, axis.value).detach().to(torch.float64) for axis in Axis}

        residuals = {"position": abs(minkowski_norm_sq(p).item() + 1.0)}
        for name, v in vectors.items():
            residuals[f"norm_{name}"] = abs(minkowski_norm_sq(v).item() - 1.0)
            residuals[f"ortho_{name}"] = abs(minkowski_inner(v, p).item())

        names = list(vectors)
        for i, first in enumerate(names):
            for second in names[i + 1:]:
                residuals[f"ortho_{first}_{second}"] = abs(
                    minkowski_inner(vectors[first], vectors[second]).item()
                )
        return residuals

    def max_residual(self) -> float:
        return max(self.residuals().values())

    def is_valid(self, atol: float = 1e-6) -> bool:
        """True when all four invariants hold within ``atol`` and ``w > 0``."""
        return self.translation[3].item() > 0 and self.max_residual() < atol

    def allclose(self, other: "HyperboloidFrame", atol: float = 1e-5) -> bool:
        """Component-wise comparison of position and basis."""
        return all(
            torch.allclose(getattr(self, name), getattr(other, name).to(self.dtype), rtol=0.0, atol=atol)
            for name in self.__slots__
        )

    def to_dict(self) -> Dict[str, list]:
        """Plain lists per component, e.g. for logging or JSON."""
        return {name: getattr(self, name).tolist() for name in self.__slots__}

    def __repr__(self) -> str:
        def fmt(v: torch.Tensor) -> str:
            return "(" + ", ".join(f"{x:.4f}" for x in v.tolist()) + ")"

        return (f"HyperboloidFrame(translation={fmt(self.translation)}, "
                f"forward={fmt(self.forward)}, up={fmt(self.up)}, right={fmt(self.right)})")


def _as_vector(value: VectorLike, name: str, dtype: torch.dtype, device) -> torch.Tensor:
    vector = torch.as_tensor(value, dtype=dtype, device=device)
    if vector.shape != (4,):
        raise InvalidInputError(f"{name} must be a 4-vector", {"shape": tuple(vector.shape)})
    # never alias the caller's tensor; frames own their state
    return vector.clone()


def _as_local_direction(value: VectorLike, dtype: torch.dtype, device) -> torch.Tensor:
    direction = torch.as_tensor(value, dtype=dtype, device=device)
    if direction.shape != (3,):
        raise InvalidInputError("Local direction must be a 3-vector", {"shape": tuple(direction.shape)})
    return direction
