"""
Mathematical operations for the hyperboloid model of hyperbolic 3-space.

Points and tangent vectors are 4-vectors ``(x, y, z, w)`` embedded in
Minkowski space with the indefinite inner product

    ⟨u, v⟩ = u.x·v.x + u.y·v.y + u.z·v.z − u.w·v.w

Positions lie on the future sheet ``⟨p, p⟩ = −1, w > 0``; tangent vectors
at ``p`` satisfy ``⟨v, p⟩ = 0`` and are unit when ``⟨v, v⟩ = 1``. The
Minkowski product replaces the Euclidean dot product in every normalization,
orthogonality and projection below.

All functions operate on the trailing dimension, so a single vector of
shape ``(4,)`` and a batch of shape ``(..., 4)`` are handled alike. They run
in the dtype of their inputs; frames default to ``torch.float32``.
"""

import math
from typing import Tuple, Union

import torch


Scalar = Union[float, torch.Tensor]

#: The hyperboloid origin ``(0, 0, 0, 1)``.
ORIGIN = (0.0, 0.0, 0.0, 1.0)


def minkowski_inner(u: torch.Tensor, v: torch.Tensor, keepdim: bool = False) -> torch.Tensor:
    """
    Minkowski inner product ``⟨u, v⟩ = u.xyz·v.xyz − u.w·v.w``.

    Args:
        u, v: Tensors of shape (..., 4)
        keepdim: Keep the trailing dimension (size 1) for broadcasting

    Returns:
        Tensor of shape (...) or (..., 1)

    Example:
        >>> u = torch.tensor([1.0, 2.0, 3.0, 4.0])
        >>> v = torch.tensor([4.0, 3.0, 2.0, 1.0])
        >>> minkowski_inner(u, v)
        tensor(12.)
    """
    spatial = torch.sum(u[..., :3] * v[..., :3], dim=-1, keepdim=keepdim)
    if keepdim:
        return spatial - u[..., 3:4] * v[..., 3:4]
    return spatial - u[..., 3] * v[..., 3]


def minkowski_norm_sq(v: torch.Tensor, keepdim: bool = False) -> torch.Tensor:
    """Minkowski quadratic form ``⟨v, v⟩``; negative for positions, positive for tangents."""
    return minkowski_inner(v, v, keepdim=keepdim)


def normalize_position(p: torch.Tensor) -> torch.Tensor:
    """
    Rescale a point so that ``⟨p, p⟩ = −1``.

    The point is divided by ``√|⟨p, p⟩|``. The sign is not corrected: the
    input must already be timelike (``⟨p, p⟩ < 0``) and on the future sheet
    (``w > 0``); a spacelike input comes back with ``⟨p, p⟩ = +1``.

    Precondition: ``⟨p, p⟩`` must not be (close to) zero. A null vector
    yields NaN/Inf; no fallback point is substituted.

    Args:
        p: Tensor of shape (..., 4)

    Returns:
        Normalized position(s) of the same shape
    """
    return p / torch.sqrt(torch.abs(minkowski_norm_sq(p, keepdim=True)))


def normalize_tangent(v: torch.Tensor) -> torch.Tensor:
    """
    Rescale a tangent vector so that ``⟨v, v⟩ = 1``.

    Precondition: ``⟨v, v⟩`` must not be (close to) zero, see
    :func:`normalize_position`.
    """
    return v / torch.sqrt(torch.abs(minkowski_norm_sq(v, keepdim=True)))


def _as_parameter(t: Scalar, like: torch.Tensor) -> torch.Tensor:
    t = torch.as_tensor(t, dtype=like.dtype, device=like.device)
    # batched distances broadcast against the trailing vector dimension
    if t.dim() > 0:
        t = t.unsqueeze(-1)
    return t


def cosh_sinh(
    t: Scalar,
    minus_one: bool = False,
    dtype: torch.dtype = torch.float32,
    device=None,
) -> Tuple[torch.Tensor, ...]:
    """
    Hyperbolic cosine and sine from a single exponential pair.

    Both values come from ``expm1(t)`` and ``expm1(−t)``, which keeps
    ``sinh t`` and ``cosh t − 1`` free of cancellation near ``t = 0``
    and makes ``t = 0`` return exactly ``(1, 0)``.

    Args:
        t: Distance (float or tensor)
        minus_one: Also return ``cosh t − 1``
        dtype: Result dtype when ``t`` is not already a tensor
        device: Result device when ``t`` is not already a tensor

    Returns:
        ``(cosh_t, sinh_t)`` or ``(cosh_t, sinh_t, cosh_t_minus_one)``
    """
    if not isinstance(t, torch.Tensor):
        t = torch.as_tensor(t, dtype=dtype, device=device)
    exp_t_m1 = torch.expm1(t)
    exp_inv_t_m1 = torch.expm1(-t)

    sinh_t = 0.5 * (exp_t_m1 - exp_inv_t_m1)
    cosh_t_m1 = 0.5 * (exp_t_m1 + exp_inv_t_m1)
    cosh_t = 1.0 + cosh_t_m1

    if minus_one:
        return cosh_t, sinh_t, cosh_t_m1
    return cosh_t, sinh_t


def geodesic_step(p: torch.Tensor, v: torch.Tensor, t: Scalar) -> torch.Tensor:
    """
    Travel distance ``t`` along the geodesic through ``p`` with direction ``v``.

    Closed-form solution of the geodesic equation on the hyperboloid:

        γ(t) = p·cosh(t) + v·sinh(t)

    ``t`` may be negative (reverse direction) or zero (identity: ``p`` is
    returned unchanged).

    Swapping the roles, ``geodesic_step(v, p, t) = v·cosh(t) + p·sinh(t)``
    is the velocity ``γ'(t)``, i.e. ``v`` carried to the new point.

    Args:
        p: Base point on the hyperboloid, shape (..., 4)
        v: Unit tangent at ``p``, shape (..., 4)
        t: Distance to travel

    Returns:
        Point reached after distance ``t``
    """
    t = _as_parameter(t, p)
    cosh_t, sinh_t = cosh_sinh(t, dtype=p.dtype, device=p.device)
    return p * cosh_t + v * sinh_t


def parallel_transport(u: torch.Tensor, p: torch.Tensor, v: torch.Tensor, t: Scalar) -> torch.Tensor:
    """
    Parallel transport of ``u`` along the geodesic from ``p`` in direction ``v``.

    Only the component of ``u`` along ``v`` rotates into the new velocity;
    the orthogonal remainder is unchanged:

        u + ⟨u, v⟩·(v·(cosh t − 1) + p·sinh t)

    Args:
        u: Tangent vector at ``p`` to transport
        p: Start point of the geodesic
        v: Unit tangent direction of the geodesic at ``p``
        t: Distance travelled

    Returns:
        Tangent vector at ``geodesic_step(p, v, t)``
    """
    t = _as_parameter(t, p)
    _, sinh_t, cosh_t_m1 = cosh_sinh(t, minus_one=True, dtype=p.dtype, device=p.device)
    return u + minkowski_inner(u, v, keepdim=True) * (v * cosh_t_m1 + p * sinh_t)


def project_to_tangent(p: torch.Tensor, v: torch.Tensor) -> torch.Tensor:
    """
    Project an ambient vector onto the tangent space at ``p``.

    Removes the component along ``p``: ``v + ⟨v, p⟩·p`` (using ``⟨p, p⟩ = −1``).
    """
    return v + minkowski_inner(v, p, keepdim=True) * p


def tangent_toward(p: torch.Tensor, q: torch.Tensor) -> torch.Tensor:
    """
    Unit tangent at ``p`` pointing along the geodesic toward ``q``.

    This is the direction of the logarithmic map ``log_p(q)``. Useful to
    derive a local "up" from a reference point, e.g. the negated direction
    toward a planet centre.

    Precondition: ``q`` must differ from ``p``.
    """
    return normalize_tangent(q + minkowski_inner(p, q, keepdim=True) * p)


def hyperbolic_distance(p: torch.Tensor, q: torch.Tensor) -> torch.Tensor:
    """
    Geodesic distance ``arccosh(−⟨p, q⟩)`` between two positions.

    The argument is clamped to 1 so that rounding on nearby points cannot
    produce NaN.
    """
    return torch.acosh(torch.clamp(-minkowski_inner(p, q), min=1.0))


def to_poincare_ball(p: torch.Tensor) -> torch.Tensor:
    """
    Map hyperboloid positions into the Poincaré ball: ``xyz / (1 + w)``.

    Args:
        p: Positions of shape (..., 4)

    Returns:
        Ball coordinates of shape (..., 3), each with Euclidean norm < 1
    """
    return p[..., :3] / (1.0 + p[..., 3:4])


def is_valid_position(p: torch.Tensor, atol: float = 1e-6) -> bool:
    """Check ``|⟨p, p⟩ + 1| < atol`` and ``w > 0`` (evaluated in float64)."""
    p = p.detach().to(torch.float64)
    on_sheet = torch.abs(minkowski_norm_sq(p) + 1.0) < atol
    return bool(torch.all(on_sheet & (p[..., 3] > 0)))


def is_valid_tangent(v: torch.Tensor, p: torch.Tensor = None, atol: float = 1e-6) -> bool:
    """
    Check that ``v`` is unit spacelike and, when ``p`` is given, orthogonal to it.

    Evaluated in float64 so the check itself adds no rounding.
    """
    v = v.detach().to(torch.float64)
    valid = torch.abs(minkowski_norm_sq(v) - 1.0) < atol
    if p is not None:
        p = p.detach().to(torch.float64)
        valid = valid & (torch.abs(minkowski_inner(v, p)) < atol)
    return bool(torch.all(valid))


def wrap_angle(angle: float) -> float:
    """Wrap an angle into ``[0, 2π)``. NaN passes through."""
    wrapped = angle % math.tau
    # float modulo can round up to exactly 2π for tiny negative inputs
    if wrapped >= math.tau:
        return 0.0
    return wrapped
