"""
Renderable poses and the primitives prepared from them.

The scene collaborator owns any number of :class:`Renderable` objects, each
a :class:`~hypernav.core.frame.HyperboloidFrame` with a shape and a
material. Once per tick :func:`prepare_spheres` turns the visible ones into
:class:`PreparedSphere` records whose centre is the frame translation. No
identity or lifetime is tracked here.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

import torch

from .core.frame import HyperboloidFrame
from .exceptions import InvalidInputError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sphere:
    """Geodesic sphere around the renderable's position."""
    radius: float

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")


@dataclass(frozen=True)
class FlatMaterial:
    """Single linear RGBA colour."""
    color: Tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0)

    # flat shading is the only material the ray marcher knows
    material_id: int = field(default=1, init=False)

    def __post_init__(self):
        if len(self.color) != 4:
            raise ValueError(f"Color must have 4 components, got {len(self.color)}")


Shape = Union[Sphere]
Material = Union[FlatMaterial]


@dataclass(frozen=True, eq=False)
class PreparedSphere:
    centre: torch.Tensor
    radius: float
    material_id: int


class Renderable:
    """
    A pose with a shape and material.

    The visibility setters return ``self`` so they can be chained.
    """

    def __init__(
        self,
        shape: Shape,
        material: Optional[Material] = None,
        frame: Optional[HyperboloidFrame] = None,
        visible: bool = True,
    ):
        self.shape = shape
        self.material = material if material is not None else FlatMaterial()
        self.frame = frame if frame is not None else HyperboloidFrame()
        self.visible = visible

    @classmethod
    def sphere(
        cls,
        radius: float,
        material: Optional[Material] = None,
        frame: Optional[HyperboloidFrame] = None,
    ) -> "Renderable":
        return cls(Sphere(radius), material, frame)

    def hide(self) -> "Renderable":
        self.visible = False
        return self

    def show(self) -> "Renderable":
        self.visible = True
        return self

    def toggle_visibility(self) -> "Renderable":
        self.visible = not self.visible
        return self

    def set_visibility(self, visible: bool) -> "Renderable":
        self.visible = visible
        return self

    def __repr__(self) -> str:
        return f"Renderable(shape={self.shape!r}, visible={self.visible})"


def prepare_spheres(renderables: Iterable[Renderable]) -> List[PreparedSphere]:
    """
    Collect render primitives for every visible renderable.

    Args:
        renderables: Renderables to read; they are not modified

    Returns:
        One PreparedSphere per visible sphere, in input order
    """
    spheres = []
    for renderable in renderables:
        if not renderable.visible:
            continue
        shape = renderable.shape
        if isinstance(shape, Sphere):
            spheres.append(PreparedSphere(
                centre=renderable.frame.translation.clone(),
                radius=float(shape.radius),
                material_id=renderable.material.material_id,
            ))
        else:
            raise InvalidInputError("Unsupported shape", {"shape": type(shape).__name__})

    logger.debug(f"Prepared {len(spheres)} spheres")
    return spheres


def stack_spheres(
    prepared: List[PreparedSphere],
    dtype: torch.dtype = torch.float32,
) -> Tuple[torch.Tensor, torch.Tensor]:
    """Stack prepared spheres into ``(N, 4)`` centres and ``(N,)`` radii."""
    if not prepared:
        return torch.zeros(0, 4, dtype=dtype), torch.zeros(0, dtype=dtype)
    centres = torch.stack([sphere.centre.to(dtype) for sphere in prepared])
    radii = torch.tensor([sphere.radius for sphere in prepared], dtype=dtype)
    return centres, radii
