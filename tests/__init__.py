"""
hypernav Test Suite

Tests are organized by module:

- Minkowski algebra and geodesic formulas
- HyperboloidFrame navigation and its invariants
- LookOrientation and view basis resolution
- Camera snapshots, scene preparation and input handling
- Configuration, exceptions and utilities
"""

import os
import sys
import math
import shutil
import tempfile
from pathlib import Path

import torch

# Add the parent directory to the path for importing hypernav
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from hypernav.core.frame import HyperboloidFrame


class TestFixtures:
    """Common test fixtures and utilities."""

    @staticmethod
    def create_temp_dir() -> Path:
        """Create a temporary directory for test files."""
        return Path(tempfile.mkdtemp())

    @staticmethod
    def cleanup_temp_dir(temp_dir: Path) -> None:
        """Clean up temporary directory."""
        if temp_dir.exists():
            shutil.rmtree(temp_dir)

    @staticmethod
    def create_moved_frame(dtype: torch.dtype = torch.float32) -> HyperboloidFrame:
        """A valid frame away from the origin with a non-trivial orientation."""
        frame = HyperboloidFrame(dtype=dtype)
        frame.translate((1.0, 0.0, 0.0), 0.4)
        frame.yaw(0.7)
        frame.pitch(-0.3)
        frame.translate((0.0, 1.0, 2.0), 0.5)
        frame.roll(1.1)
        return frame


# Paths of moderate length keep float32 residuals well under TEST_TOLERANCE
TEST_MOVES = [
    ((1.0, 0.0, 0.0), 0.3),
    ((0.0, 1.0, 1.0), -0.5),
    ((-2.0, 1.0, 1.0), 0.7),
    ((0.0, 0.0, 1.0), -0.6),
    ((1.0, -1.0, 0.5), 0.25),
    ((0.3, 0.2, -1.0), 0.4),
]

# float32 storage bounds the residual at about w² times the float32 epsilon,
# so float32 paths are checked at 1e-5; float64 tests use tighter bounds.
# See "Tolerances" in DESIGN.md.
TEST_TOLERANCE = 1e-5
TEST_ANGLES = [0.0, 0.3, -1.2, math.pi / 2, 2.5, -3.0]
