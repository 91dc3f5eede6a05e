"""
Demonstration of navigation in hyperbolic space.

This script walks a camera through the hyperboloid model and shows:
- Geodesic movement and local rotations of a frame
- Holonomy: a "square" path that does not close
- Resolving a free look orientation into a view basis
- Driving a camera with simulated key and pointer input
- Drift metrics and a Poincaré disk plot of the trajectory
"""

import math
import logging

import torch

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Import hypernav components
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from hypernav import (
    HyperboloidFrame, LookOrientation,
    HyperbolicCamera, CameraController, MovementKeys, PointerMotion,
    Renderable, FlatMaterial, prepare_spheres,
    FrameMetrics, frame_distance, plot_trajectory,
    hyperbolic_distance,
)


def demo_frame_navigation():
    """Demonstrate translating and rotating a single frame."""
    print("\n" + "="*50)
    print("DEMO: Frame Navigation")
    print("="*50)

    frame = HyperboloidFrame()
    print(f"Start: {frame}")

    frame.translate((0.0, 0.0, 1.0), 1.0)
    print(f"After one unit forward: {frame}")

    frame.yaw(math.pi / 2)
    frame.translate((0.0, 0.0, 1.0), 1.0)
    print(f"After turning right and moving again: {frame}")
    print(f"Max invariant residual: {frame.max_residual():.3e}")


def demo_holonomy():
    """Walk four sides of a 'square' with right-angle turns."""
    print("\n" + "="*50)
    print("DEMO: Holonomy of a Square Path")
    print("="*50)

    for side in [0.1, 0.5, 1.0, 2.0]:
        frame = HyperboloidFrame(dtype=torch.float64)
        for _ in range(4):
            frame.translate((0.0, 0.0, 1.0), side)
            frame.yaw(math.pi / 2)
        gap = hyperbolic_distance(frame.translation, HyperboloidFrame(dtype=torch.float64).translation)
        print(f"Side {side:.1f}: ends {gap.item():.4f} away from the start")


def demo_look_orientation():
    """Resolve yaw/pitch offsets against a frame without touching it."""
    print("\n" + "="*50)
    print("DEMO: Look Orientation")
    print("="*50)

    frame = HyperboloidFrame()
    for yaw, pitch in [(0.0, 0.0), (math.pi / 2, 0.0), (0.0, math.pi / 4), (math.pi, -0.3)]:
        look = LookOrientation(yaw, pitch)
        _, _, forward = look.resolve_view_basis(frame)
        print(f"{look}: forward = {[round(x, 4) for x in forward.tolist()]}")


def demo_camera_controller():
    """Drive a camera for a few simulated seconds and record drift."""
    print("\n" + "="*50)
    print("DEMO: Camera Controller")
    print("="*50)

    camera = HyperbolicCamera()
    controller = CameraController(camera)
    metrics = FrameMetrics(tolerance=1e-5)

    dt = 1 / 60
    path = [camera.frame.copy()]
    for tick in range(600):
        # hold forward and sweep the pointer slowly to the right
        keys = MovementKeys(forward=True, left=tick > 300)
        controller.step(dt, keys=keys, pointer=PointerMotion(dx=4.0))
        metrics.record(camera.frame)
        if tick % 20 == 0:
            path.append(camera.frame.copy())

    summary = metrics.summary()
    print(f"Ticks: {summary['num_samples']}")
    print(f"Max residual: {summary['max_residual']:.3e}")
    print(f"Violations: {summary['violations']}")
    print(f"Distance from start: {frame_distance(path[0], camera.frame):.4f}")

    prepared = camera.prepare()
    print(f"Camera uniform: {prepared.to_array().round(4)}")

    spheres = [
        Renderable.sphere(0.2, FlatMaterial((1.0, 0.2, 0.2, 1.0)), frame=path[len(path) // 2].copy()),
        Renderable.sphere(0.3, frame=path[-1].copy()).hide(),
    ]
    print(f"Prepared spheres: {len(prepare_spheres(spheres))} of {len(spheres)}")

    return path


def demo_visualization(path):
    """Plot the controller's trajectory in the Poincaré disk."""
    print("\n" + "="*50)
    print("DEMO: Trajectory Plot")
    print("="*50)

    output_path = os.path.join(os.path.dirname(__file__), "trajectory.png")
    plot_trajectory(path, title="Camera trajectory", save_path=output_path)
    print(f"Saved plot to {output_path}")


def main():
    """Run all demonstrations."""
    print("=" * 60)
    print("Hyperbolic Navigation Demo")
    print("=" * 60)

    try:
        demo_frame_navigation()
        demo_holonomy()
        demo_look_orientation()
        path = demo_camera_controller()
        demo_visualization(path)

        print("\n" + "="*60)
        print("All demonstrations completed successfully!")
        print("="*60)

    except Exception:
        logger.exception("Demo failed")
        raise


if __name__ == "__main__":
    main()
