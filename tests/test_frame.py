"""
Unit tests for HyperboloidFrame navigation and its invariants.
"""

import math

import pytest
import torch

from hypernav.core.frame import Axis, HyperboloidFrame
from hypernav.core.math_ops import (
    hyperbolic_distance, minkowski_inner, normalize_tangent, is_valid_tangent,
)
from hypernav.exceptions import InvalidInputError
from tests import TestFixtures, TEST_MOVES, TEST_TOLERANCE, TEST_ANGLES


class TestConstruction:
    """Test default and explicit frames."""

    def test_identity(self):
        frame = HyperboloidFrame()
        assert frame.translation.tolist() == [0.0, 0.0, 0.0, 1.0]
        assert frame.forward.tolist() == [0.0, 0.0, -1.0, 0.0]
        assert frame.up.tolist() == [0.0, 1.0, 0.0, 0.0]
        assert frame.right.tolist() == [1.0, 0.0, 0.0, 0.0]
        assert frame.dtype == torch.float32
        assert frame.max_residual() == 0.0
        assert frame.is_valid()

    def test_partial_pose_keeps_defaults(self):
        frame = HyperboloidFrame(up=(0.0, 0.0, 1.0, 0.0), forward=(0.0, 1.0, 0.0, 0.0))
        assert frame.right.tolist() == [1.0, 0.0, 0.0, 0.0]
        assert frame.is_valid()

    def test_from_pose_normalizes(self):
        frame = HyperboloidFrame.from_pose(
            translation=(0.0, 0.0, 0.0, 3.0),
            forward=(0.0, 0.0, -2.0, 0.0),
            up=(0.0, 5.0, 0.0, 0.0),
            right=(0.5, 0.0, 0.0, 0.0),
        )
        assert frame.is_valid()
        assert frame.translation.tolist() == [0.0, 0.0, 0.0, 1.0]

    def test_stored_as_given(self):
        frame = HyperboloidFrame(translation=(0.0, 0.0, 0.0, 2.0))
        assert frame.translation[3].item() == 2.0
        assert not frame.is_valid()

    def test_does_not_alias_input(self):
        translation = torch.tensor([0.0, 0.0, 0.0, 1.0])
        frame = HyperboloidFrame(translation=translation)
        frame.translate_forward(0.5)
        assert translation.tolist() == [0.0, 0.0, 0.0, 1.0]

    def test_float64(self):
        frame = HyperboloidFrame(dtype=torch.float64)
        assert frame.dtype == torch.float64
        assert frame.forward.dtype == torch.float64

    @pytest.mark.parametrize("value", [(0.0, 0.0, 1.0), [[0.0, 0.0, 0.0, 1.0]], (1.0,) * 5])
    def test_wrong_shape(self, value):
        with pytest.raises(InvalidInputError):
            HyperboloidFrame(translation=value)

    def test_copy_is_independent(self):
        frame = TestFixtures.create_moved_frame()
        duplicate = frame.copy()
        assert duplicate.allclose(frame, atol=0.0)
        duplicate.yaw(0.5)
        assert not duplicate.allclose(frame)

    def test_to_dict(self):
        pose = HyperboloidFrame().to_dict()
        assert list(pose) == ["translation", "forward", "up", "right"]
        assert pose["forward"] == [0.0, 0.0, -1.0, 0.0]
        assert HyperboloidFrame.from_pose(**pose).allclose(HyperboloidFrame(), atol=0.0)

    def test_repr(self):
        assert repr(HyperboloidFrame()).startswith("HyperboloidFrame(translation=(0.0000, 0.0000, 0.0000, 1.0000)")


class TestAxis:
    """Test axis lookup."""

    def test_coerce(self):
        assert Axis.coerce("FORWARD") is Axis.FORWARD
        assert Axis.coerce("up") is Axis.UP
        assert Axis.coerce(Axis.RIGHT) is Axis.RIGHT

    def test_unknown_axis(self):
        with pytest.raises(InvalidInputError) as exc_info:
            Axis.coerce("sideways")
        assert "sideways" in str(exc_info.value)

    def test_basis_columns(self):
        frame = HyperboloidFrame()
        basis = frame.basis()
        assert basis.shape == (4, 3)
        torch.testing.assert_close(basis[:, 0], frame.axis("right"))
        torch.testing.assert_close(basis[:, 1], frame.axis(Axis.UP))
        torch.testing.assert_close(basis[:, 2], frame.axis("forward"))

    def test_local_to_world(self):
        frame = HyperboloidFrame()
        world = frame.local_to_world((1.0, 2.0, 3.0))
        assert world.tolist() == [1.0, 2.0, -3.0, 0.0]

    def test_local_direction_shape(self):
        with pytest.raises(InvalidInputError):
            HyperboloidFrame().local_to_world((1.0, 0.0, 0.0, 0.0))


class TestTranslate:
    """Test geodesic movement with parallel transport."""

    def test_zero_distance_is_identity(self):
        frame = TestFixtures.create_moved_frame()
        before = frame.copy()
        frame.translate((0.3, -0.2, 1.0), 0.0)
        assert frame.allclose(before, atol=TEST_TOLERANCE)

    def test_forward_from_origin(self):
        frame = HyperboloidFrame()
        frame.translate((0.0, 0.0, 1.0), 0.5)
        expected = torch.tensor([0.0, 0.0, -math.sinh(0.5), math.cosh(0.5)])
        torch.testing.assert_close(frame.translation, expected)
        # orthogonal axes are untouched
        torch.testing.assert_close(frame.up, torch.tensor([0.0, 1.0, 0.0, 0.0]))
        torch.testing.assert_close(frame.right, torch.tensor([1.0, 0.0, 0.0, 0.0]))

    def test_direction_length_is_irrelevant(self):
        a = TestFixtures.create_moved_frame()
        b = a.copy()
        a.translate((0.0, 1.0, 1.0), 0.6)
        b.translate((0.0, 10.0, 10.0), 0.6)
        assert a.allclose(b, atol=TEST_TOLERANCE)

    @pytest.mark.parametrize("direction, t", TEST_MOVES)
    def test_preserves_invariants(self, direction, t):
        frame = HyperboloidFrame()
        frame.translate(direction, t)
        assert frame.is_valid(atol=TEST_TOLERANCE)

    @pytest.mark.parametrize("direction, t", TEST_MOVES)
    def test_travels_requested_distance(self, direction, t):
        frame = TestFixtures.create_moved_frame()
        start = frame.copy()
        frame.translate(direction, t)
        distance = hyperbolic_distance(start.translation, frame.translation).item()
        assert distance == pytest.approx(abs(t), abs=1e-4)

    def test_involution(self):
        frame = HyperboloidFrame()
        frame.translate((1.0, 0.0, 0.0), 1.0)
        frame.translate((1.0, 0.0, 0.0), -1.0)
        assert frame.allclose(HyperboloidFrame(), atol=TEST_TOLERANCE)

    @pytest.mark.parametrize("direction, t", TEST_MOVES)
    def test_involution_from_moved_frame(self, direction, t):
        frame = TestFixtures.create_moved_frame()
        start = frame.copy()
        frame.translate(direction, t)
        frame.translate(direction, -t)
        assert frame.allclose(start, atol=TEST_TOLERANCE)

    def test_long_sequence_in_float64(self):
        frame = HyperboloidFrame(dtype=torch.float64)
        for _ in range(2):
            for direction, t in TEST_MOVES:
                frame.translate(direction, t)
                frame.yaw(0.37)
                frame.roll(-0.21)
        assert frame.is_valid(atol=1e-7)

    def test_square_path_does_not_close(self):
        # right-angled squares do not exist in hyperbolic space
        frame = HyperboloidFrame(dtype=torch.float64)
        for _ in range(4):
            frame.translate((0.0, 0.0, 1.0), 1.0)
            frame.yaw(math.pi / 2)
        assert frame.is_valid(atol=1e-9)
        gap = hyperbolic_distance(frame.translation, HyperboloidFrame(dtype=torch.float64).translation)
        assert gap.item() > 1e-2


class TestTranslateAlongAxis:
    """Test the single-axis movement primitive."""

    def test_forward_matches_translate(self):
        a = TestFixtures.create_moved_frame()
        b = a.copy()
        a.translate_forward(0.7)
        b.translate((0.0, 0.0, 1.0), 0.7)
        assert a.allclose(b, atol=TEST_TOLERANCE)

    @pytest.mark.parametrize("method, direction", [
        ("translate_up", (0.0, 1.0, 0.0)),
        ("translate_right", (1.0, 0.0, 0.0)),
    ])
    def test_other_axes_match_translate(self, method, direction):
        a = TestFixtures.create_moved_frame()
        b = a.copy()
        getattr(a, method)(-0.4)
        b.translate(direction, -0.4)
        assert a.allclose(b, atol=TEST_TOLERANCE)

    def test_only_moved_axis_changes(self):
        frame = TestFixtures.create_moved_frame()
        up, right = frame.up.clone(), frame.right.clone()
        frame.translate_along_axis("forward", 0.3)
        assert torch.equal(frame.up, up)
        assert torch.equal(frame.right, right)

    def test_moved_axis_stays_tangent(self):
        frame = HyperboloidFrame()
        frame.translate_forward(1.2)
        assert is_valid_tangent(frame.forward, frame.translation, atol=TEST_TOLERANCE)


class TestRotation:
    """Test in-place tangent rotations."""

    def test_yaw_quarter_turn(self):
        frame = HyperboloidFrame()
        frame.yaw(math.pi / 2)
        torch.testing.assert_close(frame.forward, torch.tensor([1.0, 0.0, 0.0, 0.0]), atol=1e-6, rtol=0)
        torch.testing.assert_close(frame.right, torch.tensor([0.0, 0.0, 1.0, 0.0]), atol=1e-6, rtol=0)

    def test_pitch_turns_forward_up(self):
        frame = HyperboloidFrame()
        frame.pitch(math.pi / 2)
        torch.testing.assert_close(frame.forward, torch.tensor([0.0, 1.0, 0.0, 0.0]), atol=1e-6, rtol=0)

    def test_roll_turns_right_up(self):
        frame = HyperboloidFrame()
        frame.roll(math.pi / 2)
        torch.testing.assert_close(frame.right, torch.tensor([0.0, 1.0, 0.0, 0.0]), atol=1e-6, rtol=0)
        torch.testing.assert_close(frame.up, torch.tensor([-1.0, 0.0, 0.0, 0.0]), atol=1e-6, rtol=0)

    def test_position_unchanged(self):
        frame = TestFixtures.create_moved_frame()
        translation = frame.translation.clone()
        frame.local_rotation(("up", "right"), 0.9)
        assert torch.equal(frame.translation, translation)

    @pytest.mark.parametrize("theta", TEST_ANGLES)
    @pytest.mark.parametrize("method", ["pitch", "yaw", "roll"])
    def test_inverse_rotation_restores(self, method, theta):
        frame = TestFixtures.create_moved_frame()
        start = frame.copy()
        getattr(frame, method)(theta)
        getattr(frame, method)(-theta)
        assert frame.allclose(start, atol=TEST_TOLERANCE)
        assert frame.is_valid(atol=TEST_TOLERANCE)

    def test_full_turn(self):
        frame = TestFixtures.create_moved_frame()
        start = frame.copy()
        frame.yaw(2 * math.pi)
        assert frame.allclose(start, atol=TEST_TOLERANCE)

    def test_many_small_rotations(self):
        frame = TestFixtures.create_moved_frame()
        for _ in range(50):
            frame.yaw(0.01)
            frame.pitch(-0.02)
            frame.roll(0.015)
        assert frame.is_valid(atol=TEST_TOLERANCE)

    def test_identical_axes_rejected(self):
        with pytest.raises(InvalidInputError):
            HyperboloidFrame().local_rotation(("up", Axis.UP), 1.0)


class TestOrthogonalizeUp:
    """Test re-orthogonalization against an external vertical."""

    def test_new_up_is_orthogonal(self):
        frame = TestFixtures.create_moved_frame()
        new_up = normalize_tangent(frame.up + 0.3 * frame.forward - 0.2 * frame.right)
        frame.orthogonalize_up(new_up)

        torch.testing.assert_close(frame.up, new_up)
        assert abs(minkowski_inner(frame.forward, frame.up).item()) < TEST_TOLERANCE
        assert abs(minkowski_inner(frame.right, frame.up).item()) < TEST_TOLERANCE
        assert abs(minkowski_inner(frame.right, frame.forward).item()) < TEST_TOLERANCE
        assert frame.is_valid(atol=TEST_TOLERANCE)

    def test_heading_preserved_for_small_tilt(self):
        frame = TestFixtures.create_moved_frame()
        forward = frame.forward.clone()
        frame.orthogonalize_up(normalize_tangent(frame.up + 0.05 * frame.right))
        # forward had no component along the tilt, so it survives unchanged
        torch.testing.assert_close(frame.forward, forward, atol=1e-5, rtol=0)

    def test_current_up_is_noop(self):
        frame = TestFixtures.create_moved_frame()
        start = frame.copy()
        frame.orthogonalize_up(frame.up)
        assert frame.allclose(start, atol=TEST_TOLERANCE)


class TestResiduals:
    """Test invariant diagnostics."""

    def test_keys(self):
        residuals = HyperboloidFrame().residuals()
        assert set(residuals) == {
            "position",
            "norm_forward", "norm_up", "norm_right",
            "ortho_forward", "ortho_up", "ortho_right",
            "ortho_forward_up", "ortho_forward_right", "ortho_up_right",
        }
        assert all(value == 0.0 for value in residuals.values())

    def test_detects_drift(self):
        frame = HyperboloidFrame(up=(0.0, 1.0, 0.1, 0.0))
        residuals = frame.residuals()
        assert residuals["ortho_forward_up"] == pytest.approx(0.1)
        assert residuals["norm_up"] == pytest.approx(0.01)
        assert frame.max_residual() == pytest.approx(0.1)

    def test_lower_sheet_is_invalid(self):
        frame = HyperboloidFrame(translation=(0.0, 0.0, 0.0, -1.0))
        assert frame.max_residual() == 0.0
        assert not frame.is_valid()
