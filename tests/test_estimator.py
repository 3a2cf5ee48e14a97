"""End-to-end tests for the ground orientation estimator."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from packages.core.types import EstimateStatus, GroundEstimate, Quaternion, Vec3
from packages.orientation.estimator import PlaneOrientationEstimator, estimate_ground_rotation
from packages.orientation.vecmath import UP, quat_rotate


def _angle_deg(a, b) -> float:
    return float(np.degrees(np.arccos(np.clip(abs(np.dot(a, b)), -1.0, 1.0))))


class TestGuards:
    @pytest.mark.parametrize("n", [0, 1, 2])
    def test_insufficient_points(self, n: int, caplog):
        pts = np.arange(3 * n, dtype=float).reshape(n, 3)
        with caplog.at_level(logging.WARNING):
            result = estimate_ground_rotation(pts)
        assert result.status == EstimateStatus.INSUFFICIENT_POINTS
        assert result.rotation == Quaternion.identity()
        assert result.point_count == n
        assert result.plane is None
        assert "Not enough points" in caplog.text

    def test_collinear_points(self):
        result = estimate_ground_rotation([(0, 0, 0), (1, 0, 0), (2, 0, 0)])
        assert result.status == EstimateStatus.NO_VALID_PLANE
        assert result.rotation == Quaternion.identity()
        assert result.candidate_count == 0

    def test_many_collinear_points(self):
        pts = np.column_stack([np.arange(10.0), 2 * np.arange(10.0), np.zeros(10)])
        assert estimate_ground_rotation(pts).status == EstimateStatus.NO_VALID_PLANE

    @pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
    def test_non_finite_raises(self, bad: float):
        pts = np.array([[0, 0, 0], [1, 0, 0], [0, 1, bad], [1, 1, 0]])
        with pytest.raises(ValueError, match="finite"):
            estimate_ground_rotation(pts)

    def test_bad_shape_raises(self):
        with pytest.raises(ValueError):
            estimate_ground_rotation(np.zeros((5, 4)))

    def test_large_cloud_warns(self, caplog):
        rng = np.random.default_rng(0)
        pts = np.column_stack([rng.uniform(0, 10, (8, 2)), np.zeros(8)])
        estimator = PlaneOrientationEstimator(warn_point_count=5)
        with caplog.at_level(logging.WARNING):
            estimator.estimate(pts)
        assert "O(n^6)" in caplog.text


class TestScenarios:
    def test_three_points_single_candidate(self):
        result = estimate_ground_rotation([(0, 0, 0), (1, 0, 0), (0, 0, 1)])
        assert result.candidate_count == 1
        np.testing.assert_allclose(result.plane.normal.as_tuple(), [0, -1, 0], atol=1e-12)

    @pytest.mark.parametrize("shape", [(3, 3), (4, 4), (3, 4), (5, 5)])
    def test_grid_floor_is_identity(self, shape):
        # x-outer / y-inner ordering makes most triples wind clockwise.
        xs, ys = np.meshgrid(50.0 * np.arange(shape[0]), 50.0 * np.arange(shape[1]), indexing="ij")
        pts = np.column_stack([xs.ravel(), ys.ravel(), np.full(xs.size, -12.0)])
        result = estimate_ground_rotation(pts)
        assert result.rotation == Quaternion.identity()
        assert result.angle_deg == 0.0
        np.testing.assert_allclose(result.plane.normal.as_tuple(), [0, 0, 1])
        assert result.plane.offset == pytest.approx(-12.0)

    def test_downward_winning_normal_is_flipped_up(self):
        # Three points wound clockwise seen from above.
        pts = np.array([[0, 0, 0], [0, 10, 0], [10, 0, 0]], dtype=float)
        result = estimate_ground_rotation(pts)
        np.testing.assert_allclose(result.plane.normal.as_tuple(), [0, 0, 1])
        assert result.rotation == Quaternion.identity()

    def test_horizontal_floor_is_identity(self, flat_points: np.ndarray):
        result = estimate_ground_rotation(flat_points)
        assert result.rotation == Quaternion.identity()
        assert result.angle_deg == 0.0
        assert result.status == EstimateStatus.DEGENERATE_NORMAL_ALIGNMENT
        assert result.plane.offset == pytest.approx(5.0)

    def test_vertical_wall_quarter_turn(self, wall_points: np.ndarray):
        result = estimate_ground_rotation(wall_points)
        assert result.status == EstimateStatus.OK
        assert abs(result.plane.normal.y) == pytest.approx(1.0)
        assert result.angle_deg == pytest.approx(90.0)
        axis, _ = result.rotation.axis_angle()
        assert abs(axis.x) == pytest.approx(1.0)

    def test_rotation_maps_up_to_selected_normal(self, cluster_with_outlier: np.ndarray):
        result = estimate_ground_rotation(cluster_with_outlier)
        np.testing.assert_allclose(
            quat_rotate(result.rotation, UP), result.plane.normal.as_tuple(), atol=1e-9,
        )

    def test_outlier_resistance(self, cluster_with_outlier: np.ndarray, tilted_normal: np.ndarray):
        result = estimate_ground_rotation(cluster_with_outlier)
        assert result.status == EstimateStatus.OK
        assert _angle_deg(result.plane.normal.as_tuple(), tilted_normal) < 1e-3
        expected = np.degrees(np.arccos(tilted_normal[2]))
        assert result.angle_deg == pytest.approx(expected, abs=1e-6)


class TestDeterminism:
    def test_repeat_calls_identical(self, cluster_with_outlier: np.ndarray):
        a = estimate_ground_rotation(cluster_with_outlier)
        b = estimate_ground_rotation(cluster_with_outlier)
        assert a.rotation.as_tuple() == b.rotation.as_tuple()
        assert a == b

    def test_order_invariant_normal(self, flat_points: np.ndarray, wall_points: np.ndarray):
        rng = np.random.default_rng(7)
        for pts in (flat_points, wall_points):
            base = estimate_ground_rotation(pts).plane.normal.as_tuple()
            for _ in range(3):
                shuffled = pts[rng.permutation(len(pts))]
                other = estimate_ground_rotation(shuffled).plane.normal.as_tuple()
                assert _angle_deg(base, other) < 1e-6

    def test_accepts_vec3_sequence(self, flat_points: np.ndarray):
        pts = [Vec3.from_seq(p) for p in flat_points]
        assert estimate_ground_rotation(pts) == estimate_ground_rotation(flat_points)

    def test_result_serialises(self, wall_points: np.ndarray):
        result = estimate_ground_rotation(wall_points)
        again = GroundEstimate.model_validate_json(result.model_dump_json())
        assert again == result
