"""
Tests for building tile bounding boxes and for their height lifecycle.
"""
import numpy as np
import pytest

from tileobb.coord_utils import geographic_to_ecef
from tileobb.errors import InvalidCRSError
from tileobb.extent import Extent, Unit
from tileobb.obb import OBB, HeightRange, cardinal_points, extent_to_obb


def rotation_matrix(q):
    x, y, z, w = q
    return np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
        [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
        [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
    ])


def local_corners(box):
    lo, hi = box.min, box.max
    return np.array([
        [hi[0], hi[1], hi[2]],
        [lo[0], hi[1], hi[2]],
        [lo[0], lo[1], hi[2]],
        [hi[0], lo[1], hi[2]],
        [hi[0], hi[1], lo[2]],
        [lo[0], hi[1], lo[2]],
        [lo[0], lo[1], lo[2]],
        [hi[0], lo[1], lo[2]],
    ])


def snapshot(obb):
    return (obb.local_box.min.copy(), obb.local_box.max.copy(),
            obb.position.copy(), obb.world_corners.copy())


def assert_same_state(a, b):
    for x, y in zip(snapshot(a), snapshot(b)):
        np.testing.assert_array_equal(x, y)


class TestExtentToOBB:

    def test_rejects_projected_crs(self):
        extent = Extent('EPSG:3857', west=0.0, east=1000.0, south=0.0, north=1000.0)
        with pytest.raises(InvalidCRSError):
            extent_to_obb(extent)

    def test_natural_box_is_symmetric(self, small_extent, paris_extent):
        for extent in (small_extent, paris_extent):
            obb = extent_to_obb(extent)
            np.testing.assert_array_equal(obb.natural_box.max, -obb.natural_box.min)
            assert obb.local_box == obb.natural_box

    def test_center_world(self, paris_extent):
        obb = extent_to_obb(paris_extent)
        lon, lat = paris_extent.center(Unit.RADIAN)
        np.testing.assert_allclose(obb.center_world, geographic_to_ecef(lon, lat))

    def test_local_axes(self, paris_extent):
        obb = extent_to_obb(paris_extent)
        m = rotation_matrix(obb.quaternion)
        lon, _ = paris_extent.center(Unit.RADIAN)
        normal = obb.center_world / np.linalg.norm(obb.center_world)

        np.testing.assert_allclose(m[:, 0], [-np.sin(lon), np.cos(lon), 0.0], atol=1e-12)
        np.testing.assert_allclose(m[:, 2], normal, atol=1e-12)

    def test_extents_follow_tile_shape(self):
        # twice as wide as high, on the equator
        obb = extent_to_obb(Extent.from_radians(west=0.0, east=0.02, south=-0.005, north=0.005))
        half = obb.half_extents
        assert half[0] == pytest.approx(2 * half[1], rel=1e-2)
        assert half[2] > 0

    def test_box_sits_below_tangent_plane(self, small_extent):
        obb = extent_to_obb(small_extent)
        top = obb.to_local(obb.center_world)
        # the tile center touches the top face
        assert top[2] == pytest.approx(obb.local_box.max[2], abs=1e-6)

    @pytest.mark.parametrize("bounds", [
        (0.0, 0.01, 0.0, 0.01),
        (-0.3, -0.25, 0.4, 0.45),
        (2.0, 2.1, 1.0, 1.05),
        (-0.01, 0.01, -0.01, 0.01),
    ])
    def test_samples_are_contained(self, bounds):
        extent = Extent.from_radians(*bounds)
        obb = extent_to_obb(extent)
        lons, lats = cardinal_points(extent)
        for point in geographic_to_ecef(lons, lats):
            assert obb.contains_point(point, eps=1e-6)

    def test_samples_are_contained_on_sphere(self, paris_extent, sphere):
        obb = extent_to_obb(paris_extent, to_cartesian=sphere)
        lons, lats = cardinal_points(paris_extent)
        local = obb.to_local(sphere(lons, lats))
        assert np.all(local >= obb.local_box.min - 1e-6)
        assert np.all(local <= obb.local_box.max + 1e-6)
        # the box is tight on every axis
        np.testing.assert_allclose(local.min(axis=0), obb.local_box.min, atol=1e-6)
        np.testing.assert_allclose(local.max(axis=0)[:2], obb.local_box.max[:2], atol=1e-6)

    def test_point_far_away_is_not_contained(self, small_extent):
        obb = extent_to_obb(small_extent)
        assert not obb.contains_point(obb.center_world * 1.01)
        assert not obb.contains_point(np.zeros(3))

    def test_degenerate_extent(self):
        extent = Extent.from_radians(west=0.5, east=0.5, south=0.2, north=0.21)
        obb = extent_to_obb(extent)
        assert obb.half_extents[0] == pytest.approx(0.0, abs=1e-6)
        assert obb.half_extents[1] > 0
        assert obb.world_corners.shape == (8, 3)

    def test_initial_heights_match_extrude(self, small_extent):
        built = extent_to_obb(small_extent, 0, 100)
        extruded = extent_to_obb(small_extent)
        extruded.extrude(0, 100)
        assert built.height_range == HeightRange(0, 100)
        assert_same_state(built, extruded)

    def test_example_tile_with_height(self, small_extent):
        obb = extent_to_obb(small_extent, min_height=0, max_height=100)

        half = obb.half_extents
        assert half[0] > 0 and half[1] > 0
        assert obb.height_range == (0, 100)
        assert obb.world_corners.shape == (8, 3)

        corners = obb.to_local(obb.ecef_corners)
        height = corners[:, 2].max() - corners[:, 2].min()
        assert height == pytest.approx(100 + obb.natural_box.size()[2], abs=1e-6)
        assert height > 100


class TestExtrude:

    def test_returns_growth_and_translation(self, small_extent):
        obb = extent_to_obb(small_extent)
        half_height_delta, z_translation = obb.extrude(0, 100)
        assert half_height_delta == pytest.approx(50)
        assert z_translation == pytest.approx(50)

        moved = obb.position - obb.origin_position
        normal = obb.center_world / np.linalg.norm(obb.center_world)
        np.testing.assert_allclose(moved, 50 * normal, atol=1e-9)

    def test_negative_min(self, small_extent):
        obb = extent_to_obb(small_extent)
        natural_half = obb.natural_box.max[2]
        delta = obb.extrude(-30, 0)
        assert delta.half_height_delta == pytest.approx(15)
        assert delta.z_translation == pytest.approx(-15)
        assert obb.local_box.max[2] == pytest.approx(natural_half + 15)
        assert obb.local_box.min[2] == -obb.local_box.max[2]

    def test_idempotent(self, paris_extent):
        obb = extent_to_obb(paris_extent)
        obb.extrude(-10, 250)
        first = snapshot(obb)
        obb.extrude(-10, 250)
        for x, y in zip(first, snapshot(obb)):
            np.testing.assert_array_equal(x, y)

    def test_not_cumulative(self, paris_extent):
        obb = extent_to_obb(paris_extent)
        obb.extrude(5, 40)
        obb.extrude(-20, 300)

        fresh = extent_to_obb(paris_extent)
        fresh.extrude(-20, 300)

        assert_same_state(obb, fresh)
        assert obb.height_range == (-20, 300)

    def test_natural_box_untouched(self, small_extent):
        obb = extent_to_obb(small_extent)
        natural = obb.natural_box.clone()
        obb.extrude(100, 2000)
        assert obb.natural_box == natural
        with pytest.raises(ValueError):
            obb.natural_box.max[2] = 0.0

    def test_origin_position_untouched(self, small_extent):
        obb = extent_to_obb(small_extent)
        origin = obb.origin_position.copy()
        obb.extrude(0, 500)
        np.testing.assert_array_equal(obb.origin_position, origin)


class TestWorldCorners:

    def check(self, obb):
        m = rotation_matrix(obb.quaternion)
        expected = obb.position + local_corners(obb.local_box) @ m.T
        np.testing.assert_allclose(obb.world_corners, expected, atol=1e-6)

    def test_after_build(self, paris_extent):
        self.check(extent_to_obb(paris_extent))

    def test_after_extrude(self, paris_extent):
        obb = extent_to_obb(paris_extent)
        obb.extrude(-100, 900)
        self.check(obb)

    def test_after_clone(self, paris_extent):
        obb = extent_to_obb(paris_extent, 0, 300)
        self.check(obb.clone())

    def test_plain_box(self):
        obb = OBB([-1, -2, -3], [1, 2, 3], look_at=np.array([0.0, 1.0, 0.0]), translate=[0, 0, 5])
        self.check(obb)
        np.testing.assert_allclose(obb.position, [0, 5, 0], atol=1e-12)

    def test_refresh_after_manual_move(self, small_extent):
        obb = extent_to_obb(small_extent)
        obb.position = obb.position + np.array([10.0, 0.0, 0.0])
        obb.refresh_world_corners()
        self.check(obb)


class TestClone:

    def test_clone_copies_transform(self, paris_extent):
        obb = extent_to_obb(paris_extent, 0, 300)
        copy = obb.clone()
        np.testing.assert_array_equal(copy.position, obb.position)
        np.testing.assert_array_equal(copy.quaternion, obb.quaternion)
        np.testing.assert_array_equal(copy.origin_position, obb.origin_position)
        np.testing.assert_array_equal(copy.center_world, obb.center_world)
        assert copy.local_box == obb.natural_box

    def test_clone_is_independent(self, paris_extent):
        obb = extent_to_obb(paris_extent)
        before = snapshot(obb)

        copy = obb.clone()
        copy.position[0] += 1.0
        copy.local_box.min[0] -= 1.0
        copy.refresh_world_corners()

        for x, y in zip(before, snapshot(obb)):
            np.testing.assert_array_equal(x, y)

    def test_source_mutation_does_not_reach_clone(self, paris_extent):
        obb = extent_to_obb(paris_extent)
        copy = obb.clone()
        before = snapshot(copy)
        obb.extrude(0, 1000)
        obb.origin_position[1] += 3.0
        for x, y in zip(before, snapshot(copy)):
            np.testing.assert_array_equal(x, y)

    def test_extruding_clone_keeps_source_height(self, small_extent):
        obb = extent_to_obb(small_extent)
        origin = obb.origin_position.copy()
        copy = obb.clone()
        copy.extrude(10, 20)

        assert obb.height_range == (0, 0)
        assert copy.height_range == (10, 20)
        np.testing.assert_array_equal(obb.origin_position, origin)
