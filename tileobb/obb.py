"""Oriented bounding boxes for geographic tiles

A tile's box lives in the frame the tile mesh is placed in: origin at the ECEF
position of the extent center, world axes. The box itself is an axis aligned
Box3 in its own local frame (x east, y north, z up) plus a rotation and a
translation into the tile frame.
"""
import logging
from typing import Callable, NamedTuple

import numpy as np

from tileobb import geometry
from tileobb.coord_utils import geographic_to_ecef
from tileobb.crs import check_geographic
from tileobb.extent import Extent, Unit

logger = logging.getLogger(__name__)


class HeightRange(NamedTuple):
    min: float
    max: float


class HeightDelta(NamedTuple):
    half_height_delta: float  # growth of the half height compared to the natural box
    z_translation: float      # translation applied along the local height axis


class OBB:
    """Oriented bounding box

    Attributes
    ----------
    local_box : Box3
        Box in the local frame, always symmetric around the local origin on z
    natural_box : Box3
        local_box as first computed, read-only
    quaternion : np.ndarray
        Local to tile frame rotation [x, y, z, w]
    position : np.ndarray
        Translation of the local origin
    origin_position : np.ndarray
        position before any height was added
    height_range : HeightRange
        Last (min, max) passed to extrude
    world_corners : np.ndarray
        (8, 3) corners of local_box in the tile frame
    center_world : np.ndarray | None
        ECEF position of the extent center, set by extent_to_obb
    """

    def __init__(self, min_point, max_point, look_at: np.ndarray | None = None,
                 translate: np.ndarray | None = None):
        '''
        Parameters
        ----------
        min_point, max_point : array-like
            Local box corners
        look_at : np.ndarray
            Direction the local z axis should point to
        translate : np.ndarray
            Offset applied along the local axes once oriented
        '''
        self.local_box = geometry.Box3(min_point, max_point)
        self.natural_box = self.local_box.clone(readonly=True)

        self.quaternion = geometry.quaternion_identity()
        self.position = np.zeros(3)

        if look_at is not None:
            self.look_at(look_at)

        if translate is not None:
            self.translate(translate)

        self.world_corners = None
        self.refresh_world_corners()

        self.origin_position = self.position.copy()
        self.height_range = HeightRange(0.0, 0.0)
        self.center_world = None

    def clone(self) -> 'OBB':
        """Copy built from the natural box, with this box's transform"""
        c_obb = OBB(self.natural_box.min, self.natural_box.max)
        c_obb.position = self.position.copy()
        c_obb.quaternion = self.quaternion.copy()
        c_obb.origin_position = self.origin_position.copy()
        if self.center_world is not None:
            c_obb.center_world = self.center_world.copy()
        c_obb.refresh_world_corners()
        return c_obb

    #--------------------------------------------------------------
    # Transform
    #--------------------------------------------------------------
    def look_at(self, target: np.ndarray) -> None:
        """Orient the local z axis toward target, local y toward world +Z"""
        direction = np.asarray(target, dtype=float) - self.position
        matrix = geometry.look_at_matrix(direction, geometry.Z_AXIS)
        self.quaternion = geometry.quaternion_from_rotation_matrix(matrix)

    def translate(self, offset: np.ndarray) -> None:
        """Move along the local axes"""
        self.position = self.position + geometry.rotate(self.quaternion, offset)

    def translate_z(self, distance: float) -> None:
        self.translate(distance * geometry.Z_AXIS)

    def refresh_world_corners(self) -> None:
        """Recompute world_corners from local_box, quaternion and position"""
        local = self.local_box.corners()
        self.world_corners = self.position + geometry.rotate(self.quaternion, local)

    #--------------------------------------------------------------
    # Height
    #--------------------------------------------------------------
    def extrude(self, min_delta: float, max_delta: float) -> HeightDelta:
        """Grow the box along its height axis

        Always computed from natural_box and origin_position, so calling it
        again replaces the previous extrusion instead of adding to it.

        Parameters
        ----------
        min_delta : float
            Offset added to the natural bottom face (meters)
        max_delta : float
            Offset added to the natural top face (meters)

        Returns
        -------
        delta : HeightDelta
            (new half height - natural half height, translation along local z)
        """
        self.height_range = HeightRange(min_delta, max_delta)

        depth = abs(self.natural_box.min[2] - self.natural_box.max[2])

        min_z = self.natural_box.min[2] + min_delta
        max_z = self.natural_box.max[2] + max_delta

        half_size = abs(min_z - max_z) * 0.5
        translate_z = min_z + half_size
        self.local_box.min[2] = -half_size
        self.local_box.max[2] = half_size

        self.position = self.origin_position.copy()
        self.translate_z(translate_z)

        self.refresh_world_corners()

        logger.debug("extruded obb by (%s, %s): half height %s, z translation %s",
                     min_delta, max_delta, half_size, translate_z)
        return HeightDelta(half_size - depth * 0.5, translate_z)

    #--------------------------------------------------------------
    # Queries
    #--------------------------------------------------------------
    @property
    def half_extents(self) -> np.ndarray:
        return self.local_box.size() * 0.5

    @property
    def ecef_corners(self) -> np.ndarray:
        """world_corners offset by center_world"""
        if self.center_world is None:
            return self.world_corners.copy()
        return self.world_corners + self.center_world

    def to_local(self, points: np.ndarray) -> np.ndarray:
        """Express ECEF points in the box's local frame"""
        points = np.asarray(points, dtype=float)
        if self.center_world is not None:
            points = points - self.center_world
        inverse = geometry.quaternion_conjugate(self.quaternion)
        return geometry.rotate(inverse, points - self.position)

    def contains_point(self, point: np.ndarray, eps: float = 1e-6) -> bool:
        """True if an ECEF point is inside the box, with eps meters of slack on each axis"""
        local = self.to_local(point)
        return bool(np.all(local >= self.local_box.min - eps) and
                    np.all(local <= self.local_box.max + eps))

    def __repr__(self):
        return (f'OBB(local_box={self.local_box!r}, position={self.position.tolist()}, '
                f'height_range={tuple(self.height_range)})')


# Sample points of an extent, clockwise from the north-west corner, center last
#      0---1---2
#      |       |
#      7   8   3
#      |       |
#      6---5---4
SOUTH_MIDDLE = 5
CENTER = 8


def cardinal_points(extent: Extent) -> tuple[np.ndarray, np.ndarray]:
    """Longitudes and latitudes (radians) of the 9 sample points of an extent"""
    west = extent.west(Unit.RADIAN)
    east = extent.east(Unit.RADIAN)
    south = extent.south(Unit.RADIAN)
    north = extent.north(Unit.RADIAN)
    width, height = extent.dimensions(Unit.RADIAN)
    center_lon, center_lat = extent.center(Unit.RADIAN)

    mid_lon = west + width * 0.5
    mid_lat = south + height * 0.5

    lons = np.array([west, mid_lon, east, east, east, mid_lon, west, west, center_lon])
    lats = np.array([north, north, north, mid_lat, south, south, south, mid_lat, center_lat])
    return lons, lats


def extent_to_obb(extent: Extent, min_height: float = 0.0, max_height: float = 0.0,
                  to_cartesian: Callable[[np.ndarray, np.ndarray], np.ndarray] = geographic_to_ecef) -> OBB:
    """Oriented bounding box of a tile

    Parameters
    ----------
    extent : Extent
        Tile extent, must be in a geographic CRS
    min_height : float
        Lowest elevation on the tile (meters)
    max_height : float
        Highest elevation on the tile (meters)
    to_cartesian : callable
        (lon, lat) radians -> (..., 3) ECEF

    Returns
    -------
    obb : OBB
        Box in the frame centered on the extent center

    Raises
    ------
    InvalidCRSError
        extent is not in a geographic CRS
    """
    check_geographic(extent.crs)

    lons, lats = cardinal_points(extent)
    cardinals = np.asarray(to_cartesian(lons, lats), dtype=float)

    center_world = cardinals[CENTER].copy()
    normal = geometry.normalize(center_world)

    # Rotate normal onto +Z, then undo the longitude so x/y follow north/east
    plane_z = geometry.quaternion_from_unit_vectors(normal, geometry.Z_AXIS)
    rot_lon = geometry.quaternion_from_axis_angle(geometry.Z_AXIS, -extent.center(Unit.RADIAN)[0])
    q = geometry.quaternion_multiply(rot_lon, plane_z)

    # Tangent plane through the origin, not through center_world
    on_plane = geometry.project_on_plane(cardinals, normal)
    distances = np.linalg.norm(on_plane - (cardinals - center_world), axis=1)
    half_max_height = float(distances.max()) * 0.5

    on_plane = geometry.rotate(q, on_plane)
    max_v = on_plane.max(axis=0)
    min_v = on_plane.min(axis=0)

    half_length = abs(max_v[1] - min_v[1]) * 0.5
    half_width = abs(max_v[0] - min_v[0]) * 0.5
    max_point = np.array([half_length, half_width, half_max_height])
    min_point = -max_point

    # [4], [5] and [6] are not aligned because of the ellipsoid shape
    delta = half_width - abs(on_plane[SOUTH_MIDDLE, 0])
    translate = np.array([0.0, delta, -half_max_height])

    obb = OBB(min_point, max_point, look_at=normal, translate=translate)

    if min_height != 0 or max_height != 0:
        obb.extrude(min_height, max_height)

    obb.center_world = center_world

    logger.debug("built obb for %r: half extents %s", extent, obb.half_extents)
    return obb


build_obb = extent_to_obb
