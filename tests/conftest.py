from functools import partial

import pytest

from tileobb.coord_utils import spherical_to_ecef
from tileobb.extent import Extent

EARTH_RADIUS = 6371000


@pytest.fixture
def small_extent():
    """0.01 x 0.01 radian tile just north of the equator at longitude 0"""
    return Extent.from_radians(west=0.0, east=0.01, south=0.0, north=0.01)


@pytest.fixture
def paris_extent():
    return Extent('EPSG:4326', west=2.0, east=3.0, south=48.0, north=49.0)


@pytest.fixture
def sphere():
    """Spherical earth converter, (lon, lat) radians -> xyz"""
    return partial(spherical_to_ecef, r=EARTH_RADIUS)
