import os

# WGS84 ellipsoid
WGS84_A = 6378137.0             # semi-major axis (m)
WGS84_F = 1 / 298.257223563     # flattening
WGS84_E2 = WGS84_F * (2 - WGS84_F)  # eccentricity squared

GEOGRAPHIC_CRS = "EPSG:4326"
GEOCENTRIC_CRS = "EPSG:4978"

# Max number of tile bounding boxes to hold in memory
MAX_CACHED_TILES = int(os.environ.get("TILEOBB_MAX_TILES", "1024"))
