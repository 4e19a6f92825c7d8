import numpy as np
from pyproj import Transformer

from tileobb.config import WGS84_A, WGS84_E2, GEOGRAPHIC_CRS, GEOCENTRIC_CRS


def geographic_to_ecef(lon: np.ndarray, lat: np.ndarray, alt: float = 0.0) -> np.ndarray:
    """Convert geodetic coordinates (longitude, latitude, altitude) on WGS84 to ECEF

    Parameters
    ----------
    lon : np.ndarray
        Longitude in radians, scalar or array
    lat : np.ndarray
        Latitude in radians, same shape as lon
    alt : float
        Altitude above the ellipsoid in meters

    Returns
    -------
    xyz : np.ndarray
        ECEF (X, Y, Z) in meters, shape lon.shape + (3,)
    """
    lon = np.asarray(lon, dtype=float)
    lat = np.asarray(lat, dtype=float)

    # Prime vertical radius of curvature
    N = WGS84_A / np.sqrt(1 - WGS84_E2 * np.sin(lat)**2)

    x = (N + alt) * np.cos(lat) * np.cos(lon)
    y = (N + alt) * np.cos(lat) * np.sin(lon)
    z = (N * (1 - WGS84_E2) + alt) * np.sin(lat)

    return np.stack([x, y, z], axis=-1)


def spherical_to_ecef(lon: np.ndarray, lat: np.ndarray, r: float) -> np.ndarray:
    """Convert spherical coordinates to ECEF

    Parameters
    ----------
    lon : np.ndarray
        Longitude in radians
    lat : np.ndarray
        Latitude in radians
    r : float
        Distance from Earth center

    Returns
    -------
    xyz : np.ndarray
        shape lon.shape + (3,)
    """
    lon = np.asarray(lon, dtype=float)
    lat = np.asarray(lat, dtype=float)

    x = r * np.cos(lat) * np.cos(lon)
    y = r * np.cos(lat) * np.sin(lon)
    z = r * np.sin(lat)

    return np.stack([x, y, z], axis=-1)


class PyprojConverter:
    '''Geographic to geocentric conversion through PROJ

    Drop-in replacement for geographic_to_ecef when the geographic CRS is not WGS84.

    Parameters
    ----------
    crs : str
        Source geographic CRS, anything pyproj accepts
    target_crs : str
        Geocentric CRS of the output
    '''

    def __init__(self, crs: str = GEOGRAPHIC_CRS, target_crs: str = GEOCENTRIC_CRS):
        self.crs = crs
        self._transformer = Transformer.from_crs(crs, target_crs, always_xy=True)

    def __call__(self, lon: np.ndarray, lat: np.ndarray, alt: float = 0.0) -> np.ndarray:
        lon, lat = np.broadcast_arrays(np.asarray(lon, dtype=float), np.asarray(lat, dtype=float))
        shape = lon.shape
        heights = np.full(lon.size, alt, dtype=float)

        x, y, z = self._transformer.transform(np.degrees(lon).ravel(), np.degrees(lat).ravel(), heights)
        xyz = np.stack([np.asarray(x), np.asarray(y), np.asarray(z)], axis=-1)
        return xyz.reshape(shape + (3,))
