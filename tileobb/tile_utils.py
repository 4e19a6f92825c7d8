import numpy as np

from tileobb.config import GEOGRAPHIC_CRS
from tileobb.errors import InvalidExtentError
from tileobb.extent import Extent


def latlon_to_tile(lat: float, lon: float, zoom: int) -> tuple[int, int]:
    """Convert lat/lon to tile coordinates

    Parameters
    ----------
    lat : float
        latitude in WGS84 degrees
    lon : float
        longitude in WGS84 degrees
    zoom: int
        TMS zoom level

    Returns
    -------
    x : int
        TMS x
    y : int
        TMS y
    """
    n = 2 ** zoom
    x = int((lon + 180.0) / 360.0 * n)
    lat_rad = np.radians(lat)
    y = int((1.0 - np.arcsinh(np.tan(lat_rad)) / np.pi) / 2.0 * n)
    x = x % n
    y = int(np.clip(y, 0, n - 1))
    return x, y


def tile_x_to_lon(x: int, zoom: int) -> float:
    """Convert TMS tile X coordinate to the longitude of its west edge"""
    n = 2 ** zoom
    return x / n * 360.0 - 180.0


def tile_y_to_lat(y: int, zoom: int) -> float:
    """Convert TMS tile Y coordinate to the latitude of its north edge"""
    n = 2 ** zoom
    lat_rad = np.arctan(np.sinh(np.pi * (1 - 2 * y / n)))
    return float(np.degrees(lat_rad))


def tile_extent(zoom: int, x: int, y: int) -> Extent:
    """Geographic extent of a web mercator tile

    Parameters
    ----------
    zoom : int
        TMS zoom level
    x : int
        TMS x
    y : int
        TMS y, 0 at the north edge of the map

    Returns
    -------
    extent : Extent
        EPSG:4326 extent in degrees
    """
    n = 2 ** zoom
    if zoom < 0 or not (0 <= x < n and 0 <= y < n):
        raise InvalidExtentError(f'Tile {zoom}/{x}/{y} is out of range')

    return Extent(GEOGRAPHIC_CRS,
                  west=tile_x_to_lon(x, zoom),
                  east=tile_x_to_lon(x + 1, zoom),
                  south=tile_y_to_lat(y + 1, zoom),
                  north=tile_y_to_lat(y, zoom))
