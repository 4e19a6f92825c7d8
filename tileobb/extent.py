import math
from enum import Enum

from tileobb.config import GEOGRAPHIC_CRS
from tileobb.errors import InvalidExtentError


class Unit(Enum):
    DEGREE = 'degree'
    RADIAN = 'radian'


def _convert(value: float, from_unit: Unit, to_unit: Unit) -> float:
    if from_unit is to_unit:
        return value
    if to_unit is Unit.RADIAN:
        return math.radians(value)
    return math.degrees(value)


class Extent:
    """Rectangle in geographic coordinates

    Bounds are kept in the unit they were given in and converted on access.

    Attributes
    ----------
    crs : str
        Geographic CRS of the bounds
    unit : Unit
        Unit the bounds are stored in
    """

    def __init__(self, crs: str, west: float, east: float, south: float, north: float,
                 unit: Unit = Unit.DEGREE):
        '''
        Parameters
        ----------
        crs : str
            e.g. 'EPSG:4326'
        west, east : float
            Longitude bounds
        south, north : float
            Latitude bounds
        unit : Unit
            Unit of the four bounds
        '''
        if west > east or south > north:
            raise InvalidExtentError(
                f'Inverted extent: west={west}, east={east}, south={south}, north={north}')
        self.crs = crs
        self.unit = unit
        self._west = float(west)
        self._east = float(east)
        self._south = float(south)
        self._north = float(north)

    @classmethod
    def from_radians(cls, west: float, east: float, south: float, north: float,
                     crs: str = GEOGRAPHIC_CRS) -> 'Extent':
        return cls(crs, west, east, south, north, unit=Unit.RADIAN)

    def west(self, unit: Unit = Unit.DEGREE) -> float:
        return _convert(self._west, self.unit, unit)

    def east(self, unit: Unit = Unit.DEGREE) -> float:
        return _convert(self._east, self.unit, unit)

    def south(self, unit: Unit = Unit.DEGREE) -> float:
        return _convert(self._south, self.unit, unit)

    def north(self, unit: Unit = Unit.DEGREE) -> float:
        return _convert(self._north, self.unit, unit)

    def center(self, unit: Unit = Unit.DEGREE) -> tuple[float, float]:
        """Center point as (longitude, latitude)"""
        lon = (self._west + self._east) * 0.5
        lat = (self._south + self._north) * 0.5
        return _convert(lon, self.unit, unit), _convert(lat, self.unit, unit)

    def dimensions(self, unit: Unit = Unit.DEGREE) -> tuple[float, float]:
        """Size as (width, height)"""
        return (_convert(self._east - self._west, self.unit, unit),
                _convert(self._north - self._south, self.unit, unit))

    def contains_point(self, lon: float, lat: float, unit: Unit = Unit.DEGREE) -> bool:
        """True if (lon, lat) lies inside or on the border of this extent"""
        lon = _convert(lon, unit, self.unit)
        lat = _convert(lat, unit, self.unit)
        return (self._west <= lon <= self._east and
                self._south <= lat <= self._north)

    def contains(self, other: 'Extent') -> bool:
        return (self.contains_point(other.west(self.unit), other.south(self.unit), self.unit) and
                self.contains_point(other.east(self.unit), other.north(self.unit), self.unit))

    def intersects(self, other: 'Extent') -> bool:
        return not (other.west(self.unit) > self._east or other.east(self.unit) < self._west or
                    other.south(self.unit) > self._north or other.north(self.unit) < self._south)

    def __repr__(self):
        return (f'Extent({self.crs!r}, west={self._west}, east={self._east}, '
                f'south={self._south}, north={self._north}, unit={self.unit.name})')
