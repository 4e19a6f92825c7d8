import logging
from collections import OrderedDict

from tileobb.config import MAX_CACHED_TILES
from tileobb.coord_utils import geographic_to_ecef
from tileobb.obb import OBB, HeightDelta, extent_to_obb
from tileobb.tile_utils import tile_extent

logger = logging.getLogger(__name__)


class TileBoundsCache:
    '''Bounding boxes of the tiles currently in use

    Remarks
    -------
    - One OBB per (z, x, y) key, built the first time the tile is asked for
    - Elevation updates extrude the tile's OBB in place
    - Least recently used boxes are dropped once max_tiles is exceeded
    - Not thread safe, one owner at a time
    '''

    def __init__(self, max_tiles: int = MAX_CACHED_TILES, to_cartesian=geographic_to_ecef):
        '''
        Parameters
        ----------
        max_tiles : int
            Max number of boxes to keep
        to_cartesian : callable
            Geographic to ECEF converter handed to extent_to_obb
        '''
        self.max_tiles = max_tiles
        self.to_cartesian = to_cartesian
        self._boxes = OrderedDict()

    def get(self, key: tuple[int, int, int]) -> OBB:
        """Box of tile key = (z, x, y), built on first use"""
        obb = self._boxes.get(key)
        if obb is not None:
            self._boxes.move_to_end(key)
            return obb

        obb = extent_to_obb(tile_extent(*key), to_cartesian=self.to_cartesian)
        self._boxes[key] = obb

        # pruning
        while len(self._boxes) > self.max_tiles:
            oldk, _ = self._boxes.popitem(last=False)
            logger.info("dropped bounding box of tile %s/%s/%s", *oldk)
        return obb

    def update_elevation(self, key: tuple[int, int, int], min_height: float, max_height: float) -> HeightDelta:
        """Apply the elevation range now known for a tile

        Parameters
        ----------
        key : (z, x, y)
            TMS tile
        min_height : float
            Lowest terrain elevation in meters
        max_height : float
            Highest terrain elevation in meters
        """
        return self.get(key).extrude(min_height, max_height)

    def discard(self, key: tuple[int, int, int]) -> None:
        self._boxes.pop(key, None)

    def clear(self) -> None:
        self._boxes.clear()

    def __contains__(self, key):
        return key in self._boxes

    def __len__(self):
        return len(self._boxes)
