class TileOBBError(Exception):
    """Base class for errors raised by tileobb"""


class InvalidCRSError(TileOBBError):
    """The extent is not expressed in a geographic (longitude/latitude) CRS"""


class InvalidExtentError(TileOBBError, ValueError):
    """Extent bounds or tile indices are out of range"""
