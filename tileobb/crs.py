from functools import lru_cache

from pyproj import CRS
from pyproj.exceptions import CRSError

from tileobb.errors import InvalidCRSError


@lru_cache(maxsize=32)
def _parse(crs: str) -> CRS:
    return CRS.from_user_input(crs)


def check_geographic(crs) -> CRS:
    """Make sure crs is a geographic (longitude/latitude) CRS

    Parameters
    ----------
    crs : str | pyproj.CRS
        e.g. 'EPSG:4326'

    Returns
    -------
    crs : pyproj.CRS
        The parsed CRS

    Raises
    ------
    InvalidCRSError
        crs can't be parsed or is projected/geocentric
    """
    try:
        parsed = _parse(crs) if isinstance(crs, str) else CRS.from_user_input(crs)
    except CRSError as e:
        raise InvalidCRSError(f'Unable to parse CRS {crs!r}') from e

    if not parsed.is_geographic:
        raise InvalidCRSError(f'The extent crs is not a geographic CRS: {crs}')
    return parsed
