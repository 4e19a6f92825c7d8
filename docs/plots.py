import matplotlib.pyplot as plt
import numpy as np

from tileobb.extent import Extent
from tileobb.obb import cardinal_points, extent_to_obb
from tileobb.coord_utils import geographic_to_ecef


def plot_tile_box(extent: Extent, min_height: float = 0.0, max_height: float = 0.0,
                  filename: str = 'tile_box.png') -> None:
    '''Side views of a tile's bounding box and the sample points it was built from

    Parameters
    ----------
    extent : Extent
        Geographic tile extent
    min_height, max_height : float
        Elevation range of the tile (meters)
    filename : str
        Output image path
    '''
    obb = extent_to_obb(extent, min_height, max_height)

    lons, lats = cardinal_points(extent)
    samples = obb.to_local(geographic_to_ecef(lons, lats))
    corners = obb.to_local(obb.ecef_corners)

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))
    for ax, (i, j), names in zip(axes, [(0, 2), (1, 2)], [('East', 'Up'), ('North', 'Up')]):
        lo = corners.min(axis=0)
        hi = corners.max(axis=0)
        ax.add_patch(plt.Rectangle((lo[i], lo[j]), hi[i] - lo[i], hi[j] - lo[j],
                                   fill=False, color='orange'))
        ax.plot(samples[:, i], samples[:, j], 'o', color='purple')
        for k, (x, y) in enumerate(samples[:, [i, j]]):
            ax.text(x, y, str(k), fontsize=9)
        ax.set_xlabel(f'{names[0]} (m)')
        ax.set_ylabel(f'{names[1]} (m)')
        ax.set_title(f'{names[0]} / {names[1]}')

    fig.suptitle(repr(extent))
    fig.tight_layout()
    plt.savefig(filename)


if __name__ == '__main__':
    plot_tile_box(Extent('EPSG:4326', west=2.0, east=3.0, south=48.0, north=49.0),
                  min_height=0.0, max_height=2000.0)
