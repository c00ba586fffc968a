"""Bilinear upsampling of flow grids.

Target cell (x, y) maps to source coordinate (x / scale_x, y / scale_y) and
blends the 2x2 block of source cells around it. Footprint cells that fall
outside the source grid contribute nothing and their weight is not
redistributed, so cells along the far edges come out attenuated.

All arithmetic is single precision and the footprint is accumulated in the
order (0,0), (1,0), (0,1), (1,1), so results are reproducible bit for bit
across runs and platforms.
"""
import numpy as np

from flow_upsample.io.flow_io import FlowGrid


def resolve_scale(scale, target, source):
    """Effective scale factor along one axis.

    A positive `scale` is used as given. None or a non-positive value means
    unspecified, in which case the factor is inferred as target / source.
    """
    if scale is None or scale <= 0:
        return np.float32(target) / np.float32(source)
    return np.float32(scale)


def bilinear_weights(rx, ry):
    """Bilinear weights of the 2x2 footprint around (rx, ry).

    Args:
        rx, ry: Source coordinates, scalars or arrays of the same shape.

    Returns:
        w: float32 array of shape (2, 2) + shape(rx), indexed w[dx][dy].
            w[0][0] weights cell (floor(rx), floor(ry)), w[1][1] weights
            cell (floor(rx) + 1, floor(ry) + 1).
    """
    rx = np.asarray(rx, dtype=np.float32)
    ry = np.asarray(ry, dtype=np.float32)
    fx = rx - np.floor(rx)
    fy = ry - np.floor(ry)
    one = np.float32(1)
    return np.array([
        [(one - fx) * (one - fy), (one - fx) * fy],
        [fx * (one - fy), fx * fy],
    ], dtype=np.float32)


def interpolate_cell(grid, rx, ry):
    """Blend the source cells around (rx, ry) one footprint cell at a time.

    Reference form of the per-cell rule used by upsample_flow.

    Returns:
        values: float32 array of length grid.channels_per_cell.
    """
    rx = np.float32(rx)
    ry = np.float32(ry)
    kx1 = int(np.floor(rx))
    ky1 = int(np.floor(ry))
    w = bilinear_weights(rx, ry)

    acc = np.zeros(grid.channels_per_cell, dtype=np.float32)
    for dy in (0, 1):
        for dx in (0, 1):
            ix, iy = kx1 + dx, ky1 + dy
            if not (0 <= ix < grid.width and 0 <= iy < grid.height):
                continue
            acc += w[dx, dy] * grid.cell(ix, iy)
    return acc


def upsample_flow(grid, width, height, scale_x=None, scale_y=None):
    """Resample a flow grid to (width, height) by bilinear interpolation.

    Flow values are interpolated as they are; they are not rescaled by the
    magnification. The output keeps the input's format, so a confidence
    channel is carried through only for EXTENDED grids.

    Args:
        grid: Source FlowGrid.
        width, height: Target dimensions, positive ints.
        scale_x, scale_y: Magnification per axis. None or <= 0 infers the
            factor from the target and source sizes.

    Returns:
        out: New read-only FlowGrid of the target size.
    """
    assert isinstance(grid, FlowGrid), "grid must be a FlowGrid"
    assert int(width) == width and width > 0, f"invalid target width {width}"
    assert int(height) == height and height > 0, f"invalid target height {height}"
    width = int(width)
    height = int(height)

    sx = resolve_scale(scale_x, width, grid.width)
    sy = resolve_scale(scale_y, height, grid.height)

    rx = np.arange(width, dtype=np.float32) / sx
    ry = np.arange(height, dtype=np.float32) / sy
    kx1 = np.floor(rx).astype(np.int64)
    ky1 = np.floor(ry).astype(np.int64)

    # Separable weights; the outer product gives the per-cell 2x2 weights
    fx = rx - kx1.astype(np.float32)
    fy = ry - ky1.astype(np.float32)
    one = np.float32(1)
    wx = (one - fx, fx)
    wy = (one - fy, fy)

    src = grid.as_array()
    out = FlowGrid.zeros(width, height, grid.format)
    acc = out.as_array()
    for dy in (0, 1):
        iy = ky1 + dy
        valid_y = (iy >= 0) & (iy < grid.height)
        iy = np.clip(iy, 0, grid.height - 1)
        for dx in (0, 1):
            ix = kx1 + dx
            valid_x = (ix >= 0) & (ix < grid.width)
            ix = np.clip(ix, 0, grid.width - 1)

            weight = wy[dy][:, None] * wx[dx][None, :]
            contrib = weight[:, :, None] * src[iy[:, None], ix[None, :]]
            valid = valid_y[:, None] & valid_x[None, :]
            acc += np.where(valid[:, :, None], contrib, np.float32(0))

    return out.freeze()
