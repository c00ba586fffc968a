"""Middlebury color coding and PNG previews for flow grids."""
import numpy as np
from PIL import Image

from flow_upsample.io.flow_io import FlowGrid

UNKNOWN_FLOW_THRESH = 1e9


def make_colorwheel():
    """Build the Middlebury 55-bin colorwheel.

    Returns:
        colorwheel: (55, 3) array of RGB values [0, 255].
    """
    # Segment lengths: red-yellow, yellow-green, green-cyan,
    # cyan-blue, blue-magenta, magenta-red
    segments = (15, 6, 4, 11, 13, 6)
    colorwheel = np.zeros((sum(segments), 3))

    # (channel held at 255, channel ramping, ramp direction) per segment
    ramps = ((0, 1, 1), (1, 0, -1), (1, 2, 1), (2, 1, -1), (2, 0, 1), (0, 2, -1))
    col = 0
    for n, (full, ramp, direction) in zip(segments, ramps):
        up = np.floor(255 * np.arange(n) / n)
        colorwheel[col:col + n, full] = 255
        colorwheel[col:col + n, ramp] = up if direction > 0 else 255 - up
        col += n

    return colorwheel


def compute_color(u, v):
    """Color image from flow components normalized to unit maximum radius.

    Args:
        u, v: Flow components (H, W).

    Returns:
        img: Color image (H, W, 3), uint8.
    """
    wheel = make_colorwheel() / 255.0
    ncols = len(wheel)

    rad = np.hypot(u, v)[:, :, None]
    # Angle mapped onto the wheel, blended between neighbouring bins
    fk = (np.arctan2(-v, -u) / np.pi + 1) / 2.0 * (ncols - 1)
    k0 = np.floor(fk).astype(int)
    f = (fk - k0)[:, :, None]
    col = wheel[k0] * (1 - f) + wheel[(k0 + 1) % ncols] * f

    # Desaturate toward white for small motions, dim out-of-range ones
    col = 1 - rad * (1 - col)
    col = np.where(rad > 1, col * 0.75, col)
    return np.floor(255 * np.clip(col, 0, 1)).astype(np.uint8)


def flow_to_color(flow, max_flow=None):
    """Convert a flow field to an RGB image using Middlebury color coding.

    Args:
        flow: FlowGrid, or (H, W, C) array with u, v in the first two
            channels.
        max_flow: Flow magnitude mapped to full saturation. If None, the
            largest known magnitude in the field is used.

    Returns:
        img: (H, W, 3) uint8 RGB image. For EXTENDED grids the colors are
            darkened by the confidence channel, clipped to [0, 1].
    """
    confidence = None
    if isinstance(flow, FlowGrid):
        confidence = flow.confidence
        flow = flow.as_array()
    flow = np.asarray(flow, dtype=np.float64)
    if flow.ndim != 3 or flow.shape[2] < 2:
        raise ValueError(f"Flow must be (H, W, C>=2) array, got shape {flow.shape}")

    u = flow[:, :, 0].copy()
    v = flow[:, :, 1].copy()
    # NaN fails the comparison and is treated as unknown
    known = (np.abs(u) <= UNKNOWN_FLOW_THRESH) & (np.abs(v) <= UNKNOWN_FLOW_THRESH)
    unknown = ~known
    u[unknown] = 0
    v[unknown] = 0

    if max_flow is not None:
        max_rad = max_flow
    elif np.any(~unknown):
        max_rad = np.sqrt(u ** 2 + v ** 2).max()
    else:
        max_rad = 1.0
    max_rad = max(max_rad, 1e-8)

    img = compute_color(u / max_rad, v / max_rad)
    if confidence is not None:
        scale = np.clip(np.nan_to_num(confidence), 0, 1)
        img = np.floor(img * scale[:, :, None]).astype(np.uint8)
    img[unknown] = 0

    return img


def save_flow_preview(flow, filename, max_flow=None):
    """Write the color-coded flow as a PNG image."""
    img = flow_to_color(flow, max_flow=max_flow)
    Image.fromarray(img).save(filename, format='PNG')
