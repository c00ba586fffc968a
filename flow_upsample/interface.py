"""
High-level interface for upsampling flow files.

Runs the whole pipeline: read the input file, resample it to the target
size, write the result in the input's format.
"""
import os

from flow_upsample.config import UpsampleConfig
from flow_upsample.exceptions import FlowIOError
from flow_upsample.io.flow_io import read_flow, write_flow
from flow_upsample.utils.warping import upsample_flow


def upsample_flow_file(in_path, out_path, width, height, scale_x=None,
                       scale_y=None, display=False, preview=None,
                       params=None):
    """Upsample the flow stored in `in_path` and write it to `out_path`.

    The input is fully read and validated before the output is opened, so a
    bad input file never creates or touches the output.

    Args:
        in_path: Input flow file (PIEH or PIEI).
        out_path: Output flow file, written with the input's format.
        width, height: Target size in cells.
        scale_x, scale_y: Magnification per axis, or None to infer it from
            the target and source sizes.
        display: Print progress messages.
        preview: Optional path of a PNG colour preview of the result.
        params: Optional dict of parameter overrides applied on top of the
            arguments, e.g. {'x': 2.0, 'y': 2.0}.

    Returns:
        out: The upsampled FlowGrid.

    Raises:
        FlowIOError: If the input does not exist or a file cannot be opened.
        FlowError: Any decoding error of the input file, unchanged.
        ValueError: If the parameters are invalid.
    """
    config = UpsampleConfig(width, height, scale_x, scale_y, display)

    # Apply parameter overrides
    if params is not None:
        config.parse_input_parameter(params)
    config.validate()

    if not os.path.exists(in_path):
        raise FlowIOError(f"Unavailable file '{in_path}'", os.fspath(in_path))

    grid = read_flow(in_path)
    sx, sy = config.effective_scales(grid.width, grid.height)
    if config.display:
        print(f"Read {grid.width}x{grid.height} {grid.format.name} flow "
              f"from '{in_path}'")
        print(f"  Upsampling to {config.width}x{config.height} "
              f"(scale x {sx:.4f}, y {sy:.4f})")

    out = upsample_flow(grid, config.width, config.height, sx, sy)
    write_flow(out, out_path)
    if config.display:
        print(f"Wrote '{out_path}'")

    if preview is not None:
        from flow_upsample.viz.flow_color import save_flow_preview
        save_flow_preview(out, preview)
        if config.display:
            print(f"Wrote preview '{preview}'")

    return out
