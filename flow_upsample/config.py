"""
Run parameters for flow upsampling.

Parameters are plain attributes so they can be set directly, overridden
from a dict with parse_input_parameter, or filled in from the command line.
"""
import numbers

from flow_upsample.utils.warping import resolve_scale


class UpsampleConfig:
    """Target size and scale factors for one upsampling run.

    Attributes:
        width, height: Target grid size in cells.
        scale_x, scale_y: Magnification per axis. None or <= 0 means the
            factor is inferred from the target and source sizes.
        display: Print progress while processing.
    """

    def __init__(self, width=None, height=None, scale_x=None, scale_y=None,
                 display=False):
        self.width = width
        self.height = height
        self.scale_x = scale_x
        self.scale_y = scale_y
        self.display = display

    def parse_input_parameter(self, params):
        """Set parameters from a dict. Unknown keys are ignored.

        Args:
            params: dict of attribute name -> value. 'x' and 'y' are accepted
                as short names for scale_x and scale_y.
        """
        aliases = {'x': 'scale_x', 'y': 'scale_y', 'w': 'width', 'h': 'height'}
        for key, val in params.items():
            attr = aliases.get(key, key)
            if hasattr(self, attr):
                setattr(self, attr, val)
        return self

    def validate(self):
        """Check the parameters, raising ValueError on the first bad one."""
        for name in ('width', 'height'):
            val = getattr(self, name)
            if val is None:
                raise ValueError(f"Missing target {name}")
            if (isinstance(val, bool) or not isinstance(val, numbers.Integral)
                    or val <= 0):
                raise ValueError(
                    f"Target {name} must be a positive integer, got {val!r}"
                )
        for name in ('scale_x', 'scale_y'):
            val = getattr(self, name)
            if val is not None and (isinstance(val, bool)
                                    or not isinstance(val, numbers.Real)):
                raise ValueError(f"{name} must be a number, got {val!r}")
        return self

    def effective_scales(self, source_width, source_height):
        """Scale factors (sx, sy) used for a source of the given size."""
        return (float(resolve_scale(self.scale_x, self.width, source_width)),
                float(resolve_scale(self.scale_y, self.height, source_height)))

    def __repr__(self):
        return (f"UpsampleConfig(width={self.width}, height={self.height}, "
                f"scale_x={self.scale_x}, scale_y={self.scale_y})")
