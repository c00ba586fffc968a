"""
Flow Upsampling Package

Bilinear upsampling of dense optical flow fields stored in the tagged
PIEH (u, v) and PIEI (u, v, confidence) binary formats.
"""

from flow_upsample.exceptions import (
    FlowError,
    FlowIOError,
    MalformedHeader,
    UnknownFormat,
    InvalidDimensions,
    TruncatedData,
)
from flow_upsample.io.flow_io import FlowFormat, FlowGrid, read_flow, write_flow
from flow_upsample.utils.warping import bilinear_weights, upsample_flow
from flow_upsample.config import UpsampleConfig
from flow_upsample.interface import upsample_flow_file
from flow_upsample.viz.flow_color import flow_to_color

__all__ = [
    'FlowError',
    'FlowIOError',
    'MalformedHeader',
    'UnknownFormat',
    'InvalidDimensions',
    'TruncatedData',
    'FlowFormat',
    'FlowGrid',
    'read_flow',
    'write_flow',
    'bilinear_weights',
    'upsample_flow',
    'UpsampleConfig',
    'upsample_flow_file',
    'flow_to_color',
]
