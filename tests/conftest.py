"""Shared fixtures for flow upsampling tests."""
import numpy as np
import pytest

from flow_upsample.io.flow_io import FlowFormat, FlowGrid


def write_raw_flow(path, tag, width, height, samples):
    """Write a flow file byte by byte, bypassing write_flow."""
    with open(path, 'wb') as f:
        f.write(tag)
        f.write(np.array([width, height], dtype='<i4').tobytes())
        f.write(np.asarray(samples, dtype='<f4').tobytes())
    return str(path)


@pytest.fixture
def corner_grid():
    """2x2 BASIC grid with values (1,1), (2,2), (3,3), (4,4) in row-major order."""
    samples = np.array([1, 1, 2, 2, 3, 3, 4, 4], dtype=np.float32)
    return FlowGrid(2, 2, FlowFormat.BASIC, samples)


@pytest.fixture
def random_basic():
    """Random 7x5 BASIC grid."""
    rng = np.random.default_rng(0)
    return FlowGrid.from_array(rng.standard_normal((5, 7, 2)).astype(np.float32))


@pytest.fixture
def random_extended():
    """Random 6x4 EXTENDED grid with confidence in [0, 1]."""
    rng = np.random.default_rng(1)
    flow = rng.standard_normal((4, 6, 3)).astype(np.float32)
    flow[:, :, 2] = rng.random((4, 6))
    return FlowGrid.from_array(flow)


@pytest.fixture
def basic_file(tmp_path, random_basic):
    """Path of a BASIC flow file holding random_basic."""
    return write_raw_flow(tmp_path / 'basic.flow', b'PIEH', random_basic.width,
                          random_basic.height, random_basic.samples)


@pytest.fixture
def extended_file(tmp_path, random_extended):
    """Path of an EXTENDED flow file holding random_extended."""
    return write_raw_flow(tmp_path / 'extended.flow', b'PIEI',
                          random_extended.width, random_extended.height,
                          random_extended.samples)


@pytest.fixture
def write_raw():
    """The write_raw_flow helper, for tests that need hand-made files."""
    return write_raw_flow
