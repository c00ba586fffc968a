"""Read and write tagged binary flow files.

A flow file stores a dense motion field as:
    - 4 bytes: format tag, b'PIEH' (u, v) or b'PIEI' (u, v, confidence)
    - 4 bytes: width (int32)
    - 4 bytes: height (int32)
    - width * height * channels * 4 bytes: samples (float32, row-major,
      channels interleaved per cell)

All multi-byte values are little-endian. Files are read and written
byte-for-byte, so a read followed by a write reproduces the input exactly.
"""
import enum
import os

import numpy as np

from flow_upsample.exceptions import (
    FlowIOError, MalformedHeader, UnknownFormat, InvalidDimensions,
    TruncatedData,
)

INT_DTYPE = np.dtype('<i4')
FLOAT_DTYPE = np.dtype('<f4')
TAG_SIZE = 4
READ_CHUNK = 1 << 20


class FlowFormat(enum.Enum):
    """Flow file variants, keyed by their 4-byte tag."""

    BASIC = b'PIEH'
    EXTENDED = b'PIEI'

    @property
    def tag(self):
        return self.value

    @property
    def channels(self):
        """Number of float samples stored per cell."""
        return 3 if self is FlowFormat.EXTENDED else 2

    @classmethod
    def from_tag(cls, tag, path=None):
        """Look up the format for a 4-byte tag.

        Raises:
            UnknownFormat: If the tag is not a known flow tag.
        """
        try:
            return cls(bytes(tag))
        except ValueError:
            raise UnknownFormat(
                f"Invalid file type {bytes(tag)!r} in file '{path}'", path
            ) from None

    @classmethod
    def from_channels(cls, channels):
        for fmt in cls:
            if fmt.channels == channels:
                return fmt
        raise ValueError(f"No flow format stores {channels} channels per cell")


class FlowGrid:
    """A dense flow field with a flat, channel-interleaved sample buffer.

    Attributes:
        width, height: Grid dimensions in cells.
        format: The FlowFormat the grid was read from or will be written as.
        samples: 1D float32 array of width * height * channels values. Cell
            (x, y) starts at offset(x, y).
    """

    def __init__(self, width, height, fmt, samples):
        if not isinstance(fmt, FlowFormat):
            raise TypeError(f"fmt must be a FlowFormat, got {fmt!r}")
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise InvalidDimensions(
                f"Invalid width or height: {width}x{height}"
            )
        samples = np.asarray(samples, dtype=np.float32).ravel()
        expected = width * height * fmt.channels
        if samples.size != expected:
            raise ValueError(
                f"Expected {expected} samples for a {width}x{height} "
                f"{fmt.name} grid, got {samples.size}"
            )
        self.width = width
        self.height = height
        self.format = fmt
        self.samples = samples

    @classmethod
    def zeros(cls, width, height, fmt):
        """Allocate a zero-filled, writable grid."""
        n = int(width) * int(height) * fmt.channels
        return cls(width, height, fmt, np.zeros(max(n, 0), dtype=np.float32))

    @classmethod
    def from_array(cls, flow):
        """Build a grid from an (H, W, 2) or (H, W, 3) array.

        The channel count selects the format: 2 -> BASIC, 3 -> EXTENDED.
        """
        flow = np.asarray(flow, dtype=np.float32)
        if flow.ndim != 3 or flow.shape[2] not in (2, 3):
            raise ValueError(
                f"Flow must be (H, W, 2) or (H, W, 3) array, got shape {flow.shape}"
            )
        h, w, c = flow.shape
        return cls(w, h, FlowFormat.from_channels(c), flow.copy())

    @property
    def channels_per_cell(self):
        return self.format.channels

    @property
    def shape(self):
        return (self.height, self.width, self.channels_per_cell)

    def offset(self, x, y, channel=0):
        """Index into `samples` of `channel` at cell (x, y)."""
        return (y * self.width + x) * self.channels_per_cell + channel

    def cell(self, x, y):
        """Samples of cell (x, y) as a 1D array of length channels_per_cell."""
        start = self.offset(x, y)
        return self.samples[start:start + self.channels_per_cell]

    def as_array(self):
        """(H, W, C) view of the sample buffer."""
        return self.samples.reshape(self.shape)

    @property
    def u(self):
        return self.as_array()[:, :, 0]

    @property
    def v(self):
        return self.as_array()[:, :, 1]

    @property
    def confidence(self):
        """Confidence channel (H, W), or None for BASIC grids."""
        if self.format is not FlowFormat.EXTENDED:
            return None
        return self.as_array()[:, :, 2]

    def freeze(self):
        """Mark the sample buffer read-only and return the grid."""
        self.samples.flags.writeable = False
        return self

    def __eq__(self, other):
        if not isinstance(other, FlowGrid):
            return NotImplemented
        return (self.width == other.width and self.height == other.height
                and self.format is other.format
                and np.array_equal(self.samples, other.samples))

    __hash__ = None

    def __repr__(self):
        return (f"FlowGrid(width={self.width}, height={self.height}, "
                f"format={self.format.name})")


def _read_int(f, path, what):
    buf = f.read(INT_DTYPE.itemsize)
    if len(buf) < INT_DTYPE.itemsize:
        raise MalformedHeader(f"Could not read {what} from file '{path}'", path)
    return int(np.frombuffer(buf, dtype=INT_DTYPE)[0])


def _read_upto(f, nbytes):
    """Read up to nbytes, stopping early at end of file.

    Reads in bounded chunks so a header that declares more data than the
    file holds does not allocate the declared size. Works on pipes.
    """
    chunks = []
    remaining = nbytes
    while remaining > 0:
        chunk = f.read(min(remaining, READ_CHUNK))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b''.join(chunks)


def read_flow(filename):
    """Read a tagged flow file.

    Args:
        filename: Path to the flow file.

    Returns:
        grid: FlowGrid with the file's format, dimensions and samples. The
            sample buffer is read-only.

    Raises:
        FlowIOError: If the file cannot be opened.
        MalformedHeader: If the tag, width or height is cut short.
        UnknownFormat: If the tag is neither PIEH nor PIEI.
        InvalidDimensions: If width or height is not positive.
        TruncatedData: If fewer samples are present than the header declares.
    """
    path = os.fspath(filename)
    try:
        f = open(path, 'rb')
    except OSError as e:
        raise FlowIOError(
            f"Could not open file '{path}': {e.strerror or e}", path
        ) from e

    with f:
        tag = f.read(TAG_SIZE)
        if len(tag) < TAG_SIZE:
            raise MalformedHeader(
                f"Could not read file header of '{path}'", path
            )
        fmt = FlowFormat.from_tag(tag, path)

        w = _read_int(f, path, 'width')
        h = _read_int(f, path, 'height')
        if w <= 0 or h <= 0:
            raise InvalidDimensions(
                f"Invalid width or height ({w}x{h}) in file '{path}'", path
            )

        nbytes = w * h * fmt.channels * FLOAT_DTYPE.itemsize
        payload = _read_upto(f, nbytes)
        if len(payload) < nbytes:
            raise TruncatedData(
                f"Incomplete data in file '{path}': expected {nbytes} bytes, "
                f"got {len(payload)}", path
            )

    samples = np.frombuffer(payload, dtype=FLOAT_DTYPE).astype(np.float32)
    return FlowGrid(w, h, fmt, samples).freeze()


def write_flow(grid, filename):
    """Write a FlowGrid as a tagged flow file.

    The tag is taken from grid.format, so the output always has the same
    variant as the grid. A failure while writing leaves a partial file.

    Args:
        grid: FlowGrid to write.
        filename: Output path.

    Raises:
        FlowIOError: If the file cannot be created or written.
    """
    if not isinstance(grid, FlowGrid):
        raise TypeError(f"Expected a FlowGrid, got {type(grid).__name__}")

    path = os.fspath(filename)
    try:
        with open(path, 'wb') as f:
            f.write(grid.format.tag)
            f.write(np.array([grid.width, grid.height], dtype=INT_DTYPE).tobytes())
            f.write(grid.samples.astype(FLOAT_DTYPE, copy=False).tobytes())
    except OSError as e:
        raise FlowIOError(
            f"Could not open '{path}' for writing: {e.strerror or e}", path
        ) from e
