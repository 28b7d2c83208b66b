"""
Packed pixel buffer.

A PixelBuffer owns a flat byte array of ``height * stride`` bytes holding
32-bit pixels in (B, G, R, A) byte order. The pixel at (row, column) starts at
byte address ``row * stride + 4 * column``. Every algorithm treats ``stride``,
not ``width * 4``, as the row pitch.

Address-based lookups are soft: an address outside the array or not aligned to
a pixel boundary yields ``None`` ("no pixel") instead of raising, which is what
the neighbor scans at image edges rely on. Note that this is pure address
arithmetic: the left neighbor of column 0 is the last slot of the previous row.
"""

import logging
from typing import Optional, Set, Tuple, Union

import numpy as np

from pixelblob.common.constants import BufferConstants
from pixelblob.exceptions import InvalidGeometryError

from .color import WHITE, Color

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview, np.ndarray]

_BPP = BufferConstants.BYTES_PER_PIXEL


def shift_flat(values: np.ndarray, offset: int, fill=0) -> np.ndarray:
    """
    Look up ``values[p + offset]`` for every position ``p`` along the first axis.

    Positions whose source falls outside the array receive ``fill``. This is
    the vectorized form of a soft-fail address lookup.

    Args:
        values: Array indexed by pixel slot along its first axis
        offset: Slot offset to read from
        fill: Value for positions without a source slot

    Returns:
        New array with the same shape and dtype as ``values``
    """
    result = np.full_like(values, fill)
    n = values.shape[0]
    if offset >= 0:
        if offset < n:
            result[: n - offset] = values[offset:]
    elif -offset < n:
        result[-offset:] = values[: n + offset]
    return result


class PixelBuffer:
    """Packed 32-bit BGRA pixel buffer with explicit stride."""

    def __init__(
        self,
        width: int,
        height: int,
        stride: Optional[int] = None,
        data: Optional[BytesLike] = None,
    ):
        """
        Initialize buffer.

        Args:
            width: Width in pixels
            height: Height in pixels
            stride: Bytes per row; defaults to ``ceil(width * 32 / 8)``
            data: Existing pixel bytes of length ``height * stride``. Bytes-like
                input is copied; a uint8 ndarray is adopted as-is.

        Raises:
            InvalidGeometryError: If the dimensions, stride and data disagree
        """
        if stride is None:
            stride = self.min_stride(width)

        if width <= 0 or height <= 0:
            raise InvalidGeometryError(
                "width and height must be positive", width=width, height=height
            )
        if stride < width * _BPP:
            raise InvalidGeometryError(
                f"stride {stride} is smaller than width * {_BPP}", width=width, stride=stride
            )
        if stride % _BPP != 0:
            raise InvalidGeometryError(
                f"stride {stride} is not a multiple of {_BPP}", stride=stride
            )

        if data is None:
            array = np.zeros(height * stride, dtype=np.uint8)
        elif isinstance(data, np.ndarray):
            array = data.astype(np.uint8, copy=False).reshape(-1)
        else:
            array = np.frombuffer(bytes(data), dtype=np.uint8).copy()

        if array.size != height * stride:
            raise InvalidGeometryError(
                f"data length {array.size} does not equal height * stride ({height * stride})",
                height=height,
                stride=stride,
            )

        self.width = width
        self.height = height
        self.stride = stride
        self.data = array

    @staticmethod
    def min_stride(width: int, bits_per_pixel: int = BufferConstants.BITS_PER_PIXEL) -> int:
        """Smallest row pitch for ``width`` pixels: ``ceil(width * bpp / 8)``."""
        return (width * bits_per_pixel + 7) // 8

    @classmethod
    def filled(
        cls,
        width: int,
        height: int,
        color: Color = WHITE,
        stride: Optional[int] = None,
    ) -> "PixelBuffer":
        """
        Create a buffer with every pixel set to ``color`` and opaque alpha.

        Padding bytes beyond ``width * 4`` stay zero.
        """
        buffer = cls(width, height, stride)
        pixels = buffer.pixels
        pixels[:, :, : BufferConstants.ALPHA_OFFSET] = color.to_bgr()
        pixels[:, :, BufferConstants.ALPHA_OFFSET] = BufferConstants.OPAQUE_ALPHA
        return buffer

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        """Total byte length."""
        return self.data.size

    @property
    def slots_per_row(self) -> int:
        """Number of 4-byte slots per row, including padding slots."""
        return self.stride // _BPP

    @property
    def pixels(self) -> np.ndarray:
        """Writable (height, width, 4) view of the pixel area, skipping padding."""
        rows = self.data.reshape(self.height, self.stride)
        return rows[:, : self.width * _BPP].reshape(self.height, self.width, _BPP)

    @property
    def slots(self) -> np.ndarray:
        """Writable (height * slots_per_row, 4) view over every 4-byte slot."""
        return self.data.reshape(-1, _BPP)

    def channel(self, offset: int) -> np.ndarray:
        """Writable (height, width) view of one channel (0=B, 1=G, 2=R, 3=A)."""
        return self.pixels[:, :, offset]

    def foreground_mask(self) -> np.ndarray:
        """Boolean (height, width) mask of non-white pixels."""
        bgr = self.pixels[:, :, : BufferConstants.ALPHA_OFFSET]
        return np.any(bgr != 255, axis=2)

    def color_mask(self, color: Color) -> np.ndarray:
        """Boolean (height, width) mask of pixels exactly equal to ``color``."""
        bgr = self.pixels[:, :, : BufferConstants.ALPHA_OFFSET]
        return np.all(bgr == np.array(color.to_bgr(), dtype=np.uint8), axis=2)

    def distinct_colors(self) -> Set[Color]:
        """Set of distinct colors present in the pixel area."""
        bgr = self.pixels[:, :, : BufferConstants.ALPHA_OFFSET].reshape(-1, 3)
        unique = np.unique(bgr, axis=0)
        return {Color.from_bgr(b, g, r) for b, g, r in unique}

    def write_bgr(self, blue: np.ndarray, green: np.ndarray, red: np.ndarray) -> None:
        """Overwrite the B, G and R channels of the pixel area, leaving alpha untouched."""
        pixels = self.pixels
        pixels[:, :, BufferConstants.BLUE_OFFSET] = blue
        pixels[:, :, BufferConstants.GREEN_OFFSET] = green
        pixels[:, :, BufferConstants.RED_OFFSET] = red

    # ------------------------------------------------------------------
    # Address arithmetic
    # ------------------------------------------------------------------

    def address(self, row: int, column: int) -> int:
        """Byte address of the pixel at (row, column)."""
        return row * self.stride + _BPP * column

    def row_column(self, address: int) -> Tuple[int, int]:
        """Inverse of :meth:`address` for an aligned address."""
        return address // self.stride, (address % self.stride) // _BPP

    def is_valid_address(self, address: int) -> bool:
        """True if ``address`` is in range and aligned to a pixel boundary."""
        return 0 <= address < self.data.size and address % _BPP == 0

    def pixel_at(self, address: int) -> Optional[Color]:
        """
        Read the color at a byte address.

        Returns:
            The color, or None when the address is out of range or misaligned
        """
        if not self.is_valid_address(address):
            return None
        data = self.data
        return Color(int(data[address + 2]), int(data[address + 1]), int(data[address]))

    def set_pixel(self, address: int, color: Color) -> bool:
        """
        Write a color at a byte address.

        Returns:
            False (and writes nothing) when the address is out of range or misaligned
        """
        if not self.is_valid_address(address):
            return False
        self.data[address : address + 3] = color.to_bgr()
        return True

    def get_color(self, row: int, column: int) -> Color:
        """Read the color at (row, column), raising outside the image."""
        self._check_inside(row, column)
        return self.pixel_at(self.address(row, column))

    def set_color(self, row: int, column: int, color: Color) -> None:
        """Write the color at (row, column), raising outside the image."""
        self._check_inside(row, column)
        self.set_pixel(self.address(row, column), color)

    def _check_inside(self, row: int, column: int) -> None:
        if not (0 <= row < self.height and 0 <= column < self.width):
            raise InvalidGeometryError(
                f"pixel ({row}, {column}) is outside {self.width}x{self.height}",
                row=row,
                column=column,
            )

    # ------------------------------------------------------------------
    # Whole-buffer operations
    # ------------------------------------------------------------------

    def clone(self) -> "PixelBuffer":
        """Deep copy with identical geometry."""
        return PixelBuffer(self.width, self.height, self.stride, self.data.copy())

    def same_geometry(self, other: "PixelBuffer") -> bool:
        return (
            self.width == other.width
            and self.height == other.height
            and self.stride == other.stride
        )

    def _check_rect(self, x: int, y: int, width: int, height: int) -> None:
        if (
            x < 0
            or y < 0
            or width <= 0
            or height <= 0
            or x + width > self.width
            or y + height > self.height
        ):
            raise InvalidGeometryError(
                f"rectangle ({x}, {y}, {width}, {height}) exceeds {self.width}x{self.height}",
                x=x,
                y=y,
                width=width,
                height=height,
            )

    def crop(self, x: int, y: int, width: int, height: int) -> "PixelBuffer":
        """
        Copy a rectangular sub-image into a new, contiguously packed buffer.

        Source rows are read at ``stride`` offsets; the result has
        ``stride = width * 4``.

        Raises:
            InvalidGeometryError: If the rectangle exceeds the source bounds
        """
        self._check_rect(x, y, width, height)
        rows = self.data.reshape(self.height, self.stride)
        cropped = rows[y : y + height, x * _BPP : (x + width) * _BPP].copy().reshape(-1)
        return PixelBuffer(width, height, width * _BPP, cropped)

    def blank_region(self, x: int, y: int, width: int, height: int) -> None:
        """
        Zero every byte of a rectangular region in place.

        Raises:
            InvalidGeometryError: If the rectangle exceeds the buffer bounds
        """
        self._check_rect(x, y, width, height)
        rows = self.data.reshape(self.height, self.stride)
        rows[y : y + height, x * _BPP : (x + width) * _BPP] = 0

    def to_bytes(self) -> bytes:
        return self.data.tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.same_geometry(other) and np.array_equal(self.data, other.data)

    __hash__ = None

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height}, stride={self.stride})"
