"""
Image format conversion utilities.

Adapters between image files / NumPy arrays (OpenCV layout) and
:class:`~pixelblob.core.buffer.PixelBuffer`:
- Decoding and encoding image files and in-memory image bytes
- NumPy array <-> PixelBuffer (always BGRA in the buffer)
- Resizing and rotation helpers used by the auxiliary blob pipeline

The pixel algorithms never call into this module; it is the boundary where
OpenCV is used.
"""

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from pixelblob.common.constants import BlobDetectionConstants, BufferConstants
from pixelblob.core.buffer import PixelBuffer
from pixelblob.exceptions import ProcessingError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def from_ndarray(image: np.ndarray) -> PixelBuffer:
    """
    Convert an OpenCV image to a packed BGRA buffer.

    Args:
        image: Grayscale (H, W), BGR (H, W, 3) or BGRA (H, W, 4) uint8 array

    Returns:
        New PixelBuffer with ``stride == width * 4`` and opaque alpha unless
        the input carried its own alpha channel
    """
    if image.ndim == 2:
        bgra = cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    elif image.ndim == 3 and image.shape[2] == 3:
        bgra = cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
    elif image.ndim == 3 and image.shape[2] == 4:
        bgra = image.copy()
    else:
        raise ProcessingError("from_ndarray", f"unsupported image shape {image.shape}")

    height, width = bgra.shape[:2]
    data = np.ascontiguousarray(bgra, dtype=np.uint8).reshape(-1)
    return PixelBuffer(width, height, width * BufferConstants.BYTES_PER_PIXEL, data)


def to_ndarray(buffer: PixelBuffer, with_alpha: bool = True) -> np.ndarray:
    """
    Copy the pixel area of a buffer into an OpenCV array.

    Args:
        buffer: Source buffer (row padding is dropped)
        with_alpha: Return BGRA when True, BGR otherwise

    Returns:
        (H, W, 4) or (H, W, 3) uint8 array
    """
    pixels = buffer.pixels
    if not with_alpha:
        pixels = pixels[:, :, : BufferConstants.ALPHA_OFFSET]
    return np.ascontiguousarray(pixels)


def to_grayscale_ndarray(buffer: PixelBuffer) -> np.ndarray:
    """Single-channel OpenCV grayscale image of the buffer."""
    return cv2.cvtColor(to_ndarray(buffer, with_alpha=True), cv2.COLOR_BGRA2GRAY)


def decode_image_bytes(data: bytes) -> PixelBuffer:
    """
    Decode encoded image bytes (PNG, JPEG, BMP, ...) into a buffer.

    Raises:
        ProcessingError: If OpenCV cannot decode the data
    """
    array = np.frombuffer(data, np.uint8)
    image = cv2.imdecode(array, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ProcessingError("decode_image_bytes", "data is not a decodable image")
    if image.dtype != np.uint8:
        image = cv2.convertScaleAbs(image, alpha=255.0 / np.iinfo(image.dtype).max)
    return from_ndarray(image)


def decode_image_file(path: PathLike) -> PixelBuffer:
    """
    Load an image file into a BGRA buffer.

    Raises:
        ProcessingError: If the file cannot be read or decoded
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        logger.error(f"Failed to read image file {path}: {e}")
        raise ProcessingError("decode_image_file", str(e))

    buffer = decode_image_bytes(data)
    logger.debug(f"Decoded {path}: {buffer.width}x{buffer.height}")
    return buffer


def encode_image_bytes(buffer: PixelBuffer, format: str = ".png") -> bytes:
    """
    Encode a buffer to image bytes.

    Args:
        buffer: Source buffer
        format: File extension selecting the codec ('.png', '.jpg', ...)

    Raises:
        ProcessingError: If encoding fails
    """
    ext = format.lower() if format.startswith(".") else f".{format.lower()}"
    image = to_ndarray(buffer, with_alpha=ext == ".png")
    success, encoded = cv2.imencode(ext, image)
    if not success:
        raise ProcessingError("encode_image_bytes", f"failed to encode image as {ext}")
    return encoded.tobytes()


def encode_image_file(buffer: PixelBuffer, path: PathLike) -> None:
    """
    Save a buffer to an image file; the codec follows the file extension.

    Raises:
        ProcessingError: If encoding or writing fails
    """
    path = Path(path)
    data = encode_image_bytes(buffer, path.suffix or ".png")
    try:
        path.write_bytes(data)
    except OSError as e:
        logger.error(f"Failed to write image file {path}: {e}")
        raise ProcessingError("encode_image_file", str(e))
    logger.debug(f"Saved {buffer.width}x{buffer.height} image to {path}")


def resize_to_fit(buffer: PixelBuffer, box: int = BlobDetectionConstants.RESIZE_BOX) -> PixelBuffer:
    """
    Scale a buffer so both sides fit in a ``box`` x ``box`` square.

    The scale factor is ``min(box / width, box / height)`` and the new sides
    are truncated, so images smaller than the box are enlarged.
    """
    scale = min(box / buffer.width, box / buffer.height)
    width = max(1, int(scale * buffer.width))
    height = max(1, int(scale * buffer.height))
    resized = cv2.resize(to_ndarray(buffer), (width, height), interpolation=cv2.INTER_AREA)
    return from_ndarray(resized)


def rotate(buffer: PixelBuffer, degrees: float, fill: int = 0) -> PixelBuffer:
    """
    Rotate a buffer about its center without changing its size.

    Args:
        buffer: Source buffer
        degrees: Counter-clockwise angle in degrees
        fill: Gray value for the uncovered corners

    Returns:
        New rotated buffer
    """
    center = (buffer.width / 2.0, buffer.height / 2.0)
    matrix = cv2.getRotationMatrix2D(center, degrees, 1.0)
    rotated = cv2.warpAffine(
        to_ndarray(buffer),
        matrix,
        (buffer.width, buffer.height),
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=(fill, fill, fill, BufferConstants.OPAQUE_ALPHA),
    )
    return from_ndarray(rotated)
