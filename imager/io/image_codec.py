"""
Image Codec Boundary

Moves pixels between image files and normalised matrices. Decoding and
encoding are delegated to Pillow; this module converts between 8-bit
sample buffers (numpy uint8 arrays of shape rows x cols x channels) and
Matrix values in [0, 1].
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image

from ..core.errors import ValidationError
from ..core.matrix import Matrix

logger = logging.getLogger(__name__)

# Modes Pillow can hand over without conversion
_NATIVE_MODES = ('L', 'LA', 'RGB', 'RGBA')

# L, LA, RGB, RGBA
_ENCODABLE_CHANNELS = (1, 2, 3, 4)


def buffer_to_matrix(buffer: np.ndarray) -> Matrix:
    """
    Normalise an 8-bit sample buffer into a Matrix.

    Args:
        buffer: uint8 array of shape (rows, cols) or (rows, cols, channels);
            any strides or offset (e.g. a slice of a larger array) are fine

    Returns:
        Matrix with every sample divided by 255
    """
    if not isinstance(buffer, np.ndarray) or buffer.dtype != np.uint8:
        raise ValidationError(
            f"buffer_to_matrix: expected a uint8 ndarray, got "
            f"{getattr(buffer, 'dtype', type(buffer).__name__)}"
        )
    if buffer.ndim not in (2, 3):
        raise ValidationError(f"buffer_to_matrix: expected 2D or 3D samples, got {buffer.ndim}D")

    return Matrix.load(buffer).div(255)


def matrix_to_buffer(matrix: Matrix) -> np.ndarray:
    """
    Denormalise a Matrix into a contiguous uint8 buffer.

    Values are multiplied by 255 and truncated toward zero (not rounded);
    anything outside 0..255 afterwards is clipped. The matrix is not modified.
    """
    samples = np.trunc(matrix.array * 255)
    return np.ascontiguousarray(np.clip(samples, 0, 255).astype(np.uint8))


def read_image(filepath: Union[str, Path]) -> np.ndarray:
    """
    Decode an image file into a uint8 sample buffer.

    Palette and other exotic modes are converted to RGB, or RGBA when the
    source carries transparency.
    """
    with Image.open(filepath) as img:
        if img.mode not in _NATIVE_MODES:
            has_alpha = 'transparency' in img.info or img.mode.endswith('A')
            img = img.convert('RGBA' if has_alpha else 'RGB')
        buffer = np.array(img, dtype=np.uint8)

    if buffer.ndim == 2:
        buffer = buffer[:, :, np.newaxis]

    logger.debug(f"Read {filepath}: {buffer.shape[0]}x{buffer.shape[1]}x{buffer.shape[2]}")
    return buffer


def write_image(buffer: np.ndarray, filepath: Union[str, Path],
                quality: Optional[int] = None) -> None:
    """
    Encode a uint8 sample buffer; the file extension selects the format.

    Raises:
        ValidationError: If the path has no extension or the channel count
            has no Pillow mode
    """
    filepath = Path(filepath)
    if not filepath.suffix:
        raise ValidationError(f"write_image: {filepath} has no extension to select an encoding")

    channels = buffer.shape[2] if buffer.ndim == 3 else 1
    if channels not in _ENCODABLE_CHANNELS:
        raise ValidationError(f"write_image: cannot encode {channels} channels")

    pixels = buffer.reshape(buffer.shape[0], buffer.shape[1]) if channels == 1 else buffer
    img = Image.fromarray(pixels)

    options = {}
    if quality is not None:
        options['quality'] = quality
    img.save(filepath, **options)

    logger.debug(f"Wrote {filepath} ({img.mode} {img.width}x{img.height})")


async def load_image(filepath: Union[str, Path]) -> Matrix:
    """Decode a file off the event loop and normalise it into a Matrix."""
    buffer = await asyncio.to_thread(read_image, filepath)
    return buffer_to_matrix(buffer)


async def save_image(matrix: Matrix, filepath: Union[str, Path],
                     quality: Optional[int] = None) -> None:
    """Denormalise a Matrix and encode it off the event loop."""
    buffer = matrix_to_buffer(matrix)
    await asyncio.to_thread(write_image, buffer, filepath, quality)
