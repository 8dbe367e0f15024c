"""
Convolution Engine

True 2D convolution (kernel rotated 180 degrees) of an image Matrix with a
kernel Matrix, zero-padded at the borders.

Only the colour channels are accumulated. When the image carries an alpha
channel it is set to fully opaque in the result, regardless of its input.
"""

import logging

from ..core.errors import ValidationError, ChannelMismatchError
from ..core.matrix import Matrix, COLOR_CHANNELS, ALPHA_CHANNEL

logger = logging.getLogger(__name__)


def reconcile_channels(image: Matrix, kernel: Matrix) -> Matrix:
    """
    Return a copy of `kernel` whose channels line up with `image`.

    A single-channel kernel is broadcast to every image channel. A
    3-channel kernel is accepted for a 4-channel (RGBA) image, since alpha
    is never accumulated.

    Raises:
        ChannelMismatchError: For any other channel mismatch
    """
    reconciled = kernel.copy()
    if reconciled.channels == 1 and image.channels > 1:
        reconciled.extrude_channels(image.channels)

    if reconciled.channels == image.channels:
        return reconciled
    if image.channels == 4 and reconciled.channels == 3:
        return reconciled

    raise ChannelMismatchError(
        f"convolve: kernel channels ({kernel.channels}) must match "
        f"image channels ({image.channels})"
    )


def normalize(matrix: Matrix) -> Matrix:
    """Clamp every value of `matrix` into [0, 1] in place."""
    return matrix.clamp(0.0, 1.0)


def convolve(image: Matrix, kernel: Matrix) -> Matrix:
    """
    Convolve `image` with `kernel` in place.

    Args:
        image: Image matrix, replaced by the convolved result
        kernel: Kernel with an odd number of rows and columns; left untouched

    Returns:
        The same image object, holding the result clamped to [0, 1]

    Raises:
        ValidationError: If the kernel has an even row or column count
        ChannelMismatchError: If the channels cannot be reconciled
    """
    if kernel.rows % 2 == 0 or kernel.cols % 2 == 0:
        raise ValidationError(
            f"convolve: kernel must have an odd number of rows and cols, got {kernel.size_label}"
        )

    weights = reconcile_channels(image, kernel).flip_both()

    pad_rows = kernel.rows // 2
    pad_cols = kernel.cols // 2
    padded = Matrix.zeros(image.rows + 2 * pad_rows,
                          image.cols + 2 * pad_cols,
                          image.channels)
    image.copy_into(padded, pad_rows, pad_cols)

    logger.debug(
        f"Convolving {image.size_label} image with {kernel.size_label} kernel "
        f"(padding {pad_rows}x{pad_cols})"
    )

    accum = Matrix.zeros(image.rows, image.cols, image.channels)
    color = min(image.channels, COLOR_CHANNELS)
    source = padded.array
    target = accum.array[:, :, :color]
    for ki in range(weights.rows):
        for kj in range(weights.cols):
            window = source[ki:ki + image.rows, kj:kj + image.cols, :color]
            target += window * weights.array[ki, kj, :color]

    if image.channels > ALPHA_CHANNEL:
        accum.fill_alpha(1.0)

    normalize(accum)
    return accum.copy_into(image)


def convolve_all(image: Matrix, kernels) -> Matrix:
    """Apply several kernels one after another (e.g. a separable blur pair)."""
    for kernel in kernels:
        convolve(image, kernel)
    return image

