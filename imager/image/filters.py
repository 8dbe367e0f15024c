"""
Image Filters

Colour adjustments, crop and the named convolution filters built on the
kernel library and the convolution engine. All filters except crop()
modify the image in place and return it.
"""

import logging
from enum import Enum

import numpy as np

from ..core.errors import ValidationError, DimensionError, coerce_mode
from ..core.matrix import Matrix, ALPHA_CHANNEL, is_int
from . import kernels
from .convolution import convolve, convolve_all

logger = logging.getLogger(__name__)

# ITU-R BT.601 luma weights
ITU_R_WEIGHTS = np.array([0.299, 0.587, 0.114])


class GrayMode(Enum):
    NORMAL = "normal"
    ITU_R = "ITU-R"


class BlurMode(Enum):
    GAUSSIAN = "gaussian"
    BOX = "box"


def _require_positive_int(value, name: str, operation: str) -> None:
    if not is_int(value) or value < 1:
        raise ValidationError(f"{operation}: {name} must be a positive integer, got {value!r}")


# ----------------------------------------------------------------------
# Colour adjustments
# ----------------------------------------------------------------------

def gray(image: Matrix, mode=GrayMode.NORMAL) -> Matrix:
    """
    Grayscale the colour channels.

    Args:
        image: RGB or RGBA matrix
        mode: 'normal' for the plain mean of R, G and B; 'ITU-R' for luma

    The computed value is written into R, G and B; alpha is left alone.
    """
    mode = coerce_mode(GrayMode, mode, "gray")
    colors = image.color_view()
    if mode is GrayMode.ITU_R:
        value = colors @ ITU_R_WEIGHTS
    else:
        value = colors.sum(axis=2) / 3
    colors[...] = value[:, :, np.newaxis]
    return image


def invert(image: Matrix) -> Matrix:
    """Invert the colour channels (1 - value)."""
    colors = image.color_view()
    colors[...] = 1 - colors
    return image


def pixelize(image: Matrix, size: int) -> Matrix:
    """
    Replace each size x size block with its average colour.

    Blocks along the right and bottom edges are truncated to the image and
    averaged over the pixels they actually cover. Alpha is set to 1.
    """
    _require_positive_int(size, "size", "pixelize")
    colors = image.color_view()
    for top in range(0, image.rows, size):
        for left in range(0, image.cols, size):
            block = colors[top:top + size, left:left + size]
            block[...] = block.mean(axis=(0, 1))

    if image.channels > ALPHA_CHANNEL:
        image.fill_alpha(1.0)
    return image


def crop(image: Matrix, x1: int, y1: int, x2: int, y2: int) -> Matrix:
    """
    Copy the rectangle between two corners into a new matrix.

    x runs along rows and y along columns. The result has |x2 - x1| rows
    and |y2 - y1| columns, starting at the min corner.

    Raises:
        ValidationError: If the rectangle is empty
        DimensionError: If the rectangle reaches outside the image
    """
    for name, value in (("x1", x1), ("y1", y1), ("x2", x2), ("y2", y2)):
        if not is_int(value):
            raise ValidationError(f"crop: {name} must be an integer, got {value!r}")

    top, bottom = min(x1, x2), max(x1, x2)
    left, right = min(y1, y2), max(y1, y2)
    if top == bottom or left == right:
        raise ValidationError(f"crop: corners ({x1}, {y1}) and ({x2}, {y2}) enclose no pixels")
    if top < 0 or left < 0 or bottom > image.rows or right > image.cols:
        raise DimensionError(
            f"crop: rectangle ({top}, {left})-({bottom}, {right}) exceeds "
            f"image [{image.size_label}]"
        )

    logger.debug(f"Cropping [{image.size_label}] to rows {top}:{bottom}, cols {left}:{right}")
    return Matrix.load(image.array[top:bottom, left:right])


# ----------------------------------------------------------------------
# Convolution filters
# ----------------------------------------------------------------------

def edge_detect(image: Matrix, level: int = 1) -> Matrix:
    return convolve(image, kernels.edge_detection(level))


def emboss(image: Matrix) -> Matrix:
    """Emboss, then grayscale with ITU-R luma."""
    convolve(image, kernels.emboss())
    return gray(image, GrayMode.ITU_R)


def kirsch(image: Matrix, direction) -> Matrix:
    return convolve(image, kernels.kirsch(direction))


def sobel(image: Matrix, direction) -> Matrix:
    return convolve(image, kernels.sobel(direction))


def prewitt(image: Matrix) -> Matrix:
    return convolve(image, kernels.prewitt())


def laplace(image: Matrix) -> Matrix:
    return convolve(image, kernels.laplacian())


def sharp(image: Matrix, amount: float = 1.0) -> Matrix:
    return convolve(image, kernels.sharpen(amount))


def unsharp(image: Matrix, size: int = 5) -> Matrix:
    return convolve(image, kernels.unsharp_mask(size))


def blur(image: Matrix, mode=BlurMode.GAUSSIAN, size: int = 3) -> Matrix:
    """
    Blur the image.

    Args:
        mode: 'gaussian' (separable, two passes) or 'box' (3x3)
        size: Gaussian kernel size, odd; ignored for box blur
    """
    mode = coerce_mode(BlurMode, mode, "blur")
    if mode is BlurMode.BOX:
        return convolve(image, kernels.box_blur())
    return convolve_all(image, kernels.gaussian_blur(size))
