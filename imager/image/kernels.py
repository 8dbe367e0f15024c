"""
Convolution Kernel Library

Factories for common image-processing kernels. Every call returns a fresh
Matrix so callers may mutate the result freely.
"""

from enum import Enum
from typing import List, Tuple

import numpy as np

from ..core.errors import ValidationError, InvalidModeError, coerce_mode
from ..core.matrix import Matrix, is_int


class SobelDirection(Enum):
    """Gradient direction picked up by a Sobel kernel."""
    RIGHT = "right"
    TOP = "top"
    LEFT = "left"
    BOTTOM = "bottom"


class KirschDirection(Enum):
    """Compass direction picked up by a Kirsch kernel."""
    RIGHT = "right"
    TOP_RIGHT = "topRight"
    TOP = "top"
    TOP_LEFT = "topLeft"
    LEFT = "left"
    BOTTOM_LEFT = "bottomLeft"
    BOTTOM = "bottom"
    BOTTOM_RIGHT = "bottomRight"


_EDGE_DETECTION = {
    1: [[1, 0, -1],
        [0, 1, 0],
        [-1, 0, 1]],
    2: [[0, -1, 0],
        [-1, 4, -1],
        [0, -1, 0]],
    3: [[-1, -1, -1],
        [-1, 8, -1],
        [-1, -1, -1]],
}

_SOBEL = {
    SobelDirection.RIGHT: [[-1, 0, 1],
                           [-2, 0, 2],
                           [-1, 0, 1]],
    SobelDirection.TOP: [[1, 2, 1],
                         [0, 0, 0],
                         [-1, -2, -1]],
    SobelDirection.LEFT: [[1, 0, -1],
                          [2, 0, -2],
                          [1, 0, -1]],
    SobelDirection.BOTTOM: [[-1, -2, -1],
                            [0, 0, 0],
                            [1, 2, 1]],
}

_KIRSCH = {
    KirschDirection.RIGHT: [[-3, -3, 5],
                            [-3, 0, 5],
                            [-3, -3, 5]],
    KirschDirection.TOP_RIGHT: [[-3, 5, 5],
                                [-3, 0, 5],
                                [-3, -3, -3]],
    KirschDirection.TOP: [[5, 5, 5],
                          [-3, 0, -3],
                          [-3, -3, -3]],
    KirschDirection.TOP_LEFT: [[5, 5, -3],
                               [5, 0, -3],
                               [-3, -3, -3]],
    KirschDirection.LEFT: [[5, -3, -3],
                           [5, 0, -3],
                           [5, -3, -3]],
    KirschDirection.BOTTOM_LEFT: [[-3, -3, -3],
                                  [5, 0, -3],
                                  [5, 5, -3]],
    KirschDirection.BOTTOM: [[-3, -3, -3],
                             [-3, 0, -3],
                             [5, 5, 5]],
    KirschDirection.BOTTOM_RIGHT: [[-3, -3, -3],
                                   [-3, 0, 5],
                                   [-3, 5, 5]],
}


def pascal_row(n: int) -> List[int]:
    """
    Return the n-th row of Pascal's triangle (1-based).

    >>> pascal_row(5)
    [1, 4, 6, 4, 1]
    """
    if not is_int(n) or n < 1:
        raise ValidationError(f"pascal_row: n must be a positive integer, got {n!r}")
    if n == 1:
        return [1]

    row = [1, 1]
    for _ in range(2, n):
        inner = [row[j] + row[j + 1] for j in range(len(row) - 1)]
        row = [1] + inner + [1]
    return row


def _require_odd_size(size, operation: str) -> None:
    if not is_int(size) or size < 1 or size % 2 == 0:
        raise ValidationError(f"{operation}: size must be a positive odd integer, got {size!r}")


def identity() -> Matrix:
    return Matrix.load([[0, 0, 0],
                        [0, 1, 0],
                        [0, 0, 0]])


def box_blur() -> Matrix:
    return Matrix.ones(3, 3).mul(1 / 9)


def edge_detection(level: int = 1) -> Matrix:
    """Edge detection kernel; level 1 is diagonal, 2 and 3 are Laplacian-like."""
    if not is_int(level) or level not in _EDGE_DETECTION:
        raise InvalidModeError("edge_detection", level, [str(k) for k in _EDGE_DETECTION])
    return Matrix.load(_EDGE_DETECTION[int(level)])


def laplacian() -> Matrix:
    return Matrix.load([[0, 1, 0],
                        [1, -4, 1],
                        [0, 1, 0]])


def emboss() -> Matrix:
    return Matrix.load([[-2, -1, 0],
                        [-1, 1, 1],
                        [0, 1, 2]])


def sobel(direction) -> Matrix:
    direction = coerce_mode(SobelDirection, direction, "sobel")
    return Matrix.load(_SOBEL[direction])


def kirsch(direction) -> Matrix:
    direction = coerce_mode(KirschDirection, direction, "kirsch")
    return Matrix.load(_KIRSCH[direction])


def prewitt() -> Matrix:
    """Product of the row-gradient and column-gradient Prewitt operators."""
    rows = Matrix.load([[1, 1, 1],
                        [0, 0, 0],
                        [-1, -1, -1]])
    cols = Matrix.load([[1, 0, -1],
                        [1, 0, -1],
                        [1, 0, -1]])
    return rows.mat_mul(cols)


def sharpen(amount: float = 1.0) -> Matrix:
    """Sharpen kernel scaled by `amount`."""
    return Matrix.load([[0, -1, 0],
                        [-1, 5, -1],
                        [0, -1, 0]]).mul(amount)


def gaussian_blur(size: int) -> Tuple[Matrix, Matrix]:
    """
    Separable Gaussian approximation built from binomial coefficients.

    Args:
        size: Odd kernel length

    Returns:
        (row_kernel, col_kernel): a 1 x size and a size x 1 kernel, each
        summing to 1. Apply them as two sequential convolutions.
    """
    _require_odd_size(size, "gaussian_blur")
    row = pascal_row(size)
    total = sum(row)
    row_kernel = Matrix.load([row]).div(total)
    col_kernel = Matrix.load([[n] for n in row]).div(total)
    return row_kernel, col_kernel


def unsharp_mask(size: int = 5) -> Matrix:
    """
    Unsharp masking kernel: twice the identity minus a size x size Gaussian.

    For size 5 this is the familiar -1/256 * [[1, 4, 6, 4, 1], ..., -476, ...].
    """
    _require_odd_size(size, "unsharp_mask")
    row = np.array(pascal_row(size), dtype=np.float64)
    gaussian = np.outer(row, row) / row.sum() ** 2
    kernel = -gaussian
    kernel[size // 2, size // 2] += 2.0
    return Matrix.load(kernel)
