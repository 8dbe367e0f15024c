"""
Image Processor

One object exposing loading, saving, convolution, filters and blends,
with defaults taken from an ImagerConfig.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..core.config import ImagerConfig
from ..core.matrix import Matrix
from ..io.image_codec import load_image, save_image
from . import blending, filters
from .convolution import convolve, normalize

logger = logging.getLogger(__name__)


class ImageProcessor:
    """
    Process images held as normalised matrices.

    Example:
        >>> processor = ImageProcessor()
        >>> image = await processor.load("photo.png")
        >>> processor.blur(image, "gaussian")
        >>> await processor.save(image, "photo_blurred.png")
    """

    def __init__(self, config: Optional[ImagerConfig] = None):
        self.config = config or ImagerConfig()
        is_valid, error = self.config.validate()
        if not is_valid:
            raise ValueError(f"Invalid config: {error}")

    # ------------------------------------------------------------------
    # Codec boundary
    # ------------------------------------------------------------------

    async def load(self, filepath: Union[str, Path]) -> Matrix:
        image = await load_image(filepath)
        logger.info(f"Loaded {filepath} as {image.size_label}")
        return image

    async def save(self, image: Matrix, filepath: Union[str, Path]) -> None:
        await save_image(image, filepath, quality=self.config.save_quality)
        logger.info(f"Saved {image.size_label} image to {filepath}")

    # ------------------------------------------------------------------
    # Engines
    # ------------------------------------------------------------------

    def convolution(self, image: Matrix, kernel: Matrix) -> Matrix:
        return convolve(image, kernel)

    def normalize(self, image: Matrix) -> Matrix:
        return normalize(image)

    # ------------------------------------------------------------------
    # Self-transformations
    # ------------------------------------------------------------------

    def crop(self, image: Matrix, x1: int, y1: int, x2: int, y2: int) -> Matrix:
        return filters.crop(image, x1, y1, x2, y2)

    def gray(self, image: Matrix, mode=filters.GrayMode.NORMAL) -> Matrix:
        return filters.gray(image, mode)

    def invert(self, image: Matrix) -> Matrix:
        return filters.invert(image)

    def pixelize(self, image: Matrix, size: Optional[int] = None) -> Matrix:
        return filters.pixelize(image, self.config.pixel_size if size is None else size)

    # ------------------------------------------------------------------
    # Blends
    # ------------------------------------------------------------------

    def blend(self, base: Matrix, top: Matrix, mode=blending.BlendMode.NORMAL) -> Matrix:
        return blending.blend(base, top, mode)

    def addition(self, base: Matrix, top: Matrix) -> Matrix:
        return blending.addition(base, top)

    def subtraction(self, base: Matrix, top: Matrix) -> Matrix:
        return blending.subtraction(base, top)

    def multiply(self, base: Matrix, top: Matrix) -> Matrix:
        return blending.multiply(base, top)

    def divide(self, base: Matrix, top: Matrix) -> Matrix:
        return blending.divide(base, top)

    def difference(self, base: Matrix, top: Matrix) -> Matrix:
        return blending.difference(base, top)

    def screen(self, base: Matrix, top: Matrix) -> Matrix:
        return blending.screen(base, top)

    def overlay(self, base: Matrix, top: Matrix) -> Matrix:
        return blending.overlay(base, top)

    def normal(self, base: Matrix, top: Matrix) -> Matrix:
        return blending.normal(base, top)

    def darken(self, base: Matrix, top: Matrix) -> Matrix:
        return blending.darken(base, top)

    def lighten(self, base: Matrix, top: Matrix) -> Matrix:
        return blending.lighten(base, top)

    def light(self, base: Matrix, top: Matrix, mode) -> Matrix:
        return blending.light(base, top, mode)

    def dodge(self, base: Matrix, top: Matrix, mode) -> Matrix:
        return blending.dodge(base, top, mode)

    def burn(self, base: Matrix, top: Matrix, mode) -> Matrix:
        return blending.burn(base, top, mode)

    # ------------------------------------------------------------------
    # Convolution filters
    # ------------------------------------------------------------------

    def edge_detect(self, image: Matrix, level: int = 1) -> Matrix:
        return filters.edge_detect(image, level)

    def emboss(self, image: Matrix) -> Matrix:
        return filters.emboss(image)

    def kirsch(self, image: Matrix, direction) -> Matrix:
        return filters.kirsch(image, direction)

    def sobel(self, image: Matrix, direction) -> Matrix:
        return filters.sobel(image, direction)

    def prewitt(self, image: Matrix) -> Matrix:
        return filters.prewitt(image)

    def laplace(self, image: Matrix) -> Matrix:
        return filters.laplace(image)

    def sharp(self, image: Matrix, amount: Optional[float] = None) -> Matrix:
        return filters.sharp(image, self.config.sharp_amount if amount is None else amount)

    def unsharp(self, image: Matrix, size: Optional[int] = None) -> Matrix:
        return filters.unsharp(image, self.config.unsharp_size if size is None else size)

    def blur(self, image: Matrix, mode=filters.BlurMode.GAUSSIAN,
             size: Optional[int] = None) -> Matrix:
        return filters.blur(image, mode, self.config.gaussian_size if size is None else size)
