"""
Imager - raster image processing on normalised matrices.

Convolution filters, colour adjustments and blend compositing over a
numpy-backed Matrix, with Pillow handling file decoding and encoding.
"""

__version__ = "0.1.0"

from .core import (
    Matrix, ImagerConfig, load_config, save_config, configure_logging,
    ImagerError, ValidationError, InvalidModeError, MatrixIndexError,
    ChannelMismatchError, DimensionError, DivisionByZeroError
)
from .image import ImageProcessor

__all__ = [
    'Matrix', 'ImagerConfig', 'load_config', 'save_config', 'configure_logging',
    'ImagerError', 'ValidationError', 'InvalidModeError', 'MatrixIndexError',
    'ChannelMismatchError', 'DimensionError', 'DivisionByZeroError',
    'ImageProcessor',
]
