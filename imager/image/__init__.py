"""
Imager Image Processing Module

Contains image processing tools:
- Kernel library and convolution engine
- Blend compositing
- Colour adjustments, crop and named filters
- ImageProcessor facade
"""

from . import kernels
from .kernels import SobelDirection, KirschDirection, pascal_row
from .convolution import convolve, convolve_all, reconcile_channels, normalize
from .blending import (
    BlendMode, LightMode, DodgeMode, BurnMode,
    blend, addition, subtraction, multiply, divide, difference,
    screen, overlay, normal, darken, lighten, light, dodge, burn
)
from .filters import (
    GrayMode, BlurMode,
    gray, invert, pixelize, crop,
    edge_detect, emboss, kirsch, sobel, prewitt, laplace, sharp, unsharp, blur
)
from .processor import ImageProcessor

__all__ = [
    # Kernels
    'kernels', 'SobelDirection', 'KirschDirection', 'pascal_row',
    # Convolution
    'convolve', 'convolve_all', 'reconcile_channels', 'normalize',
    # Blending
    'BlendMode', 'LightMode', 'DodgeMode', 'BurnMode',
    'blend', 'addition', 'subtraction', 'multiply', 'divide', 'difference',
    'screen', 'overlay', 'normal', 'darken', 'lighten', 'light', 'dodge', 'burn',
    # Filters
    'GrayMode', 'BlurMode',
    'gray', 'invert', 'pixelize', 'crop',
    'edge_detect', 'emboss', 'kirsch', 'sobel', 'prewitt', 'laplace',
    'sharp', 'unsharp', 'blur',
    # Facade
    'ImageProcessor',
]
