"""
Imager I/O Module

Handles image file import and export through Pillow.
"""

from .image_codec import (
    buffer_to_matrix, matrix_to_buffer,
    read_image, write_image, load_image, save_image
)

__all__ = [
    'buffer_to_matrix', 'matrix_to_buffer',
    'read_image', 'write_image', 'load_image', 'save_image',
]
