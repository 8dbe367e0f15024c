"""
Imager Core Module

Contains the core data structures:
- Matrix: dense rows x cols x channels numeric container
- Errors: the exception hierarchy shared by every module
- Config: processing defaults and logging level
"""

from .errors import (
    ImagerError, ValidationError, InvalidModeError, MatrixIndexError,
    ChannelMismatchError, DimensionError, DivisionByZeroError, coerce_mode
)
from .matrix import Matrix
from .config import ImagerConfig, load_config, save_config, configure_logging

__all__ = [
    'ImagerError', 'ValidationError', 'InvalidModeError', 'MatrixIndexError',
    'ChannelMismatchError', 'DimensionError', 'DivisionByZeroError', 'coerce_mode',
    'Matrix',
    'ImagerConfig', 'load_config', 'save_config', 'configure_logging',
]
