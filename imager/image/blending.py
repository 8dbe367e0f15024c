"""
Blend Engine

Per-pixel compositing of an overlay matrix onto a base matrix.

Every operator mutates the base in place and returns it. Only the colour
channels (0..2) are written. normal() reads both alpha channels (Porter-Duff
"over") but leaves the base alpha as it was.
"""

import logging
from enum import Enum
from typing import Callable

import numpy as np

from ..core.errors import ChannelMismatchError, DimensionError, DivisionByZeroError, coerce_mode
from ..core.matrix import Matrix, ALPHA_CHANNEL

logger = logging.getLogger(__name__)


class BlendMode(Enum):
    """Single-step blend operators."""
    NORMAL = "normal"
    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    DIFFERENCE = "difference"
    SCREEN = "screen"
    OVERLAY = "overlay"
    DARKEN = "darken"
    LIGHTEN = "lighten"


class LightMode(Enum):
    SOFT = "soft"
    HARD = "hard"
    VIVID = "vivid"
    LINEAR = "linear"


class DodgeMode(Enum):
    SCREEN = "screen"
    COLOR = "color"
    LINEAR = "linear"
    DIVIDE = "divide"


class BurnMode(Enum):
    MULTIPLY = "multiply"
    COLOR = "color"
    LINEAR = "linear"


def _check_operands(base: Matrix, top: Matrix, operation: str) -> None:
    if (base.rows, base.cols) != (top.rows, top.cols):
        raise DimensionError(
            f"{operation}: base [{base.size_label}] and overlay "
            f"[{top.size_label}] must have the same rows and cols"
        )
    for name, matrix in (("base", base), ("overlay", top)):
        if matrix.channels < 3:
            raise ChannelMismatchError(
                f"{operation}: {name} needs at least 3 channels, has {matrix.channels}"
            )


def _require_nonzero(divisor: np.ndarray, operation: str) -> None:
    zeros = np.argwhere(divisor == 0)
    if zeros.size:
        row, col, channel = (int(i) for i in zeros[0])
        raise DivisionByZeroError(
            f"{operation}: zero divisor at ({row}, {col}, {channel})"
        )


def _checked_divide(numerator: np.ndarray, divisor: np.ndarray, operation: str) -> np.ndarray:
    _require_nonzero(divisor, operation)
    return numerator / divisor


def _apply(base: Matrix, top: Matrix, operation: str,
           func: Callable[[np.ndarray, np.ndarray], np.ndarray]) -> Matrix:
    """Check operands, then replace base colours with func(base, top)."""
    _check_operands(base, top, operation)
    colors = base.color_view()
    colors[...] = func(colors, top.color_view())
    return base


# ----------------------------------------------------------------------
# Arithmetic blends
# ----------------------------------------------------------------------

def addition(base: Matrix, top: Matrix) -> Matrix:
    return _apply(base, top, "addition", lambda a, b: a + b)


def subtraction(base: Matrix, top: Matrix) -> Matrix:
    return _apply(base, top, "subtraction", lambda a, b: a - b)


def multiply(base: Matrix, top: Matrix) -> Matrix:
    return _apply(base, top, "multiply", lambda a, b: a * b)


def divide(base: Matrix, top: Matrix) -> Matrix:
    """
    Divide base colours by overlay colours.

    Raises:
        DivisionByZeroError: At the first zero overlay element; base is left untouched
    """
    return _apply(base, top, "divide", lambda a, b: _checked_divide(a, b, "divide"))


def difference(base: Matrix, top: Matrix) -> Matrix:
    """Absolute sum of base and overlay colours, abs(base + overlay)."""
    return _apply(base, top, "difference", lambda a, b: np.abs(a + b))


def screen(base: Matrix, top: Matrix) -> Matrix:
    return _apply(base, top, "screen", lambda a, b: 1 - (1 - a) * (1 - b))


def darken(base: Matrix, top: Matrix) -> Matrix:
    return _apply(base, top, "darken", np.minimum)


def lighten(base: Matrix, top: Matrix) -> Matrix:
    return _apply(base, top, "lighten", np.maximum)


def _overlay(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.where(a < 0.5, 2 * a * b, 1 - 2 * (1 - a) * (1 - b))


def overlay(base: Matrix, top: Matrix) -> Matrix:
    """Multiply where the base is dark, screen where it is light."""
    return _apply(base, top, "overlay", _overlay)


def normal(base: Matrix, top: Matrix) -> Matrix:
    """
    Porter-Duff "over" of base above top, using both alpha channels.

    result_alpha = Aa + Ba * (1 - Aa)
    result_color = (Ac * Aa + Bc * Ba * (1 - Aa)) / result_alpha

    Only the colour channels are written; the base alpha is kept. Pixels
    where result_alpha is 0 get black colour channels.

    Raises:
        ChannelMismatchError: If either operand lacks an alpha channel
    """
    _check_operands(base, top, "normal")
    for name, matrix in (("base", base), ("overlay", top)):
        if matrix.channels <= ALPHA_CHANNEL:
            raise ChannelMismatchError(
                f"normal: {name} needs an alpha channel, has {matrix.channels} channels"
            )

    base_alpha = base.array[:, :, ALPHA_CHANNEL:ALPHA_CHANNEL + 1]
    top_alpha = top.array[:, :, ALPHA_CHANNEL:ALPHA_CHANNEL + 1]
    result_alpha = base_alpha + top_alpha * (1 - base_alpha)
    weighted = base.color_view() * base_alpha + top.color_view() * top_alpha * (1 - base_alpha)
    colors = np.divide(weighted, result_alpha,
                       out=np.zeros_like(weighted), where=result_alpha != 0)

    base.color_view()[...] = colors
    return base


# ----------------------------------------------------------------------
# Composite families
# ----------------------------------------------------------------------

def _soft_light(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    dark = 2 * a * b + a ** 2 * (1 - 2 * b)
    light = 2 * a * (1 - b) + np.sqrt(np.maximum(a, 0)) * (2 * b - 1)
    return np.where(a < 0.5, dark, light)


def light(base: Matrix, top: Matrix, mode) -> Matrix:
    """
    Light blends.

    Args:
        mode: LightMode or its value: 'soft', 'hard', 'vivid' or 'linear'
    """
    mode = coerce_mode(LightMode, mode, "light")
    if mode is LightMode.SOFT:
        return _apply(base, top, "light", _soft_light)
    if mode is LightMode.HARD:
        return _apply(base, top, "light", _overlay)
    if mode is LightMode.VIVID:
        _check_operands(base, top, "light")
        colors = top.color_view()
        _require_nonzero(1 - colors, "light")
        _require_nonzero(colors, "light")
        dodge(base, top, DodgeMode.COLOR)
        return burn(base, top, BurnMode.COLOR)
    dodge(base, top, DodgeMode.LINEAR)
    return burn(base, top, BurnMode.LINEAR)


def dodge(base: Matrix, top: Matrix, mode) -> Matrix:
    """
    Dodge blends.

    'screen' inverts both operands, multiplies and inverts back; 'color'
    divides the base by the inverted overlay; 'linear' adds; 'divide' is
    colour dodge, skipped entirely when the overlay is all white.
    """
    mode = coerce_mode(DodgeMode, mode, "dodge")
    if mode is DodgeMode.SCREEN:
        return _apply(base, top, "dodge", lambda a, b: 1 - (1 - a) * (1 - b))
    if mode is DodgeMode.COLOR:
        return _apply(base, top, "dodge", lambda a, b: _checked_divide(a, 1 - b, "dodge"))
    if mode is DodgeMode.LINEAR:
        return _apply(base, top, "dodge", lambda a, b: a + b)
    if top.is_all_white():
        _check_operands(base, top, "dodge")
        return base
    return dodge(base, top, DodgeMode.COLOR)


def burn(base: Matrix, top: Matrix, mode) -> Matrix:
    """
    Burn blends.

    'multiply' multiplies; 'color' divides the inverted base by the
    overlay and inverts back; 'linear' computes base + overlay - 1.
    """
    mode = coerce_mode(BurnMode, mode, "burn")
    if mode is BurnMode.MULTIPLY:
        return _apply(base, top, "burn", lambda a, b: a * b)
    if mode is BurnMode.COLOR:
        return _apply(base, top, "burn", lambda a, b: 1 - _checked_divide(1 - a, b, "burn"))
    return _apply(base, top, "burn", lambda a, b: a + b - 1)


_BLENDS = {
    BlendMode.NORMAL: normal,
    BlendMode.ADDITION: addition,
    BlendMode.SUBTRACTION: subtraction,
    BlendMode.MULTIPLY: multiply,
    BlendMode.DIVIDE: divide,
    BlendMode.DIFFERENCE: difference,
    BlendMode.SCREEN: screen,
    BlendMode.OVERLAY: overlay,
    BlendMode.DARKEN: darken,
    BlendMode.LIGHTEN: lighten,
}


def blend(base: Matrix, top: Matrix, mode=BlendMode.NORMAL) -> Matrix:
    """Apply the single-step blend named by `mode`."""
    mode = coerce_mode(BlendMode, mode, "blend")
    logger.debug(f"Blending [{top.size_label}] onto [{base.size_label}] ({mode.value})")
    return _BLENDS[mode](base, top)
