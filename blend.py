import logging
import numpy as np
from enum import IntEnum
from typing import Callable
from numba import njit  # type: ignore
from numba.types import float64, int64  # type: ignore
from color import ALPHA_SHIFT, BLUE_MASK, GREEN_MASK, GREEN_SHIFT, RED_MASK, RED_SHIFT, ColorArray, PackedColor, alpha, as_color_array

logger = logging.getLogger(__name__)

class BlendMode(IntEnum):
    """Color blending modes."""
    LERP = 0
    ADD = 1
    SUBTRACT = 2
    MULTIPLY = 3
    SCREEN = 4
    LIGHTEST = 5
    DARKEST = 6

@njit(int64(int64, int64, int64, int64), inline="always")
def lerp_channel(a: PackedColor, b: PackedColor, amount: int, mask: int) -> int:
    """Interpolates one channel of a towards the same channel of b.

    Channels are never shifted down to bytes, the result stays in the mask's bit window.

    Args:
        a (PackedColor): Color to interpolate from.
        b (PackedColor): Color to interpolate towards.
        amount (int): Interpolation weight, 0-255.
        mask (int): Bit mask of the channel.

    Returns:
        int: The interpolated channel, masked.
    """
    am, bm = a & mask, b & mask
    return (am + (((amount + 1) * (bm - am)) >> 8)) & mask

@njit(int64(int64, int64), inline="always")
def _combined_alpha(c1: PackedColor, c2: PackedColor) -> int:
    return min(0xff, alpha(c1) + alpha(c2)) << ALPHA_SHIFT

@njit(int64(int64, int64, int64), inline="always")
def _scaled(c: PackedColor, amount: int, mask: int) -> int:
    return ((c & mask) * (amount + 1)) >> 8

@njit(int64(int64, int64, int64))
def lerp_alpha(c1: PackedColor, c2: PackedColor, amount: int) -> PackedColor:
    """Interpolates each of the RGB channels between c1 and c2.

    Args:
        c1 (PackedColor): First color.
        c2 (PackedColor): Second color.
        amount (int): Single byte (0-255) interpolation weight.

    Returns:
        PackedColor: Interpolated color, alpha is the clipped sum of both alphas.
    """
    return (
        _combined_alpha(c1, c2) |
        lerp_channel(c1, c2, amount, RED_MASK) |
        lerp_channel(c1, c2, amount, GREEN_MASK) |
        lerp_channel(c1, c2, amount, BLUE_MASK)
    )

@njit(int64(int64, int64, float64))
def lerp_amount(c1: PackedColor, c2: PackedColor, amount: float) -> PackedColor:
    return lerp_alpha(c1, c2, int(amount * 0xff))

@njit(int64(int64, int64))
def _lerp_by_c2(c1: PackedColor, c2: PackedColor) -> PackedColor:
    return lerp_alpha(c1, c2, alpha(c2))

def lerp(c1: PackedColor, c2: PackedColor, amount: int | float | None = None) -> PackedColor:
    """Interpolates each of the RGB channels between c1 and c2.

    Args:
        c1 (PackedColor): First color.
        c2 (PackedColor): Second color.
        amount (int | float | None, optional): A float is a 0-1 fraction, an int is a raw 0-255 weight.
            Defaults to the alpha of c2.

    Returns:
        PackedColor: Interpolated color.
    """
    if amount is None:
        return _lerp_by_c2(c1, c2)

    if isinstance(amount, (float, np.floating)):
        return lerp_amount(c1, c2, float(amount))

    return lerp_alpha(c1, c2, int(amount))

@njit(int64(int64, int64, int64), inline="always")
def _add_channel(c1: PackedColor, c2: PackedColor, mask: int) -> int:
    return min(mask, (c1 & mask) + _scaled(c2, alpha(c2), mask)) & mask

@njit(int64(int64, int64))
def add(c1: PackedColor, c2: PackedColor) -> PackedColor:
    """Adds c2, weighted by its alpha, to c1 with a clip at each channel's maximum."""
    return (
        _combined_alpha(c1, c2) |
        _add_channel(c1, c2, RED_MASK) |
        _add_channel(c1, c2, GREEN_MASK) |
        _add_channel(c1, c2, BLUE_MASK)
    )

@njit(int64(int64, int64, int64), inline="always")
def _subtract_channel(c1: PackedColor, c2: PackedColor, mask: int) -> int:
    return max(0, (c1 & mask) - _scaled(c2, alpha(c2), mask)) & mask

@njit(int64(int64, int64))
def subtract(c1: PackedColor, c2: PackedColor) -> PackedColor:
    """Subtracts c2, weighted by its alpha, from c1 with a clip at 0."""
    return (
        _combined_alpha(c1, c2) |
        _subtract_channel(c1, c2, RED_MASK) |
        _subtract_channel(c1, c2, GREEN_MASK) |
        _subtract_channel(c1, c2, BLUE_MASK)
    )

@njit(int64(int64, int64, int64, int64), inline="always")
def _multiply_channel(c1: PackedColor, c2: PackedColor, mask: int, shift: int) -> int:
    # 16 bit product, its top byte lands in the channel window
    product = ((c1 & mask) >> shift) * (((c2 & mask) >> shift) + 1)
    return lerp_channel(c1, (product << shift) >> 8, alpha(c2), mask)

@njit(int64(int64, int64))
def multiply(c1: PackedColor, c2: PackedColor) -> PackedColor:
    """Multiplies the RGB channels, blended over c1 by the alpha of c2."""
    return (
        _combined_alpha(c1, c2) |
        _multiply_channel(c1, c2, RED_MASK, RED_SHIFT) |
        _multiply_channel(c1, c2, GREEN_MASK, GREEN_SHIFT) |
        _multiply_channel(c1, c2, BLUE_MASK, 0)
    )

@njit(int64(int64, int64, int64, int64), inline="always")
def _screen_channel(c1: PackedColor, c2: PackedColor, mask: int, shift: int) -> int:
    product = (0xff - ((c1 & mask) >> shift)) * (0xff - ((c2 & mask) >> shift) + 1)
    return lerp_channel(c1, mask - ((product << shift) >> 8), alpha(c2), mask)

@njit(int64(int64, int64))
def screen(c1: PackedColor, c2: PackedColor) -> PackedColor:
    """Inverse multiplies the RGB channels as 255 - [255-c1]*[255-c2], blended over c1 by the alpha of c2."""
    return (
        _combined_alpha(c1, c2) |
        _screen_channel(c1, c2, RED_MASK, RED_SHIFT) |
        _screen_channel(c1, c2, GREEN_MASK, GREEN_SHIFT) |
        _screen_channel(c1, c2, BLUE_MASK, 0)
    )

@njit(int64(int64, int64, int64), inline="always")
def _lightest_channel(c1: PackedColor, c2: PackedColor, mask: int) -> int:
    return max(c1 & mask, _scaled(c2, alpha(c2), mask)) & mask

@njit(int64(int64, int64))
def lightest(c1: PackedColor, c2: PackedColor) -> PackedColor:
    return (
        _combined_alpha(c1, c2) |
        _lightest_channel(c1, c2, RED_MASK) |
        _lightest_channel(c1, c2, GREEN_MASK) |
        _lightest_channel(c1, c2, BLUE_MASK)
    )

@njit(int64(int64, int64, int64), inline="always")
def _darkest_channel(c1: PackedColor, c2: PackedColor, mask: int) -> int:
    return lerp_channel(c1, min(c1 & mask, c2 & mask), alpha(c2), mask)

@njit(int64(int64, int64))
def darkest(c1: PackedColor, c2: PackedColor) -> PackedColor:
    return (
        _combined_alpha(c1, c2) |
        _darkest_channel(c1, c2, RED_MASK) |
        _darkest_channel(c1, c2, GREEN_MASK) |
        _darkest_channel(c1, c2, BLUE_MASK)
    )

_BLEND_FUNCTIONS: dict[BlendMode, Callable[[PackedColor, PackedColor], PackedColor]] = {
    BlendMode.LERP: _lerp_by_c2,
    BlendMode.ADD: add,
    BlendMode.SUBTRACT: subtract,
    BlendMode.MULTIPLY: multiply,
    BlendMode.SCREEN: screen,
    BlendMode.LIGHTEST: lightest,
    BlendMode.DARKEST: darkest,
}

def _blend_function(mode: BlendMode) -> Callable[[PackedColor, PackedColor], PackedColor]:
    function = _BLEND_FUNCTIONS.get(mode) if isinstance(mode, BlendMode) else None

    if function is None:
        logger.error("Unimplemented blend mode: %r", mode)
        raise NotImplementedError(f"Unimplemented blend mode: {mode!r}")

    return function

def blend(c1: PackedColor, c2: PackedColor, mode: BlendMode) -> PackedColor:
    """Blends c2 onto c1 with the given mode, using the alpha of c2 as its strength.

    Args:
        c1 (PackedColor): First color.
        c2 (PackedColor): Second color to be blended.
        mode (BlendMode): Type of blending.

    Raises:
        NotImplementedError: If mode is not a BlendMode.

    Returns:
        PackedColor: Blended color.
    """
    return _blend_function(mode)(c1, c2)

@njit
def _blend_into(function, c1s: ColorArray, c2s: ColorArray, out: ColorArray) -> None:
    for i in range(c1s.shape[0]):
        out[i] = function(c1s[i], c2s[i])

def blend_array(c1s: ColorArray, c2s: ColorArray, mode: BlendMode, out: ColorArray | None = None) -> ColorArray:
    """Blends two arrays of colors element by element.

    Args:
        c1s (ColorArray): First colors.
        c2s (ColorArray): Colors to be blended onto the first ones.
        mode (BlendMode): Type of blending.
        out (ColorArray | None, optional): Array to write into. A new uint32 array is allocated when omitted.

    Raises:
        NotImplementedError: If mode is not a BlendMode.
        ValueError: If the arrays differ in shape.

    Returns:
        ColorArray: The blended colors.
    """
    function = _blend_function(mode)
    c1s, c2s = as_color_array(c1s), as_color_array(c2s)

    if c1s.shape != c2s.shape:
        raise ValueError(f"Cannot blend color arrays of shapes {c1s.shape} and {c2s.shape}")

    if out is None:
        out = np.empty(c1s.shape, dtype=np.uint32)
    elif out.shape != c1s.shape:
        raise ValueError(f"Output shape {out.shape} does not match colors shape {c1s.shape}")

    logger.debug("Blending %d colors with %s", c1s.shape[0], mode.name)
    _blend_into(function, c1s.astype(np.int64), c2s.astype(np.int64), out)

    return out
