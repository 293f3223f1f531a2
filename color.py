import numpy as np
from typing import TypeAlias
from numba import njit  # type: ignore
from numba.types import int64  # type: ignore

PackedColor: TypeAlias = int
ColorArray: TypeAlias = np.ndarray

ALPHA_MASK = 0xff000000
RED_MASK = 0x00ff0000
GREEN_MASK = 0x0000ff00
BLUE_MASK = 0x000000ff

ALPHA_SHIFT = 24
RED_SHIFT = 16
GREEN_SHIFT = 8

BLACK: PackedColor = 0xff000000
WHITE: PackedColor = 0xffffffff
RED: PackedColor = 0xffff0000
GREEN: PackedColor = 0xff00ff00
BLUE: PackedColor = 0xff0000ff

@njit(int64(int64), inline="always")
def alpha(argb: PackedColor) -> int:
    return (argb & ALPHA_MASK) >> ALPHA_SHIFT

@njit(int64(int64), inline="always")
def red(argb: PackedColor) -> int:
    return (argb & RED_MASK) >> RED_SHIFT

@njit(int64(int64), inline="always")
def green(argb: PackedColor) -> int:
    return (argb & GREEN_MASK) >> GREEN_SHIFT

@njit(int64(int64), inline="always")
def blue(argb: PackedColor) -> int:
    return argb & BLUE_MASK

@njit(int64(int64, int64, int64, int64), inline="always")
def pack(red: int, green: int, blue: int, alpha: int) -> PackedColor:
    """Packs channel bytes into a single ARGB value.

    Args:
        red (int): Red channel, 0-255.
        green (int): Green channel, 0-255.
        blue (int): Blue channel, 0-255.
        alpha (int): Alpha channel, 0-255.

    Returns:
        PackedColor: The color as [alpha][red][green][blue] bytes.
    """
    return ((alpha & 0xff) << ALPHA_SHIFT) | ((red & 0xff) << RED_SHIFT) | ((green & 0xff) << GREEN_SHIFT) | (blue & 0xff)

@njit(int64(int64, int64, int64), inline="always")
def rgb(red: int, green: int, blue: int) -> PackedColor:
    return pack(red, green, blue, 0xff)

def as_color_array(colors: ColorArray) -> ColorArray:
    """Coerces a sequence of packed colors into a one dimensional integer array.

    Args:
        colors (ColorArray): Packed colors, as a numpy array or any sequence of ints.

    Raises:
        ValueError: If the colors are not laid out in a single dimension.
        TypeError: If the colors are not integers.

    Returns:
        ColorArray: The colors as an integer array. Numpy arrays are returned as is, never copied.
    """
    array = np.asarray(colors)

    if array.ndim != 1:
        raise ValueError(f"Expected a one dimensional array of colors, got shape {array.shape}")

    if array.size and not np.issubdtype(array.dtype, np.integer):
        raise TypeError(f"Packed colors must be integers, got {array.dtype}")

    return array
