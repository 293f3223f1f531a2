import logging
import numpy as np
from typing import TypeAlias
from numba import njit  # type: ignore
from numba.types import UniTuple, float64, int64  # type: ignore
from color import ALPHA_SHIFT, ColorArray, PackedColor, as_color_array, blue, green, red, rgb

logger = logging.getLogger(__name__)

HSB: TypeAlias = np.ndarray

@njit(UniTuple(float64, 3)(int64, int64, int64))
def rgb_components_to_hsb(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Converts RGB channel bytes to normalized HSB.

    Args:
        r (int): Red channel, 0-255.
        g (int): Green channel, 0-255.
        b (int): Blue channel, 0-255.

    Returns:
        tuple[float, float, float]: Hue, saturation and brightness, each in [0, 1].
    """
    cmax = r if r > g else g
    if b > cmax:
        cmax = b

    cmin = r if r < g else g
    if b < cmin:
        cmin = b

    if cmax == 0:
        return (0.0, 0.0, 0.0)

    brightness = cmax / 255.0

    # Achromatic, hue is meaningless
    if cmax == cmin:
        return (0.0, 0.0, brightness)

    span = float(cmax - cmin)
    saturation = span / cmax
    redc = (cmax - r) / span
    greenc = (cmax - g) / span
    bluec = (cmax - b) / span

    if r == cmax:
        hue = bluec - greenc
    elif g == cmax:
        hue = 2.0 + redc - bluec
    else:
        hue = 4.0 + greenc - redc

    hue /= 6.0

    if hue < 0:
        hue += 1.0

    return (hue, saturation, brightness)

@njit(int64(float64, float64, float64))
def hsb_components_to_rgb(hue: float, saturation: float, brightness: float) -> PackedColor:
    """Converts normalized HSB to an opaque packed color.

    Args:
        hue (float): Hue in turns, only the fractional part is used.
        saturation (float): Saturation, 0-1.
        brightness (float): Brightness, 0-1.

    Returns:
        PackedColor: Opaque color, channels rounded half up.
    """
    if saturation == 0:
        r = g = b = brightness
    else:
        h = (hue - np.floor(hue)) * 6.0
        f = h - np.floor(h)
        p = brightness * (1.0 - saturation)
        q = brightness * (1.0 - saturation * f)
        t = brightness * (1.0 - saturation * (1.0 - f))
        sector = int(h)

        if sector == 0:
            r, g, b = brightness, t, p
        elif sector == 1:
            r, g, b = q, brightness, p
        elif sector == 2:
            r, g, b = p, brightness, t
        elif sector == 3:
            r, g, b = p, q, brightness
        elif sector == 4:
            r, g, b = t, p, brightness
        else:
            r, g, b = brightness, p, q

    return rgb(int(r * 255.0 + 0.5), int(g * 255.0 + 0.5), int(b * 255.0 + 0.5))

@njit(int64(float64, float64, float64))
def hsb(h: float, s: float, b: float) -> PackedColor:
    """Creates an opaque color from HSB.

    Args:
        h (float): Hue in degrees, any value is wrapped into 0-360.
        s (float): Saturation, 0-100.
        b (float): Brightness, 0-100.

    Returns:
        PackedColor: The color.
    """
    return hsb_components_to_rgb((h % 360.0) / 360.0, s / 100.0, b / 100.0)

@njit(int64(float64, float64, float64, float64))
def hsba(h: float, s: float, b: float, a: float) -> PackedColor:
    """Creates a color from HSB and a 0-1 alpha.

    Args:
        h (float): Hue in degrees.
        s (float): Saturation, 0-100.
        b (float): Brightness, 0-100.
        a (float): Alpha, 0-1.

    Returns:
        PackedColor: The color.
    """
    alpha = min(0xff, max(0, int(a * 0xff)))
    return (alpha << ALPHA_SHIFT) | (hsb(h, s, b) & 0x00ffffff)

@njit(float64(int64))
def hue(argb: PackedColor) -> float:
    return 360.0 * rgb_components_to_hsb(red(argb), green(argb), blue(argb))[0]

@njit(float64(int64))
def saturation(argb: PackedColor) -> float:
    return 100.0 * rgb_components_to_hsb(red(argb), green(argb), blue(argb))[1]

@njit(float64(int64))
def brightness(argb: PackedColor) -> float:
    return 100.0 * rgb_components_to_hsb(red(argb), green(argb), blue(argb))[2]

def rgb_to_hsb(argb: PackedColor, out: HSB | None = None) -> HSB:
    """Converts a packed color to HSB, ignoring its alpha.

    Args:
        argb (PackedColor): The color.
        out (HSB | None, optional): Buffer of at least 3 floats to write into. A new array is allocated when omitted.

    Returns:
        HSB: Hue in degrees [0, 360), saturation and brightness in [0, 100].
    """
    if out is None:
        out = np.empty(3, dtype=np.float64)

    h, s, b = rgb_components_to_hsb(red(argb), green(argb), blue(argb))
    out[0] = 360.0 * h
    out[1] = 100.0 * s
    out[2] = 100.0 * b

    return out

@njit(int64(int64, float64))
def scale_brightness(argb: PackedColor, factor: float) -> PackedColor:
    """Scales the brightness of a color, capped at full brightness.

    The result is always opaque, the input alpha does not survive the HSB round trip.
    """
    h, s, b = rgb_components_to_hsb(red(argb), green(argb), blue(argb))
    return hsb_components_to_rgb(h, s, min(1.0, b * factor))

@njit
def _scale_brightness_into(colors: ColorArray, factor: float, result: ColorArray) -> None:
    for i in range(colors.shape[0]):
        result[i] = scale_brightness(colors[i], factor)

def scale_brightness_array(colors: ColorArray, factor: float, result: ColorArray | None = None) -> ColorArray:
    """Scales the brightness of an array of colors.

    Args:
        colors (ColorArray): Packed colors.
        factor (float): Factor by which to scale brightness.
        result (ColorArray | None, optional): Array to write into. When omitted the input array is overwritten.

    Raises:
        ValueError: If result and colors differ in shape.

    Returns:
        ColorArray: The array holding the scaled colors.
    """
    colors = as_color_array(colors)

    if result is None:
        result = colors
    elif result.shape != colors.shape:
        raise ValueError(f"Result shape {result.shape} does not match colors shape {colors.shape}")

    logger.debug("Scaling brightness of %d colors by %s", colors.shape[0], factor)
    _scale_brightness_into(colors.astype(np.int64), float(factor), result)

    return result

def scale_brightness_copy(colors: ColorArray, factor: float) -> ColorArray:
    colors = as_color_array(colors)
    return scale_brightness_array(colors, factor, np.empty(colors.shape, dtype=np.uint32))
