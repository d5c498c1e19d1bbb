from __future__ import annotations

import colorsys
import math
import re

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def round_half_up(value: float) -> int:
    # Pre-round to absorb float noise such as 78.49999999999999.
    return int(math.floor(round(value, 9) + 0.5))


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    match = _HEX_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid hex color: {value!r}")
    digits = match.group(1)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    clamped = [max(0, min(255, channel)) for channel in rgb]
    return "#{:02X}{:02X}{:02X}".format(*clamped)


def normalize_hex(value: str) -> str:
    return rgb_to_hex(hex_to_rgb(value))


def mix(first: str, second: str, weight: float) -> str:
    """Channel-wise linear blend: `weight` of `first`, the rest of `second`."""
    a = hex_to_rgb(first)
    b = hex_to_rgb(second)
    blended = tuple(round_half_up(x * weight + y * (1 - weight)) for x, y in zip(a, b))
    return rgb_to_hex(blended)  # type: ignore[arg-type]


def is_achromatic(value: str) -> bool:
    r, g, b = hex_to_rgb(value)
    return r == g == b


def rotate_hue(value: str, degrees: float) -> str:
    r, g, b = hex_to_rgb(value)
    hue, lightness, saturation = colorsys.rgb_to_hls(r / 255, g / 255, b / 255)
    hue = (hue + degrees / 360.0) % 1.0
    nr, ng, nb = colorsys.hls_to_rgb(hue, lightness, saturation)
    return rgb_to_hex((round_half_up(nr * 255), round_half_up(ng * 255), round_half_up(nb * 255)))
