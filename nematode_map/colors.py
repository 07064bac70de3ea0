"""Color utility functions for the nematode map.

This module assigns every common-name label a stable marker color without a
lookup table, and darkens hex colors for marker outlines.
"""

from nematode_map.constants import LABEL_PALETTE


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def label_hash(label: str) -> int:
    """
    Order-dependent hash of a label, ``hash * 31 + code_unit`` over UTF-16 code units.

    The shift wraps to 32 bits on every step while the running value does not,
    which matches how the browser front end computes it, so labels keep the
    same color on both sides.
    """
    encoded = label.encode("utf-16-le")
    code_units = [
        int.from_bytes(encoded[i : i + 2], "little") for i in range(0, len(encoded), 2)
    ]

    hash_value = 0
    for code_unit in code_units:
        shifted = _to_int32(_to_int32(hash_value) << 5)
        hash_value = code_unit + (shifted - hash_value)
    return hash_value


def color_for_label(label: str | None, palette: list[str] = LABEL_PALETTE) -> str:
    """
    Pick a palette color for a label.

    Args:
        label: The common name of a nematode group. ``None`` is treated as ``""``.
        palette: The colors to choose from

    Returns:
        A hex color string from the palette
    """
    return palette[abs(label_hash(label or "")) % len(palette)]


def darken_hex_color(hex_color: str, factor: float = 0.5) -> str:
    """
    Darken a hex color by multiplying RGB components by the given factor.

    Args:
        hex_color: A hex color string like '#ff0000' or '#f00'
        factor: A float between 0 and 1 (0 = black, 1 = original color)

    Returns:
        A darkened hex color string
    """
    hex_color = hex_color.lstrip("#")

    # Handle shorthand hex format (#rgb -> #rrggbb)
    if len(hex_color) == 3:
        hex_color = "".join([c * 2 for c in hex_color])

    r = int(hex_color[0:2], 16)
    g = int(hex_color[2:4], 16)
    b = int(hex_color[4:6], 16)

    r = max(0, min(255, int(r * factor)))
    g = max(0, min(255, int(g * factor)))
    b = max(0, min(255, int(b * factor)))

    return f"#{r:02x}{g:02x}{b:02x}"
