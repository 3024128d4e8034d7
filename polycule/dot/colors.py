"""Color hashing and normalization.

Default node colors are derived from the label so they stay stable without
being stored. User supplied colors are canonicalized to `#rrggbb` where the
input is a hex or `hsl()` value.
"""

from __future__ import annotations

import math
import re

DEFAULT_FALLBACK = "#bdbdbd"

HEX_PATTERN = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)
HSL_PATTERN = re.compile(
    r"^hsl\(\s*([\d.]+)\s*,\s*([\d.]+)%\s*,\s*([\d.]+)%\s*\)$", re.IGNORECASE
)


def _clamp01(n: float) -> float:
    return min(1.0, max(0.0, n))


def _hex_byte(n: float) -> str:
    # round half up
    return f"{int(math.floor(n + 0.5)):02x}"


def _int32(n: int) -> int:
    n &= 0xFFFFFFFF
    return n - 0x100000000 if n & 0x80000000 else n


def _code_units(text: str) -> list[int]:
    """UTF-16 code units, so astral characters hash as surrogate pairs."""
    raw = text.encode("utf-16-le")
    return [int.from_bytes(raw[i : i + 2], "little") for i in range(0, len(raw), 2)]


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """Convert HSL (degrees, percent, percent) to `#rrggbb`."""
    h_norm = ((h % 360) + 360) % 360
    s_frac = _clamp01(s / 100)
    l_frac = _clamp01(l / 100)

    c = (1 - abs(2 * l_frac - 1)) * s_frac
    x = c * (1 - abs(((h_norm / 60) % 2) - 1))
    m = l_frac - c / 2

    if h_norm < 60:
        r1, g1, b1 = c, x, 0.0
    elif h_norm < 120:
        r1, g1, b1 = x, c, 0.0
    elif h_norm < 180:
        r1, g1, b1 = 0.0, c, x
    elif h_norm < 240:
        r1, g1, b1 = 0.0, x, c
    elif h_norm < 300:
        r1, g1, b1 = x, 0.0, c
    else:
        r1, g1, b1 = c, 0.0, x

    return "#" + "".join(_hex_byte((v + m) * 255) for v in (r1, g1, b1))


def normalize_color_to_hex(color: str | None, fallback: str | None = DEFAULT_FALLBACK) -> str | None:
    """Return `color` as lower-case `#rrggbb`, or `fallback` if it is not hex/hsl."""
    if not color:
        return fallback

    value = color.strip()
    hex_match = HEX_PATTERN.match(value)
    if hex_match:
        raw = hex_match.group(1).lower()
        if len(raw) == 3:
            raw = "".join(ch * 2 for ch in raw)
        return f"#{raw}"

    hsl_match = HSL_PATTERN.match(value)
    if hsl_match:
        try:
            h, s, l = (float(g) for g in hsl_match.groups())
        except ValueError:
            return fallback
        if all(math.isfinite(n) for n in (h, s, l)):
            return hsl_to_hex(h, s, l)

    return fallback


def looks_like_color_code(value: str) -> bool:
    """True for values that attempt hex or hsl notation (valid or not)."""
    lowered = value.strip().lower()
    return lowered.startswith("#") or lowered.startswith("hsl")


def canonical_color(value: str | None) -> str | None:
    """Canonicalize hex/hsl input and keep named colors as given.

    Returns None for empty input and for malformed hex/hsl attempts.
    """
    if value is None or not value.strip():
        return None
    normalized = normalize_color_to_hex(value, fallback=None)
    if normalized is not None:
        return normalized
    if looks_like_color_code(value):
        return None
    return value.strip()


def string_to_color(text: str) -> str:
    """Deterministic, good looking color for a label."""
    units = _code_units(text)
    hash_ = 5381
    for i, code in enumerate(units):
        hash_ = _int32(_int32(hash_) << 5) + hash_ + code * (i + 13)

    char_sum = sum(units)
    h = abs(hash_ + char_sum * 31) % 360
    s = 65 + (char_sum % 20)  # 65-84
    l = 55 + (hash_ % 10)  # 55-64
    return hsl_to_hex(h, s, l)
