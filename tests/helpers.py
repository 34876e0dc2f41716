# test helpers

import io
import math

from PIL import Image

from engraver.models.neighbor_weights import OFFSETS

# usize wraparound, as an unsigned index would behave
_WRAP = (1 << 64) - 1


def round_half_away(value):
    if not math.isfinite(value):
        return value
    whole = math.trunc(value)
    if abs(value - whole) >= 0.5:
        whole += 1 if value > 0 else -1
    return float(whole)


def as_unsigned(value):
    # saturating float -> u64 cast
    if math.isnan(value) or value < 0:
        return 0.0
    return min(value, float(2 ** 64))


def wrap_u8(value):
    if not math.isfinite(value):
        return 0
    return math.trunc(value) % 256


def reference_engrave(rows, weights, add, mult, invert=False, gray=False):
    """Per-pixel version of the filter; `rows` is a list of rows of (r, g, b)."""
    height = len(rows)
    width = len(rows[0]) if rows else 0
    result = []
    for x in range(height):
        out_row = []
        for y in range(width):
            s = [0.0, 0.0, 0.0]
            ms = 0.0
            for (dx, dy), m in zip(OFFSETS, weights):
                mx = (x + dx) & _WRAP
                my = (y + dy) & _WRAP
                if mx < height and my < width:
                    for c in range(3):
                        s[c] += m * rows[mx][my][c]
                    ms += m
            if ms != 0.0:
                s = [v / ms for v in s]
            s = [v - rows[x][y][c] for c, v in enumerate(s)]
            s = [-v * mult + add for v in s]
            if invert:
                s = [255.0 - v for v in s]
            if gray:
                r, g, b = (as_unsigned(round_half_away(v)) for v in s)
                b /= 2.0
                bright = wrap_u8(round_half_away(math.sqrt(r * r + g * g + b * b)) / 1.5)
                out_row.append((bright, bright, bright))
            else:
                out_row.append(tuple(wrap_u8(round_half_away(v)) for v in s))
        result.append(out_row)
    return result


def uniform_rows(width, height, rgb):
    return [[tuple(rgb)] * width for _ in range(height)]


def png_bytes(image):
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def uniform_image(width, height, rgb, mode="RGB"):
    return Image.new(mode, (width, height), tuple(rgb) if mode != "L" else rgb[0])
