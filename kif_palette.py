import logging

import numpy as np

from kif_errors import InvalidArgumentError
from kif_headers import MAX_PALETTE_ENTRIES, PALETTE_ENTRY_SIZE

# Colors are handled as little-endian uint32 so byte 0 is red and byte 3 is
# alpha, whatever the host byte order. 0 is transparent black.
COLOR_DTYPE = np.dtype("<u4")


def pixels_to_values(pixels: bytes) -> np.ndarray:
    """View a raw RGBA buffer as one uint32 color per pixel."""
    if len(pixels) % PALETTE_ENTRY_SIZE:
        raise InvalidArgumentError(
            f"RGBA buffer length {len(pixels)} is not a multiple of 4"
        )
    return np.frombuffer(pixels, dtype=COLOR_DTYPE)


def build_palette(
    values: np.ndarray, max_entries: int = MAX_PALETTE_ENTRIES
) -> tuple[np.ndarray, int]:
    """Ordered unique colors of an image, entry 0 reserved for transparent black.

    Colors keep the order in which they are first seen. Once max_entries is
    reached the remaining new colors are dropped; the second value returned is
    how many were dropped.
    """
    colors, first_seen = np.unique(values, return_index=True)
    colors = colors[np.argsort(first_seen, kind="stable")]
    colors = colors[colors != 0]

    palette = np.concatenate(
        (np.zeros(1, dtype=COLOR_DTYPE), colors.astype(COLOR_DTYPE))
    )
    dropped = max(0, len(palette) - max_entries)
    if dropped:
        logging.info(f"palette full at {max_entries} entries, dropped {dropped}")
    return palette[:max_entries], dropped


def lookup_indices(palette: np.ndarray, values: np.ndarray) -> np.ndarray:
    """Palette index of every value, -1 for colors missing from the palette."""
    if values.size == 0:
        return np.empty(0, dtype=np.int64)

    sorter = np.argsort(palette, kind="stable")
    pos = np.searchsorted(palette, values, sorter=sorter)
    pos = np.minimum(pos, len(palette) - 1)

    indices = sorter[pos].astype(np.int64)
    indices[palette[indices] != values] = -1
    return indices


def palette_to_bytes(palette: np.ndarray) -> bytes:
    return palette.astype(COLOR_DTYPE).tobytes()


def palette_from_bytes(data: bytes, count: int, offset: int = 0) -> np.ndarray:
    size = count * PALETTE_ENTRY_SIZE
    return np.frombuffer(data[offset : offset + size], dtype=COLOR_DTYPE)


def palette_rgba(palette: np.ndarray) -> np.ndarray:
    """(n, 4) uint8 array of r, g, b, a rows."""
    return palette.astype(COLOR_DTYPE).view(np.uint8).reshape(-1, PALETTE_ENTRY_SIZE)


def palette_colors(palette: np.ndarray) -> list[tuple[int, int, int, int]]:
    """Convert a palette to a list of RGBA tuples"""
    return [tuple(c) for c in palette_rgba(palette).tolist()]
