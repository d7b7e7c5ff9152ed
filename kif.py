"""
Kompakt Icon Format (.kif) encoder and decoder.

A .kif file is a 16 byte header, a palette of RGBA records and a stream of
(palette index, run length) byte pairs that expands to the pixels in
row-major order. See kif_headers for the exact layout.

    data = kif.encode(rgba_bytes, kif.new_header(width, height))
    pixels, header = kif.decode(data, 32)
"""

import logging

import numpy as np

from kif_errors import (
    AllocationError,
    InvalidArgumentError,
    KifIOError,
    MalformedInputError,
    PaletteOverflowError,
)
from kif_headers import (
    HEADER_SIZE,
    KIF_BPP_RGB,
    KIF_BPP_RGBA,
    KIF_MAGIC,
    MAX_DIMENSION,
    MAX_RLE_INDEX,
    OUTPUT_BPP_CHOICES,
    PALETTE_ENTRY_SIZE,
    KifHeader,
    new_header,
    pack_header,
    payload_size,
    unpack_header,
)
from kif_palette import (
    build_palette,
    lookup_indices,
    palette_from_bytes,
    palette_rgba,
    palette_to_bytes,
    pixels_to_values,
)
from kif_rle import expand_runs, find_runs, pack_entries, unpack_entries

__all__ = [
    "KifHeader",
    "new_header",
    "encode",
    "decode",
    "read_header",
    "read",
    "write",
]


def encode(pixels: bytes, header: KifHeader, strict: bool = True) -> bytes:
    """Encode raw RGBA pixels into a .kif image.

    Only width and height are taken from header, every other field is
    filled in by the encoder. With strict=False, colors the RLE stream cannot
    address (palette index above 255, or dropped from a full palette) are
    written as the reserved transparent black entry instead of raising
    PaletteOverflowError.
    """
    if pixels is None or header is None:
        raise InvalidArgumentError("encode needs both pixels and a header")

    width, height = header.width, header.height
    if not (0 <= width <= MAX_DIMENSION and 0 <= height <= MAX_DIMENSION):
        raise InvalidArgumentError(f"invalid image size {width}x{height}")

    expected = width * height * PALETTE_ENTRY_SIZE
    if len(pixels) != expected:
        raise InvalidArgumentError(
            f"expected {expected} bytes of RGBA data for {width}x{height}, "
            f"got {len(pixels)}"
        )

    try:
        return _encode(pixels, header, strict)
    except MemoryError as err:
        raise AllocationError(f"out of memory encoding {width}x{height}") from err


def _encode(pixels: bytes, header: KifHeader, strict: bool) -> bytes:
    values = pixels_to_values(pixels)
    palette, dropped = build_palette(values)

    # runs compare the colors themselves, not their palette index
    starts, lengths = find_runs(values)
    indices = lookup_indices(palette, values[starts])

    unreachable = (indices < 0) | (indices > MAX_RLE_INDEX)
    if unreachable.any():
        if strict:
            raise PaletteOverflowError(
                f"image needs {len(palette) + dropped} palette entries, "
                f"only {MAX_RLE_INDEX + 1} can be addressed",
                colors=len(palette),
                dropped=dropped,
            )
        lost = int(lengths[unreachable].sum())
        logging.warning(
            f"{lost} pixels use colors past palette index {MAX_RLE_INDEX}, "
            "writing them as index 0"
        )
        indices[unreachable] = 0
        palette = palette[: MAX_RLE_INDEX + 1]

    header = header._replace(
        magic=KIF_MAGIC,
        bpp=KIF_BPP_RGBA,
        compressed=0,
        palette_entries=len(palette),
        rle_entries=len(starts),
    )
    logging.debug(f"encode: {header}")

    out = bytearray(pack_header(header))
    out.extend(palette_to_bytes(palette))
    out.extend(pack_entries(indices, lengths))
    return bytes(out)


def read_header(data: bytes) -> KifHeader:
    """Parse and check the header without decoding any pixels."""
    header = unpack_header(data)
    if header.magic != KIF_MAGIC:
        raise MalformedInputError(f"not a kif file, magic is {header.magic:#010x}")
    if header.bpp not in (KIF_BPP_RGB, KIF_BPP_RGBA):
        raise MalformedInputError(f"unsupported source bpp {header.bpp}")
    if header.compressed:
        raise MalformedInputError(f"unsupported compression {header.compressed}")
    return header


def decode(data: bytes, output_bpp: int = 32) -> tuple[bytes, KifHeader]:
    """Decode a .kif image to RGB (output_bpp=24) or RGBA (32) bytes."""
    if data is None:
        raise InvalidArgumentError("no data to decode")
    if output_bpp not in OUTPUT_BPP_CHOICES:
        raise InvalidArgumentError(f"output bpp must be 24 or 32, got {output_bpp}")

    header = read_header(data)
    logging.debug(f"decode: {header}")

    size = payload_size(header)
    if len(data) < size:
        raise MalformedInputError(
            f"truncated kif data: header declares {size} bytes, got {len(data)}"
        )
    if len(data) > size:
        logging.debug(f"ignoring {len(data) - size} trailing bytes")

    try:
        return _decode(data, header, output_bpp), header
    except MemoryError as err:
        raise AllocationError(
            f"out of memory decoding {header.width}x{header.height}"
        ) from err


def _decode(data: bytes, header: KifHeader, output_bpp: int) -> bytes:
    palette = palette_from_bytes(data, header.palette_entries, HEADER_SIZE)
    rle_offset = HEADER_SIZE + header.palette_entries * PALETTE_ENTRY_SIZE
    indices, lengths = unpack_entries(data, header.rle_entries, rle_offset)

    if indices.size:
        empty = np.flatnonzero(lengths == 0)
        if empty.size:
            raise MalformedInputError(f"RLE entry {empty[0]} has a run length of 0")

        bad = np.flatnonzero(indices >= header.palette_entries)
        if bad.size:
            raise MalformedInputError(
                f"RLE entry {bad[0]} uses palette index {indices[bad[0]]}, "
                f"palette has {header.palette_entries} entries"
            )

    total = int(lengths.sum(dtype=np.int64))
    expected = header.width * header.height
    if total != expected:
        raise MalformedInputError(
            f"RLE stream holds {total} pixels, "
            f"{header.width}x{header.height} needs {expected}"
        )

    pixels = palette_rgba(palette)[expand_runs(indices, lengths)]
    if output_bpp == 24:
        pixels = pixels[:, :3]
    return pixels.tobytes()


def write(filename: str, pixels: bytes, header: KifHeader, strict: bool = True) -> int:
    """Encode pixels and write them to filename, returns the bytes written."""
    # encode first so a bad image never leaves a truncated file behind
    encoded = encode(pixels, header, strict)
    try:
        with open(filename, "wb") as f:
            f.write(encoded)
    except OSError as err:
        raise KifIOError(f"cannot write {filename}: {err}") from err

    logging.info(f"wrote {len(encoded)} bytes to {filename}")
    return len(encoded)


def read(filename: str, output_bpp: int = 32) -> tuple[bytes, KifHeader]:
    try:
        with open(filename, "rb") as f:
            data = f.read()
    except OSError as err:
        raise KifIOError(f"cannot read {filename}: {err}") from err

    if not data:
        raise MalformedInputError(f"{filename} is empty")
    return decode(data, output_bpp)
