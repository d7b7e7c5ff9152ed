#!/usr/bin/env python3

import argparse
import sys

import kif
from kif_errors import KifError
from kif_headers import HEADER_SIZE, PALETTE_ENTRY_SIZE, payload_size
from kif_palette import palette_colors, palette_from_bytes


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Print the header of a KIF icon")
    parser.add_argument("file", help="The KIF file to inspect.")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Also print the palette."
    )
    args = parser.parse_args(argv)

    try:
        with open(args.file, "rb") as f:
            data = f.read()
        header = kif.read_header(data)
    except (KifError, OSError) as err:
        print(f"{args.file}: {err}", file=sys.stderr)
        return 1

    print(
        f"bpp={header.bpp} compressed={header.compressed} "
        f"size={header.width}x{header.height} "
        f"palette={header.palette_entries} runs={header.rle_entries}"
    )
    if len(data) < payload_size(header):
        print(f"truncated: {len(data)} of {payload_size(header)} bytes")

    if args.verbose:
        available = (len(data) - HEADER_SIZE) // PALETTE_ENTRY_SIZE
        count = min(header.palette_entries, available)
        palette = palette_from_bytes(data, count, HEADER_SIZE)
        for i, rgba in enumerate(palette_colors(palette)):
            print(f"{i} - {' '.join(str(x) for x in rgba)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
