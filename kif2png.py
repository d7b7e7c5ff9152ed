#!/usr/bin/env python3

import argparse
import logging
import os
import sys

from PIL import Image
from PIL.Image import Image as PILImage

import kif
from kif_errors import KifError
from kif_headers import OUTPUT_BPP_CHOICES


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Convert KIF icons to PNG")
    parser.add_argument("file", help="The KIF file to convert.")
    parser.add_argument("-o", "--output", help="Output PNG file name", default=None)
    parser.add_argument(
        "--bpp",
        type=int,
        choices=OUTPUT_BPP_CHOICES,
        default=32,
        help="Output depth: 24 for RGB, 32 for RGBA",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Enable verbose mode. Can be specified multiple times.",
    )
    args = parser.parse_args(argv)

    if args.verbose >= 2:
        logging.basicConfig(level=logging.DEBUG)
    elif args.verbose == 1:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    filename = args.file
    out = args.output if args.output else f"{os.path.splitext(filename)[0]}.png"

    try:
        pixels, header = kif.read(filename, args.bpp)
    except KifError as err:
        logging.error(f"{filename}: {err}")
        return 1

    logging.info(
        f"kif: {filename}, w: {header.width}, h: {header.height}, "
        f"palette: {header.palette_entries}, runs: {header.rle_entries}"
    )
    image = kif_to_image(pixels, header, args.bpp)
    logging.debug(f"saving to {out}")
    try:
        image.save(out)
    except OSError as err:
        logging.error(f"{out}: {err}")
        return 1
    return 0


def kif_to_image(pixels: bytes, header: kif.KifHeader, output_bpp: int) -> PILImage:
    mode = "RGBA" if output_bpp == 32 else "RGB"
    return Image.frombytes(mode, (header.width, header.height), pixels)


if __name__ == "__main__":
    sys.exit(main())
