#!/usr/bin/env python3

import argparse
import logging
import os
import sys

from PIL import Image
from PIL.Image import Image as PILImage

import kif
from kif_errors import KifError
from kif_headers import MAX_RLE_INDEX


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Convert PNG files to KIF icons")
    parser.add_argument("file", help="The image file to convert.")
    parser.add_argument("-o", "--output", help="Output KIF file name", default=None)
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Enable verbose mode. Can be specified multiple times.",
    )
    parser.add_argument(
        "--quantize",
        action="store_true",
        help="Reduce the image to 255 colors so every color fits the palette.",
    )
    parser.add_argument(
        "--lossy",
        action="store_true",
        help="Write colors past palette index 255 as transparent instead of failing.",
    )
    args = parser.parse_args(argv)

    if args.verbose >= 2:
        logging.basicConfig(level=logging.DEBUG)
    elif args.verbose == 1:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    out = args.output if args.output else f"{os.path.splitext(args.file)[0]}.kif"

    try:
        image = Image.open(args.file)
        if args.quantize:
            image = quantize_image(image)
        pixels, header = image_to_rgba(image)
    except OSError as err:
        logging.error(f"{args.file}: {err}")
        return 1

    try:
        size = kif.write(out, pixels, header, strict=not args.lossy)
    except KifError as err:
        logging.error(f"{args.file}: {err}")
        return 1

    print(f"writing kif to {out} ({size} bytes)")
    return 0


def image_to_rgba(image: PILImage) -> tuple[bytes, kif.KifHeader]:
    """Raw RGBA bytes of an image and a header sized for it."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    width, height = image.size
    return image.tobytes(), kif.new_header(width, height)


def quantize_image(image: PILImage) -> PILImage:
    # palette entry 0 is reserved, which leaves 255 colors for the image
    rgba = image.convert("RGBA")
    quantized = rgba.quantize(colors=MAX_RLE_INDEX, method=Image.Quantize.FASTOCTREE)
    return quantized.convert("RGBA")


if __name__ == "__main__":
    sys.exit(main())
