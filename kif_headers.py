import struct
from collections import namedtuple

from kif_errors import InvalidArgumentError, MalformedInputError

# typedef struct {  // KIF header, 16 bytes, no padding
#     uint32_t magic;            // 'kif1'
#     uint8_t bpp;               // 3 = RGB, 4 = RGBA source
#     uint8_t compressed;        // reserved, always 0
#     uint16_t palette_entries;  // number of RGBA palette records
#     uint16_t width;            // image width in pixels
#     uint16_t height;           // image height in pixels
#     uint32_t rle_entries;      // number of (palette index, run) pairs
# } kif_header_t;
KifHeader = namedtuple(
    "KifHeader",
    [
        "magic",
        "bpp",
        "compressed",
        "palette_entries",
        "width",
        "height",
        "rle_entries",
    ],
)
kif_header_format = "<IBBHHHI"

HEADER_SIZE = struct.calcsize(kif_header_format)

# typedef struct { uint8_t r, g, b, a; } kif_rgba_t;
PALETTE_ENTRY_SIZE = 4

# typedef struct { uint8_t index, run; } kif_rle_t;
RLE_ENTRY_SIZE = 2

KIF_MAGIC = 0x6B696631  # 'kif1'
KIF_BPP_RGB = 3
KIF_BPP_RGBA = 4

MAX_PALETTE_ENTRIES = 65536
MAX_RLE_INDEX = 0xFF
MAX_RUN_LENGTH = 0xFF
MAX_DIMENSION = 0xFFFF

OUTPUT_BPP_CHOICES = (24, 32)


def new_header(width: int, height: int) -> KifHeader:
    """Header for an image that is about to be encoded."""
    return KifHeader(KIF_MAGIC, KIF_BPP_RGBA, 0, 0, width, height, 0)


def pack_header(header: KifHeader) -> bytes:
    try:
        return struct.pack(kif_header_format, *header)
    except struct.error as err:
        raise InvalidArgumentError(f"header field out of range: {header}") from err


def unpack_header(data: bytes) -> KifHeader:
    if len(data) < HEADER_SIZE:
        raise MalformedInputError(
            f"need {HEADER_SIZE} header bytes, got {len(data)}"
        )
    return KifHeader._make(struct.unpack_from(kif_header_format, data, 0))


def payload_size(header: KifHeader) -> int:
    """Number of bytes a file with this header must hold."""
    return (
        HEADER_SIZE
        + header.palette_entries * PALETTE_ENTRY_SIZE
        + header.rle_entries * RLE_ENTRY_SIZE
    )
