# Run-length stream of (palette index, run length) byte pairs.

import numpy as np

from kif_headers import MAX_RUN_LENGTH, RLE_ENTRY_SIZE


def find_runs(
    values: np.ndarray, max_run: int = MAX_RUN_LENGTH
) -> tuple[np.ndarray, np.ndarray]:
    """Split values into runs of equal neighbours.

    Returns the start position and the length of every run. Runs longer than
    max_run are split into consecutive pieces of max_run, the last piece
    holding the remainder.
    """
    if values.size == 0:
        return np.empty(0, dtype=np.int64), np.empty(0, dtype=np.int64)

    changes = np.concatenate(([True], values[1:] != values[:-1]))
    starts = np.flatnonzero(changes)
    lengths = np.diff(np.append(starts, values.size))

    # ceil(length / max_run) pieces per run
    pieces = -(-lengths // max_run)
    first_piece = np.repeat(np.cumsum(pieces) - pieces, pieces)
    piece_no = np.arange(first_piece.size) - first_piece

    offsets = piece_no * max_run
    run_starts = np.repeat(starts, pieces) + offsets
    run_lengths = np.minimum(max_run, np.repeat(lengths, pieces) - offsets)
    return run_starts, run_lengths


def pack_entries(indices: np.ndarray, lengths: np.ndarray) -> bytes:
    entries = np.empty((len(indices), RLE_ENTRY_SIZE), dtype=np.uint8)
    entries[:, 0] = indices
    entries[:, 1] = lengths
    return entries.tobytes()


def unpack_entries(
    data: bytes, count: int, offset: int = 0
) -> tuple[np.ndarray, np.ndarray]:
    size = count * RLE_ENTRY_SIZE
    entries = np.frombuffer(data[offset : offset + size], dtype=np.uint8)
    entries = entries.reshape(-1, RLE_ENTRY_SIZE)
    return entries[:, 0], entries[:, 1]


def expand_runs(indices: np.ndarray, lengths: np.ndarray) -> np.ndarray:
    """One palette index per pixel."""
    return np.repeat(indices, lengths)
