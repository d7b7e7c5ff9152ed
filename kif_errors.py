class KifError(Exception):
    """Base class for everything the KIF codec raises."""


class KifIOError(KifError, OSError):
    """A .kif file could not be opened, read or written."""


class AllocationError(KifError, MemoryError):
    """A pixel or output buffer could not be allocated."""


class InvalidArgumentError(KifError, ValueError):
    """Missing buffer/header, bad dimensions or an unsupported output depth."""


class MalformedInputError(KifError, ValueError):
    """Encoded data that does not describe a valid .kif image."""


class PaletteOverflowError(KifError, ValueError):
    """The image has more colors than the RLE stream can address."""

    def __init__(self, message: str, colors: int = 0, dropped: int = 0):
        super().__init__(message)
        self.colors = colors
        self.dropped = dropped
