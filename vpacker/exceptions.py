"""
Error types raised by vpacker.
"""


class VPackError(Exception):
    """Base class for every error vpacker raises on purpose."""


class ScanError(VPackError):
    """
    The input tree could not be listed or stat'd. Aborts the whole scan.
    """

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class EncodeError(VPackError):
    """Writing one archive group failed."""


class ReadError(EncodeError):
    """An input file vanished, became unreadable or changed size after the scan."""


class WriteError(EncodeError):
    """The output stream rejected a write."""


class ArchiveOverflowError(EncodeError, OverflowError):
    """A size, offset or total does not fit the format's signed 32-bit fields."""


class NameTooLongError(EncodeError):
    """An entry name does not fit the fixed-width TOC name field."""


class AlreadyExistsError(VPackError, FileExistsError):
    """The destination archive is already present on disk."""

    def __init__(self, path):
        super().__init__(f"{path} already exists")
        self.path = path
