"""Exceptions raised by the fsformats readers and writers.

All content errors derive from :class:`FormatError`, which is itself a
``ValueError`` so callers that only catch ``ValueError`` keep working.
Files that cannot be opened raise the builtin ``OSError`` subclasses
(``FileNotFoundError``, ``PermissionError``, ...) unchanged.
"""


class FormatError(ValueError):
    """A file does not follow the layout of the format it is read as."""


class TruncatedFileError(FormatError, EOFError):
    """The file ended before all declared data could be read."""


class DecompressionError(FormatError):
    """A gzip-compressed file could not be decompressed."""


class MagicMismatchError(FormatError):
    """The file signature (magic number) is not the expected one."""


class UnsupportedVersionError(FormatError):
    """The file uses a format version this package cannot decode."""


class UnsupportedDataTypeError(UnsupportedVersionError):
    """An MGH header declares an unknown voxel data type code."""


class ShapeError(FormatError):
    """Volume data cannot be reshaped as requested."""


class InvalidIndexError(FormatError):
    """A colortable entry declares a negative structure index."""
