"""Sequential big-endian reading from plain or gzip-compressed files.

All FreeSurfer binary formats are big-endian and are read strictly front to
back.  :func:`open_stream` hides whether the file is gzip-compressed and
guarantees the handle is closed when the ``with`` block is left, also when
a reader raises.  :class:`BinaryStream` offers the primitive reads the
format readers need, including the 3-byte integer used by the curv and
surface signatures.
"""

import gzip
import zlib
from contextlib import contextmanager

import numpy as np

from ..errors import DecompressionError, FormatError, TruncatedFileError

GZ_SUFFIXES = (".gz",)


def is_gzipped_filename(path, suffixes=GZ_SUFFIXES):
    """Return True if *path* ends with one of *suffixes* (case-sensitive)."""
    return str(path).endswith(tuple(suffixes))


def _use_gzip(path, compressed, gz_suffixes):
    if compressed is None:
        return is_gzipped_filename(path, gz_suffixes)
    return bool(compressed)


class BinaryStream:
    """Forward-only reader of big-endian primitives.

    Parameters
    ----------
    fobj : file-like
        Binary file object opened for reading.
    name : str, optional
        Name used in error messages.
    compressed : bool, optional
        Whether *fobj* decompresses gzip data.  Decompression failures are
        then reported as :class:`~fsformats.errors.DecompressionError`.
    """

    def __init__(self, fobj, name="<stream>", compressed=False):
        self._fobj = fobj
        self.name = str(name)
        self.compressed = compressed
        self._pos = 0

    @property
    def position(self):
        """Number of bytes consumed so far."""
        return self._pos

    def _read(self, n):
        try:
            data = self._fobj.read(n)
        except (gzip.BadGzipFile, zlib.error, EOFError) as exc:
            if not self.compressed:
                raise
            raise DecompressionError(
                f"Could not decompress gzip file {self.name!r}: {exc}"
            ) from exc
        self._pos += len(data)
        return data

    def read_bytes(self, n):
        """Read exactly *n* bytes."""
        n = int(n)
        if n < 0:
            raise FormatError(
                f"Cannot read a negative number of bytes ({n}) from {self.name!r}."
            )
        data = self._read(n)
        if len(data) != n:
            raise TruncatedFileError(
                f"Unexpected end of file in {self.name!r}: wanted {n} bytes at "
                f"offset {self._pos - len(data)}, got {len(data)}."
            )
        return data

    def read_optional(self, n):
        """Read *n* bytes, or return ``None`` if fewer than *n* remain.

        Used for trailers that a file may or may not carry.
        """
        data = self._read(int(n))
        if len(data) != n:
            return None
        return data

    def read_remaining(self):
        """Read everything up to the end of the file."""
        return self._read(-1)

    def skip(self, n):
        """Consume and discard *n* bytes (no seeking, gzip-safe)."""
        self.read_bytes(n)

    def read_array(self, dtype, count):
        """Read *count* items of big-endian *dtype* into a numpy array."""
        dtype = np.dtype(dtype)
        count = int(count)
        if count < 0:
            raise FormatError(
                f"Cannot read a negative number of items ({count}) from {self.name!r}."
            )
        buf = self.read_bytes(dtype.itemsize * count)
        return np.frombuffer(buf, dtype=dtype, count=count)

    def read_u8(self):
        return self.read_bytes(1)[0]

    def read_bool(self):
        """Read one byte; any nonzero value is true."""
        return self.read_u8() != 0

    def read_u16_be(self):
        return int.from_bytes(self.read_bytes(2), "big")

    def read_u24_be(self):
        """Read a 3-byte unsigned integer ``b0 << 16 | b1 << 8 | b2``."""
        b0, b1, b2 = self.read_bytes(3)
        return (b0 << 16) | (b1 << 8) | b2

    def read_u32_be(self):
        return int.from_bytes(self.read_bytes(4), "big")

    def read_i16_be(self):
        return int.from_bytes(self.read_bytes(2), "big", signed=True)

    def read_i32_be(self):
        return int.from_bytes(self.read_bytes(4), "big", signed=True)

    def read_f32_be(self):
        return float(self.read_array(">f4", 1)[0])

    def read_fixed_length_string(self, n):
        """Read exactly *n* bytes and return the text before the first NUL.

        FreeSurfer stores names with their terminating NUL included in the
        length, so everything from the first NUL on is dropped.
        """
        raw = self.read_bytes(n)
        return raw.split(b"\x00", 1)[0].decode("utf-8", errors="replace")

    def read_length_prefixed_string(self):
        """Read an int32 length followed by a string of that many bytes."""
        n = self.read_i32_be()
        if n < 0:
            raise FormatError(
                f"Negative string length {n} at offset {self._pos - 4} "
                f"in {self.name!r}."
            )
        return self.read_fixed_length_string(n)

    def read_until(self, terminator, max_bytes=None):
        """Read up to and including *terminator*; return the bytes before it.

        Raises
        ------
        TruncatedFileError
            If the file ends (or *max_bytes* are read) before the terminator.
        """
        buf = bytearray()
        while not buf.endswith(terminator):
            if max_bytes is not None and len(buf) >= max_bytes:
                raise TruncatedFileError(
                    f"No terminator {terminator!r} within {max_bytes} bytes "
                    f"in {self.name!r}."
                )
            buf += self.read_bytes(1)
        return bytes(buf[: -len(terminator)])


@contextmanager
def open_stream(path, compressed=None, gz_suffixes=GZ_SUFFIXES):
    """Open *path* for sequential reading.

    Parameters
    ----------
    path : str or os.PathLike
        File to read.
    compressed : bool or None, optional
        ``None`` (default) decides by filename suffix; ``True``/``False``
        force gzip or plain reading.
    gz_suffixes : tuple of str, optional
        Suffixes that mark gzip files when *compressed* is ``None``.

    Yields
    ------
    BinaryStream

    Raises
    ------
    OSError
        If the file cannot be opened.
    """
    use_gzip = _use_gzip(path, compressed, gz_suffixes)
    fobj = gzip.open(path, "rb") if use_gzip else open(path, "rb")
    try:
        yield BinaryStream(fobj, name=path, compressed=use_gzip)
    finally:
        fobj.close()


@contextmanager
def open_output(path, compressed=None, gz_suffixes=GZ_SUFFIXES):
    """Open *path* for binary writing, gzip-compressed by suffix.

    Parameters are the same as for :func:`open_stream`.

    Yields
    ------
    file-like
        Binary file object.
    """
    use_gzip = _use_gzip(path, compressed, gz_suffixes)
    fobj = gzip.open(path, "wb") if use_gzip else open(path, "wb")
    try:
        yield fobj
    finally:
        fobj.close()
