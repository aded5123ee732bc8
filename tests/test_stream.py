"""Tests for fsformats/io/stream.py: primitive reads and gzip handling.

All tests write bytes to temporary files so no external data is required.
"""

import gzip
import os
import struct
import tempfile

import numpy as np
import pytest

from fsformats.errors import DecompressionError, FormatError, TruncatedFileError
from fsformats.io.stream import is_gzipped_filename, open_output, open_stream

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _write_tmp(content, suffix, compress=False):
    fd, path = tempfile.mkstemp(suffix=suffix)
    with os.fdopen(fd, "wb") as fh:
        fh.write(gzip.compress(content) if compress else content)
    return path


_PRIMITIVES = (
    b"\x07"                          # u8
    + b"\x01\x02"                    # u16
    + b"\xff\xff\xff"                # u24
    + b"\x00\x00\x01\x00"            # u32
    + struct.pack(">h", -2)          # i16
    + struct.pack(">i", -5)          # i32
    + struct.pack(">f", 0.5)         # f32
    + b"\x00\x02"                    # two bools
)


def _read_primitives(stream):
    return (
        stream.read_u8(),
        stream.read_u16_be(),
        stream.read_u24_be(),
        stream.read_u32_be(),
        stream.read_i16_be(),
        stream.read_i32_be(),
        stream.read_f32_be(),
        stream.read_bool(),
        stream.read_bool(),
    )


_EXPECTED = (7, 258, 16777215, 256, -2, -5, 0.5, False, True)


# ---------------------------------------------------------------------------
# Primitive reads
# ---------------------------------------------------------------------------

class TestPrimitives:
    def test_plain_file(self):
        path = _write_tmp(_PRIMITIVES, ".bin")
        try:
            with open_stream(path) as stream:
                assert _read_primitives(stream) == _EXPECTED
                assert stream.position == len(_PRIMITIVES)
        finally:
            os.unlink(path)

    def test_gzip_file_same_values(self):
        path = _write_tmp(_PRIMITIVES, ".bin.gz", compress=True)
        try:
            with open_stream(path) as stream:
                assert stream.compressed
                assert _read_primitives(stream) == _EXPECTED
        finally:
            os.unlink(path)

    def test_u24_composition(self):
        path = _write_tmp(b"\x01\x02\x03", ".bin")
        try:
            with open_stream(path) as stream:
                assert stream.read_u24_be() == (1 << 16) | (2 << 8) | 3
        finally:
            os.unlink(path)

    def test_read_array_big_endian(self):
        values = np.array([1.5, -2.25, 3.0], dtype=">f4")
        path = _write_tmp(values.tobytes(), ".bin")
        try:
            with open_stream(path) as stream:
                arr = stream.read_array(">f4", 3)
        finally:
            os.unlink(path)
        np.testing.assert_array_equal(arr, [1.5, -2.25, 3.0])


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------

class TestStrings:
    def test_fixed_length_string_stops_at_nul(self):
        path = _write_tmp(b"cortex\x00\x00rest", ".bin")
        try:
            with open_stream(path) as stream:
                assert stream.read_fixed_length_string(8) == "cortex"
                assert stream.read_bytes(4) == b"rest"
        finally:
            os.unlink(path)

    def test_length_prefixed_string(self):
        path = _write_tmp(struct.pack(">i", 4) + b"abc\x00", ".bin")
        try:
            with open_stream(path) as stream:
                assert stream.read_length_prefixed_string() == "abc"
        finally:
            os.unlink(path)

    def test_negative_length_raises(self):
        path = _write_tmp(struct.pack(">i", -1), ".bin")
        try:
            with open_stream(path) as stream:
                with pytest.raises(FormatError, match="Negative string length"):
                    stream.read_length_prefixed_string()
        finally:
            os.unlink(path)

    def test_read_until_terminator(self):
        path = _write_tmp(b"created by me\n\nXYZ", ".bin")
        try:
            with open_stream(path) as stream:
                assert stream.read_until(b"\n\n") == b"created by me"
                assert stream.read_bytes(3) == b"XYZ"
        finally:
            os.unlink(path)

    def test_read_until_missing_terminator_raises(self):
        path = _write_tmp(b"no terminator\n", ".bin")
        try:
            with open_stream(path) as stream:
                with pytest.raises(TruncatedFileError):
                    stream.read_until(b"\n\n")
        finally:
            os.unlink(path)


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

class TestErrors:
    def test_short_read_raises(self):
        path = _write_tmp(b"\x00\x01", ".bin")
        try:
            with open_stream(path) as stream:
                with pytest.raises(TruncatedFileError, match="Unexpected end of file"):
                    stream.read_i32_be()
        finally:
            os.unlink(path)

    def test_truncated_is_value_and_eof_error(self):
        assert issubclass(TruncatedFileError, ValueError)
        assert issubclass(TruncatedFileError, EOFError)

    def test_missing_file_raises_oserror(self):
        with pytest.raises(FileNotFoundError):
            with open_stream("/nonexistent/dir/lh.thickness"):
                pass

    def test_malformed_gzip_raises(self):
        path = _write_tmp(b"this is not gzip data at all", ".gz")
        try:
            with open_stream(path) as stream:
                with pytest.raises(DecompressionError):
                    stream.read_bytes(4)
        finally:
            os.unlink(path)

    def test_read_optional_returns_none_at_eof(self):
        path = _write_tmp(b"\x00\x00", ".bin")
        try:
            with open_stream(path) as stream:
                assert stream.read_optional(16) is None
        finally:
            os.unlink(path)


# ---------------------------------------------------------------------------
# Suffix detection and output
# ---------------------------------------------------------------------------

class TestSuffixes:
    def test_gz_suffix_is_case_sensitive(self):
        assert is_gzipped_filename("lh.thickness.gz")
        assert not is_gzipped_filename("lh.thickness.GZ")
        assert not is_gzipped_filename("lh.thickness")

    def test_custom_suffixes(self):
        assert is_gzipped_filename("brain.mgz", (".mgz", ".gz"))

    def test_forced_compression_flag(self):
        path = _write_tmp(b"\x00\x00\x00\x2a", ".dat", compress=True)
        try:
            with open_stream(path, compressed=True) as stream:
                assert stream.read_i32_be() == 42
        finally:
            os.unlink(path)

    def test_open_output_gzip_round_trip(self):
        fd, path = tempfile.mkstemp(suffix=".gz")
        os.close(fd)
        try:
            with open_output(path) as fobj:
                fobj.write(b"payload")
            with open(path, "rb") as fh:
                assert fh.read(2) == b"\x1f\x8b"
            with open_stream(path) as stream:
                assert stream.read_remaining() == b"payload"
        finally:
            os.unlink(path)
