"""Tests for fsformats/io/curv.py and the read_morph dispatcher.

Files are built byte by byte with ``struct`` so the tests do not depend on
the writer under test.
"""

import gzip
import os
import struct
import tempfile

import numpy as np
import pytest

from fsformats.errors import MagicMismatchError, ShapeError, TruncatedFileError
from fsformats.io.curv import read_curv, write_curv
from fsformats.io.mgh import write_mgh
from fsformats.io.morph import morph_format_from_filename, read_morph

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _write_tmp(content, suffix, compress=False):
    fd, path = tempfile.mkstemp(suffix=suffix)
    with os.fdopen(fd, "wb") as fh:
        fh.write(gzip.compress(content) if compress else content)
    return path


def _tmp_name(suffix):
    fd, path = tempfile.mkstemp(suffix=suffix)
    os.close(fd)
    return path


def _curv_bytes(values, magic=b"\xff\xff\xff", n_faces=1, per_vertex=1, n_verts=None):
    n_verts = len(values) if n_verts is None else n_verts
    return (
        magic
        + struct.pack(">iii", n_verts, n_faces, per_vertex)
        + struct.pack(f">{len(values)}f", *values)
    )


_VALUES = [0.5, 1.2, -0.3]


# ---------------------------------------------------------------------------
# read_curv
# ---------------------------------------------------------------------------

class TestReadCurv:
    def test_three_values(self):
        path = _write_tmp(_curv_bytes(_VALUES), "lh.thickness")
        try:
            data = read_curv(path)
        finally:
            os.unlink(path)
        assert data.shape == (3,)
        assert data.dtype == np.float32
        np.testing.assert_allclose(data, _VALUES, rtol=1e-6)

    def test_length_is_declared_vertex_count(self):
        # trailing bytes after the declared values are ignored
        content = _curv_bytes(_VALUES + [9.0, 9.0], n_verts=3)
        path = _write_tmp(content, ".curv")
        try:
            data = read_curv(path)
        finally:
            os.unlink(path)
        assert data.shape == (3,)

    def test_wrong_magic_raises(self):
        path = _write_tmp(_curv_bytes(_VALUES, magic=b"\xff\xff\xfe"), ".curv")
        try:
            with pytest.raises(MagicMismatchError, match="16777215"):
                read_curv(path)
        finally:
            os.unlink(path)

    def test_magic_mismatch_is_value_error(self):
        assert issubclass(MagicMismatchError, ValueError)

    def test_truncated_values_raise(self):
        content = _curv_bytes(_VALUES, n_verts=10)
        path = _write_tmp(content, ".curv")
        try:
            with pytest.raises(TruncatedFileError):
                read_curv(path)
        finally:
            os.unlink(path)

    def test_values_per_vertex_not_validated(self):
        path = _write_tmp(_curv_bytes(_VALUES, per_vertex=3), ".curv")
        try:
            data = read_curv(path)
        finally:
            os.unlink(path)
        np.testing.assert_allclose(data, _VALUES, rtol=1e-6)

    def test_gzip_equals_plain(self):
        content = _curv_bytes(_VALUES)
        plain = _write_tmp(content, "lh.thickness")
        packed = _write_tmp(content, "lh.thickness.gz", compress=True)
        try:
            np.testing.assert_array_equal(read_curv(plain), read_curv(packed))
        finally:
            os.unlink(plain)
            os.unlink(packed)


# ---------------------------------------------------------------------------
# write_curv
# ---------------------------------------------------------------------------

class TestWriteCurv:
    def test_bytes_match_layout(self):
        path = _tmp_name(".curv")
        try:
            write_curv(path, _VALUES, num_faces=1)
            with open(path, "rb") as fh:
                written = fh.read()
        finally:
            os.unlink(path)
        assert written == _curv_bytes(_VALUES)

    def test_round_trip_gz(self):
        values = np.linspace(-2, 2, 50).astype(np.float32)
        path = _tmp_name(".curv.gz")
        try:
            write_curv(path, values)
            np.testing.assert_array_equal(read_curv(path), values)
        finally:
            os.unlink(path)

    def test_2d_raises(self):
        with pytest.raises(ValueError, match="1-D"):
            write_curv("unused.curv", np.ones((2, 2)))

    def test_nibabel_reads_our_file(self):
        fsio = pytest.importorskip("nibabel.freesurfer.io")
        values = np.array([0.25, -1.0, 3.5, 0.0], dtype=np.float32)
        path = _tmp_name(".curv")
        try:
            write_curv(path, values)
            np.testing.assert_array_equal(fsio.read_morph_data(path), values)
        finally:
            os.unlink(path)

    def test_we_read_nibabel_file(self):
        fsio = pytest.importorskip("nibabel.freesurfer.io")
        values = np.array([1.0, 2.0, -3.0], dtype=np.float32)
        path = _tmp_name(".curv")
        try:
            fsio.write_morph_data(path, values)
            np.testing.assert_array_equal(read_curv(path), values)
        finally:
            os.unlink(path)


# ---------------------------------------------------------------------------
# morph_format_from_filename / read_morph
# ---------------------------------------------------------------------------

class TestMorphDispatch:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("lh.thickness", "curv"),
            ("lh.thickness.mgh", "mgh"),
            ("lh.thickness.fwhm10.fsaverage.mgz", "mgz"),
            ("lh.thickness.MGH", "curv"),
            ("lh.area.gz", "curv"),
            ("mgh", "curv"),
        ],
    )
    def test_format_from_filename(self, name, expected):
        assert morph_format_from_filename(name) == expected

    def test_curv_route(self):
        path = _write_tmp(_curv_bytes(_VALUES), "lh.area")
        try:
            np.testing.assert_allclose(read_morph(path), _VALUES, rtol=1e-6)
        finally:
            os.unlink(path)

    def test_mgz_route_flattens(self):
        values = np.arange(7, dtype=np.float32)
        path = _tmp_name(".mgz")
        try:
            write_mgh(path, values.reshape(7, 1, 1, 1))
            data = read_morph(path)
        finally:
            os.unlink(path)
        assert data.shape == (7,)
        np.testing.assert_array_equal(data, values)

    def test_mgh_route_rejects_volume(self):
        path = _tmp_name(".mgh")
        try:
            write_mgh(path, np.zeros((2, 3, 4), dtype=np.float32))
            with pytest.raises(ShapeError):
                read_morph(path)
        finally:
            os.unlink(path)

    def test_no_content_sniffing(self):
        # an MGH file with a curv-style name is read as curv and fails
        path = _tmp_name(".thickness")
        try:
            write_mgh(path, np.zeros(3, dtype=np.float32))
            with pytest.raises(MagicMismatchError):
                read_morph(path)
        finally:
            os.unlink(path)
