"""Reader and writer for FreeSurfer 'curv' morphometry files.

A curv file (e.g. ``surf/lh.thickness``) stores one float per vertex:

* 3-byte magic number ``16777215``
* int32 number of vertices
* int32 number of faces (not needed to read the values)
* int32 values per vertex (always 1 in practice)
* ``n_vertices`` big-endian float32 values
"""

import logging

import numpy as np

from ..errors import MagicMismatchError
from .stream import open_output, open_stream

logger = logging.getLogger(__name__)

CURV_MAGIC = 16777215


def read_curv_stream(stream):
    """Decode curv data from an open :class:`~fsformats.io.stream.BinaryStream`.

    Returns
    -------
    numpy.ndarray, shape (n_vertices,), dtype float32
    """
    magic = stream.read_u24_be()
    if magic != CURV_MAGIC:
        raise MagicMismatchError(
            f"Magic number mismatch ({magic} != {CURV_MAGIC}). The file "
            f"{stream.name!r} is not a FreeSurfer 'curv' file in new binary "
            f"format (expected files like 'lh.area' in a subject's 'surf' "
            f"directory)."
        )
    n_vertices = stream.read_i32_be()
    stream.read_i32_be()  # number of faces, unused
    values_per_vertex = stream.read_i32_be()
    if values_per_vertex != 1:
        logger.debug(
            "curv file %s declares %d values per vertex; reading one.",
            stream.name, values_per_vertex,
        )
    return stream.read_array(">f4", n_vertices).astype(np.float32)


def read_curv(filepath):
    """Read per-vertex morphometry data from a FreeSurfer curv file.

    Parameters
    ----------
    filepath : str
        Path to the curv file, e.g. ``lh.thickness``.  Files ending in
        ``.gz`` are decompressed on the fly.

    Returns
    -------
    numpy.ndarray, shape (n_vertices,), dtype float32
        One value per vertex.  Bytes after the declared values are ignored.

    Raises
    ------
    MagicMismatchError
        If the file does not start with the curv magic number.
    TruncatedFileError
        If the file holds fewer values than it declares.
    OSError
        If the file cannot be opened.
    """
    with open_stream(filepath) as stream:
        return read_curv_stream(stream)


def write_curv(filepath, data, num_faces=0):
    """Write per-vertex values to a FreeSurfer curv file.

    Parameters
    ----------
    filepath : str
        Output path; a ``.gz`` suffix writes a gzip-compressed file.
    data : array_like
        1-D per-vertex values, stored as float32.
    num_faces : int, optional
        Value of the face count field.  Default is 0.
    """
    values = np.asarray(data, dtype=">f4")
    if values.ndim != 1:
        raise ValueError(
            f"curv data must be 1-D, got an array of shape {values.shape}."
        )
    with open_output(filepath) as fobj:
        fobj.write(CURV_MAGIC.to_bytes(3, "big"))
        fobj.write(np.array([values.size, num_faces, 1], dtype=">i4").tobytes())
        fobj.write(values.tobytes())
