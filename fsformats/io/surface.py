"""Reader and writer for FreeSurfer triangle surface files.

Surface files (``surf/lh.white``, ``surf/rh.pial``, ...) have no standard
extension.  Layout:

* 3-byte magic number ``16777214`` (triangle surface)
* creation stamp text terminated by two newline bytes
* int32 number of vertices, int32 number of faces
* vertices × 3 big-endian float32 coordinates
* faces × 3 big-endian int32 vertex indices (0-based)

Some files carry extra volume geometry information after the faces; it is
not read.
"""

import numpy as np

from ..errors import FormatError, MagicMismatchError
from ..types import SurfaceMesh, read_only
from .stream import open_output, open_stream

TRIANGLE_MAGIC = 16777214
QUAD_MAGIC = 16777215
COMMENT_TERMINATOR = b"\n\n"
_MAX_COMMENT_BYTES = 1 << 16


def read_surface_stream(stream):
    """Decode a triangle surface from an open stream.

    Returns
    -------
    SurfaceMesh
    """
    magic = stream.read_u24_be()
    if magic != TRIANGLE_MAGIC:
        hint = (
            " Quad surfaces are not supported." if magic == QUAD_MAGIC else ""
        )
        raise MagicMismatchError(
            f"Magic number mismatch ({magic} != {TRIANGLE_MAGIC}). The file "
            f"{stream.name!r} is not a FreeSurfer triangle surface file.{hint}"
        )
    comment = stream.read_until(COMMENT_TERMINATOR, max_bytes=_MAX_COMMENT_BYTES)
    n_vertices = stream.read_i32_be()
    n_faces = stream.read_i32_be()
    vertices = stream.read_array(">f4", 3 * n_vertices).reshape(n_vertices, 3)
    faces = stream.read_array(">i4", 3 * n_faces).reshape(n_faces, 3)

    if n_faces > 0 and (int(faces.max()) >= n_vertices or int(faces.min()) < 0):
        raise FormatError(
            f"Surface face indices out of range [0, {n_vertices}) in {stream.name!r}."
        )
    return SurfaceMesh(
        vertices=read_only(vertices.astype(np.float64)),
        faces=read_only(faces.astype(np.int32)),
        comment=comment.decode("utf-8", errors="replace"),
    )


def read_surface(filepath):
    """Read a FreeSurfer triangle surface mesh.

    Parameters
    ----------
    filepath : str
        Path to the surface file, e.g. ``lh.white``.  Files ending in ``.gz``
        are decompressed on the fly.

    Returns
    -------
    SurfaceMesh
        float64 vertex coordinates of shape (V, 3) and int32 faces of shape
        (F, 3) with 0-based vertex indices.

    Raises
    ------
    MagicMismatchError
        If the file is not a triangle surface (quad surfaces included).
    FormatError
        If a face references a vertex that does not exist.
    TruncatedFileError
        If the file ends early.
    OSError
        If the file cannot be opened.
    """
    with open_stream(filepath) as stream:
        return read_surface_stream(stream)


def write_surface(filepath, vertices, faces, comment=None):
    """Write a FreeSurfer triangle surface file.

    Parameters
    ----------
    filepath : str
        Output path; a ``.gz`` suffix writes a gzip-compressed file.
    vertices : array_like, shape (V, 3)
        Vertex coordinates, stored as float32.
    faces : array_like, shape (F, 3)
        0-based vertex indices.
    comment : str, optional
        Creation stamp.  Default ``"created by fsformats"``.
    """
    vertices = np.asarray(vertices, dtype=">f4")
    faces = np.asarray(faces, dtype=">i4")
    if vertices.ndim != 2 or vertices.shape[1] != 3:
        raise ValueError(
            f"vertices must be an array of shape (N, 3), got shape {vertices.shape}."
        )
    if faces.ndim != 2 or faces.shape[1] != 3:
        raise ValueError(
            f"faces must be an array of shape (M, 3), got shape {faces.shape}."
        )
    if comment is None:
        comment = "created by fsformats"
    stamp = comment.encode("utf-8")
    if b"\n\n" in stamp + b"\n":
        raise ValueError("The surface comment must not contain a blank line.")
    with open_output(filepath) as fobj:
        fobj.write(TRIANGLE_MAGIC.to_bytes(3, "big"))
        fobj.write(stamp + COMMENT_TERMINATOR)
        fobj.write(np.array([vertices.shape[0], faces.shape[0]], dtype=">i4").tobytes())
        fobj.write(vertices.tobytes())
        fobj.write(faces.tobytes())
