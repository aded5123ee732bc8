"""Reader and writer for FreeSurfer annotation (``.annot``) files.

An annotation assigns a label code to every vertex of a surface and usually
embeds a colortable that maps the codes to region names and colors::

    int32 n
    n × (int32 vertex index, int32 label code)      interleaved
    int32 has_colortable
    int32 count      > 0: legacy colortable with ``count`` entries
                     < 0: version ``-count``; version 2 is followed by
                          int32 entry count and a v2 colortable
"""

import logging

import numpy as np

from ..errors import FormatError, UnsupportedVersionError
from ..types import Annotation, read_only
from .colortable import read_colortable_legacy, read_colortable_v2, write_colortable_v2
from .stream import open_output, open_stream

logger = logging.getLogger(__name__)

UNMATCHED_COLOR = "#333333"


def _derive_names_and_colors(label_codes, colortable, empty_label_name):
    """Return per-vertex region names and ``#RRGGBB`` colors.

    Rows are processed in table order; a vertex takes the name and color of
    every row whose code equals its label code.  Empty names are replaced by
    ``<empty_label_name><k>`` with ``k`` counting from 1, so several unnamed
    regions stay distinguishable.
    """
    names = np.full(label_codes.shape, "", dtype=object)
    colors = np.full(label_codes.shape, UNMATCHED_COLOR, dtype=object)
    n_empty = 1
    for entry in colortable.entries:
        name = entry.name
        if empty_label_name and not name:
            name = f"{empty_label_name}{n_empty}"
            logger.debug("Replacing empty label name with %r.", name)
            n_empty += 1
        hits = label_codes == entry.code
        names[hits] = name
        colors[hits] = entry.hex_rgb
    return names.astype(str), colors.astype(str)


def read_annot_stream(stream, empty_label_name="unknown"):
    """Decode an annotation from an open stream.

    See :func:`read_annot` for the parameters and return value.
    """
    n = stream.read_i32_be()
    if n < 0:
        raise FormatError(
            f"Annotation file {stream.name!r} declares a negative vertex count ({n})."
        )
    pairs = stream.read_array(">i4", 2 * n)
    vertices = read_only(pairs[0::2].astype(np.int64))
    label_codes = read_only(pairs[1::2].astype(np.int64))

    # a file ending right after the pairs has no colortable
    first = stream.read_optional(1)
    if first is None:
        return Annotation(vertices=vertices, label_codes=label_codes)
    flag = first + stream.read_bytes(3)
    if not int.from_bytes(flag, "big", signed=True):
        return Annotation(vertices=vertices, label_codes=label_codes)

    num_entries = stream.read_i32_be()
    if num_entries > 0:
        colortable = read_colortable_legacy(stream, num_entries)
    else:
        version = -num_entries
        if version != 2:
            raise UnsupportedVersionError(
                f"Unsupported annotation file version {version} in {stream.name!r}."
            )
        num_entries = stream.read_i32_be()
        colortable = read_colortable_v2(stream, num_entries)

    label_names, hex_colors = _derive_names_and_colors(
        label_codes, colortable, empty_label_name
    )
    return Annotation(
        vertices=vertices,
        label_codes=label_codes,
        colortable=colortable,
        label_names=read_only(label_names),
        hex_colors_rgb=read_only(hex_colors),
    )


def read_annot(filepath, empty_label_name="unknown"):
    """Read a FreeSurfer annotation file.

    Parameters
    ----------
    filepath : str
        Path to the annotation file, e.g. ``label/lh.aparc.annot``.  Files
        ending in ``.gz`` are decompressed on the fly.
    empty_label_name : str or None, optional
        Prefix for regions with an empty name; the k-th such region is called
        ``f"{empty_label_name}{k}"``.  ``None`` or ``""`` keeps empty names.
        Default is ``"unknown"``.

    Returns
    -------
    Annotation
        Vertex indices and label codes, plus the colortable, per-vertex
        names and colors if the file has a colortable.  Vertices whose code
        matches no region get the name ``""`` and color ``#333333``.

    Raises
    ------
    UnsupportedVersionError
        If the colortable uses a version other than 2.
    InvalidIndexError
        If a version 2 colortable entry has a negative struct index.
    TruncatedFileError
        If the file ends early.
    OSError
        If the file cannot be opened.
    """
    with open_stream(filepath) as stream:
        return read_annot_stream(stream, empty_label_name=empty_label_name)


def write_annot(filepath, vertices, label_codes, colortable=None):
    """Write a FreeSurfer annotation file with a version 2 colortable.

    Parameters
    ----------
    filepath : str
        Output path; a ``.gz`` suffix writes a gzip-compressed file.
    vertices : array_like
        Vertex indices (0-based).
    label_codes : array_like
        Label code per vertex, parallel to *vertices*.
    colortable : ColorTable, optional
        Colortable to embed.  Without it the has-colortable flag is 0.
    """
    vertices = np.asarray(vertices, dtype=np.int64)
    label_codes = np.asarray(label_codes, dtype=np.int64)
    if vertices.shape != label_codes.shape or vertices.ndim != 1:
        raise ValueError(
            f"vertices and label_codes must be 1-D with equal length, got shapes "
            f"{vertices.shape} and {label_codes.shape}."
        )
    pairs = np.column_stack([vertices, label_codes]).astype(">i4")
    with open_output(filepath) as fobj:
        fobj.write(np.array([vertices.size], dtype=">i4").tobytes())
        fobj.write(pairs.tobytes())
        fobj.write(np.array([colortable is not None], dtype=">i4").tobytes())
        if colortable is not None:
            write_colortable_v2(fobj, colortable)
