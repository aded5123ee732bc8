"""Readers for the colortables embedded in FreeSurfer annotation files.

Two historical layouts exist.  Both start with the path of the colortable
file on the machine that created the annotation, which is read only to keep
the stream position right.

Legacy layout (entry count given by the caller)::

    int32 len, char[len] dev_filepath
    per entry: int32 len, char[len] name, int32 r, g, b, a

Version 2 layout::

    int32 len, char[len] dev_filepath
    int32 number of stored entries
    per entry: int32 struct_index, int32 len, char[len] name, int32 r, g, b, a

In both layouts entry ``i`` of the file becomes row ``i`` of the table.  The
struct index of version 2 entries is checked but does not decide the row,
which keeps tables identical to those produced by earlier readers.
"""

import logging

import numpy as np

from ..errors import InvalidIndexError
from ..types import ColorTable

logger = logging.getLogger(__name__)


def _read_entry(stream):
    name = stream.read_length_prefixed_string()
    rgba = stream.read_array(">i4", 4).astype(np.int64)
    return name, rgba


def _build(names, rgba_rows):
    return ColorTable.from_rgba(names, np.array(rgba_rows, dtype=np.int64).reshape(-1, 4))


def read_colortable_legacy(stream, num_entries):
    """Read a colortable in the legacy (unversioned) layout.

    Parameters
    ----------
    stream : BinaryStream
        Stream positioned right after the entry count.
    num_entries : int
        Number of entries, as read from the annotation file.

    Returns
    -------
    ColorTable
    """
    stream.read_length_prefixed_string()  # dev filepath, unused
    names = []
    rgba_rows = []
    for _ in range(num_entries):
        name, rgba = _read_entry(stream)
        names.append(name)
        rgba_rows.append(rgba)
    return _build(names, rgba_rows)


def read_colortable_v2(stream, num_entries):
    """Read a colortable in the version 2 layout.

    Parameters
    ----------
    stream : BinaryStream
        Stream positioned right after the entry count that follows the
        version code.
    num_entries : int
        Entry count read from the annotation file.  It is compared with the
        number of stored entries; a mismatch is logged, not raised.

    Returns
    -------
    ColorTable

    Raises
    ------
    InvalidIndexError
        If an entry declares a negative struct index.
    """
    stream.read_length_prefixed_string()  # dev filepath, unused
    num_stored = stream.read_i32_be()
    if num_stored != num_entries:
        logger.warning(
            "Colortable in %s: entry count mismatch, header says %d but %d "
            "entries are stored.", stream.name, num_entries, num_stored,
        )

    names = []
    rgba_rows = []
    seen = set()
    for i in range(num_stored):
        # stored 0-based; the 1-based index must not be negative, so -1 passes
        struct_idx = stream.read_i32_be() + 1
        if struct_idx < 0:
            raise InvalidIndexError(
                f"Invalid struct index in colortable entry #{i} of "
                f"{stream.name!r}: 1-based index must not be negative but is "
                f"{struct_idx}."
            )
        name, rgba = _read_entry(stream)
        if name and name in seen:
            logger.warning(
                "Colortable in %s, entry #%d (struct index %d): name %r was "
                "already used; structure names must be unique.",
                stream.name, i, struct_idx, name,
            )
        seen.add(name)
        names.append(name)
        rgba_rows.append(rgba)
    return _build(names, rgba_rows)


def _string_bytes(text):
    raw = text.encode("utf-8") + b"\x00"
    return np.array([len(raw)], dtype=">i4").tobytes() + raw


def write_colortable_v2(fobj, colortable, dev_filepath=""):
    """Write *colortable* in the version 2 layout, version code included.

    Struct indices are written as the row positions.
    """
    n = colortable.num_entries
    fobj.write(np.array([-2, n], dtype=">i4").tobytes())
    fobj.write(_string_bytes(dev_filepath))
    fobj.write(np.array([n], dtype=">i4").tobytes())
    for idx, (name, row) in enumerate(zip(colortable.struct_names, colortable.table)):
        fobj.write(np.array([idx], dtype=">i4").tobytes())
        fobj.write(_string_bytes(name))
        fobj.write(np.asarray(row[:4], dtype=">i4").tobytes())
