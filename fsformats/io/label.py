"""Reader and writer for FreeSurfer ASCII label files.

A label file (e.g. ``label/lh.cortex.label``) lists a subset of surface
vertices::

    #!ascii label  , from subject bert vox2ras=TkReg
    3
    1021  -31.2  -10.5  40.1  0.000000
    1022  -30.9  -10.1  40.3  0.000000
    1350  -29.7   -9.8  41.0  0.000000

The first line is a comment, the second the number of rows, then one row
per vertex: vertex index, x, y, z and a value.
"""

import numpy as np

from ..errors import FormatError
from ..types import LabelSet, read_only
from .stream import open_output, open_stream


def _parse_label_text(text, name, default_value):
    lines = [ln.strip() for ln in text.splitlines()]
    lines = [ln for ln in lines if ln]
    if len(lines) < 2:
        raise FormatError(
            f"Label file {name!r} needs a comment line and a count line."
        )
    comment = lines[0].lstrip("#").strip()
    try:
        count = int(lines[1].split()[0])
    except ValueError as exc:
        raise FormatError(
            f"Could not parse label count line {lines[1]!r} in {name!r}."
        ) from exc
    rows = lines[2:]
    if count < 0 or len(rows) < count:
        raise FormatError(
            f"Label file {name!r} declares {count} vertices but only "
            f"{len(rows)} data lines follow."
        )

    vertices = np.empty(count, dtype=np.int64)
    coords = np.zeros((count, 3), dtype=np.float64)
    values = np.full(count, default_value, dtype=np.float64)
    for i, row in enumerate(rows[:count]):
        tokens = row.split()
        try:
            vertices[i] = int(tokens[0])
            xyz = [float(t) for t in tokens[1:4]]
            coords[i, : len(xyz)] = xyz
            if len(tokens) >= 5:
                values[i] = float(tokens[4])
        except ValueError as exc:
            raise FormatError(
                f"Could not parse label row {i} in {name!r}: {row!r}"
            ) from exc
    return LabelSet(
        vertices=read_only(vertices),
        values=read_only(values),
        coords=read_only(coords),
        comment=comment,
    )


def read_label(filepath, default_value=0.0):
    """Read a FreeSurfer ASCII label file.

    Parameters
    ----------
    filepath : str
        Path to the label file.  Files ending in ``.gz`` are decompressed on
        the fly.
    default_value : float, optional
        Value for rows without a value column.  Default 0.0.

    Returns
    -------
    LabelSet
        0-based vertex indices, their values and coordinates.

    Raises
    ------
    FormatError
        If the count line or a data row cannot be parsed, or fewer rows
        follow than declared.
    OSError
        If the file cannot be opened.
    """
    with open_stream(filepath) as stream:
        text = stream.read_remaining().decode("utf-8", errors="replace")
        return _parse_label_text(text, stream.name, default_value)


def write_label(filepath, vertices, values=None, coords=None, comment=None):
    """Write a FreeSurfer ASCII label file.

    Parameters
    ----------
    filepath : str
        Output path; a ``.gz`` suffix writes a gzip-compressed file.
    vertices : array_like
        0-based vertex indices.
    values : array_like, optional
        One value per vertex.  Default all zeros.
    coords : array_like, optional
        (n, 3) coordinates.  Default all zeros.
    comment : str, optional
        Header comment, written after ``#``.
    """
    vertices = np.asarray(vertices, dtype=np.int64).reshape(-1)
    n = vertices.size
    values = np.zeros(n) if values is None else np.asarray(values, dtype=np.float64)
    coords = np.zeros((n, 3)) if coords is None else np.asarray(coords, dtype=np.float64)
    if values.shape != (n,) or coords.shape != (n, 3):
        raise ValueError(
            f"Expected values of shape ({n},) and coords of shape ({n}, 3), got "
            f"{values.shape} and {coords.shape}."
        )
    if comment is None:
        comment = "!ascii label , written by fsformats"
    lines = [f"#{comment}", str(n)]
    for vid, (x, y, z), val in zip(vertices, coords, values):
        lines.append(f"{vid} {float(x)!r} {float(y)!r} {float(z)!r} {float(val)!r}")
    with open_output(filepath) as fobj:
        fobj.write(("\n".join(lines) + "\n").encode("utf-8"))
