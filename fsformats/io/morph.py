"""Format-independent reading of per-vertex morphometry data.

Morphometry data comes either as FreeSurfer curv files (usually without an
extension, e.g. ``lh.thickness``) or as MGH/MGZ files holding a single
non-trivial dimension (e.g. ``lh.thickness.fwhm10.fsaverage.mgh``).
:func:`read_morph` routes by the last three characters of the filename.
"""

from .curv import read_curv
from .mgh import read_mgh

_MGH_FORMATS = ("mgh", "mgz")


def morph_format_from_filename(filepath):
    """Return the morphometry format implied by a filename.

    Parameters
    ----------
    filepath : str
        Path or filename.

    Returns
    -------
    str
        ``"mgh"`` or ``"mgz"`` if the name ends in exactly those three
        (lower-case) characters, ``"curv"`` for everything else.
    """
    name = str(filepath)
    suffix = name[-3:]
    if len(name) > 3 and suffix in _MGH_FORMATS:
        return suffix
    return "curv"


def read_morph(filepath):
    """Read per-vertex morphometry data from a curv, MGH or MGZ file.

    Parameters
    ----------
    filepath : str
        Path to the file.  Names ending in ``mgh`` or ``mgz`` are read with
        :func:`~fsformats.io.mgh.read_mgh` (flattened); all others with
        :func:`~fsformats.io.curv.read_curv`.

    Returns
    -------
    numpy.ndarray, shape (n_vertices,)

    Raises
    ------
    ShapeError
        If an MGH/MGZ file holds more than one non-trivial dimension.
    MagicMismatchError
        If a non-MGH file is not a curv file.
    """
    if morph_format_from_filename(filepath) in _MGH_FORMATS:
        return read_mgh(filepath, flatten=True)
    return read_curv(filepath)
