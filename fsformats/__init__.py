"""fsformats: Read and write FreeSurfer neuroimaging file formats.

fsformats decodes the binary and text files written by FreeSurfer into
numpy arrays and small dataclasses.  It includes:

- **Morphometry**: ``read_curv`` for curv files such as ``lh.thickness``
  and ``read_morph`` which also accepts per-vertex MGH/MGZ files
- **Volumes**: ``read_mgh`` for MGH/MGZ files, optionally with the header
- **Atlases**: ``read_annot`` for annotation files with their colortables
- **Meshes and labels**: ``read_surface`` and ``read_label``
- **Writers** for all of the above, for round-tripping data

Every reader transparently handles gzip-compressed files (``.gz``; MGZ
volumes are gzip by definition)::

    from fsformats import read_annot, read_morph

    thickness = read_morph('subject/surf/lh.thickness')
    annot = read_annot('subject/label/lh.aparc.annot')
    print(annot.label_names[:5])

Problems with a file raise subclasses of :class:`fsformats.errors.FormatError`
(itself a ``ValueError``); recoverable oddities are reported through the
``logging`` module.
"""

from ._config import sys_info  # noqa: F401
from ._version import __version__  # noqa: F401
from .datasets import fetch_sample_subject
from .errors import (
    DecompressionError,
    FormatError,
    InvalidIndexError,
    MagicMismatchError,
    ShapeError,
    TruncatedFileError,
    UnsupportedDataTypeError,
    UnsupportedVersionError,
)
from .io import (
    morph_format_from_filename,
    read_annot,
    read_curv,
    read_label,
    read_mgh,
    read_morph,
    read_surface,
    write_annot,
    write_curv,
    write_label,
    write_mgh,
    write_surface,
)
from .types import (
    Annotation,
    ColorTable,
    ColorTableEntry,
    LabelSet,
    MghDataType,
    MghFile,
    MghHeader,
    SurfaceMesh,
)

# Export list
__all__ = [
    "__version__",
    "sys_info",
    "fetch_sample_subject",
    # readers
    "read_curv",
    "read_mgh",
    "read_morph",
    "read_annot",
    "read_surface",
    "read_label",
    "morph_format_from_filename",
    # writers
    "write_curv",
    "write_mgh",
    "write_annot",
    "write_surface",
    "write_label",
    # types
    "Annotation",
    "ColorTable",
    "ColorTableEntry",
    "LabelSet",
    "MghDataType",
    "MghFile",
    "MghHeader",
    "SurfaceMesh",
    # errors
    "FormatError",
    "TruncatedFileError",
    "DecompressionError",
    "MagicMismatchError",
    "UnsupportedVersionError",
    "UnsupportedDataTypeError",
    "ShapeError",
    "InvalidIndexError",
]
