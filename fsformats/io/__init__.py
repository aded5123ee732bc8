"""IO subpackage: readers and writers for FreeSurfer file formats.

Architecture
------------
The subpackage has two layers:

**Layer 1, byte streams** (:mod:`~fsformats.io.stream`):

``open_stream`` / ``open_output`` open plain or gzip-compressed files and
:class:`~fsformats.io.stream.BinaryStream` provides the big-endian reads
(including the 3-byte integer) every binary format is built from.

**Layer 2, format codecs** (one file per format):

* :mod:`~fsformats.io.curv`: morphometry scalars (``read_curv``).
* :mod:`~fsformats.io.mgh`: MGH/MGZ volumes (``read_mgh``).
* :mod:`~fsformats.io.colortable`: legacy and version 2 colortables, used
  by :mod:`~fsformats.io.annot` (``read_annot``).
* :mod:`~fsformats.io.surface`: triangle meshes (``read_surface``).
* :mod:`~fsformats.io.label`: ASCII labels (``read_label``).

Each codec also has a ``write_*`` counterpart.  :mod:`~fsformats.io.morph`
picks curv or MGH reading for per-vertex data by filename
(``read_morph``).
"""
from .annot import read_annot, write_annot
from .colortable import read_colortable_legacy, read_colortable_v2
from .curv import read_curv, write_curv
from .label import read_label, write_label
from .mgh import read_mgh, write_mgh
from .morph import morph_format_from_filename, read_morph
from .stream import BinaryStream, open_output, open_stream
from .surface import read_surface, write_surface

__all__ = [
    # Streams
    'open_stream',
    'open_output',
    'BinaryStream',
    # Readers
    'read_curv',
    'read_mgh',
    'read_morph',
    'read_annot',
    'read_colortable_legacy',
    'read_colortable_v2',
    'read_surface',
    'read_label',
    'morph_format_from_filename',
    # Writers
    'write_curv',
    'write_mgh',
    'write_annot',
    'write_surface',
    'write_label',
]
