"""Data structures returned by the fsformats readers.

Every reader builds a fresh instance per call; nothing is shared between
calls.  Optional parts of a file are modelled as fields set to ``None``.
Structures holding arrays compare field-wise with ``numpy.array_equal`` and
are not hashable.  Arrays held by decoded
structures are read-only.

Classes
-------
MghDataType
    Voxel data type codes of the MGH format.
MghHeader
    Decoded MGH header, including the optional orientation and MR blocks.
MghFile
    ``(data, header)`` pair returned by ``read_mgh(..., with_header=True)``.
ColorTableEntry
    One named region with its RGBA color and unique code.
ColorTable
    Ordered region table stored inside annotation files.
Annotation
    Per-vertex label codes plus the optional colortable and derived names.
SurfaceMesh
    Vertex coordinates and triangle faces of a surface file.
LabelSet
    Vertex indices and values of a label file.
"""

import enum
from dataclasses import dataclass, field, fields
from typing import NamedTuple

import numpy as np


class MghDataType(enum.Enum):
    """Voxel data type codes used in the MGH header.

    Attributes
    ----------
    UCHAR : int
        Unsigned 8-bit integer (code 0).
    INT : int
        Signed 32-bit integer (code 1).
    FLOAT : int
        32-bit float (code 3).
    SHORT : int
        Signed 16-bit integer (code 4).
    """
    UCHAR = 0
    INT = 1
    FLOAT = 3
    SHORT = 4

    @property
    def dtype(self) -> np.dtype:
        """Big-endian numpy dtype of one sample on disk."""
        return np.dtype(_MGH_DTYPES[self])

    @property
    def itemsize(self) -> int:
        """Number of bytes of one sample."""
        return self.dtype.itemsize

    @classmethod
    def from_numpy(cls, dtype):
        """Return the MGH type able to store samples of numpy *dtype*.

        ``uint8``, ``int16``, ``int32`` and ``float32`` map exactly; other
        floats are stored as ``FLOAT`` and other integers (and booleans) as
        ``INT``.
        """
        dtype = np.dtype(dtype)
        for member, code in _MGH_DTYPES.items():
            if np.dtype(code).newbyteorder("=") == dtype.newbyteorder("="):
                return member
        if np.issubdtype(dtype, np.floating):
            return cls.FLOAT
        if np.issubdtype(dtype, np.integer) or dtype == np.bool_:
            return cls.INT
        raise TypeError(f"Cannot store numpy dtype {dtype} in an MGH file.")


_MGH_DTYPES = {
    MghDataType.UCHAR: ">u1",
    MghDataType.INT:   ">i4",
    MghDataType.FLOAT: ">f4",
    MghDataType.SHORT: ">i2",
}


def _fields_equal(a, b):
    """Field-wise equality that compares numpy arrays by shape and content."""
    if type(a) is not type(b):
        return NotImplemented
    for f in fields(a):
        x, y = getattr(a, f.name), getattr(b, f.name)
        if isinstance(x, np.ndarray) or isinstance(y, np.ndarray):
            if x is None or y is None or not np.array_equal(x, y):
                return False
        elif x != y:
            return False
    return True


def read_only(arr):
    """Mark a decoded array as read-only and return it (``None`` passes)."""
    if arr is not None:
        arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class MghHeader:
    """Header of an MGH/MGZ volume.

    Attributes
    ----------
    dtype : MghDataType
        Voxel data type.
    dof : int
        Degrees of freedom field (kept for round-tripping).
    ras_good_flag : bool
        Whether the orientation block is present and valid.
    has_mr_params : bool
        Whether the MR acquisition parameter trailer is present.
    voldim : tuple of int
        ``(width, height, depth, frames)``.
    delta : numpy.ndarray or None
        Voxel sizes, shape (3,).  Set iff ``ras_good_flag``.
    mdc : numpy.ndarray or None
        Direction cosines, shape (3, 3), one column per voxel axis.
        Set iff ``ras_good_flag``.
    p_xyz_c : numpy.ndarray or None
        RAS coordinate of the volume center, shape (3,).  Set iff
        ``ras_good_flag``.
    vox2ras_matrix : numpy.ndarray or None
        4×4 voxel-to-RAS transform.  Set iff ``ras_good_flag``.
    ras_xform : numpy.ndarray or None
        4×4 transform built from ``mdc`` and ``p_xyz_c``.  Set iff
        ``ras_good_flag``.
    mr_params : numpy.ndarray or None
        ``(TR, flip angle, TE, TI)``.  Set iff ``has_mr_params``.
    """
    dtype: MghDataType
    voldim: tuple
    dof: int = 0
    ras_good_flag: bool = False
    has_mr_params: bool = False
    delta: np.ndarray | None = None
    mdc: np.ndarray | None = None
    p_xyz_c: np.ndarray | None = None
    vox2ras_matrix: np.ndarray | None = None
    ras_xform: np.ndarray | None = None
    mr_params: np.ndarray | None = None

    __eq__ = _fields_equal
    __hash__ = None


class MghFile(NamedTuple):
    """Volume data together with its header."""
    data: np.ndarray
    header: MghHeader


@dataclass(frozen=True)
class ColorTableEntry:
    """A named brain region and its color.

    Attributes
    ----------
    name : str
        Structure name, may be empty.
    r, g, b, a : int
        Color channels in 0..255.
    """
    name: str
    r: int
    g: int
    b: int
    a: int = 0

    @property
    def code(self) -> int:
        """Unique label code ``r + g*2**8 + b*2**16 + a*2**24``."""
        return ColorTable.compute_code(self.r, self.g, self.b, self.a)

    @property
    def hex_rgb(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    @property
    def hex_rgba(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}{self.a:02X}"


@dataclass(eq=False)
class ColorTable:
    """Ordered table of brain regions stored in annotation files.

    Row ``i`` of :attr:`table` belongs to ``struct_names[i]``.

    Attributes
    ----------
    struct_names : list of str
        Region names, in file order.
    table : numpy.ndarray
        Integer array of shape (n, 5) with columns r, g, b, a, code.
    """
    struct_names: list = field(default_factory=list)
    table: np.ndarray = field(
        default_factory=lambda: np.zeros((0, 5), dtype=np.int64)
    )

    __eq__ = _fields_equal
    __hash__ = None

    @staticmethod
    def compute_code(r, g, b, a=0):
        """Return the unique code of an RGBA color."""
        return int(r) + int(g) * 2 ** 8 + int(b) * 2 ** 16 + int(a) * 2 ** 24

    @classmethod
    def from_rgba(cls, names, rgba):
        """Build a table from names and an (n, 4) array of RGBA values."""
        rgba = np.asarray(rgba, dtype=np.int64).reshape(-1, 4)
        if len(names) != rgba.shape[0]:
            raise ValueError(
                f"Got {len(names)} names but {rgba.shape[0]} colors."
            )
        codes = rgba[:, 0] + rgba[:, 1] * 2 ** 8 + rgba[:, 2] * 2 ** 16 + rgba[:, 3] * 2 ** 24
        return cls(struct_names=list(names), table=np.column_stack([rgba, codes]))

    @classmethod
    def from_entries(cls, entries):
        """Build a table from a sequence of :class:`ColorTableEntry`."""
        entries = list(entries)
        return cls.from_rgba(
            [e.name for e in entries], [(e.r, e.g, e.b, e.a) for e in entries]
        )

    @property
    def num_entries(self) -> int:
        return len(self.struct_names)

    def __len__(self):
        return self.num_entries

    @property
    def codes(self) -> np.ndarray:
        return self.table[:, 4]

    @property
    def entries(self) -> list:
        return [
            ColorTableEntry(name, *(int(c) for c in row[:4]))
            for name, row in zip(self.struct_names, self.table)
        ]

    def index_of(self, code):
        """Return the first row index whose code equals *code*, or ``None``."""
        hits = np.flatnonzero(self.codes == code)
        return int(hits[0]) if hits.size else None

    def lookup(self, code):
        """Return the :class:`ColorTableEntry` for *code*, or ``None``."""
        idx = self.index_of(code)
        if idx is None:
            return None
        return self.entries[idx]


@dataclass(frozen=True, eq=False)
class Annotation:
    """Decoded annotation file.

    Attributes
    ----------
    vertices : numpy.ndarray
        Vertex indices as stored in the file (0-based).
    label_codes : numpy.ndarray
        Label code of each vertex, parallel to ``vertices``.
    colortable : ColorTable or None
        The embedded colortable, if the file has one.
    label_names : numpy.ndarray or None
        Region name of each vertex; ``None`` without a colortable.
    hex_colors_rgb : numpy.ndarray or None
        ``#RRGGBB`` display color of each vertex; ``None`` without a
        colortable.
    """
    vertices: np.ndarray
    label_codes: np.ndarray
    colortable: ColorTable | None = None
    label_names: np.ndarray | None = None
    hex_colors_rgb: np.ndarray | None = None

    __eq__ = _fields_equal
    __hash__ = None


@dataclass(frozen=True, eq=False)
class SurfaceMesh:
    """Triangle mesh read from a surface file.

    Attributes
    ----------
    vertices : numpy.ndarray
        float64 coordinates, shape (V, 3).
    faces : numpy.ndarray
        int32 vertex indices, shape (F, 3), 0-based.
    comment : str
        Creation stamp stored in the file header.
    """
    vertices: np.ndarray
    faces: np.ndarray
    comment: str = ""

    __eq__ = _fields_equal
    __hash__ = None

    @property
    def num_vertices(self) -> int:
        return self.vertices.shape[0]

    @property
    def num_faces(self) -> int:
        return self.faces.shape[0]


@dataclass(frozen=True, eq=False)
class LabelSet:
    """Vertices and values of a label file.

    Attributes
    ----------
    vertices : numpy.ndarray
        int64 vertex indices (0-based).
    values : numpy.ndarray
        float64 value per vertex.
    coords : numpy.ndarray
        float64 coordinates, shape (n, 3), passed through unchanged.
    comment : str
        The header comment line, without the leading ``#``.
    """
    vertices: np.ndarray
    values: np.ndarray
    coords: np.ndarray
    comment: str = ""

    __eq__ = _fields_equal
    __hash__ = None

    def __len__(self):
        return self.vertices.shape[0]
