"""Reader and writer for FreeSurfer MGH/MGZ volume files.

Layout of an MGH file (all big-endian):

* int32 version (1)
* int32 width, height, depth, frames
* int32 data type code (see :class:`~fsformats.types.MghDataType`)
* int32 degrees of freedom
* int16 RAS-good flag
* if the flag is set: 3 float32 voxel sizes, 9 float32 direction cosines
  (one voxel axis after the other) and 3 float32 RAS center coordinates
* unused header space up to byte offset 284
* the samples, width varying fastest (column-major / Fortran order)
* optionally 4 float32 MR parameters: TR, flip angle, TE, TI

MGZ files are the same data gzip-compressed.
"""

import logging
import math

import numpy as np

from ..errors import FormatError, ShapeError, UnsupportedDataTypeError
from ..types import MghDataType, MghFile, MghHeader, read_only
from .stream import open_output, open_stream

logger = logging.getLogger(__name__)

MGH_VERSION = 1
MGH_DATA_OFFSET = 284
MGH_GZ_SUFFIXES = (".mgz", ".gz")


def _affine(linear, translation):
    out = np.eye(4)
    out[:3, :3] = linear
    out[:3, 3] = translation
    return out


def compute_vox2ras(mdc, delta, p_xyz_c, voldim):
    """Return the 4×4 voxel-to-RAS matrix of an MGH orientation block.

    Parameters
    ----------
    mdc : numpy.ndarray, shape (3, 3)
        Direction cosines, one column per voxel axis.
    delta : numpy.ndarray, shape (3,)
        Voxel sizes.
    p_xyz_c : numpy.ndarray, shape (3,)
        RAS coordinate of the volume center.
    voldim : sequence of int
        Volume dimensions; the first three are used.

    Returns
    -------
    numpy.ndarray, shape (4, 4)
    """
    linear = np.asarray(mdc, dtype=np.float64) * np.asarray(delta, dtype=np.float64)
    p_crs_c = np.asarray(voldim[:3], dtype=np.float64) / 2.0
    p_xyz_0 = np.asarray(p_xyz_c, dtype=np.float64) - linear @ p_crs_c
    return _affine(linear, p_xyz_0)


def _orientation_from_vox2ras(vox2ras, voldim):
    """Split a vox2ras matrix into ``(delta, mdc, p_xyz_c)``."""
    vox2ras = np.asarray(vox2ras, dtype=np.float64)
    if vox2ras.shape != (4, 4):
        raise ValueError(f"vox2ras must have shape (4, 4), got {vox2ras.shape}.")
    linear = vox2ras[:3, :3]
    delta = np.sqrt(np.sum(linear ** 2, axis=0))
    if np.any(delta == 0):
        raise ValueError("vox2ras has a zero-length voxel axis.")
    mdc = linear / delta
    p_crs_c = np.asarray(voldim[:3], dtype=np.float64) / 2.0
    p_xyz_c = linear @ p_crs_c + vox2ras[:3, 3]
    return delta, mdc, p_xyz_c


def _flatten(data, name):
    non_singleton = [d for d in data.shape if d != 1]
    if len(non_singleton) > 1:
        raise ShapeError(
            f"Requested to flatten data of shape {data.shape} from {name!r}, but "
            f"{len(non_singleton)} dimensions have length > 1 (flatten only "
            f"works if at most one does)."
        )
    return data.reshape(-1)


def read_mgh_stream(stream, with_header=False, flatten=False, drop_empty_dims=False):
    """Decode an MGH volume from an open stream.

    See :func:`read_mgh` for the parameters and return value.
    """
    version = stream.read_i32_be()
    if version != MGH_VERSION:
        logger.warning(
            "MGH file %s has version %d, expected %d; reading anyway.",
            stream.name, version, MGH_VERSION,
        )
    voldim = tuple(int(d) for d in stream.read_array(">i4", 4))
    if any(d < 0 for d in voldim):
        raise FormatError(
            f"MGH file {stream.name!r} has negative dimensions {voldim}."
        )
    type_code = stream.read_i32_be()
    try:
        mgh_type = MghDataType(type_code)
    except ValueError:
        raise UnsupportedDataTypeError(
            f"MGH file {stream.name!r} has unsupported data type code {type_code}; "
            f"supported are {[t.value for t in MghDataType]}."
        ) from None
    dof = stream.read_i32_be()
    ras_good_flag = stream.read_i16_be() > 0

    orientation = {}
    if ras_good_flag:
        delta = stream.read_array(">f4", 3).astype(np.float64)
        # stored axis by axis, i.e. column-wise
        mdc = stream.read_array(">f4", 9).astype(np.float64).reshape(3, 3).T
        p_xyz_c = stream.read_array(">f4", 3).astype(np.float64)
        orientation = {
            "delta": delta,
            "mdc": mdc,
            "p_xyz_c": p_xyz_c,
            "vox2ras_matrix": compute_vox2ras(mdc, delta, p_xyz_c, voldim),
            "ras_xform": _affine(mdc, p_xyz_c),
        }
        orientation = {key: read_only(arr) for key, arr in orientation.items()}

    stream.skip(MGH_DATA_OFFSET - stream.position)

    n_samples = math.prod(voldim)
    raw = stream.read_array(mgh_type.dtype, n_samples)
    data = raw.reshape(voldim, order="F").astype(mgh_type.dtype.newbyteorder("="))

    trailer = stream.read_optional(16)
    mr_params = None
    if trailer is not None:
        mr_params = read_only(np.frombuffer(trailer, dtype=">f4").astype(np.float64))

    if flatten:
        data = _flatten(data, stream.name)
    elif drop_empty_dims:
        data = np.squeeze(data)

    if not with_header:
        return data
    header = MghHeader(
        dtype=mgh_type,
        voldim=voldim,
        dof=dof,
        ras_good_flag=ras_good_flag,
        has_mr_params=mr_params is not None,
        mr_params=mr_params,
        **orientation,
    )
    return MghFile(data, header)


def read_mgh(filepath, with_header=False, flatten=False, drop_empty_dims=False):
    """Read a FreeSurfer MGH or MGZ volume.

    Parameters
    ----------
    filepath : str
        Path to the file.  Names ending in ``.mgz`` or ``.gz`` are read as
        gzip-compressed.
    with_header : bool, optional
        If True, return an :class:`~fsformats.types.MghFile` holding the data
        and the decoded :class:`~fsformats.types.MghHeader`.  Default False.
    flatten : bool, optional
        If True, return the data as a 1-D array.  Only allowed when at most
        one dimension has length > 1, which is the case for per-vertex data
        stored in MGH format.  Default False.
    drop_empty_dims : bool, optional
        If True (and *flatten* is False), remove all dimensions of length 1.
        Default False.

    Returns
    -------
    numpy.ndarray or MghFile
        The 4-D data array indexed ``[column, row, slice, frame]`` (unless
        reshaped by *flatten* or *drop_empty_dims*), or ``(data, header)``
        when *with_header* is True.

    Raises
    ------
    ShapeError
        If *flatten* is requested for data with more than one non-trivial
        dimension.
    UnsupportedDataTypeError
        If the header declares an unknown data type.
    TruncatedFileError
        If the file holds fewer samples than the header declares.
    DecompressionError
        If an MGZ file is not valid gzip.
    OSError
        If the file cannot be opened.
    """
    with open_stream(filepath, gz_suffixes=MGH_GZ_SUFFIXES) as stream:
        return read_mgh_stream(
            stream,
            with_header=with_header,
            flatten=flatten,
            drop_empty_dims=drop_empty_dims,
        )


def write_mgh(filepath, data, header=None, vox2ras=None, mr_params=None):
    """Write a volume to an MGH or MGZ file.

    Parameters
    ----------
    filepath : str
        Output path; ``.mgz`` and ``.gz`` suffixes write gzip-compressed data.
    data : array_like
        Up to 4-D array; missing trailing dimensions are written as 1.  A 1-D
        per-vertex array becomes a ``(n, 1, 1, 1)`` volume.
    header : MghHeader, optional
        Header to take the data type, dof, orientation and MR parameters
        from, e.g. the one returned by ``read_mgh(..., with_header=True)``.
        Without it the data type follows the array dtype.
    vox2ras : array_like, optional
        4×4 voxel-to-RAS matrix; overrides the orientation in *header*.
    mr_params : array_like, optional
        ``(TR, flip angle, TE, TI)``; overrides the values in *header*.

    Raises
    ------
    ValueError
        If *data* has more than 4 dimensions or *vox2ras* is degenerate.
    """
    arr = np.asarray(data)
    if arr.ndim > 4:
        raise ValueError(f"MGH data can have at most 4 dimensions, got {arr.ndim}.")
    voldim = tuple(arr.shape) + (1,) * (4 - arr.ndim)
    arr = arr.reshape(voldim)

    mgh_type = header.dtype if header is not None else MghDataType.from_numpy(arr.dtype)
    dof = header.dof if header is not None else 0

    orientation = None
    if vox2ras is not None:
        orientation = _orientation_from_vox2ras(vox2ras, voldim)
    elif header is not None and header.ras_good_flag:
        orientation = (header.delta, header.mdc, header.p_xyz_c)

    if mr_params is None and header is not None and header.has_mr_params:
        mr_params = header.mr_params

    head = np.array([MGH_VERSION, *voldim, mgh_type.value, dof], dtype=">i4").tobytes()
    head += np.array([1 if orientation is not None else 0], dtype=">i2").tobytes()
    if orientation is not None:
        delta, mdc, p_xyz_c = (np.asarray(x, dtype=np.float64) for x in orientation)
        head += np.concatenate([delta, mdc.T.ravel(), p_xyz_c]).astype(">f4").tobytes()
    head += b"\x00" * (MGH_DATA_OFFSET - len(head))

    with open_output(filepath, gz_suffixes=MGH_GZ_SUFFIXES) as fobj:
        fobj.write(head)
        fobj.write(arr.astype(mgh_type.dtype).tobytes(order="F"))
        if mr_params is not None:
            fobj.write(np.asarray(mr_params, dtype=">f4").reshape(4).tobytes())
