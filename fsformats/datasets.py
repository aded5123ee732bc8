"""Sample subject download for examples and manual testing.

Fetches a small anonymized FreeSurfer subject (surfaces, morphometry,
annotations and labels) and caches it locally, so every reader in this
package can be tried on real files.
"""

from pathlib import Path

RELEASE_URL = (
    "https://github.com/Deep-MI/WhipperSnapPy"
    "/releases/download/v2.0.0/{file_name}"
)

# Relative path inside the subject directory → (result key, SHA-256 hash).
# Release assets are flat, so only the basename is part of the URL.
SAMPLE_FILES = {
    "surf/lh.white":                        ("lh_white", "sha256:4ab049fb42ca882ba9b56f8fe0d0e8814973e7fa2e0575a794d8e468abf7d62f"),
    "surf/lh.curv":                         ("lh_curv", "sha256:9edbde57be8593cd9d89d9d1124e2175edd8ecfee55d53e066d89700c480b12a"),
    "surf/lh.thickness":                    ("lh_thickness", "sha256:40ab3483284608c6c5cca2d3d794a60cd1bcbeb0140bb1ca6ad0fce7962c57c6"),
    "surf/rh.white":                        ("rh_white", "sha256:43035c53a8b04bebe4e843c34f80588f253f79052a8dbf7194b706495b11f8d2"),
    "surf/rh.curv":                         ("rh_curv", "sha256:af2bc71133d7ef17ce1a3a6f4208d2495a5a4c96da00c80b59be03bb7c8ea83f"),
    "surf/rh.thickness":                    ("rh_thickness", "sha256:50ec291c73928cd697156edd9e0e77f5c54d15c56cf84810d2564b496876e132"),
    "label/lh.aparc.DKTatlas.mapped.annot": ("lh_annot", "sha256:4d48d33f4fd8278ab973a1552f6ea9c396dfc1791b707ed17ad8e761299c4960"),
    "label/lh.cortex.label":                ("lh_label", "sha256:79ae17fcfde6b2e0a75a0652fcc0f3c072e4ea62a541843b7338e01c598b0b6e"),
    "label/rh.aparc.DKTatlas.mapped.annot": ("rh_annot", "sha256:12217166d8ef43ee1fa280511ec2ba0796c6885f527a4455b93760acc73ce273"),
    "label/rh.cortex.label":                ("rh_label", "sha256:162c97c887eb1ec857fe575b8cc4e4b950c7dd5ec181a581d709bbe7fca58f9e"),
}


def _paths(base: Path) -> dict:
    """Map result keys to file paths below *base*."""
    paths = {"sdir": str(base)}
    for rel_path, (key, _) in SAMPLE_FILES.items():
        paths[key] = str(base / rel_path)
    return paths


def _is_complete(base: Path) -> bool:
    return base.is_dir() and all((base / p).exists() for p in SAMPLE_FILES)


def fetch_sample_subject(path=None) -> dict:
    """Download and cache the sample subject.

    Parameters
    ----------
    path : str or pathlib.Path, optional
        Directory holding (or receiving) the subject.  Default is the
        OS-specific user cache directory of ``pooch``.  A complete local
        ``sub-rs/`` directory next to the package is used without network
        access.

    Returns
    -------
    dict
        ``sdir`` (subject directory) plus one key per file: ``lh_white``,
        ``lh_curv``, ``lh_thickness``, ``lh_annot``, ``lh_label`` and the
        same for ``rh``.

    Raises
    ------
    ImportError
        If the files have to be downloaded and ``pooch`` is not installed.
        Install with ``pip install 'fsformats[data]'``.

    Notes
    -----
    Data from the Rhineland Study (Koch et al.),
    https://doi.org/10.5281/zenodo.11186582, CC BY 4.0.

    Examples
    --------
    >>> from fsformats import fetch_sample_subject, read_annot
    >>> data = fetch_sample_subject()
    >>> annot = read_annot(data["lh_annot"])
    """
    base = Path(path) if path is not None else Path(__file__).resolve().parent.parent / "sub-rs"
    if _is_complete(base):
        return _paths(base)

    try:
        import pooch
    except ImportError as e:
        raise ImportError(
            "fetch_sample_subject() requires pooch. "
            "Install with: pip install 'fsformats[data]'"
        ) from e

    if path is None:
        base = Path(pooch.os_cache("fsformats")) / "sub-rs"

    for rel_path, (_, known_hash) in SAMPLE_FILES.items():
        rel = Path(rel_path)
        pooch.retrieve(
            url=RELEASE_URL.format(file_name=rel.name),
            known_hash=known_hash,
            fname=rel.name,
            path=base / rel.parent,
        )
    return _paths(base)
