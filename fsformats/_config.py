"""System and dependency report for bug reports (top-level module)."""

import platform
import re
import sys
from functools import partial
from importlib.metadata import PackageNotFoundError, requires, version
from pathlib import Path
from typing import IO, Callable, Optional

import psutil

_SPECIFIERS = re.compile(r"\s*(~=|==|!=|<=|>=|<|>|===).*$")


def _declared_requirements(package: str) -> list[str]:
    """Return requirement strings from the installed metadata.

    When the package runs from a source checkout without being installed,
    the ``[project]`` tables of ``pyproject.toml`` are used instead, with
    optional dependencies marked like installed metadata does.
    """
    try:
        return requires(package) or []
    except PackageNotFoundError:
        pass

    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    if not pyproject.exists():
        return []
    try:
        import tomllib
    except ImportError:  # Python < 3.11
        return []
    with pyproject.open("rb") as fh:
        project = tomllib.load(fh).get("project", {})
    reqs = list(project.get("dependencies", []))
    for extra, deps in project.get("optional-dependencies", {}).items():
        reqs.extend(f'{dep}; extra == "{extra}"' for dep in deps)
    return reqs


def _requirement_name(req: str) -> str:
    name = req.split(";")[0]
    name = _SPECIFIERS.sub("", name)
    return name.split("[")[0].strip()


def _extra_of(req: str) -> Optional[str]:
    match = re.search(r"extra\s*==\s*['\"]([^'\"]+)['\"]", req)
    return match.group(1) if match else None


def sys_info(fid: Optional[IO] = None, developer: bool = False):
    """Print the system information for debugging.

    Parameters
    ----------
    fid : file-like, default=None
        The file to write to, passed to :func:`print`.
        Can be None to use :data:`sys.stdout`.
    developer : bool, default=False
        If True, also list the optional dependencies of every extra.
    """
    ljust = 26
    out = partial(print, end="", file=fid)
    package = __package__.split(".")[0]

    out("Platform:".ljust(ljust) + platform.platform() + "\n")
    out("Python:".ljust(ljust) + sys.version.replace("\n", " ") + "\n")
    out("Executable:".ljust(ljust) + sys.executable + "\n")
    out("CPU:".ljust(ljust) + platform.processor() + "\n")
    out("Physical cores:".ljust(ljust) + str(psutil.cpu_count(False)) + "\n")
    out("Logical cores:".ljust(ljust) + str(psutil.cpu_count(True)) + "\n")
    out("RAM:".ljust(ljust))
    out(f"{psutil.virtual_memory().total / float(2 ** 30):0.1f} GB\n")

    out("\nDependencies info\n")
    try:
        pkg_version = version(package)
    except PackageNotFoundError:
        pkg_version = "Not installed."
    out(f"{package}:".ljust(ljust) + pkg_version + "\n")

    reqs = _declared_requirements(package)
    _list_dependencies_info(
        out, ljust, [_requirement_name(r) for r in reqs if _extra_of(r) is None]
    )

    if developer:
        extras = sorted({e for e in map(_extra_of, reqs) if e is not None})
        for extra in extras:
            names = [_requirement_name(r) for r in reqs if _extra_of(r) == extra]
            out(f"\nOptional '{extra}' info\n")
            _list_dependencies_info(out, ljust, names)


def _list_dependencies_info(out: Callable, ljust: int, dependencies: list[str]):
    """List dependencies names and versions.

    Parameters
    ----------
    out : Callable
        output function
    ljust : int
         length of returned string
    dependencies : List[str]
        list of distribution names
    """
    for dep in dependencies:
        try:
            version_ = version(dep)
        except PackageNotFoundError:
            version_ = "Not found."
        out(f"{dep}:".ljust(ljust) + version_ + "\n")
