from __future__ import annotations
import sys, platform, datetime
import tomllib
from pathlib import Path
from importlib.metadata import version as _pkg_version, PackageNotFoundError

def _read_version_from_pyproject() -> str:
    """
    Read version from pyproject.toml as the single source of truth.

    Returns:
        Version string from pyproject.toml, or "unknown" if unable to read.
    """
    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    try:
        with open(pyproject_path, "rb") as f:
            return tomllib.load(f).get("project", {}).get("version", "unknown")
    except (OSError, tomllib.TOMLDecodeError):
        return "unknown"

def get_versions() -> dict[str, str]:
    # Installed package metadata first, then pyproject.toml for a source checkout
    try:
        app_ver = _pkg_version("xdrc")
    except PackageNotFoundError:
        app_ver = _read_version_from_pyproject()

    try:
        lark_ver = _pkg_version("lark")
    except PackageNotFoundError:
        lark_ver = "unknown"

    return {
        "app": app_ver,
        "python": platform.python_version(),
        "lark": lark_ver,
    }

def print_banner(stream=None) -> None:
    stream = stream or sys.stdout
    v = get_versions()
    today = datetime.date.today().isoformat()

    # Only style interactive terminals so piped output stays clean
    if getattr(stream, "isatty", lambda: False)():
        BOLD, DIM, RESET = "\x1b[1m", "\x1b[2m", "\x1b[0m"
    else:
        BOLD, DIM, RESET = "", "", ""

    print(
        f"{BOLD}xdrc, XDR to Rust compiler{RESET} • {v['app']}\n"
        f"{DIM}Python {v['python']} • lark {v['lark']} • {today}{RESET}",
        file=stream,
    )
