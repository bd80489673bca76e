"""xdrc - XDR (RFC 4506) interface definitions compiled to zero-copy Rust codecs."""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("xdrc")
    __dev__ = False
except PackageNotFoundError:
    # Development mode - read from pyproject.toml
    from xdrc.internals.version import _read_version_from_pyproject
    __version__ = _read_version_from_pyproject()
    __dev__ = True

from xdrc.compiler.pipeline import analyze_source, compile_source  # noqa: E402

__all__ = ["analyze_source", "compile_source", "__version__"]
