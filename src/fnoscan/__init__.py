"""Core package for the F&O bull/bear qualification scanner."""

from importlib.metadata import version

__all__ = ["__version__"]

try:
    __version__ = version("fno-scanner")
except Exception:  # pragma: no cover - package not installed in dev mode yet.
    __version__ = "0.0.0"
