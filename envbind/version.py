"""Release version and supported interpreter range for envbind."""

from __future__ import annotations

from pathlib import Path
from typing import Final, Tuple

MIN_PYTHON_VERSION: Final[Tuple[int, int]] = (3, 10)
MIN_PYTHON_VERSION_STR: Final[str] = ".".join(str(part) for part in MIN_PYTHON_VERSION)
PYTHON_REQUIRES_SPECIFIER: Final[str] = f">={MIN_PYTHON_VERSION_STR}"

# setup.py reads this module with runpy, so the VERSION file is located
# relative to this file rather than through importlib.resources.
_VERSION_FILE = Path(__file__).resolve().parent / "VERSION"
PROJECT_VERSION: Final[str] = _VERSION_FILE.read_text(encoding="utf-8").strip()
__version__: Final[str] = PROJECT_VERSION

__all__ = [
    "MIN_PYTHON_VERSION",
    "MIN_PYTHON_VERSION_STR",
    "PYTHON_REQUIRES_SPECIFIER",
    "PROJECT_VERSION",
    "__version__",
]
