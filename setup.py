from __future__ import annotations

import runpy
from pathlib import Path

from setuptools import setup

_VERSION = runpy.run_path(str(Path(__file__).parent / "envbind" / "version.py"))
PROJECT_VERSION = _VERSION["PROJECT_VERSION"]
PYTHON_REQUIRES_SPECIFIER = _VERSION["PYTHON_REQUIRES_SPECIFIER"]

if __name__ == "__main__":
    setup(
        name="envbind",
        version=PROJECT_VERSION,
        description="Bind typed configuration objects from tagged environment variables",
        python_requires=PYTHON_REQUIRES_SPECIFIER,
        packages=["envbind"],
        package_data={"envbind": ["VERSION"]},
        install_requires=[
            "annotated-types>=0.6",
            "loguru>=0.7",
            "pydantic>=2.5",
            "pydantic-core>=2.14",
            "PyYAML>=6.0",
        ],
        extras_require={
            "test": [
                "hypothesis>=6.90",
                "pytest>=7.4",
            ],
        },
    )
