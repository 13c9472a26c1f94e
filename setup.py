"""
Setup file.
"""

import os

from setuptools import find_packages, setup

KEYWORDS = "cargo build-script codegen bindings egl webidl rust"
HERE = os.path.dirname(os.path.abspath(__file__))


if __name__ == "__main__":
    setup(
        name="prebuild",
        version="0.1.0",
        description="Pre-compilation orchestrator for Cargo build scripts",
        keywords=KEYWORDS,
        python_requires=">=3.8",
        package_dir={"": "src"},
        packages=find_packages("src"),
        package_data={"prebuild.bindings": ["api/egl.xml"]},
        include_package_data=True,
        install_requires=[],
        extras_require={"test": ["pytest"]},
        entry_points={"console_scripts": ["prebuild=prebuild.cli:main"]},
    )
