"""
RDMLOrganizer – read, build and write RDML qPCR documents.
"""

import re
from pathlib import Path
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()


def read_version():
    """Read version from RDMLOrganizer/version.py without importing package."""
    version_path = Path(__file__).resolve().parent / "RDMLOrganizer" / "version.py"
    text = version_path.read_text(encoding="utf-8")
    match = re.search(r'^__version__\s*=\s*"([^"]+)"', text, re.MULTILINE)
    if not match:
        raise RuntimeError("Unable to find __version__ in RDMLOrganizer/version.py")
    return match.group(1)


setup(
    name="RDMLOrganizer",
    version=read_version(),
    author="RDMLOrganizer Team",
    description="Object model, parser and writer for RDML real-time PCR documents",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["RDMLOrganizer", "RDMLOrganizer.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20.0",
        "pandas>=1.3.0",
        "lxml>=4.6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov",
        ],
    },
)
