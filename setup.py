"""
Setup configuration for the terrastl package.

Version 0.1.0 - Solid STL terrain models from elevation grids, with gap
filling, smoothing, heightmap previews and a typer command-line interface.
"""

from setuptools import find_packages, setup

setup(
    name="terrastl",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["terrastl_cli"],
    install_requires=[
        "numpy>=1.20.0",
        "matplotlib>=3.5.0",
        "pillow>=8.0.0",
        "scipy>=1.6.0",
        "typer>=0.9.0",
        "rich>=12.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "terrastl=terrastl_cli:main",
        ],
    },
    description="Convert elevation grids into 3D-printable STL terrain models",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: GIS",
    ],
    python_requires=">=3.8",
)
