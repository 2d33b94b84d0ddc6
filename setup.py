"""
Setup script for the Plate Layout Randomizer
"""
from setuptools import setup, find_namespace_packages

with open("requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="plate-layout-randomizer",
    version="0.1.0",
    description="Seeded, balanced randomization of factorial treatments onto multi-well plates",
    python_requires=">=3.10,<4.0",
    packages=find_namespace_packages(include=["core", "config", "utils", "backend", "backend.*"]),
    py_modules=["main"],
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.0.0,<10.0.0",
            "pytest-cov>=4.0.0,<8.0.0",
            "pytest-mock>=3.10.0,<4.0.0",
            "httpx>=0.24.0,<1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "plate-layout=main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
    ],
)
