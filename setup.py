"""Setup script for permstore Python package."""

from setuptools import setup, find_packages

setup(
    name="permstore",
    version="0.1.0",
    description="Permission-gated hierarchical in-memory key-value store",
    author="permstore developers",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": ["pytest", "black", "mypy"],
    },
)
