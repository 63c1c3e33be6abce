"""Calc History - integer calculator with pluggable operation history."""
from setuptools import setup, find_packages

setup(
    name="calc-history",
    version="1.0.0",
    description="Integer calculator that records every operation into a swappable history",
    author="Morten Elmstroem Hansen",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click>=8.1.0",
        "rich>=13.0.0",
        "questionary>=2.0.0",
        "toml>=0.10.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "calc-history=calc_history.cli:main",
            "calc=calc_history.cli:main",  # Short alias
        ],
    },
    python_requires=">=3.10",
)
