#!/usr/bin/env python
"""Python package description."""

from pathlib import Path

from setuptools import setup

setup(
    name="pybluelinkapi",
    version="0.1.0",
    description="Python library and CLI for managing a Hyundai Bluelink Europe API session.",
    long_description=Path("README.md").read_text(encoding="utf-8"),
    long_description_content_type="text/markdown",
    include_package_data=True,
    license="MIT",
    packages=["pybluelinkapi"],
    python_requires=">=3.10",
    install_requires=["httpx<1", "push_receiver", "rich"],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": ["bluelink=pybluelinkapi.cli:cli"],
    },
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python",
        "Operating System :: OS Independent",
    ],
)
