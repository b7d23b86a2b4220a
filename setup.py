#!/usr/bin/env python

from setuptools import setup


VERSION = "0.1a1"

setup(
    name="lxml-scaffold",
    version=VERSION,
    packages=["lxml_scaffold"],
    python_requires=">=3.11",
    install_requires=["lxml"],
    extras_require={"tests": ["pytest"]},
)
