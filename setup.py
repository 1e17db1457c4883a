#!/usr/bin/env python

from setuptools import setup

setup(
    name="pbxdecode",
    version="0.1.0",
    packages=[
        "pbxdecode",
        "pbxdecode.details",
        "pbxdecode.details.tools",
    ],
    python_requires=">=3.9",
    install_requires=["openstep_parser"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["pbxdecode = pbxdecode.__main__:main"]},
)
