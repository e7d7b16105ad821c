#!/usr/bin/env python
from setuptools import setup, find_packages

setup(
    name="mhs5200a-driver",
    version="0.0.1",
    description="Serial driver and frequency counter acquisition for the MHS-5200A function generator",
    packages=find_packages(),
    entry_points={"console_scripts": ["mhs5200a = mhs5200a.run:run"]},
    # fmt: off
    install_requires=[
        "backoff",
        "pandas",
        "pyserial"
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock"
        ]
    },
    # fmt: on
    include_package_data=True,
)
