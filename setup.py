#!/usr/bin/env python

# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# -*- encoding: utf-8 -*-

from setuptools import find_packages
from setuptools import setup

setup(
    name="dero",
    version="0.0.0",
    license="GPL-3.0-or-later",
    description="Type romanized Korean, get Hangul on the clipboard",
    long_description="An always-on-top window that converts romanized Korean to Hangul as you type, "
    "then copies the result to the clipboard or looks it up in the dictionary.",
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: POSIX :: Linux",
        "Natural Language :: Korean",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Text Processing :: Linguistic",
    ],
    keywords=["hangul", "korean", "romanization", "input method"],
    python_requires=">=3.11",
    install_requires=[
        "cattrs>=23.1",
        "msgspec",
        "Pillow>=10.1.0",
        "pygtrie>=2.4.2",
        "trio>=0.20.0",
        "trio-util>=0.7.0",
    ],
    extras_require={
        "test": ["pytest>=6.2.4", "pytest-trio>=0.8.0"],
    },
    entry_points={
        "console_scripts": [
            "dero = dero.app:main",
            "dero-convert = dero.scripts:convert_cli",
            "dero-keys = dero.scripts:print_key_events",
        ],
    },
)
