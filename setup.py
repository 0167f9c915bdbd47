#!/usr/bin/env python3

# Copyright 2025 Espressif Systems (Shanghai) PTE LTD
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
import sys


def get_install_requires():
    """Read the runtime requirements next to this file."""
    requirements = os.path.join(os.path.dirname(os.path.realpath(__file__)), "requirements.txt")
    with open(requirements) as f:
        required = [line.strip() for line in f.read().splitlines()]
        return [line for line in required if line and not line.startswith("#")]


try:
    from setuptools import find_packages, setup
except ImportError:
    print("Package setuptools is missing from your Python installation. "
          "Please see the installation section in the zap-conformance "
          "documentation for instructions on how to install it.")
    exit(1)

VERSION = "1.0.0"

long_description = """
====================
zap-conformance Tool
====================
A command-line utility and library for evaluating Matter/Zigbee conformance
expressions and resolving feature dependencies of a cluster.

Documentation
-------------
Run ``zap-conformance -h``.

License
-------
Apache-2.0
"""

setup(
    name="zap-conformance",
    version=VERSION,
    description=(
        "A command-line utility for evaluating Matter/Zigbee conformance "
        "expressions and resolving feature dependencies."
    ),
    long_description=long_description,  # noqa: E501
    long_description_content_type="text/x-rst",
    author="",
    author_email="",
    license="Apache-2.0",
    classifiers=[
        "License :: OSI Approved :: Apache Software License",
        "Intended Audience :: Developers",
        "Natural Language :: English",
        "Operating System :: POSIX",
        "Operating System :: MacOS :: MacOS X",
        "Topic :: Software Development :: Embedded Systems",
    ],
    python_requires=">=3.10",
    setup_requires=(["wheel"] if "bdist_wheel" in sys.argv else []),
    install_requires=get_install_requires(),
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
    packages=find_packages(exclude=["zap_conformance.tests", "zap_conformance.tests.*"]),
    entry_points={
        "console_scripts": [
            "zap-conformance=zap_conformance.cli.main:main"
        ],
    },
)
