#!/usr/bin/env python

# Support setuptools only, distutils has a divergent and more annoying API and
# few folks will lack setuptools.
from setuptools import setup, find_packages

# Version info -- read without importing
_locals = {}
with open("timedwriter/_version.py") as fp:
    exec(fp.read(), None, _locals)
version = _locals["__version__"]

exclude = ["tests", "tests.*", "integration", "integration.*"]

with open("README.rst") as fp:
    long_description = fp.read()


setup(
    name="timed-writer",
    version=version,
    description="Write a block to a file every so many seconds",
    license="AGPL-3.0-or-later",
    long_description=long_description,
    python_requires=">=3.6",
    packages=find_packages(exclude=exclude),
    include_package_data=True,
    install_requires=["invoke>=2.0"],
    extras_require={
        "testing": ["pytest>=7", "pytest-relaxed>=2"],
    },
    entry_points={
        "console_scripts": [
            "timed-writer = timedwriter.main:program.run",
        ]
    },
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Environment :: Console",
        "Intended Audience :: System Administrators",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU Affero General Public License v3 or later (AGPLv3+)", # noqa
        "Operating System :: POSIX",
        "Operating System :: Unix",
        "Operating System :: MacOS :: MacOS X",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: System :: Benchmark",
        "Topic :: System :: Filesystems",
        "Topic :: System :: Systems Administration",
    ],
)
