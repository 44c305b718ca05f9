"""setup.py: setuptools control."""

import codecs
import os.path
import sys
from typing import List

from setuptools import find_packages, setup


ROOT_DIR = os.path.abspath(os.path.dirname(__file__))


def read_file(rel_path: str) -> str:
    """Read a file and return the contents."""
    _path = os.path.join(ROOT_DIR, rel_path)
    if os.path.isfile(_path):
        with codecs.open(_path, "r") as fp:
            return fp.read()
    else:
        return ""


def get_project_name_and_version(rel_path: str) -> List[str]:
    """Get the project name and version from a file specified by __version__ = name@version."""
    for line in read_file(rel_path).splitlines():
        if line.startswith("__version__"):
            delim = '"' if '"' in line else "'"
            return line.split(delim)[1].split("@")
    else:
        raise RuntimeError("Unable to find version string.")


def get_requirements(filename: str = "requirements.txt") -> List[str]:
    """Get Python package dependencies from a requirements file."""

    def _read_requirements(filename: str) -> List[str]:
        requirements = read_file(filename).strip().split("\n")
        resolved_requirements = []
        for line in requirements:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("-r "):
                resolved_requirements += _read_requirements(line.split()[1])
            else:
                resolved_requirements.append(line)
        return resolved_requirements

    return _read_requirements(filename)


name, version = get_project_name_and_version("healthcheck_exporter/__about__.py")
version_range_max = max(sys.version_info[1], 12) + 1

setup(
    name=name,
    version=version,
    description=(
        "Prometheus exporter that probes the HTTP liveness endpoint of every pod in a Kubernetes cluster "
        "on each scrape and reports the round trip latency as a labeled gauge."
    ),
    long_description=read_file("README.md"),
    long_description_content_type="text/markdown",
    keywords="kubernetes prometheus exporter liveness probe health check latency",
    license="Apache 2.0 License",
    author="Bud Ecosystem Inc.",
    packages=find_packages(
        exclude=(
            "docs",
            "docs.*",
            "tests",
            "tests.*",
        ),
    ),
    package_data={"healthcheck_exporter": ["py.typed"]},
    include_package_data=True,
    python_requires=">=3.11.0",
    install_requires=get_requirements(),
    extras_require={"test": get_requirements("requirements-test.txt")},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "Topic :: System :: Monitoring",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
    ]
    + [f"Programming Language :: Python :: 3.{i}" for i in range(11, version_range_max)],
)
