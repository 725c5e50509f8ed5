"""
setup.py for fieldtypes.

Runtime introspection goes through python-introspect. The test extra pulls in
pytest:

    pip install -e .[test]
"""

from setuptools import find_packages, setup

setup(
    name="fieldtypes",
    version="0.3.0",
    description="Field type detection and fully-qualified class name resolution",
    packages=find_packages(include=["fieldtypes", "fieldtypes.*"]),
    python_requires=">=3.10",
    install_requires=[
        "python-introspect>=0.3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
)
