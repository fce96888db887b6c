"""A setuptools based setup module.

See:
https://packaging.python.org/en/latest/distributing.html
https://github.com/pypa/sampleproject
"""
import os

from setuptools import find_packages, setup

# pylint: disable=redefined-builtin

here = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(here, "README.rst"), encoding="utf-8") as fid:
    long_description = fid.read()

with open(os.path.join(here, "requirements.txt"), encoding="utf-8") as fid:
    install_requires = [line for line in fid.read().splitlines() if line.strip()]

setup(
    name="annotation-search",
    version="0.0.1",
    description="Search annotations through class hierarchies and enclosing scopes.",
    long_description=long_description,
    url="https://github.com/annotation-search/annotation-search",
    author="Annotation Search Developers",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    license="License :: OSI Approved :: MIT License",
    keywords="annotations decorators metadata inheritance meta-annotations",
    packages=find_packages(exclude=["tests", "tests.*", "continuous_integration"]),
    install_requires=install_requires,
    extras_require={
        "dev": [
            "black==24.3.0",
            "mypy==1.9.0",
            "pylint==3.1.0",
            "coverage>=6.5.0,<8",
        ],
    },
    python_requires=">=3.10",
    package_data={"annotation_search": ["py.typed"]},
    data_files=[(".", ["README.rst", "requirements.txt"])],
    entry_points={
        "console_scripts": [
            "annotation-search=annotation_search.main:entry_point",
        ]
    },
)
