#!/usr/bin/env python3

"""Check that the distribution and annotation_search/__init__.py are in sync."""
import os
import pathlib
import subprocess
import sys
from typing import Dict, List, Optional

import annotation_search

#: Map from the status classifier of the distribution to the expected ``__status__``
STATUS_MAP = {
    "Development Status :: 1 - Planning": "Planning",
    "Development Status :: 2 - Pre-Alpha": "Pre-Alpha",
    "Development Status :: 3 - Alpha": "Alpha",
    "Development Status :: 4 - Beta": "Beta",
    "Development Status :: 5 - Production/Stable": "Production/Stable",
    "Development Status :: 6 - Mature": "Mature",
    "Development Status :: 7 - Inactive": "Inactive",
}


def _query_setup_py(setup_py_pth: pathlib.Path, field: str) -> str:
    """Ask ``setup.py`` for the value of the ``field``."""
    return subprocess.check_output(
        [sys.executable, str(setup_py_pth), f"--{field}"], encoding="utf-8"
    ).strip()


def main() -> int:
    """Execute the main routine."""
    repo_root = pathlib.Path(os.path.realpath(__file__)).parent.parent

    setup_py_pth = repo_root / "setup.py"
    if not setup_py_pth.exists():
        raise RuntimeError(f"Could not find the setup.py: {setup_py_pth}")

    errors = []  # type: List[str]

    expected_in_init = {
        "version": annotation_search.__version__,
        "author": annotation_search.__author__,
        "license": annotation_search.__license__,
        "description": annotation_search.__doc__,
    }  # type: Dict[str, Optional[str]]

    for field, in_init in expected_in_init.items():
        in_setup_py = _query_setup_py(setup_py_pth, field)
        if in_setup_py != in_init:
            errors.append(
                f"The {field} in the setup.py is {in_setup_py!r}, "
                f"while the {field} in annotation_search/__init__.py is: {in_init!r}"
            )

    classifiers = _query_setup_py(setup_py_pth, "classifiers").splitlines()

    status_classifier = next(
        (classifier for classifier in classifiers if classifier in STATUS_MAP), None
    )

    if status_classifier is None:
        errors.append(
            "Expected a status classifier in setup.py "
            "(e.g., 'Development Status :: 3 - Alpha'), but found none."
        )
    elif STATUS_MAP[status_classifier] != annotation_search.__status__:
        errors.append(
            f"Expected status {STATUS_MAP[status_classifier]} "
            f"according to setup.py in annotation_search/__init__.py, "
            f"but found: {annotation_search.__status__}"
        )

    for error in errors:
        print(error, file=sys.stderr)

    return 0 if len(errors) == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
