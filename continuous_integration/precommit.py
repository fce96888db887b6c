#!/usr/bin/env python3

"""Run the formatting, static and unit-test checks before a commit."""
import argparse
import enum
import os
import pathlib
import shlex
import subprocess
import sys
from typing import Dict, List, Mapping, Optional, Sequence


class Step(enum.Enum):
    """List the checks in the order of execution."""

    REFORMAT = "reformat"
    MYPY = "mypy"
    PYLINT = "pylint"
    TEST = "test"
    CHECK_INIT_AND_SETUP_COINCIDE = "check-init-and-setup-coincide"


#: Directories and files inspected by the formatter and the static checkers
TARGETS = ["annotation_search", "tests", "continuous_integration", "setup.py"]


def commands_for(step: Step, overwrite: bool) -> List[List[str]]:
    """Give the commands executing the ``step``, one after another."""
    if step is Step.REFORMAT:
        return [["black"] + ([] if overwrite else ["--check"]) + TARGETS]

    if step is Step.MYPY:
        return [["mypy", "--strict"] + TARGETS]

    if step is Step.PYLINT:
        return [["pylint"] + TARGETS]

    if step is Step.TEST:
        return [
            [
                "coverage",
                "run",
                "--source",
                "annotation_search",
                "-m",
                "unittest",
                "discover",
            ],
            ["coverage", "report"],
        ]

    if step is Step.CHECK_INIT_AND_SETUP_COINCIDE:
        return [
            [sys.executable, "continuous_integration/check_init_and_setup_coincide.py"]
        ]

    raise AssertionError(f"Unhandled step: {step}")


def run(
    cmd: Sequence[str], cwd: pathlib.Path, env: Optional[Mapping[str, str]] = None
) -> int:
    """Execute the ``cmd`` and report on STDERR if it failed."""
    exit_code = subprocess.call(cmd, cwd=str(cwd), env=env)

    if exit_code != 0:
        print(
            f"The command failed with exit code {exit_code}: "
            f"{' '.join(shlex.quote(part) for part in cmd)}",
            file=sys.stderr,
        )

    return exit_code


def main() -> int:
    """Execute the main routine."""
    step_values = [step.value for step in Step]

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--overwrite",
        help="Re-format the files in place instead of only checking the format",
        action="store_true",
    )
    parser.add_argument(
        "--select",
        help="Execute only these steps; one or more of: " + " ".join(step_values),
        metavar="",
        nargs="+",
        choices=step_values,
    )
    parser.add_argument(
        "--skip",
        help="Do not execute these steps; one or more of: " + " ".join(step_values),
        metavar="",
        nargs="+",
        choices=step_values,
    )
    args = parser.parse_args()

    selected = list(Step)
    if args.select is not None:
        selected = [Step(value) for value in args.select]

    skipped = {Step(value) for value in args.skip} if args.skip is not None else set()

    repo_root = pathlib.Path(os.path.realpath(__file__)).parent.parent

    # Contracts are also checked in their slow variants during the tests.
    env = dict(os.environ)  # type: Dict[str, str]
    env["ICONTRACT_SLOW"] = "true"

    for step in Step:
        if step not in selected or step in skipped:
            print(f"Skipped {step.value}.")
            continue

        print(f"Running {step.value}...")
        for cmd in commands_for(step=step, overwrite=bool(args.overwrite)):
            if run(cmd=cmd, cwd=repo_root, env=env) != 0:
                return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
