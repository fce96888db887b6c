"""Search annotations through class hierarchies and enclosing scopes."""

import argparse
import enum
import importlib
import inspect
import sys
from typing import Any, List, Optional, TextIO, Tuple

import annotation_search
from annotation_search import search
from annotation_search.annotations import (
    Annotation,
    container_of,
    is_annotation_type,
    unwrap,
)
from annotation_search.common import (
    DOTTED_NAME_RE,
    DottedName,
    assert_never,
    write_error_report,
)
from annotation_search.enclosing import context_of
from annotation_search.flattening import FlatteningError

assert annotation_search.__doc__ == __doc__


class Query(enum.Enum):
    """List available queries."""

    IS_PRESENT = "is_present"
    IS_ANY_REPEATABLE_PRESENT = "is_any_repeatable_present"
    CLOSEST = "closest"
    CLOSEST_REPEATABLE = "closest_repeatable"
    ALL = "all"
    ALL_REPEATABLE = "all_repeatable"
    ANNOTATED = "annotated"
    PARAMETER_SOURCES = "parameter_sources"
    METHOD_SOURCES = "method_sources"


#: Queries which need the annotation kind to be given
QUERIES_WITH_KIND = frozenset(
    [
        Query.IS_PRESENT,
        Query.IS_ANY_REPEATABLE_PRESENT,
        Query.CLOSEST,
        Query.CLOSEST_REPEATABLE,
        Query.ALL,
        Query.ALL_REPEATABLE,
        Query.ANNOTATED,
    ]
)

#: Queries which need the annotation kind to be repeatable
QUERIES_WITH_REPEATABLE_KIND = frozenset(
    [
        Query.IS_ANY_REPEATABLE_PRESENT,
        Query.CLOSEST_REPEATABLE,
        Query.ALL_REPEATABLE,
    ]
)

#: Queries which can only be answered for functions
QUERIES_ON_FUNCTIONS = frozenset([Query.PARAMETER_SOURCES, Query.METHOD_SOURCES])


class Parameters:
    """Represent the program parameters."""

    def __init__(
        self,
        element: DottedName,
        kind: Optional[DottedName],
        query: Query,
    ) -> None:
        """Initialize with the given values."""
        self.element = element
        self.kind = kind
        self.query = query


def resolve(name: DottedName) -> Tuple[Optional[Any], Optional[str]]:
    """
    Import the longest importable module prefix of ``name`` and follow the attributes.

    :return: the resolved object, or the error message
    """
    parts = name.split(".")

    something = None  # type: Any
    imported_count = 0
    for count in range(len(parts), 0, -1):
        module_name = ".".join(parts[:count])
        try:
            something = importlib.import_module(module_name)
        except ModuleNotFoundError as exception:
            # A missing dependency of the module must not be taken for
            # a non-module prefix.
            missing = exception.name
            if missing is not None and not (
                module_name == missing or module_name.startswith(missing + ".")
            ):
                return None, f"Failed to import the module {module_name}: {exception}"

            continue

        imported_count = count
        break

    if imported_count == 0:
        return None, f"No module could be imported from: {name}"

    for i in range(imported_count, len(parts)):
        if not hasattr(something, parts[i]):
            return None, (
                f"The attribute {parts[i]} could not be found "
                f"in {'.'.join(parts[:i])}"
            )

        something = getattr(something, parts[i])

    return something, None


def _write_annotations(annotations: List[Annotation], stdout: TextIO) -> None:
    for annotation in annotations:
        stdout.write(f"{annotation!r}\n")


def execute(params: Parameters, stdout: TextIO, stderr: TextIO) -> int:
    """Run the program."""
    # region Resolve

    errors = []  # type: List[str]

    element, error = resolve(params.element)
    if error is not None:
        errors.append(error)
    elif not (inspect.isclass(element) or inspect.isfunction(unwrap(element))):
        errors.append(
            f"Expected the element {params.element} to be a class or a function, "
            f"but got: {element!r}"
        )
    elif params.query in QUERIES_ON_FUNCTIONS and not inspect.isfunction(
        unwrap(element)
    ):
        errors.append(
            f"Expected the element {params.element} to be a function "
            f"for the query {params.query.value}, but got: {element!r}"
        )

    kind = None  # type: Optional[Any]
    if params.query in QUERIES_WITH_KIND:
        if params.kind is None:
            errors.append(f"The --kind is required for the query {params.query.value}")
        else:
            kind, error = resolve(params.kind)
            if error is not None:
                errors.append(error)
            elif not is_annotation_type(kind):
                errors.append(
                    f"Expected the kind {params.kind} to be an annotation kind, "
                    f"but got: {kind!r}"
                )
            elif (
                params.query in QUERIES_WITH_REPEATABLE_KIND
                and container_of(kind) is None
            ):
                errors.append(
                    f"Expected the kind {params.kind} to be repeatable "
                    f"for the query {params.query.value}"
                )

    if len(errors) > 0:
        write_error_report(
            message="Failed to resolve the command-line arguments",
            errors=errors,
            stderr=stderr,
        )
        return 1

    # endregion

    # region Dispatch

    try:
        if params.query is Query.IS_PRESENT:
            found = search.is_annotation_present(context_of(element), kind)
            stdout.write("true\n" if found else "false\n")

        elif params.query is Query.IS_ANY_REPEATABLE_PRESENT:
            found = search.is_any_repeatable_annotation_present(
                context_of(element), kind
            )
            stdout.write("true\n" if found else "false\n")

        elif params.query is Query.CLOSEST:
            annotation = search.find_closest_enclosing_annotation(
                context_of(element), kind
            )
            _write_annotations([] if annotation is None else [annotation], stdout)

        elif params.query is Query.CLOSEST_REPEATABLE:
            _write_annotations(
                search.find_closest_enclosing_repeatable_annotations(
                    context_of(element), kind
                ),
                stdout,
            )

        elif params.query is Query.ALL:
            _write_annotations(
                search.find_all_enclosing_annotations(context_of(element), kind),
                stdout,
            )

        elif params.query is Query.ALL_REPEATABLE:
            _write_annotations(
                search.find_all_enclosing_repeatable_annotations(
                    context_of(element), kind
                ),
                stdout,
            )

        elif params.query is Query.ANNOTATED:
            _write_annotations(
                search.find_annotated_annotations(element, kind), stdout
            )

        elif params.query is Query.PARAMETER_SOURCES:
            _write_annotations(
                search.find_parameter_arguments_sources(element), stdout
            )

        elif params.query is Query.METHOD_SOURCES:
            _write_annotations(search.find_method_arguments_sources(element), stdout)

        else:
            assert_never(params.query)

    except FlatteningError as exception:
        underlying = exception.__cause__
        write_error_report(
            message=str(exception),
            errors=[] if underlying is None else [str(underlying)],
            stderr=stderr,
        )
        return 1

    # endregion

    return 0


def main(prog: str) -> int:
    """
    Execute the main routine.

    :param prog: name of the program to be displayed in the help
    :return: exit code
    """
    parser = argparse.ArgumentParser(prog=prog, description=__doc__)
    parser.add_argument(
        "--element",
        help=(
            "dotted name of the class or the function under search, "
            "e.g., some_package.some_module.SomeClass.some_method"
        ),
        required=True,
    )
    parser.add_argument(
        "--kind",
        help=(
            "dotted name of the annotation kind to search for "
            "(or of the marker kind for the query 'annotated')"
        ),
    )
    parser.add_argument(
        "--query",
        help="what to search for",
        default=Query.CLOSEST.value,
        choices=[literal.value for literal in Query],
    )
    parser.add_argument(
        "--version", help="show the current version and exit", action="store_true"
    )

    # NOTE:
    # The module ``argparse`` is not flexible enough to understand special options such
    # as ``--version`` so we manually hard-wire.
    if "--version" in sys.argv and "--help" not in sys.argv:
        print(annotation_search.__version__)
        return 0

    args = parser.parse_args()

    for value, flag in ((args.element, "--element"), (args.kind, "--kind")):
        if value is not None and not DOTTED_NAME_RE.fullmatch(value):
            write_error_report(
                message="Failed to parse the command-line arguments",
                errors=[f"Expected {flag} to be a dotted name, but got: {value!r}"],
                stderr=sys.stderr,
            )
            return 1

    params = Parameters(
        element=DottedName(args.element),
        kind=DottedName(args.kind) if args.kind is not None else None,
        query=Query(args.query),
    )

    return execute(params=params, stdout=sys.stdout, stderr=sys.stderr)


def entry_point() -> int:
    """Provide an entry point for a console script."""
    return main(prog="annotation-search")


if __name__ == "__main__":
    sys.exit(main(prog="annotation-search"))
