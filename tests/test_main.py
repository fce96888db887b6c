# pylint: disable=missing-docstring

import io
import unittest
from typing import Tuple

import annotation_search.main
from annotation_search.annotations import Annotation
from annotation_search.common import DottedName
from annotation_search.main import Parameters, Query

from tests.common import Config, Marker, Tag


class Broken(Annotation):
    value: Tuple["Missing", ...]  # type: ignore


@Config("fixture")
class Fixture:
    @Marker("method")
    @Tag("a")
    @Tag("b")
    def method(self) -> None:
        pass

    def unmarked_method(self) -> None:
        pass


@Broken()
def broken_function() -> None:
    pass


def execute(element: str, kind: str, query: Query) -> Tuple[int, str, str]:
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = annotation_search.main.execute(
        params=Parameters(
            element=DottedName(element),
            kind=DottedName(kind) if kind != "" else None,
            query=query,
        ),
        stdout=stdout,
        stderr=stderr,
    )

    return exit_code, stdout.getvalue(), stderr.getvalue()


class Test_resolve(unittest.TestCase):
    def test_nested_attribute(self) -> None:
        something, error = annotation_search.main.resolve(
            DottedName("tests.test_main.Fixture.method")
        )

        self.assertIsNone(error)
        self.assertIs(Fixture.method, something)

    def test_module(self) -> None:
        something, error = annotation_search.main.resolve(DottedName("tests.common"))

        self.assertIsNone(error)
        self.assertIs(Config, getattr(something, "Config"))

    def test_missing_attribute(self) -> None:
        something, error = annotation_search.main.resolve(
            DottedName("tests.test_main.Fixture.nonexisting")
        )

        self.assertIsNone(something)
        self.assertEqual(
            "The attribute nonexisting could not be found in tests.test_main.Fixture",
            error,
        )

    def test_missing_module(self) -> None:
        something, error = annotation_search.main.resolve(
            DottedName("nonexisting_package_for_annotation_search")
        )

        self.assertIsNone(something)
        self.assertIsNotNone(error)

    def test_missing_dependency_sharing_a_name_prefix(self) -> None:
        something, error = annotation_search.main.resolve(
            DottedName("tests.fixture_with_missing_dependency.something")
        )

        self.assertIsNone(something)
        assert error is not None
        self.assertTrue(
            error.startswith(
                "Failed to import the module tests.fixture_with_missing_dependency"
            ),
            error,
        )


class Test_execute(unittest.TestCase):
    def test_closest(self) -> None:
        exit_code, stdout, stderr = execute(
            element="tests.test_main.Fixture.method",
            kind="tests.common.Marker",
            query=Query.CLOSEST,
        )

        self.assertEqual("", stderr)
        self.assertEqual(0, exit_code)
        self.assertEqual("@Marker(name='method')\n", stdout)

    def test_closest_from_class(self) -> None:
        exit_code, stdout, _ = execute(
            element="tests.test_main.Fixture.unmarked_method",
            kind="tests.common.Config",
            query=Query.CLOSEST,
        )

        self.assertEqual(0, exit_code)
        self.assertEqual("@Config(name='fixture')\n", stdout)

    def test_closest_repeatable(self) -> None:
        exit_code, stdout, _ = execute(
            element="tests.test_main.Fixture.method",
            kind="tests.common.Tag",
            query=Query.CLOSEST_REPEATABLE,
        )

        self.assertEqual(0, exit_code)
        self.assertEqual("@Tag(name='a')\n@Tag(name='b')\n", stdout)

    def test_is_present(self) -> None:
        exit_code, stdout, _ = execute(
            element="tests.test_main.Fixture.unmarked_method",
            kind="tests.common.Marker",
            query=Query.IS_PRESENT,
        )

        self.assertEqual(0, exit_code)
        self.assertEqual("false\n", stdout)

    def test_missing_attribute(self) -> None:
        exit_code, stdout, stderr = execute(
            element="tests.test_main.Fixture.nonexisting",
            kind="tests.common.Marker",
            query=Query.CLOSEST,
        )

        self.assertEqual(1, exit_code)
        self.assertEqual("", stdout)
        self.assertTrue(
            stderr.startswith("Failed to resolve the command-line arguments:\n"),
            stderr,
        )

    def test_non_repeatable_kind_for_repeatable_query(self) -> None:
        exit_code, _, stderr = execute(
            element="tests.test_main.Fixture.method",
            kind="tests.common.Marker",
            query=Query.ALL_REPEATABLE,
        )

        self.assertEqual(1, exit_code)
        self.assertIn("to be repeatable", stderr)

    def test_missing_kind(self) -> None:
        exit_code, _, stderr = execute(
            element="tests.test_main.Fixture.method",
            kind="",
            query=Query.CLOSEST,
        )

        self.assertEqual(1, exit_code)
        self.assertIn("The --kind is required", stderr)

    def test_kind_is_not_an_annotation(self) -> None:
        exit_code, _, stderr = execute(
            element="tests.test_main.Fixture.method",
            kind="tests.test_main.Fixture",
            query=Query.CLOSEST,
        )

        self.assertEqual(1, exit_code)
        self.assertIn("to be an annotation kind", stderr)

    def test_sources_need_a_function(self) -> None:
        exit_code, _, stderr = execute(
            element="tests.test_main.Fixture",
            kind="",
            query=Query.PARAMETER_SOURCES,
        )

        self.assertEqual(1, exit_code)
        self.assertIn("to be a function", stderr)

    def test_broken_container(self) -> None:
        exit_code, stdout, stderr = execute(
            element="tests.test_main.broken_function",
            kind="tests.common.Marker",
            query=Query.ANNOTATED,
        )

        self.assertEqual(1, exit_code)
        self.assertEqual("", stdout)
        self.assertTrue(
            stderr.startswith(
                "Failed to resolve the declarations of the annotation kind Broken:\n"
            ),
            stderr,
        )


if __name__ == "__main__":
    unittest.main()
