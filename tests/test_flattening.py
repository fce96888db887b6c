# pylint: disable=missing-docstring

import unittest
from typing import Sequence, Tuple

from annotation_search.annotations import Annotation, repeatable
from annotation_search.flattening import (
    FlatteningError,
    contained_type,
    flatten,
    flatten_all,
)

import tests.common
from tests.common import Marker, Tag, Tags


class Labels(Annotation):
    value: Tuple["Label", ...]

    def __init__(self, *value: "Label") -> None:
        self.value = value


@repeatable(Labels)
class Label(Annotation):
    def __init__(self, name: str) -> None:
        self.name = name


class LabelGroups(Annotation):
    value: Sequence[Labels]

    def __init__(self, *value: Labels) -> None:
        self.value = value


repeatable(LabelGroups)(Labels)


class Plain(Annotation):
    value: str

    def __init__(self, value: str) -> None:
        self.value = value


class Impostor(Annotation):
    value: Tuple[Label, ...]

    def __init__(self, *value: Label) -> None:
        self.value = value


class Broken(Annotation):
    value: Tuple["Missing", ...]  # type: ignore


class Hollow(Annotation):
    value: Tuple["Hollowed", ...]


@repeatable(Hollow)
class Hollowed(Annotation):
    pass


class Test_contained_type(unittest.TestCase):
    def test_container(self) -> None:
        self.assertIs(Tag, contained_type(Tags))
        self.assertIs(Label, contained_type(Labels))
        self.assertIs(Labels, contained_type(LabelGroups))

    def test_without_value(self) -> None:
        self.assertIsNone(contained_type(Marker))

    def test_value_not_a_sequence_of_annotations(self) -> None:
        self.assertIsNone(contained_type(Plain))

    def test_component_contained_by_another_kind(self) -> None:
        self.assertIsNone(contained_type(Impostor))

    def test_container_defined_in_function_body(self) -> None:
        class Notes(Annotation):
            value: Tuple["Note", ...]

            def __init__(self, *value: "Note") -> None:
                self.value = value

        @repeatable(Notes)
        class Note(Annotation):
            def __init__(self, name: str) -> None:
                self.name = name

        self.assertIs(Note, contained_type(Notes))
        self.assertListEqual(
            ["a", "b"], tests.common.names(flatten(Notes(Note("a"), Note("b"))))
        )

    def test_unresolvable_declaration(self) -> None:
        with self.assertRaises(FlatteningError) as context:
            contained_type(Broken)

        self.assertIsInstance(context.exception.__cause__, NameError)


class Test_flatten(unittest.TestCase):
    def test_atomic(self) -> None:
        marker = Marker("x")
        result = flatten(marker)

        self.assertEqual(1, len(result))
        self.assertIs(marker, result[0])

    def test_container(self) -> None:
        result = flatten(Tags(Tag("a"), Tag("b")))

        self.assertListEqual(["a", "b"], tests.common.names(result))

    def test_nested_containers(self) -> None:
        groups = LabelGroups(
            Labels(Label("a"), Label("b")),
            Labels(Label("c")),
        )

        self.assertListEqual(["a", "b", "c"], tests.common.names(flatten(groups)))

    def test_impostor_is_atomic(self) -> None:
        impostor = Impostor(Label("a"))

        self.assertListEqual([impostor], flatten(impostor))

    def test_idempotent(self) -> None:
        once = flatten(Tags(Tag("a"), Tag("b")))
        twice = flatten_all(once)

        self.assertListEqual(once, twice)

    def test_flatten_all_preserves_order(self) -> None:
        result = flatten_all(
            [Marker("first"), Tags(Tag("second"), Tag("third")), Marker("fourth")]
        )

        self.assertListEqual(
            ["first", "second", "third", "fourth"], tests.common.names(result)
        )

    def test_container_without_held_annotations(self) -> None:
        with self.assertRaises(FlatteningError) as context:
            flatten(Hollow())

        self.assertIsInstance(context.exception.__cause__, AttributeError)

    def test_container_holding_something_else(self) -> None:
        labels = Labels()
        labels.value = ("not an annotation",)  # type: ignore

        with self.assertRaises(FlatteningError):
            flatten(labels)


if __name__ == "__main__":
    unittest.main()
