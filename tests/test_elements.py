# pylint: disable=missing-docstring

import unittest
from typing import Annotated

from annotation_search import elements
from annotation_search.annotations import declared_annotations

import tests.common
from tests.common import Marker


@elements.interface
class Walking:
    pass


@elements.interface
class Swimming(Walking):
    pass


class Animal:
    pass


class Duck(Animal, Swimming):
    pass


class Robot(Swimming):
    pass


class Outer:
    class Inner:
        class Innermost:
            pass

        def method(self) -> None:
            pass


def module_level_function() -> None:
    pass


def function_with_parameters(
    first: int,
    second: Annotated[int, Marker("second"), "not an annotation"],
    third: str,
) -> None:
    pass


class Test_hierarchy(unittest.TestCase):
    def test_interfaces_are_marked(self) -> None:
        self.assertTrue(elements.is_interface(Walking))
        self.assertTrue(elements.is_interface(Swimming))
        self.assertFalse(elements.is_interface(Duck))

    def test_interface_mark_is_not_propagated_to_implementations(self) -> None:
        self.assertFalse(elements.is_interface(Robot))

    def test_interfaces_of(self) -> None:
        self.assertListEqual([Swimming], elements.interfaces_of(Duck))
        self.assertListEqual([Walking], elements.interfaces_of(Swimming))
        self.assertListEqual([], elements.interfaces_of(Animal))

    def test_superclass_of(self) -> None:
        self.assertIs(Animal, elements.superclass_of(Duck))
        self.assertIs(object, elements.superclass_of(Animal))
        self.assertIs(object, elements.superclass_of(Robot))

    def test_interfaces_and_object_have_no_superclass(self) -> None:
        self.assertIsNone(elements.superclass_of(Swimming))
        self.assertIsNone(elements.superclass_of(Walking))
        self.assertIsNone(elements.superclass_of(object))


class Test_enclosing(unittest.TestCase):
    def test_nested_classes(self) -> None:
        self.assertIs(Outer, elements.enclosing_class_of(Outer.Inner))
        self.assertIs(Outer.Inner, elements.enclosing_class_of(Outer.Inner.Innermost))

    def test_top_level_class(self) -> None:
        self.assertIsNone(elements.enclosing_class_of(Outer))

    def test_local_class(self) -> None:
        class Local:
            class Nested:
                pass

        self.assertIsNone(elements.enclosing_class_of(Local))
        self.assertIsNone(elements.enclosing_class_of(Local.Nested))

    def test_declaring_class_of_method(self) -> None:
        self.assertIs(Outer.Inner, elements.declaring_class_of(Outer.Inner.method))

    def test_declaring_class_of_module_level_function(self) -> None:
        self.assertIsNone(elements.declaring_class_of(module_level_function))


class Test_parameters(unittest.TestCase):
    def test_parameters_in_order_of_signature(self) -> None:
        parameters = elements.parameters_of(function_with_parameters)

        self.assertListEqual(
            ["first", "second", "third"], [parameter.name for parameter in parameters]
        )
        self.assertListEqual([0, 1, 2], [parameter.index for parameter in parameters])

    def test_only_annotations_among_metadata_are_declared(self) -> None:
        parameters = elements.parameters_of(function_with_parameters)

        declared = [
            tests.common.names(declared_annotations(parameter))
            for parameter in parameters
        ]

        self.assertListEqual([[], ["second"], []], declared)

    def test_method_parameters_include_self(self) -> None:
        parameters = elements.parameters_of(Outer.Inner.method)

        self.assertListEqual(["self"], [parameter.name for parameter in parameters])


if __name__ == "__main__":
    unittest.main()
