"""Provide annotation kinds shared across different tests."""
from typing import List, Sequence, Tuple

from annotation_search.annotations import Annotation, inherited, repeatable


# pylint: disable=missing-function-docstring


class Marker(Annotation):
    """Mark an element; the kind is not inherited."""

    def __init__(self, name: str = "") -> None:
        self.name = name


@inherited
class Config(Annotation):
    """Configure an element; the kind is inherited by the subclasses."""

    def __init__(self, name: str) -> None:
        self.name = name


class Tags(Annotation):
    """Hold the repeated tags."""

    value: Tuple["Tag", ...]

    def __init__(self, *value: "Tag") -> None:
        self.value = value


@repeatable(Tags)
class Tag(Annotation):
    """Tag an element; the kind is repeatable, but not inherited."""

    def __init__(self, name: str) -> None:
        self.name = name


@inherited
class InheritedTags(Annotation):
    """Hold the repeated inherited tags."""

    value: Tuple["InheritedTag", ...]

    def __init__(self, *value: "InheritedTag") -> None:
        self.value = value


@inherited
@repeatable(InheritedTags)
class InheritedTag(Annotation):
    """Tag an element; the kind is both repeatable and inherited."""

    def __init__(self, name: str) -> None:
        self.name = name


def names(annotations: Sequence[Annotation]) -> List[str]:
    """Extract the names of the annotations for easier comparison."""
    return [getattr(annotation, "name") for annotation in annotations]
