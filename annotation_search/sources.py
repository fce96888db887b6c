"""Provide the annotation kinds which mark the sources of test arguments."""
from typing import Any, Tuple

from annotation_search.annotations import Annotation, repeatable


class ArgumentsSources(Annotation):
    """Hold the repeated :py:class:`ArgumentsSource` annotations."""

    value: Tuple["ArgumentsSource", ...]

    def __init__(self, *value: "ArgumentsSource") -> None:
        """Initialize with the given values."""
        self.value = value


@repeatable(ArgumentsSources)
class ArgumentsSource(Annotation):
    """Mark an annotation kind or a parameter as a source of arguments."""

    def __init__(self, provider: Any) -> None:
        """Initialize with the given values."""
        self.provider = provider


class CartesianArgumentsSource(Annotation):
    """
    Mark an annotation kind as a source of arguments for a cartesian product.

    Annotations of the marked kinds supply the values of a single parameter
    (or, when declared on the method, of all its parameters).
    """

    def __init__(self, provider: Any) -> None:
        """Initialize with the given values."""
        self.provider = provider
