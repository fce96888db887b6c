"""Flatten the container annotations into the repeated annotations they hold."""
import collections.abc
import inspect
import typing
from typing import Any, Dict, Iterable, List, Optional, Type

from icontract import ensure

from annotation_search.annotations import (
    Annotation,
    container_of,
    is_annotation_type,
    repeated_kind_of,
)

#: Name of the attribute through which a container kind holds the repeated annotations
VALUE_ATTRIBUTE = "value"


class FlatteningError(RuntimeError):
    """Signal that a container annotation is malformed and can not be flattened."""


def _component_of_sequence(type_hint: Any) -> Optional[Any]:
    """Extract ``X`` from ``Tuple[X, ...]``, ``List[X]`` or ``Sequence[X]``."""
    origin = typing.get_origin(type_hint)
    args = typing.get_args(type_hint)

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]

        return None

    if origin in (list, collections.abc.Sequence):
        if len(args) == 1:
            return args[0]

        return None

    return None


def contained_type(kind: Type[Annotation]) -> Optional[Type[Annotation]]:
    """
    Determine the kind of the annotations held by the container ``kind``.

    A container kind declares its own ``value`` as a homogeneous sequence of
    a repeatable kind which names ``kind`` as its container.

    :return: the contained kind, or ``None`` if ``kind`` is not a container
    :raise: :py:class:`FlatteningError` if the declarations of ``kind`` can not be
        resolved
    """
    # Only the own declarations of the kind count, not the inherited ones.
    if VALUE_ATTRIBUTE not in inspect.get_annotations(kind):
        return None

    # The repeated kind might not be reachable from the module globals if it has
    # been defined in a function body.
    localns = {}  # type: Dict[str, Any]
    repeated_kind = repeated_kind_of(kind)
    if repeated_kind is not None:
        localns[repeated_kind.__name__] = repeated_kind

    try:
        type_hints = typing.get_type_hints(kind, localns=localns)
    except (NameError, AttributeError, SyntaxError, TypeError) as exception:
        raise FlatteningError(
            f"Failed to resolve the declarations of the annotation kind "
            f"{kind.__qualname__}"
        ) from exception

    type_hint = type_hints[VALUE_ATTRIBUTE]

    component = _component_of_sequence(type_hint)
    if component is None or not is_annotation_type(component):
        return None

    if container_of(component) is not kind:
        return None

    assert is_annotation_type(component)
    return component  # type: ignore


def _held_annotations(container: Annotation) -> List[Annotation]:
    """Read the annotations held by the ``container``."""
    try:
        held = getattr(container, VALUE_ATTRIBUTE)
    except AttributeError as exception:
        raise FlatteningError(
            f"Failed to read the held annotations of the container {container!r}"
        ) from exception

    if not isinstance(held, (tuple, list)) or not all(
        isinstance(item, Annotation) for item in held
    ):
        raise FlatteningError(
            f"Expected the container {container!r} to hold a sequence of "
            f"annotations, but got: {held!r}"
        )

    return list(held)


@ensure(lambda result: all(contained_type(type(item)) is None for item in result))
def flatten(annotation: Annotation) -> List[Annotation]:
    """
    Flatten the ``annotation`` if it is a container of repeated annotations.

    Containers nested in containers are flattened recursively. An annotation which is
    not a container is returned as the only item.
    """
    if contained_type(type(annotation)) is None:
        return [annotation]

    result = []  # type: List[Annotation]
    for held in _held_annotations(annotation):
        result.extend(flatten(held))

    return result


def flatten_all(annotations: Iterable[Annotation]) -> List[Annotation]:
    """Flatten the ``annotations`` preserving the order of declaration."""
    result = []  # type: List[Annotation]
    for annotation in annotations:
        result.extend(flatten(annotation))

    return result
