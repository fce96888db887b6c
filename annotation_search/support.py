"""
Find annotations on a single element.

The functions here look at one element and, through meta-annotations, at the kinds of
the annotations declared on it. The repeatable look-up additionally follows the
superclasses and interfaces of classes. The walk over the type hierarchy and
the enclosing scopes is composed on top of these functions in
:py:mod:`annotation_search.hierarchy` and :py:mod:`annotation_search.enclosing`.
"""
import inspect
from typing import Any, List, Optional, Sequence, Set, Tuple, Type, TypeVar, cast

from icontract import require, ensure

from annotation_search import elements
from annotation_search.annotations import (
    Annotation,
    container_of,
    declared_annotations,
    is_annotation_type,
    is_inherited,
)
from annotation_search.flattening import flatten, flatten_all

AnnotationT = TypeVar("AnnotationT", bound=Annotation)


def _find_with_origin(
    element: Any, annotation_type: Type[Annotation], visited: Set[Type[Annotation]]
) -> Optional[Tuple[Annotation, Any]]:
    declared = declared_annotations(element)

    for annotation in declared:
        if type(annotation) is annotation_type:
            return annotation, element

    for annotation in declared:
        kind = type(annotation)
        if kind in visited:
            continue

        visited.add(kind)

        found = _find_with_origin(kind, annotation_type, visited)
        if found is not None:
            return found

    return None


@require(lambda annotation_type: is_annotation_type(annotation_type))
@ensure(
    lambda result, annotation_type: result is None
    or isinstance(result[0], annotation_type)
)
def find_annotation_with_origin(
    element: Any, annotation_type: Type[AnnotationT]
) -> Optional[Tuple[AnnotationT, Any]]:
    """
    Find the annotation present or meta-present on the ``element``.

    :return: the annotation together with the element declaring it, if found
    """
    found = _find_with_origin(element, annotation_type, set())
    if found is None:
        return None

    return cast(AnnotationT, found[0]), found[1]


@require(lambda annotation_type: is_annotation_type(annotation_type))
def find_annotation(
    element: Any, annotation_type: Type[AnnotationT]
) -> Optional[AnnotationT]:
    """
    Find the annotation present or meta-present on the ``element``.

    A directly declared annotation takes precedence. Otherwise, the kinds of
    the declared annotations are searched recursively, in the order of declaration.
    """
    found = find_annotation_with_origin(element, annotation_type)
    return None if found is None else found[0]


def present_annotations(element: Any) -> List[Annotation]:
    """
    List the annotations present on the ``element``.

    For classes, these are the declared annotations together with the annotations of
    inherited kinds declared on the superclasses. The closest declaration of a kind
    hides the ones further up.
    """
    result = list(declared_annotations(element))
    if not inspect.isclass(element):
        return result

    observed_kinds = {type(annotation) for annotation in result}

    superclass = elements.superclass_of(element)
    while superclass is not None:
        for annotation in declared_annotations(superclass):
            kind = type(annotation)
            if is_inherited(kind) and kind not in observed_kinds:
                result.append(annotation)
                observed_kinds.add(kind)

        superclass = elements.superclass_of(superclass)

    return result


class _RepeatableSearch:
    """Collect the repeated annotations of a kind over a single search."""

    def __init__(
        self,
        annotation_type: Type[Annotation],
        container_type: Type[Annotation],
    ) -> None:
        self.annotation_type = annotation_type
        self.container_type = container_type
        self.inherited = is_inherited(container_type)

        self.found = []  # type: List[Annotation]
        self._found_ids = set()  # type: Set[int]
        self._visited_ids = set()  # type: Set[int]

    def _add(self, annotation: Annotation) -> None:
        if id(annotation) not in self._found_ids:
            self._found_ids.add(id(annotation))
            self.found.append(annotation)

    def visit(self, element: Any) -> None:
        if inspect.isclass(element):
            if element is object:
                return

            # We recurse first to the superclass so that the annotations come in
            # the top-down order.
            if self.inherited:
                superclass = elements.superclass_of(element)
                if superclass is not None and superclass is not object:
                    self.visit(superclass)

            for ifc in elements.interfaces_of(element):
                self.visit(ifc)

        self._visit_candidates(declared_annotations(element))
        self._visit_candidates(present_annotations(element))

    def _visit_candidates(self, candidates: Sequence[Annotation]) -> None:
        for candidate in candidates:
            if id(candidate) in self._visited_ids:
                continue

            self._visited_ids.add(id(candidate))

            kind = type(candidate)
            if kind is self.annotation_type:
                self._add(candidate)
            elif kind is self.container_type:
                for held in flatten(candidate):
                    self._add(held)
            else:
                self.visit(kind)


@require(lambda annotation_type: is_annotation_type(annotation_type))
@require(
    lambda annotation_type: container_of(annotation_type) is not None,
    "The annotation kind must be repeatable",
)
@ensure(
    lambda result, annotation_type: all(
        isinstance(annotation, annotation_type) for annotation in result
    )
)
def find_repeatable_annotations(
    element: Any, annotation_type: Type[AnnotationT]
) -> List[AnnotationT]:
    """
    Find the repeatable annotations present, meta-present or inherited on ``element``.

    For classes, the superclasses are searched first if the container kind is
    inherited, then the interfaces. The containers are flattened.
    """
    container_type = container_of(annotation_type)
    assert container_type is not None

    search = _RepeatableSearch(
        annotation_type=annotation_type, container_type=container_type
    )
    search.visit(element)

    return cast(List[AnnotationT], search.found)


@require(lambda annotation_type: is_annotation_type(annotation_type))
def annotations_by_type(
    element: Any, annotation_type: Type[AnnotationT]
) -> List[AnnotationT]:
    """
    List the annotations of ``annotation_type`` declared on the ``element``.

    The containers are flattened. If there are none on a class and the kind is
    inherited, the annotations are looked up on the superclass.
    """
    result = [
        annotation
        for annotation in flatten_all(declared_annotations(element))
        if type(annotation) is annotation_type
    ]

    if len(result) == 0 and inspect.isclass(element) and is_inherited(annotation_type):
        superclass = elements.superclass_of(element)
        if superclass is not None:
            return annotations_by_type(superclass, annotation_type)

    return cast(List[AnnotationT], result)
