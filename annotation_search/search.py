"""
Determine whether annotations apply to a method or a class.

An annotation of a kind applies to an element if it is:

* *present*, *i.e.*, declared directly on the element,
* *indirectly present*, *i.e.*, declared on a superclass or an interface of
  the element,
* *meta-present*, *i.e.*, declared on the kind of an annotation present on
  the element, or
* *enclosing-present*, *i.e.*, declared on a class which textually encloses
  the element.

All of the above mechanisms apply recursively. For example, an annotation can be
meta-present on an annotation which is meta-present on another annotation present on
the element.
"""
from typing import Any, Callable, List, Optional, Type, TypeVar, cast

from icontract import require

from annotation_search import enclosing, elements, hierarchy, support
from annotation_search.annotations import (
    Annotation,
    container_of,
    declared_annotations,
    is_annotation_type,
)
from annotation_search.criteria import SearchCriteria
from annotation_search.enclosing import SearchContext
from annotation_search.flattening import flatten_all
from annotation_search.sources import ArgumentsSource, CartesianArgumentsSource

AnnotationT = TypeVar("AnnotationT", bound=Annotation)


@require(lambda annotation_type: is_annotation_type(annotation_type))
def find_annotations(
    context: SearchContext,
    annotation_type: Type[AnnotationT],
    find_repeated: bool,
    find_all_enclosing: bool,
) -> List[AnnotationT]:
    """Find the annotations in the ``context`` according to the given flags."""
    criteria = SearchCriteria(
        annotation_type=annotation_type,
        find_repeated=find_repeated,
        find_all_enclosing=find_all_enclosing,
    )

    return cast(List[AnnotationT], enclosing.find_annotations(context, criteria))


def is_annotation_present(
    context: SearchContext, annotation_type: Type[Annotation]
) -> bool:
    """Check whether an annotation of the kind applies to the ``context``."""
    return find_closest_enclosing_annotation(context, annotation_type) is not None


def is_any_repeatable_annotation_present(
    context: SearchContext, annotation_type: Type[Annotation]
) -> bool:
    """Check whether any repeatable annotation of the kind applies to ``context``."""
    return (
        len(find_closest_enclosing_repeatable_annotations(context, annotation_type))
        > 0
    )


def find_closest_enclosing_annotation(
    context: SearchContext, annotation_type: Type[AnnotationT]
) -> Optional[AnnotationT]:
    """
    Find the annotation applying to the ``context``.

    If annotations are present on more than one enclosing scope, the closest one
    is returned.
    """
    found = find_annotations(
        context, annotation_type, find_repeated=False, find_all_enclosing=False
    )
    return found[0] if len(found) > 0 else None


def find_closest_enclosing_repeatable_annotations(
    context: SearchContext, annotation_type: Type[AnnotationT]
) -> List[AnnotationT]:
    """
    Find the annotations of the repeatable kind applying to the ``context``.

    If annotations are present on more than one enclosing scope, only those of
    the closest one are returned.
    """
    return find_annotations(
        context, annotation_type, find_repeated=True, find_all_enclosing=False
    )


def find_all_enclosing_annotations(
    context: SearchContext, annotation_type: Type[AnnotationT]
) -> List[AnnotationT]:
    """Find the annotations applying to the ``context`` in all the enclosing scopes."""
    return find_annotations(
        context, annotation_type, find_repeated=False, find_all_enclosing=True
    )


def find_all_enclosing_repeatable_annotations(
    context: SearchContext, annotation_type: Type[AnnotationT]
) -> List[AnnotationT]:
    """
    Find the annotations of the repeatable kind applying to the ``context``.

    The annotations from all the enclosing scopes are returned, closest first.
    """
    return find_annotations(
        context, annotation_type, find_repeated=True, find_all_enclosing=True
    )


@require(lambda marker_type: is_annotation_type(marker_type))
def find_annotated_annotations(
    element: Any, marker_type: Type[Annotation]
) -> List[Annotation]:
    """
    Find the annotations declared on ``element`` whose kinds are marked.

    The marker can be present, indirectly present or meta-present on the kind.
    Containers of repeated annotations are flattened beforehand.
    """
    criteria = SearchCriteria(
        annotation_type=marker_type,
        find_repeated=container_of(marker_type) is not None,
        find_all_enclosing=False,
    )

    return [
        annotation
        for annotation in flatten_all(declared_annotations(element))
        if len(hierarchy.find_on_type(type(annotation), criteria)) > 0
    ]


def _collect_arguments_sources(parameter: elements.Parameter) -> List[Annotation]:
    result = []  # type: List[Annotation]

    cartesian = support.find_annotation(parameter, CartesianArgumentsSource)
    if cartesian is not None:
        result.append(cartesian)

    # The arguments sources are allowed on the parameters as well since a cartesian
    # test does not overlap with a parameterized test.
    result.extend(support.find_repeatable_annotations(parameter, ArgumentsSource))

    return result


def find_parameter_arguments_sources(method: Callable[..., Any]) -> List[Annotation]:
    """
    Find the source of arguments for each parameter of the ``method``.

    Only the first source of a parameter is kept. The parameters without a source
    are skipped.
    """
    result = []  # type: List[Annotation]
    for parameter in elements.parameters_of(method):
        sources = _collect_arguments_sources(parameter)
        if len(sources) > 0:
            result.append(sources[0])

    return result


def find_method_arguments_sources(method: Callable[..., Any]) -> List[Annotation]:
    """Find the annotations on the ``method`` whose kinds are cartesian sources."""
    return [
        annotation
        for annotation in declared_annotations(method)
        if support.find_annotation(type(annotation), CartesianArgumentsSource)
        is not None
    ]
