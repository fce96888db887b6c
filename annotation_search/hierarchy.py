"""Find annotations through the superclasses and the interfaces of a class."""
import inspect
from typing import Any, List, Optional, Sequence, Set, Tuple, Type

from icontract import require, ensure

from annotation_search import elements, support
from annotation_search.annotations import Annotation, is_inherited
from annotation_search.criteria import SearchCriteria

#: An annotation together with the element which declares it
_Found = Tuple[Annotation, Any]


def distinct(*groups: Sequence[_Found]) -> List[_Found]:
    """
    Concatenate the ``groups`` keeping only the first occurrence of each declaration.

    A declaration is identified by the kind of the annotation and the element
    declaring it. The same declaration is usually reached more than once through
    diamonds in the graph of the interfaces.
    """
    result = []  # type: List[_Found]
    visited = set()  # type: Set[Tuple[Type[Annotation], Any]]

    for group in groups:
        for annotation, origin in group:
            key = (type(annotation), origin)
            if key in visited:
                continue

            visited.add(key)
            result.append((annotation, origin))

    return result


def _find_single_on_type(cls: Optional[type], criteria: SearchCriteria) -> List[_Found]:
    if cls is None or cls is object:
        return []

    on_element = []  # type: List[_Found]
    found = support.find_annotation_with_origin(cls, criteria.annotation_type)
    if found is not None:
        on_element.append(found)

    if not is_inherited(criteria.annotation_type) and not criteria.find_all_enclosing:
        return on_element

    on_interfaces = []  # type: List[_Found]
    for ifc in elements.interfaces_of(cls):
        on_interfaces.extend(_find_single_on_type(ifc, criteria))

    if not is_inherited(criteria.annotation_type):
        return distinct(on_element, on_interfaces)

    on_superclass = _find_single_on_type(elements.superclass_of(cls), criteria)

    return distinct(on_element, on_interfaces, on_superclass)


@require(lambda cls: cls is None or inspect.isclass(cls))
@ensure(
    lambda criteria, result: all(
        isinstance(annotation, criteria.annotation_type) for annotation in result
    )
)
def find_on_type(cls: Optional[type], criteria: SearchCriteria) -> List[Annotation]:
    """
    Find the annotations of ``criteria.annotation_type`` on ``cls`` and its supertypes.

    The interfaces count regardless of whether the kind is inherited. For
    a non-inherited kind, however, only the annotation on ``cls`` itself is returned
    unless all the enclosing annotations are requested. The superclass is searched
    only if the kind is inherited. The annotations come in the order: the class
    itself, the interfaces, the superclass.

    If ``criteria.find_repeated`` is set, the repeatable look-up of
    :py:func:`annotation_search.support.find_repeatable_annotations` is used
    instead, which already follows the hierarchy on its own.
    """
    if cls is None or cls is object:
        return []

    if criteria.find_repeated:
        return list(
            support.find_repeatable_annotations(cls, criteria.annotation_type)
        )

    return [annotation for annotation, _ in _find_single_on_type(cls, criteria)]
