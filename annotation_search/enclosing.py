"""Find annotations on the method, its declaring class and the enclosing classes."""
import inspect
from typing import Any, Callable, List, Optional

from icontract import require, ensure

from annotation_search import elements, hierarchy, support
from annotation_search.annotations import Annotation, unwrap
from annotation_search.criteria import SearchCriteria


class SearchContext:
    """
    Represent the element under search.

    The ``method`` is optional so that a class alone can be searched. The enclosing
    classes are determined from the ``declaring_class``.
    """

    #: Class declaring the method, or the class under search
    declaring_class: Optional[type]

    #: Method under search, if any
    method: Optional[Callable[..., Any]]

    @require(
        lambda declaring_class: declaring_class is None
        or inspect.isclass(declaring_class)
    )
    @require(lambda method: method is None or inspect.isfunction(unwrap(method)))
    def __init__(
        self,
        declaring_class: Optional[type],
        method: Optional[Callable[..., Any]] = None,
    ) -> None:
        """Initialize with the given values."""
        self.declaring_class = declaring_class
        self.method = None if method is None else unwrap(method)

    def __repr__(self) -> str:
        """Represent the context for debugging."""
        class_str = (
            "None"
            if self.declaring_class is None
            else self.declaring_class.__qualname__
        )
        method_str = "None" if self.method is None else self.method.__qualname__
        return f"SearchContext(declaring_class={class_str}, method={method_str})"


@require(
    lambda element: inspect.isclass(element) or inspect.isfunction(unwrap(element))
)
def context_of(element: Any) -> SearchContext:
    """
    Create the search context for a class or a function.

    The declaring class of a function is determined from its qualified name.
    """
    if inspect.isclass(element):
        return SearchContext(declaring_class=element)

    return SearchContext(
        declaring_class=elements.declaring_class_of(element), method=element
    )


def _find_on_method(
    method: Callable[..., Any], criteria: SearchCriteria
) -> List[Annotation]:
    if criteria.find_repeated:
        return list(
            support.find_repeatable_annotations(method, criteria.annotation_type)
        )

    found = support.find_annotation(method, criteria.annotation_type)
    return [] if found is None else [found]


def find_on_outer_classes(
    cls: Optional[type], criteria: SearchCriteria
) -> List[Annotation]:
    """
    Find the annotations on ``cls`` and, outwards, on the classes enclosing it.

    Unless all the enclosing annotations are requested, the search stops at the first
    class with a match.
    """
    if cls is None:
        return []

    on_this_class = support.annotations_by_type(cls, criteria.annotation_type)
    if not criteria.find_all_enclosing and len(on_this_class) > 0:
        return list(on_this_class)

    on_class = hierarchy.find_on_type(cls, criteria)
    if not criteria.find_all_enclosing and len(on_class) > 0:
        return on_class

    on_outer_class = find_on_outer_classes(elements.enclosing_class_of(cls), criteria)

    return on_class + on_outer_class


@ensure(
    lambda criteria, result: all(
        isinstance(annotation, criteria.annotation_type) for annotation in result
    )
)
def find_annotations(
    context: SearchContext, criteria: SearchCriteria
) -> List[Annotation]:
    """
    Find the annotations on the method, the declaring class and the enclosing classes.

    The method-level annotations come first. Unless all the enclosing annotations are
    requested, only the annotations of the closest scope with a match are returned.
    """
    on_method = []  # type: List[Annotation]
    if context.method is not None:
        on_method = _find_on_method(context.method, criteria)

    if not criteria.find_all_enclosing and len(on_method) > 0:
        return on_method

    on_class = find_on_outer_classes(context.declaring_class, criteria)

    return on_method + on_class
