"""
Define annotations, the declarative metadata declared on classes and functions.

An annotation kind is a class deriving from :py:class:`Annotation`, and an
annotation is an instance of such a class. You declare an annotation on a class or
a function by applying it as a decorator:

.. code-block:: python

    class Tag(Annotation):
        def __init__(self, name: str) -> None:
            self.name = name

    @Tag("fast")
    def test_something() -> None:
        ...

The annotations are stored in the own ``__dict__`` of the element so that the usual
Python attribute look-up never leaks them to the subclasses. All propagation, such as
inheritance from the superclasses, is a matter of the search.
"""
import inspect
from typing import Any, Optional, Sequence, Type, TypeVar, List, Callable

from icontract import require, ensure

#: Name of the attribute holding the annotations declared directly on an element
DECLARED_ATTRIBUTE = "__declared_annotations__"

_INHERITED_ATTRIBUTE = "__annotation_inherited__"
_CONTAINER_ATTRIBUTE = "__annotation_container__"
_CONTAINED_ATTRIBUTE = "__annotation_contained__"

T = TypeVar("T")


class Annotation:
    """
    Represent an annotation declared on an element.

    The kind of the annotation is its concrete class.
    """

    @property
    def annotation_type(self) -> Type["Annotation"]:
        """Return the kind of the annotation."""
        return type(self)

    def __call__(self, element: T) -> T:
        """Declare the annotation on the ``element`` and return it unchanged."""
        annotate(element, self)
        return element

    def __repr__(self) -> str:
        """Represent the annotation with its values for debugging."""
        values_str = ", ".join(
            f"{name}={value!r}" for name, value in sorted(vars(self).items())
        )
        return f"@{self.__class__.__name__}({values_str})"


AnnotationT = TypeVar("AnnotationT", bound=Annotation)


def is_annotation_type(value: Any) -> bool:
    """Check whether ``value`` is an annotation kind."""
    return inspect.isclass(value) and issubclass(value, Annotation)


@require(lambda kind: is_annotation_type(kind))
def inherited(kind: Type[AnnotationT]) -> Type[AnnotationT]:
    """
    Mark the annotation ``kind`` as inherited from superclasses to subclasses.

    The mark is not propagated to the subclasses of ``kind``.
    """
    setattr(kind, _INHERITED_ATTRIBUTE, True)
    return kind


@require(lambda kind: is_annotation_type(kind))
def is_inherited(kind: Type[Annotation]) -> bool:
    """Check whether the annotation ``kind`` has been marked as inherited."""
    return bool(vars(kind).get(_INHERITED_ATTRIBUTE, False))


@require(lambda container: is_annotation_type(container))
def repeatable(
    container: Type[Annotation],
) -> Callable[[Type[AnnotationT]], Type[AnnotationT]]:
    """
    Mark the annotation kind as repeatable with the ``container`` kind.

    Repeated declarations of the kind on the same element are aggregated in
    a single instance of the ``container``. The container remembers the kind so
    that its declarations resolve even if both are defined in a function body.
    """

    @require(lambda kind: is_annotation_type(kind))
    @require(lambda kind: kind is not container)
    def decorator(kind: Type[AnnotationT]) -> Type[AnnotationT]:
        setattr(kind, _CONTAINER_ATTRIBUTE, container)
        setattr(container, _CONTAINED_ATTRIBUTE, kind)
        return kind

    return decorator


@require(lambda kind: is_annotation_type(kind))
@ensure(lambda result: result is None or is_annotation_type(result))
def container_of(kind: Type[Annotation]) -> Optional[Type[Annotation]]:
    """Retrieve the container kind if ``kind`` is repeatable, otherwise ``None``."""
    container = vars(kind).get(_CONTAINER_ATTRIBUTE, None)
    assert container is None or is_annotation_type(container)
    return container


@require(lambda container: is_annotation_type(container))
@ensure(lambda result: result is None or is_annotation_type(result))
def repeated_kind_of(container: Type[Annotation]) -> Optional[Type[Annotation]]:
    """Retrieve the kind marked repeatable with the ``container``, if any."""
    kind = vars(container).get(_CONTAINED_ATTRIBUTE, None)
    assert kind is None or is_annotation_type(kind)
    return kind


def unwrap(element: Any) -> Any:
    """Unwrap static methods, class methods and bound methods to their function."""
    if isinstance(element, (staticmethod, classmethod)):
        return element.__func__

    if inspect.ismethod(element):
        return element.__func__

    return element


def declared_annotations(element: Any) -> Sequence[Annotation]:
    """
    Retrieve the annotations declared directly on the ``element``.

    The annotations are given in the order of declaration in the source code.
    Elements without own attributes, such as built-in types, have no annotations.
    """
    own = getattr(unwrap(element), "__dict__", None)
    if own is None:
        return ()

    result = own.get(DECLARED_ATTRIBUTE, ())  # type: Sequence[Annotation]
    return result


def _can_be_declared(element: Any, annotation: Annotation) -> bool:
    """Check that a non-repeatable kind is declared at most once on the element."""
    if container_of(type(annotation)) is not None:
        return True

    return all(
        type(declared) is not type(annotation)
        for declared in declared_annotations(element)
    )


@require(
    lambda element: inspect.isclass(unwrap(element))
    or inspect.isfunction(unwrap(element))
)
@require(
    lambda element, annotation: _can_be_declared(element, annotation),
    "Only repeatable annotation kinds can be declared more than once "
    "on the same element",
)
@ensure(
    lambda element, annotation: any(
        declared is annotation or annotation in getattr(declared, "value", ())
        for declared in declared_annotations(element)
    )
)
def annotate(element: Any, annotation: Annotation) -> None:
    """
    Declare the ``annotation`` on the ``element``.

    Decorators are applied bottom-up, so the ``annotation`` is put *before*
    the already declared ones to preserve the order of the source code.

    Repeated declarations of a repeatable kind are wrapped in an instance of its
    container kind which receives the contained annotations as positional arguments.
    """
    target = unwrap(element)

    declared = list(declared_annotations(target))  # type: List[Annotation]

    kind = type(annotation)
    container = container_of(kind)

    merged = False
    if container is not None:
        for i, existing in enumerate(declared):
            if type(existing) is kind:
                declared[i] = container(annotation, existing)  # type: ignore
                merged = True
                break

            if type(existing) is container:
                declared[i] = container(  # type: ignore
                    annotation, *getattr(existing, "value")
                )
                merged = True
                break

    if not merged:
        declared.insert(0, annotation)

    setattr(target, DECLARED_ATTRIBUTE, tuple(declared))
