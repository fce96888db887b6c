"""Navigate the program structure: interfaces, superclasses and enclosing classes."""
import inspect
import sys
import typing
from typing import Any, Callable, List, Mapping, Optional, Sequence, TypeVar

from icontract import require, ensure

from annotation_search.annotations import Annotation, unwrap, DECLARED_ATTRIBUTE
from annotation_search.common import Identifier

_INTERFACE_ATTRIBUTE = "__annotation_search_interface__"

ClassT = TypeVar("ClassT", bound=type)


@require(lambda cls: inspect.isclass(cls) and cls is not object)
def interface(cls: ClassT) -> ClassT:
    """
    Mark the class ``cls`` as an interface.

    An interface has no superclass. The interfaces it extends are its interface
    bases. Annotations on interfaces are always considered for the classes
    implementing them, regardless of whether the annotation kind is inherited.
    """
    setattr(cls, _INTERFACE_ATTRIBUTE, True)
    return cls


def is_interface(cls: type) -> bool:
    """Check whether ``cls`` has been marked as an interface."""
    return bool(vars(cls).get(_INTERFACE_ATTRIBUTE, False))


@require(lambda cls: inspect.isclass(cls))
@ensure(lambda result: all(is_interface(ifc) for ifc in result))
def interfaces_of(cls: type) -> List[type]:
    """List the interfaces directly implemented or extended by ``cls``."""
    return [base for base in cls.__bases__ if is_interface(base)]


@require(lambda cls: inspect.isclass(cls))
@ensure(lambda result: result is None or not is_interface(result))
def superclass_of(cls: type) -> Optional[type]:
    """
    Determine the superclass of ``cls``.

    The superclass is the first base which is not an interface, or ``object`` if all
    the bases are interfaces. Interfaces and ``object`` itself have no superclass.
    """
    if cls is object or is_interface(cls):
        return None

    for base in cls.__bases__:
        if not is_interface(base):
            return base

    return object


def _resolve_qualified_parent(element: Any) -> Optional[type]:
    """Follow the ``__qualname__`` of the ``element`` to the class defining it."""
    parts = element.__qualname__.split(".")
    if len(parts) < 2 or "<locals>" in parts:
        return None

    module = sys.modules.get(element.__module__, None)
    if module is None:
        return None

    something = module  # type: Any
    for part in parts[:-1]:
        something = getattr(something, part, None)
        if something is None:
            return None

    if not inspect.isclass(something):
        return None

    return something


@require(lambda cls: inspect.isclass(cls))
def enclosing_class_of(cls: type) -> Optional[type]:
    """
    Determine the class which textually encloses ``cls``.

    Classes defined in function bodies have no enclosing class.
    """
    return _resolve_qualified_parent(cls)


@require(lambda function: inspect.isfunction(unwrap(function)))
def declaring_class_of(function: Callable[..., Any]) -> Optional[type]:
    """Determine the class declaring the ``function``, if it is a method."""
    return _resolve_qualified_parent(unwrap(function))


class Parameter:
    """Represent a parameter of a function together with its annotations."""

    #: Function declaring the parameter
    function: Callable[..., Any]

    #: Name of the parameter
    name: Identifier

    #: Position of the parameter in the signature, starting at zero
    index: int

    def __init__(
        self,
        function: Callable[..., Any],
        name: Identifier,
        index: int,
        annotations: Sequence[Annotation],
    ) -> None:
        """Initialize with the given values."""
        self.function = function
        self.name = name
        self.index = index
        setattr(self, DECLARED_ATTRIBUTE, tuple(annotations))

    def __repr__(self) -> str:
        """Represent the parameter for debugging."""
        return (
            f"<{self.__class__.__name__} {self.name} at index {self.index} "
            f"of {self.function.__qualname__}>"
        )


@require(lambda function: inspect.isfunction(unwrap(function)))
@ensure(
    lambda result: all(parameter.index == i for i, parameter in enumerate(result))
)
def parameters_of(function: Callable[..., Any]) -> List[Parameter]:
    """
    List the parameters of the ``function`` in the order of the signature.

    The annotations of a parameter are the :py:class:`Annotation` instances given
    as metadata of :py:class:`typing.Annotated`:

    .. code-block:: python

        def test_something(x: Annotated[int, Ints(1, 2, 3)]) -> None:
            ...

    If some hints can not be resolved, for example because they refer to classes
    local to a function body, the hints are taken as written. Stringified hints are
    then left unresolved and carry no annotations.
    """
    function = unwrap(function)

    signature = inspect.signature(function)

    type_hints = dict()  # type: Mapping[str, Any]
    try:
        type_hints = typing.get_type_hints(function, include_extras=True)
    except (NameError, AttributeError, SyntaxError, TypeError):
        type_hints = inspect.get_annotations(function)

    result = []  # type: List[Parameter]
    for index, name in enumerate(signature.parameters):
        type_hint = type_hints.get(name, None)

        annotations = []  # type: List[Annotation]
        if type_hint is not None and typing.get_origin(type_hint) is typing.Annotated:
            annotations = [
                metadata
                for metadata in type_hint.__metadata__
                if isinstance(metadata, Annotation)
            ]

        result.append(
            Parameter(
                function=function,
                name=Identifier(name),
                index=index,
                annotations=annotations,
            )
        )

    return result
