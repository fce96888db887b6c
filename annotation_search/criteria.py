"""Represent a query for annotations."""
from typing import Final, Type

from annotation_search.annotations import Annotation


class SearchCriteria:
    """
    Represent what annotations to search for and how far to look.

    The criteria are not validated. If you set ``find_repeated`` for a kind which is
    not repeatable, the search fails where the repeated annotations are looked up.
    """

    #: Kind of the annotations to find
    annotation_type: Final[Type[Annotation]]

    #: If set, collect all the repeated annotations instead of a single one
    find_repeated: Final[bool]

    #: If set, search all enclosing scopes instead of stopping at the closest match
    find_all_enclosing: Final[bool]

    def __init__(
        self,
        annotation_type: Type[Annotation],
        find_repeated: bool,
        find_all_enclosing: bool,
    ) -> None:
        """Initialize with the given values."""
        self.annotation_type = annotation_type
        self.find_repeated = find_repeated
        self.find_all_enclosing = find_all_enclosing

    def __repr__(self) -> str:
        """Represent the criteria for debugging."""
        return (
            f"SearchCriteria("
            f"annotation_type={self.annotation_type.__name__}, "
            f"find_repeated={self.find_repeated!r}, "
            f"find_all_enclosing={self.find_all_enclosing!r})"
        )
