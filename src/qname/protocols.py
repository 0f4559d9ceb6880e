from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Protocol, TypeVar, Union

# T_Name is covariant, meaning QualifiedNameProtocol can return subtypes of itself
T_Name = TypeVar("T_Name", bound="QualifiedNameProtocol", covariant=True)

SegmentPredicate = Callable[[str], bool]
SegmentMatcher = Callable[[str, str], bool]
SegmentTransformer = Callable[[str], str]


class QualifiedNameProtocol(Protocol[T_Name]):
    """
    Defines the contract for a Qualified Name.

    A Qualified Name is a recursive, immutable chain of string segments.
    Each name holds a reference to its enclosing scope (the parent) and
    the one segment it adds to it.
    """

    @property
    def parent(self) -> Optional[T_Name]:
        """
        The enclosing scope, or None for the empty name.
        Example: of("a", "b").parent -> of("a")
        """
        ...

    @property
    def segment(self) -> Optional[str]:
        """
        The last segment, or None for the empty name.
        """
        ...

    def add(self, segment: str) -> T_Name:
        """
        Creates a new name extended by one segment. The receiver is unchanged.
        Example: of("a").add("b") -> "a.b"
        """
        ...

    def add_all(self, segments: Iterable[str]) -> T_Name:
        """
        Extends the name by each segment in order.
        """
        ...

    def join(self, separator: str = ".", escape: str = "\\") -> str:
        """
        Returns the escaped textual form of the name.
        Example: of("a", "b.c").join() -> "a.b\\.c"
        """
        ...

    def __iter__(self) -> Iterator[str]:
        """
        Iterating over a name yields its segments from first to last.
        """
        ...

    def __len__(self) -> int:
        """
        The number of segments. The empty name has none.
        """
        ...

    def __hash__(self) -> int:
        """
        Names must be hashable to be used as dictionary keys.
        """
        ...

    def __eq__(self, other: Any) -> bool:
        """
        Names are equal when their segments are equal, in order.
        """
        ...

    def __truediv__(self, other: Union[str, "QualifiedNameProtocol"]) -> T_Name:
        """
        Operator '/': Extends the name with a segment or with another name.
        Example: of("a") / "b" / of("c", "d") -> "a.b.c.d"
        """
        ...

    def resolve(self, mapping: Mapping[str, Any], default: Any = None) -> Any:
        """
        Looks the name up in a nested mapping.

        Args:
            mapping: A mapping whose values may themselves be mappings.
            default: Returned when any step of the path is missing.

        Returns:
            The value found at the end of the path, or `default`.
        """
        ...
