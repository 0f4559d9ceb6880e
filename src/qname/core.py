import operator
import re
from itertools import islice
from typing import (
    Any,
    Callable,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Sequence,
    TypeVar,
    Union,
)

from .codec import DEFAULT_ESCAPE, DEFAULT_SEPARATOR, join_segments, split_escaped
from .exceptions import InvalidSegmentError, SegmentIndexError
from .protocols import (
    QualifiedNameProtocol,
    SegmentMatcher,
    SegmentPredicate,
    SegmentTransformer,
)

T = TypeVar("T")

EMPTY_MARKER = "{}"
_EMPTY_HASH = hash(())


def _restore(segments: Sequence[str]) -> "QualifiedName":
    return QualifiedName.of_all(segments)


class QualifiedName(QualifiedNameProtocol):
    """
    An immutable chain of string segments.

    A name is either empty (no parent, no segment) or a node holding its
    enclosing scope and one segment. Nodes are never altered after
    construction, so a parent chain can be shared by any number of names.
    """

    __slots__ = ("_parent", "_segment", "_size", "_hash")

    def __init__(self, *segments: str):
        parent: Optional[QualifiedName] = None
        segment: Optional[str] = None
        if segments:
            chain = ROOT.add_all(segments)
            parent, segment = chain._parent, chain._segment
        self._bind(parent, segment)

    @classmethod
    def _node(cls, parent: "QualifiedName", segment: str) -> "QualifiedName":
        node = object.__new__(cls)
        node._bind(parent, segment)
        return node

    def _bind(self, parent: Optional["QualifiedName"], segment: Optional[str]) -> None:
        if hasattr(self, "_size"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        if parent is None:
            size, hashed = 0, _EMPTY_HASH
        else:
            size, hashed = parent._size + 1, hash((parent._hash, segment))
        object.__setattr__(self, "_parent", parent)
        object.__setattr__(self, "_segment", segment)
        object.__setattr__(self, "_size", size)
        object.__setattr__(self, "_hash", hashed)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # --- Construction ---

    @classmethod
    def empty(cls) -> "QualifiedName":
        return ROOT

    @classmethod
    def of(cls, *segments: str) -> "QualifiedName":
        return ROOT.add_all(segments)

    @classmethod
    def of_all(cls, segments: Iterable[str]) -> "QualifiedName":
        return ROOT.add_all(segments)

    @classmethod
    def parse(
        cls,
        text: str,
        separator: str = DEFAULT_SEPARATOR,
        escape: str = DEFAULT_ESCAPE,
    ) -> "QualifiedName":
        return ROOT.add_parsed(text, separator, escape)

    def add(self, segment: str) -> "QualifiedName":
        if not isinstance(segment, str):
            raise InvalidSegmentError(segment)
        return self._node(self, segment)

    def add_all(self, segments: Iterable[str]) -> "QualifiedName":
        # A bare string is one segment, not a sequence of characters
        if isinstance(segments, str):
            segments = [segments]
        result = self
        for segment in segments:
            result = result.add(segment)
        return result

    def add_parsed(
        self,
        text: str,
        separator: str = DEFAULT_SEPARATOR,
        escape: str = DEFAULT_ESCAPE,
    ) -> "QualifiedName":
        return self.add_all(split_escaped(text, separator, escape))

    # --- Structure ---

    @property
    def parent(self) -> Optional["QualifiedName"]:
        return self._parent

    @property
    def segment(self) -> Optional[str]:
        return self._segment

    @property
    def is_empty(self) -> bool:
        return self._parent is None

    def __len__(self) -> int:
        return self._size

    def _nodes(self) -> Iterator["QualifiedName"]:
        node = self
        while node._parent is not None:
            yield node
            node = node._parent

    def reversed_segments(self) -> Iterator[str]:
        for node in self._nodes():
            yield node._segment  # type: ignore[misc]

    def __reversed__(self) -> Iterator[str]:
        return self.reversed_segments()

    def __iter__(self) -> Iterator[str]:
        yield from reversed(list(self.reversed_segments()))

    def __contains__(self, segment: object) -> bool:
        return any(s == segment for s in self.reversed_segments())

    # --- Identity ---

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, QualifiedName):
            return NotImplemented
        if self._size != other._size or self._hash != other._hash:
            return False
        left: Optional[QualifiedName] = self
        right: Optional[QualifiedName] = other
        # Stops early once both sides reach a shared ancestor
        while left is not right:
            if left._segment != right._segment:  # type: ignore[union-attr]
                return False
            left, right = left._parent, right._parent  # type: ignore[union-attr]
        return True

    def _compare(self, other: "QualifiedName") -> int:
        for mine, theirs in zip(self, other):
            if mine != theirs:
                return -1 if mine < theirs else 1
        return (self._size > other._size) - (self._size < other._size)

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, QualifiedName):
            return NotImplemented
        return self._compare(other) < 0

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, QualifiedName):
            return NotImplemented
        return self._compare(other) <= 0

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, QualifiedName):
            return NotImplemented
        return self._compare(other) > 0

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, QualifiedName):
            return NotImplemented
        return self._compare(other) >= 0

    def __copy__(self) -> "QualifiedName":
        return self

    def __deepcopy__(self, memo: dict) -> "QualifiedName":
        return self

    def __reduce__(self):
        return (_restore, (tuple(self),))

    # --- Traversal ---

    def fold_outward(
        self,
        initial: T,
        combine: Callable[[T, str], T],
        continue_while: Optional[Callable[[T], bool]] = None,
    ) -> T:
        """
        Folds the segments root-first.

        `continue_while` is tested against the accumulator before each segment
        is combined; once it is false the accumulator is returned as is.
        """
        result = initial
        for segment in self:
            if continue_while is not None and not continue_while(result):
                break
            result = combine(result, segment)
        return result

    def fold_inward(
        self,
        initial: T,
        combine: Callable[[T, str], T],
        continue_while: Optional[Callable[[T, str], bool]] = None,
    ) -> T:
        """
        Folds the segments leaf-first.

        `continue_while` receives the accumulator and the segment about to be
        combined; once it is false the remaining segments are not visited.
        """
        result = initial
        for segment in self.reversed_segments():
            if continue_while is not None and not continue_while(result, segment):
                break
            result = combine(result, segment)
        return result

    def reverse(self) -> "QualifiedName":
        return self.fold_inward(ROOT, lambda acc, segment: acc.add(segment))

    def transform(self, transformer: SegmentTransformer) -> "QualifiedName":
        return self.fold_outward(
            ROOT, lambda acc, segment: acc.add(transformer(segment))
        )

    # --- Text ---

    def join(
        self, separator: str = DEFAULT_SEPARATOR, escape: str = DEFAULT_ESCAPE
    ) -> str:
        return join_segments(self, separator, escape)

    def __str__(self) -> str:
        return EMPTY_MARKER if self.is_empty else self.join()

    def __repr__(self) -> str:
        if self.is_empty:
            return "<QualifiedName: (empty)>"
        return f"<QualifiedName: {self.join()!r}>"

    # --- Matching ---

    def matches(
        self,
        other: "QualifiedName",
        predicate: SegmentMatcher,
        match_all: bool = False,
    ) -> bool:
        """
        Compares segments from the leaf backward.

        `predicate(own_segment, other_segment)` must hold at every position of
        `other`. A shorter `other` is a trailing match unless `match_all` is
        set, in which case both names must have the same length.
        """
        if other._size > self._size:
            return False
        if match_all and other._size != self._size:
            return False
        for mine, theirs in zip(self.reversed_segments(), other.reversed_segments()):
            if not predicate(mine, theirs):
                return False
        return True

    def ends_with(self, suffix: "QualifiedName") -> bool:
        return self.matches(suffix, operator.eq)

    def starts_with(self, prefix: "QualifiedName") -> bool:
        return self.reverse().ends_with(prefix.reverse())

    def pattern_matches(self, pattern: "QualifiedName", match_all: bool = False) -> bool:
        return self.matches(
            pattern,
            lambda segment, regex: re.fullmatch(regex, segment) is not None,
            match_all,
        )

    def index_from_end(self, predicate: SegmentPredicate) -> int:
        for index, segment in enumerate(self.reversed_segments()):
            if predicate(segment):
                return index
        return -1

    def index_of(self, predicate: SegmentPredicate) -> int:
        return self.reverse().index_from_end(predicate)

    def contains(self, predicate: SegmentPredicate) -> bool:
        return any(predicate(segment) for segment in self.reversed_segments())

    # --- Slicing ---

    def left_from_end(self, count: int) -> "QualifiedName":
        node = self
        while count > 0 and node._parent is not None:
            node = node._parent
            count -= 1
        return node

    def left(self, count: int) -> "QualifiedName":
        return self.left_from_end(self._size - count)

    def right_last(self, count: int) -> "QualifiedName":
        if count <= 0:
            return ROOT
        if count >= self._size:
            return self
        tail = list(islice(self.reversed_segments(), count))
        return ROOT.add_all(reversed(tail))

    def right_from_start(self, count: int) -> "QualifiedName":
        return self.right_last(self._size - count)

    def up_to(self, predicate: SegmentPredicate) -> "QualifiedName":
        return self.fold_outward(
            ROOT,
            lambda acc, segment: acc.add(segment),
            lambda acc: acc.is_empty or not predicate(acc.segment),
        )

    def from_end(self, predicate: SegmentPredicate) -> "QualifiedName":
        return self.fold_inward(
            ROOT,
            lambda acc, segment: acc.add(segment),
            lambda acc, segment: not predicate(segment),
        ).reverse()

    def get_from_end(self, index: int) -> str:
        if not 0 <= index < self._size:
            raise SegmentIndexError(index, self._size)
        return self.left_from_end(index)._segment  # type: ignore[return-value]

    def get(self, index: int) -> str:
        if not 0 <= index < self._size:
            raise SegmentIndexError(index, self._size)
        return self.get_from_end(self._size - 1 - index)

    def __getitem__(self, key: Union[int, slice]) -> Any:
        if isinstance(key, slice):
            start, stop, step = key.indices(self._size)
            if start == 0 and step == 1:
                return self.left(stop)
            return ROOT.add_all(list(self)[key])
        if not -self._size <= key < self._size:
            raise SegmentIndexError(key, self._size)
        if key < 0:
            return self.get_from_end(-key - 1)
        return self.get(key)

    # --- Composition ---

    def __truediv__(self, other: Union[str, "QualifiedName"]) -> "QualifiedName":
        if isinstance(other, QualifiedName):
            return self.add_all(other)
        if isinstance(other, str):
            return self.add(other)
        return NotImplemented

    def __rtruediv__(self, other: str) -> "QualifiedName":
        if isinstance(other, str):
            return ROOT.add(other).add_all(self)
        return NotImplemented

    # --- Lookup ---

    def resolve(self, mapping: Mapping[str, Any], default: Any = None) -> Any:
        # Lazy import to avoid circular dependency at module level
        from .nested import resolve

        return resolve(self, mapping, default)


# The shared empty name that terminates every chain.
ROOT = QualifiedName()
