import re

import pytest

from qname import ROOT, InvalidSegmentError, QualifiedName

ABC = QualifiedName.of("a", "b", "c")


def test_starts_with():
    assert ABC.starts_with(QualifiedName.of("a", "b", "c"))
    assert ABC.starts_with(QualifiedName.of("a", "b"))
    assert ABC.starts_with(QualifiedName.of("a"))
    assert ABC.starts_with(ROOT)
    assert not ABC.starts_with(QualifiedName.of("c"))
    assert not ABC.starts_with(QualifiedName.of("a", "b", "c", "d"))


def test_ends_with():
    assert ABC.ends_with(QualifiedName.of("a", "b", "c"))
    assert ABC.ends_with(QualifiedName.of("b", "c"))
    assert ABC.ends_with(QualifiedName.of("c"))
    assert ABC.ends_with(ROOT)
    assert not ABC.ends_with(QualifiedName.of("a"))
    assert not ABC.ends_with(QualifiedName.of("a", "b", "c", "d"))


@pytest.mark.parametrize(
    "prefix",
    [ROOT, QualifiedName.of("a"), QualifiedName.of("b"), QualifiedName.of("a", "b"), ABC],
)
def test_starts_with_mirrors_ends_with(prefix):
    assert ABC.starts_with(prefix) == ABC.reverse().ends_with(prefix.reverse())


def test_matches_with_custom_predicate():
    name = QualifiedName.of("Alpha", "Beta")
    same_ignoring_case = lambda mine, theirs: mine.lower() == theirs.lower()

    assert name.matches(QualifiedName.of("alpha", "beta"), same_ignoring_case, True)
    assert name.matches(QualifiedName.of("beta"), same_ignoring_case)
    assert not name.matches(QualifiedName.of("beta"), same_ignoring_case, True)


def test_matches_empty_names():
    eq = lambda mine, theirs: mine == theirs

    assert ROOT.matches(ROOT, eq, True)
    assert ROOT.matches(ROOT, eq, False)
    assert ABC.matches(ROOT, eq, False)
    assert not ABC.matches(ROOT, eq, True)
    assert not ROOT.matches(ABC, eq, False)
    assert not ROOT.matches(ABC, eq, True)


def test_pattern_match():
    should_match1 = QualifiedName.of("peter", "piper", "picked")
    should_match2 = QualifiedName.of("peter", "poper", "jumped")
    shouldnt_match = QualifiedName.of("david", "piper", "picked")
    pattern = QualifiedName.of("p.*", "p.per", ".*d")

    assert should_match1.pattern_matches(pattern, True)
    assert should_match2.pattern_matches(pattern, True)
    assert not shouldnt_match.pattern_matches(pattern, True)


def test_pattern_match_trailing():
    pattern = QualifiedName.of("p.per", ".*d")
    name = QualifiedName.of("david", "piper", "picked")

    assert name.pattern_matches(pattern)
    assert not name.pattern_matches(pattern, match_all=True)


def test_pattern_segments_must_match_the_whole_segment():
    assert not QualifiedName.of("picked!").pattern_matches(QualifiedName.of(".*d"))
    assert not QualifiedName.of("xpeter").pattern_matches(QualifiedName.of("p.*"))


def test_invalid_pattern_propagates():
    with pytest.raises(re.error):
        QualifiedName.of("a").pattern_matches(QualifiedName.of("("))


def test_index_from_end():
    assert ABC.index_from_end(lambda e: e == "a") == 2
    assert ABC.index_from_end(lambda e: e == "b") == 1
    assert ABC.index_from_end(lambda e: e == "c") == 0
    assert ABC.index_from_end(lambda e: e == "d") == -1
    assert ROOT.index_from_end(lambda e: True) == -1


def test_index_of():
    assert ABC.index_of(lambda e: e == "a") == 0
    assert ABC.index_of(lambda e: e == "b") == 1
    assert ABC.index_of(lambda e: e == "c") == 2
    assert ABC.index_of(lambda e: e == "d") == -1


def test_index_picks_the_nearest_match():
    name = QualifiedName.of("x", "a", "y", "a")

    assert name.index_of(lambda e: e == "a") == 1
    assert name.index_from_end(lambda e: e == "a") == 0


def test_contains():
    assert ABC.contains(lambda e: e == "b")
    assert not ABC.contains(lambda e: e.isupper())
    assert not ROOT.contains(lambda e: True)


# --- Transform ---


def test_transform():
    n1 = QualifiedName.of("x", "abc", "2")

    assert n1.transform(str.upper) == QualifiedName.of("X", "ABC", "2")
    assert n1.transform(lambda i: i.upper()) == QualifiedName.of("X", "ABC", "2")
    assert ROOT.transform(str.upper) is ROOT


def test_transform_is_applied_root_first():
    seen = []

    def record(segment):
        seen.append(segment)
        return segment

    QualifiedName.of("a", "b", "c").transform(record)

    assert seen == ["a", "b", "c"]


class TransformFailed(Exception):
    pass


def test_transform_failure_propagates_unchanged():
    seen = []

    def checked(segment):
        seen.append(segment)
        if segment == "ERROR":
            raise TransformFailed(segment)
        return segment

    name = QualifiedName.of("x", "ERROR", "2")

    with pytest.raises(TransformFailed) as excinfo:
        name.transform(checked)

    assert excinfo.value.args == ("ERROR",)
    # No segment is retried and nothing after the failure is visited
    assert seen == ["x", "ERROR"]


def test_transform_must_return_strings():
    with pytest.raises(InvalidSegmentError):
        QualifiedName.of("abc").transform(len)  # type: ignore[arg-type]
