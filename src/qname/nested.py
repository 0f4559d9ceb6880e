import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Tuple, Union

from .core import ROOT, QualifiedName

log = logging.getLogger(__name__)

LEAF_KEY = "_"

NameLike = Union[str, QualifiedName]


def _as_name(name: NameLike) -> QualifiedName:
    if isinstance(name, QualifiedName):
        return name
    return QualifiedName.parse(name)


def resolve(name: NameLike, mapping: Mapping, default: Any = None) -> Any:
    """
    Walks a nested mapping along the segments of a name.

    Returns `default` when a key is missing or when a value on the way is not
    itself a mapping. The empty name resolves to `mapping`.
    """
    current: Any = mapping
    for depth, segment in enumerate(_as_name(name)):
        if not isinstance(current, Mapping):
            log.debug(
                f"Cannot resolve '{name}': value at depth {depth} is not a mapping"
            )
            return default
        if segment not in current:
            return default
        current = current[segment]
    return current


def flatten(
    mapping: Mapping, leaf_key: str = LEAF_KEY
) -> Dict[QualifiedName, Any]:
    items: Dict[QualifiedName, Any] = {}
    _flatten_into(items, mapping, ROOT, leaf_key)
    return items


def _flatten_into(
    items: Dict[QualifiedName, Any],
    mapping: Mapping,
    prefix: QualifiedName,
    leaf_key: str,
) -> None:
    for k, v in mapping.items():
        key = str(k)
        new_name = prefix if key == leaf_key else prefix.add(key)

        if isinstance(v, Mapping):
            _flatten_into(items, v, new_name, leaf_key)
        else:
            items[new_name] = v


def _detached(value: Any) -> Any:
    # Mapping values are copied so later branches never write into caller data
    if isinstance(value, Mapping):
        return {k: _detached(v) for k, v in value.items()}
    return value


def inflate(
    items: Union[Mapping[NameLike, Any], Iterable[Tuple[NameLike, Any]]],
    leaf_key: str = LEAF_KEY,
) -> Dict[str, Any]:
    """
    Builds a nested dict from (name, value) pairs; the inverse of `flatten`.

    A name that is both a leaf and a branch keeps its leaf value under
    `leaf_key`: {"a": 1, "a.b": 2} inflates to {"a": {"_": 1, "b": 2}}.
    """
    pairs = items.items() if isinstance(items, Mapping) else items
    result: Dict[str, Any] = {}
    for raw_name, raw_value in pairs:
        name = _as_name(raw_name)
        value = _detached(raw_value)
        if name.is_empty:
            result[leaf_key] = value
            continue

        d_curr = result
        for part in name.left_from_end(1):
            if part not in d_curr:
                d_curr[part] = {}
            elif not isinstance(d_curr[part], dict):
                # Conflict: 'a' was a leaf, now needs to be a node.
                d_curr[part] = {leaf_key: d_curr[part]}
            d_curr = d_curr[part]

        last_part = name.segment
        if isinstance(d_curr.get(last_part), dict):
            d_curr[last_part][leaf_key] = value
        else:
            d_curr[last_part] = value
    return result
