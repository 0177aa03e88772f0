# formstate/core/data_management.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import copy
import re
from typing import Any, List, Mapping, Sequence

from formstate.interfaces.types import FieldPath, FieldRef

_SEGMENT_RE = re.compile(r"[^.\[\]]+|\[(\d+)\]")

# Distinguishes "key absent" from an explicit None when walking documents.
_MISSING = object()


def _parse_path_string(field: str) -> List[Any]:
    segments: List[Any] = []
    for match in _SEGMENT_RE.finditer(field):
        if match.group(1) is not None:
            segments.append(int(match.group(1)))
        else:
            segments.append(match.group(0))
    return segments


def to_path(field: FieldRef) -> FieldPath:
    """
    Normalize a field reference into a tuple of path segments.

    Accepts ``None``, an int index, a dotted/bracketed string such as
    ``"friends[0].name"``, or any nesting of lists/tuples of those.

    :param field: The field reference.
    :return: Tuple of str keys and int indices.
    """
    if field is None or field == "":
        return ()
    if isinstance(field, bool):
        raise TypeError(f"Invalid path segment: {field!r}")
    if isinstance(field, int):
        return (field,)
    if isinstance(field, str):
        return tuple(_parse_path_string(field))
    if isinstance(field, Sequence):
        path: List[Any] = []
        for part in field:
            path.extend(to_path(part))
        return tuple(path)
    raise TypeError(f"Invalid field reference: {field!r}")


def join_path(parent: FieldRef, child: FieldRef) -> FieldPath:
    """Prefix ``child`` with ``parent``."""
    return to_path(parent) + to_path(child)


def _step(node: Any, segment: Any) -> Any:
    if isinstance(node, Mapping):
        return node.get(segment, _MISSING)
    if isinstance(node, list) and isinstance(segment, int) and -len(node) <= segment < len(node):
        return node[segment]
    return _MISSING


def get_in(document: Any, field: FieldRef, default: Any = None) -> Any:
    """
    Read the value at ``field`` inside a nested document.

    :param document: Nested dicts and lists.
    :param field: Field reference, see ``to_path``.
    :param default: Returned when any step along the path is missing.
    """
    node = document
    for segment in to_path(field):
        node = _step(node, segment)
        if node is _MISSING:
            return default
    return node


def _empty_container(segment: Any) -> Any:
    return [] if isinstance(segment, int) else {}


def _copy_container(node: Any, segment: Any) -> Any:
    if isinstance(segment, int) and isinstance(node, list):
        return list(node)
    if isinstance(node, Mapping):
        return dict(node)
    return _empty_container(segment)


def _assign(container: Any, segment: Any, value: Any) -> None:
    if isinstance(container, list):
        if segment < 0:
            segment += len(container)
        while len(container) <= segment:
            container.append(None)
    container[segment] = value


def set_in(document: Any, field: FieldRef, value: Any) -> Any:
    """
    Return a new document with ``value`` written at ``field``.

    Containers along the path are shallow-copied; the original document is
    never modified. Missing containers become lists when the next segment is
    an int and dicts otherwise.
    """
    path = to_path(field)
    if not path:
        return value

    head, rest = path[0], path[1:]
    container = _copy_container(document, head)
    child = _step(document, head)
    if rest:
        child = None if child is _MISSING else child
        _assign(container, head, set_in(child, rest, value))
    else:
        _assign(container, head, value)
    return container


def unset_in(document: Any, field: FieldRef) -> Any:
    """
    Return a new document with the entry at ``field`` removed.

    List entries are replaced by None so sibling indices do not shift. A
    missing path returns the document unchanged.
    """
    path = to_path(field)
    if not path:
        return None

    head, rest = path[0], path[1:]
    child = _step(document, head)
    if child is _MISSING:
        return document

    container = _copy_container(document, head)
    if rest:
        _assign(container, head, unset_in(child, rest))
    elif isinstance(container, list):
        container[head] = None
    else:
        del container[head]
    return container


def snapshot(document: Any) -> Any:
    """Deep copy sharing no mutable substructure with ``document``."""
    return copy.deepcopy(document)


def deep_equal(a: Any, b: Any) -> bool:
    """
    Structural equality for state documents.

    Mapping key order is ignored, a missing key is never equal to an explicit
    None, and lists/tuples compare element-wise.
    """
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if set(a.keys()) != set(b.keys()):
            return False
        return all(deep_equal(a[key], b[key]) for key in a)
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        if len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, (Mapping, list, tuple)) or isinstance(b, (Mapping, list, tuple)):
        return False
    if a is None or b is None:
        return a is b
    # bool is an int subclass; True must not equal 1 here
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return a == b
