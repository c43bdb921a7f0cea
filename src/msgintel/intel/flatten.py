"""Payload flattening - walk a nested payload into parallel (paths, values).

Paths are dotted for keys and bracket-indexed for elements of a sequence
value, e.g. ``message.buttons[1].buttonId``. A container reached as a
sequence element, or passed in at the top level, is entered by its own keys,
indexes included: ``rows[0].1.caption``, ``0.text``. Order is pre-order,
following the payload's own key and index order.

No cycle detection: payloads are assumed acyclic (decoded JSON always is).
Use payload_depth() to cap nesting before flattening untrusted input.
"""

from collections.abc import Iterable, Mapping
from typing import Any


def _is_sequence(value: Any) -> bool:
    # str/bytes are scalars here
    return isinstance(value, (list, tuple))


def _is_container(value: Any) -> bool:
    return isinstance(value, Mapping) or _is_sequence(value)


def _join(prefix: str, key: Any) -> str:
    return f"{prefix}.{key}" if prefix else str(key)


def _entries(container: Any) -> Iterable[tuple[Any, Any]]:
    if isinstance(container, Mapping):
        return container.items()
    return enumerate(container)


def _collect_entries(
    container: Any,
    prefix: str,
    field_names: list[str],
    values: list[Any],
) -> None:
    for key, value in _entries(container):
        path = _join(prefix, key)
        field_names.append(path)
        values.append(value)

        if _is_sequence(value):
            _collect_sequence(value, path, field_names, values)
        elif isinstance(value, Mapping):
            _collect_entries(value, path, field_names, values)


def _collect_sequence(
    sequence: list[Any] | tuple[Any, ...],
    prefix: str,
    field_names: list[str],
    values: list[Any],
) -> None:
    for index, item in enumerate(sequence):
        path = f"{prefix}[{index}]"
        field_names.append(path)
        values.append(item)

        # Scalars are leaves; nested lists are walked by dotted index
        if _is_container(item):
            _collect_entries(item, path, field_names, values)


def flatten_payload(payload: Any) -> tuple[list[str], list[Any]]:
    """Flatten a payload into parallel lists of field paths and raw values.

    Args:
        payload: Any decoded payload (mapping, sequence or scalar).

    Returns:
        Tuple of (field_names, values) with equal length. Both are empty for
        a scalar or None payload.
    """
    field_names: list[str] = []
    values: list[Any] = []

    if _is_container(payload):
        _collect_entries(payload, "", field_names, values)

    return field_names, values


def payload_depth(payload: Any) -> int:
    """Return container nesting depth (scalar=0, flat dict/list=1).

    Iterative, so it is safe to call on payloads too deep to flatten.
    """
    deepest = 0
    stack: list[tuple[Any, int]] = [(payload, 0)]

    while stack:
        node, depth = stack.pop()
        if isinstance(node, Mapping):
            children = list(node.values())
        elif _is_sequence(node):
            children = list(node)
        else:
            continue

        depth += 1
        deepest = max(deepest, depth)
        stack.extend((child, depth) for child in children)

    return deepest


class InvalidPayloadError(Exception):
    """Raised by guards when a payload must not be analyzed."""

    pass


class PayloadTooDeepError(InvalidPayloadError):
    """Raised when payload nesting exceeds the caller's cap."""

    def __init__(self, depth: int, max_depth: int) -> None:
        super().__init__(f"payload too deep: {depth} > {max_depth}")
        self.depth = depth
        self.max_depth = max_depth


def ensure_max_depth(payload: Any, max_depth: int) -> None:
    """Raise PayloadTooDeepError if payload nests deeper than max_depth."""
    depth = payload_depth(payload)
    if depth > max_depth:
        raise PayloadTooDeepError(depth, max_depth)
