"""Message type detection from flattened payloads.

Deterministic, no LLM. Two ordered rule tables:
- FIELD_RULES test the lower-cased field paths
- CONTENT_RULES test string values (case-insensitive substring)

A content match always wins over a field-name match. Changing that
precedence changes classification of live traffic.

Security: NEVER log raw values (PII). Only kinds and counts.
"""

from collections.abc import Callable, Sequence
from typing import Any

from msgintel.intel.flatten import flatten_payload
from msgintel.intel.models import MessageAnalysis, MessageKind
from msgintel.observability.logging import get_logger
from msgintel.observability.redaction import safe_log_context

logger = get_logger(__name__)

# Predicate over lower-cased paths
FieldPredicate = Callable[[list[str]], bool]


def _last_segment(path: str) -> str:
    return path.rsplit(".", 1)[-1]


def _path_contains(*needles: str) -> FieldPredicate:
    def match(paths: list[str]) -> bool:
        return any(needle in path for path in paths for needle in needles)

    return match


def _last_segment_in(*names: str) -> FieldPredicate:
    wanted = frozenset(names)

    def match(paths: list[str]) -> bool:
        return any(_last_segment(path) in wanted for path in paths)

    return match


def _paths_contain_all(*needles: str) -> FieldPredicate:
    """Each needle must appear in some path (not necessarily the same one)."""

    def match(paths: list[str]) -> bool:
        return all(any(needle in path for path in paths) for needle in needles)

    return match


# Order is priority: first match wins
FIELD_RULES: tuple[tuple[MessageKind, FieldPredicate], ...] = (
    (MessageKind.STICKER, _path_contains("sticker")),
    (MessageKind.REACTION, _path_contains("reaction")),
    (MessageKind.TEMPLATE, _last_segment_in("template", "components", "language")),
    (MessageKind.BUTTONS, _path_contains("buttons")),
    (MessageKind.LIST, _path_contains("sections", "buttontext")),
    (MessageKind.LOCATION, _paths_contain_all("latitude", "longitude")),
    (MessageKind.CONTACT, _path_contains("contact", "wuid")),
    (MessageKind.POLL, _path_contains("selectablecount")),
    (MessageKind.STATUS, _last_segment_in("statusjidlist", "allcontacts")),
    (MessageKind.PTV, _path_contains("video")),
    (MessageKind.AUDIO, _path_contains("audio")),
    (MessageKind.MEDIA, _last_segment_in("media", "mediatype", "mimetype")),
    (MessageKind.TEXT, _last_segment_in("text")),
)

# Same kind order as FIELD_RULES; marker is matched inside string values
CONTENT_RULES: tuple[tuple[MessageKind, str], ...] = (
    (MessageKind.STICKER, "sticker"),
    (MessageKind.REACTION, "reaction"),
    (MessageKind.TEMPLATE, "template"),
    (MessageKind.BUTTONS, "button"),
    (MessageKind.LIST, "section"),
    (MessageKind.LOCATION, "latitude"),
    (MessageKind.CONTACT, "contact"),
    (MessageKind.POLL, "selectablecount"),
    (MessageKind.STATUS, "status"),
    (MessageKind.PTV, "video"),
    (MessageKind.AUDIO, "audio"),
    (MessageKind.MEDIA, "media"),
    (MessageKind.TEXT, "text"),
)


def detect_by_fields(field_names: Sequence[str]) -> MessageKind | None:
    """Phase A: first FIELD_RULES entry matching any path, or None."""
    paths = [name.lower() for name in field_names]
    for kind, match in FIELD_RULES:
        if match(paths):
            return kind
    return None


def detect_by_values(values: Sequence[Any]) -> MessageKind | None:
    """Phase B: first CONTENT_RULES marker found in any string value, or None."""
    lowered = [value.lower() for value in values if isinstance(value, str)]
    if not lowered:
        return None

    for kind, marker in CONTENT_RULES:
        if any(marker in value for value in lowered):
            return kind
    return None


def detect_message_type(field_names: Sequence[str], values: Sequence[Any]) -> MessageKind:
    """Resolve exactly one kind: content match, else field match, else UNKNOWN."""
    by_fields = detect_by_fields(field_names)
    by_values = detect_by_values(values)
    kind = by_values or by_fields or MessageKind.UNKNOWN

    logger.debug(
        "message type detected",
        extra={
            "extra_fields": safe_log_context(
                type=kind.value,
                by_fields=by_fields.value if by_fields else None,
                by_values=by_values.value if by_values else None,
                field_count=len(field_names),
            )
        },
    )
    return kind


def analyze_message_payload(payload: Any) -> MessageAnalysis:
    """Flatten a payload once and classify it.

    Args:
        payload: Decoded message payload of any shape.

    Returns:
        MessageAnalysis with parallel field_names/values and the detected type.
        Never raises for unexpected shapes; they classify as UNKNOWN.
    """
    field_names, values = flatten_payload(payload)
    return MessageAnalysis(
        field_names=tuple(field_names),
        values=tuple(values),
        type=detect_message_type(field_names, values),
    )
