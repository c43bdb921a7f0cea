"""Message intel result models.

Transient values only; produced and consumed within a single call.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MessageKind(str, Enum):
    """Closed set of semantic message kinds. UNKNOWN is the total fallback."""

    STICKER = "sticker"
    REACTION = "reaction"
    TEMPLATE = "template"
    BUTTONS = "buttons"
    LIST = "list"
    LOCATION = "location"
    CONTACT = "contact"
    POLL = "poll"
    STATUS = "status"
    PTV = "ptv"
    AUDIO = "audio"
    MEDIA = "media"
    TEXT = "text"
    UNKNOWN = "unknown"


class MediaType(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    DOCUMENT = "document"


@dataclass(frozen=True)
class MessageAnalysis:
    """Flattened payload plus the kind assigned to it.

    `field_names` and `values` are parallel: values[i] sits at field_names[i].
    """

    field_names: tuple[str, ...]
    values: tuple[Any, ...]
    type: MessageKind

    def string_values(self) -> list[str]:
        """String-typed values in flattening order."""
        return [value for value in self.values if isinstance(value, str)]

    def as_payload(self) -> dict[str, Any]:
        return {
            "fieldNames": list(self.field_names),
            "values": list(self.values),
            "type": self.type.value,
        }


@dataclass(frozen=True)
class MediaMetadata:
    """Partial attachment metadata. A None field was neither inferred nor supplied.

    `mediatype` is a MediaType when inferred; a caller-supplied value is kept
    exactly as given, so it may be any string.
    """

    mediatype: MediaType | str | None = None
    mimetype: str | None = None
    file_name: str | None = None
    media: str | None = None

    def is_empty(self) -> bool:
        return not (self.mediatype or self.mimetype or self.file_name or self.media)

    def as_payload(self) -> dict[str, str]:
        """Wire form: only present fields, camelCase `fileName`."""
        payload: dict[str, str] = {}
        if self.mediatype:
            payload["mediatype"] = (
                self.mediatype.value if isinstance(self.mediatype, MediaType) else self.mediatype
            )
        if self.mimetype:
            payload["mimetype"] = self.mimetype
        if self.file_name:
            payload["fileName"] = self.file_name
        if self.media:
            payload["media"] = self.media
        return payload
