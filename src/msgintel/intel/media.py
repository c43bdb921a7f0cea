"""Attachment metadata inference from flattened payload values.

Heuristic only: decisions come from URL paths, textual markers and string
length, never from decoding the bytes. Caller-supplied fields always win.

Security: NEVER log the candidate value. Only its length and the branch taken.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from msgintel.intel.models import MediaMetadata, MediaType, MessageAnalysis
from msgintel.intel.validators import is_base64, is_url, mime_extension, mime_lookup
from msgintel.observability.logging import get_logger
from msgintel.observability.redaction import safe_log_context

logger = get_logger(__name__)

# Base64 candidates must be longer than this
LONG_STRING_THRESHOLD = 200
VIDEO_SIZE_THRESHOLD = 4_000_000
AUDIO_SIZE_THRESHOLD = 1_000_000


@dataclass(frozen=True)
class InlineMediaProfile:
    mediatype: MediaType
    mimetype: str
    file_name: str


def _contains_any(*markers: str) -> Callable[[str, int], bool]:
    def match(lowered: str, _length: int) -> bool:
        return any(marker in lowered for marker in markers)

    return match


def _longer_than(threshold: int) -> Callable[[str, int], bool]:
    def match(_lowered: str, length: int) -> bool:
        return length > threshold

    return match


_OGG = InlineMediaProfile(MediaType.AUDIO, "audio/ogg", "audio.ogg")
_JPEG = InlineMediaProfile(MediaType.IMAGE, "image/jpeg", "image.jpg")
_MP4 = InlineMediaProfile(MediaType.VIDEO, "video/mp4", "video.mp4")
_MP3 = InlineMediaProfile(MediaType.AUDIO, "audio/mpeg", "audio.mp3")
_PNG = InlineMediaProfile(MediaType.IMAGE, "image/png", "image.png")

# Order is priority: first match wins, DEFAULT_INLINE_PROFILE otherwise
INLINE_MEDIA_RULES: tuple[tuple[Callable[[str, int], bool], InlineMediaProfile], ...] = (
    (_contains_any("audio/ogg", ".ogg"), _OGG),
    (_contains_any("image/jpeg", ".jpg", "jpeg"), _JPEG),
    (_longer_than(VIDEO_SIZE_THRESHOLD), _MP4),
    (_longer_than(AUDIO_SIZE_THRESHOLD), _MP3),
)
DEFAULT_INLINE_PROFILE = _PNG

_BODY_FIELDS = {
    "mediatype": "mediatype",
    "mimetype": "mimetype",
    "fileName": "file_name",
    "media": "media",
}


def media_type_from_mime(mimetype: str | None) -> MediaType | None:
    """Map a MIME type to a MediaType by its primary type. None if no MIME type."""
    if not mimetype:
        return None
    primary = mimetype.split("/", 1)[0].lower()
    if primary == "image":
        return MediaType.IMAGE
    if primary == "audio":
        return MediaType.AUDIO
    if primary == "video":
        return MediaType.VIDEO
    return MediaType.DOCUMENT


def classify_inline_media(candidate: str) -> InlineMediaProfile:
    """Pick the inline profile for a base64 candidate from markers and length."""
    lowered = candidate.lower()
    length = len(candidate)
    for match, profile in INLINE_MEDIA_RULES:
        if match(lowered, length):
            return profile
    return DEFAULT_INLINE_PROFILE


def _supplied(body: Mapping[str, Any] | None) -> dict[str, Any]:
    """Truthy metadata fields the caller already set, keyed by attribute name."""
    if not body:
        return {}
    return {attr: body[key] for key, attr in _BODY_FIELDS.items() if body.get(key)}


def _url_extension(url: str) -> str | None:
    try:
        path = urlsplit(url).path
    except ValueError:
        return None
    segment = path.rstrip("/").rsplit("/", 1)[-1]
    if not segment:
        return None
    return segment.rsplit(".", 1)[-1] or None


def _from_url(url: str, supplied: dict[str, Any]) -> MediaMetadata:
    looked_up = mime_lookup(url)
    mimetype = supplied.get("mimetype") or looked_up
    extension = mime_extension(looked_up) or _url_extension(url)

    file_name = supplied.get("file_name")
    if not file_name and extension:
        file_name = f"media.{extension}"

    return MediaMetadata(
        mediatype=supplied.get("mediatype") or media_type_from_mime(looked_up) or MediaType.DOCUMENT,
        mimetype=mimetype,
        file_name=file_name,
        media=supplied.get("media") or url,
    )


def _from_base64(candidate: str, supplied: dict[str, Any]) -> MediaMetadata:
    profile = classify_inline_media(candidate)
    return MediaMetadata(
        mediatype=supplied.get("mediatype") or profile.mediatype,
        mimetype=supplied.get("mimetype") or profile.mimetype,
        file_name=supplied.get("file_name") or profile.file_name,
        media=supplied.get("media") or candidate,
    )


def infer_media_metadata(
    body: Mapping[str, Any] | None,
    analysis: MessageAnalysis,
) -> MediaMetadata:
    """Infer attachment metadata from an analyzed payload.

    Args:
        body: Caller hints; truthy `media`, `mimetype`, `mediatype` and
            `fileName` are copied through and never recomputed.
        analysis: Result of analyze_message_payload().

    Returns:
        MediaMetadata; partial or empty when the payload has no media signal.
        The first URL value wins over any base64 value.
    """
    supplied = _supplied(body)
    strings = analysis.string_values()

    url = next((value for value in strings if is_url(value, require_tld=False)), None)
    if url is not None:
        logger.debug(
            "media inferred from url",
            extra={"extra_fields": safe_log_context(branch="url", candidate_len=len(url))},
        )
        return _from_url(url, supplied)

    candidate = next(
        (
            value
            for value in strings
            if len(value) > LONG_STRING_THRESHOLD and is_base64(value, allow_mime_prefix=True)
        ),
        None,
    )
    if candidate is not None:
        logger.debug(
            "media inferred from base64",
            extra={
                "extra_fields": safe_log_context(branch="base64", candidate_len=len(candidate))
            },
        )
        return _from_base64(candidate, supplied)

    return MediaMetadata(**supplied)
