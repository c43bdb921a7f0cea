"""Message intel endpoints for the gateway.

POST /messages/analyze         → field paths, values and detected type
POST /messages/media-metadata  → detected type plus inferred attachment metadata

Security: payloads carry PII (JIDs, text, media). Logs carry only kinds,
counts and sizes.
"""

import os
from typing import Any

from fastapi import APIRouter, Response
from pydantic import BaseModel, ConfigDict, Field

from msgintel.intel.detection import analyze_message_payload
from msgintel.intel.flatten import PayloadTooDeepError, ensure_max_depth
from msgintel.intel.media import infer_media_metadata
from msgintel.intel.models import MessageAnalysis
from msgintel.observability.logging import get_logger
from msgintel.observability.redaction import safe_log_context

router = APIRouter(prefix="/messages", tags=["messages"])

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 64


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    payload: Any = None


class MediaMetadataRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    payload: Any = None
    media: str | None = None
    mimetype: str | None = None
    mediatype: str | None = None
    file_name: str | None = Field(default=None, alias="fileName")

    def hints(self) -> dict[str, Any]:
        """Caller-supplied metadata in wire names."""
        return self.model_dump(by_alias=True, exclude={"payload"}, exclude_none=True)


def _get_max_depth() -> int:
    """Nesting cap from MESSAGE_INTEL_MAX_DEPTH; bad values fall back to default."""
    raw = os.environ.get("MESSAGE_INTEL_MAX_DEPTH", "")
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_MAX_DEPTH
    return value if value >= 1 else DEFAULT_MAX_DEPTH


def _analyze_or_reject(payload: Any) -> MessageAnalysis | Response:
    max_depth = _get_max_depth()
    try:
        ensure_max_depth(payload, max_depth)
    except PayloadTooDeepError as exc:
        logger.warning(
            "payload rejected",
            extra={
                "extra_fields": safe_log_context(depth=exc.depth, max_depth=exc.max_depth)
            },
        )
        return Response(status_code=400, content="payload too deep")

    return analyze_message_payload(payload)


@router.post("/analyze")
def analyze(body: AnalyzeRequest) -> Any:
    """Flatten and classify a message payload.

    Returns:
        200 with {fieldNames, values, type}.
        400 if the payload nests deeper than the configured cap.
    """
    result = _analyze_or_reject(body.payload)
    if isinstance(result, Response):
        return result

    logger.info(
        "message analyzed",
        extra={
            "extra_fields": safe_log_context(
                type=result.type.value, field_count=len(result.field_names)
            )
        },
    )
    return result.as_payload()


@router.post("/media-metadata")
def media_metadata(body: MediaMetadataRequest) -> Any:
    """Classify a payload and infer attachment metadata.

    Caller-supplied media, mimetype, mediatype and fileName are returned
    unchanged; the rest is inferred from URL or base64 values.
    """
    result = _analyze_or_reject(body.payload)
    if isinstance(result, Response):
        return result

    metadata = infer_media_metadata(body.hints(), result)

    logger.info(
        "media metadata inferred",
        extra={
            "extra_fields": safe_log_context(
                type=result.type.value,
                mediatype=metadata.as_payload().get("mediatype"),
                inferred=not metadata.is_empty(),
            )
        },
    )
    return {"type": result.type.value, "metadata": metadata.as_payload()}
