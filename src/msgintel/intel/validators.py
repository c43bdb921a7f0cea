"""Primitive string checks and MIME registry lookups.

Stateless. Every function answers "no match" (False/None) instead of raising.
"""

import ipaddress
import mimetypes
import re
from urllib.parse import urlsplit

URL_SCHEMES = frozenset({"http", "https", "ftp"})

# Browsers reject longer URLs; also keeps base64 blobs out of urlsplit
MAX_URL_LENGTH = 2083

_HOST_LABEL = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$", re.IGNORECASE)
_TLD = re.compile(r"^[a-z]{2,63}$", re.IGNORECASE)

# Padding only at the end; length checked separately
_BASE64_BODY = re.compile(r"[A-Za-z0-9+/]*={0,2}")
_DATA_URI_PREFIX = re.compile(
    r"^data:[a-z0-9!#$&^_.+-]+/[a-z0-9!#$&^_.+-]+(?:;[a-z0-9_.+-]+=[a-z0-9_.+-]+)*;base64,",
    re.IGNORECASE,
)


def _is_ip(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def _is_valid_host(host: str, require_tld: bool) -> bool:
    if _is_ip(host):
        return True

    labels = host.rstrip(".").split(".")
    if not all(_HOST_LABEL.match(label) for label in labels):
        return False
    if require_tld:
        return len(labels) > 1 and bool(_TLD.match(labels[-1]))
    return True


def is_url(value: str, *, require_tld: bool = True) -> bool:
    """Check that value is an absolute http(s)/ftp URL.

    With require_tld=False, single-label hosts such as ``localhost`` or
    ``minio`` are accepted.
    """
    if not isinstance(value, str) or not value or len(value) >= MAX_URL_LENGTH:
        return False
    if any(ch.isspace() for ch in value):
        return False

    try:
        parts = urlsplit(value)
        host = parts.hostname
        parts.port  # raises ValueError for out-of-range ports
    except ValueError:
        return False

    if parts.scheme.lower() not in URL_SCHEMES or not host:
        return False
    return _is_valid_host(host, require_tld)


def is_base64(value: str, *, allow_mime_prefix: bool = False) -> bool:
    """Check standard-alphabet, padded base64, optionally as a data: URI."""
    if not isinstance(value, str) or not value:
        return False

    body = value
    if allow_mime_prefix:
        prefix = _DATA_URI_PREFIX.match(value)
        if prefix:
            body = value[prefix.end():]

    if not body or len(body) % 4:
        return False
    return _BASE64_BODY.fullmatch(body) is not None


def mime_lookup(path_or_url: str) -> str | None:
    """Guess a MIME type from a filename, path or URL. Query/fragment ignored.

    Only the URL path is consulted, so a bare host never resolves by its TLD.
    """
    if not path_or_url:
        return None
    try:
        parts = urlsplit(path_or_url)
        path = parts.path if parts.scheme else path_or_url
        if not path:
            return None
        mimetype, _encoding = mimetypes.guess_type(path, strict=False)
    except (TypeError, ValueError):
        return None
    return mimetype


def mime_extension(mimetype: str | None) -> str | None:
    """Preferred file extension (without dot) for a MIME type."""
    if not mimetype:
        return None
    try:
        extension = mimetypes.guess_extension(mimetype, strict=False)
    except (TypeError, ValueError):
        return None
    return extension.lstrip(".") if extension else None
