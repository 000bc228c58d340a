from __future__ import annotations

from urllib.parse import parse_qs, urlparse

from backend.app.models.result import NOTHING, Option, Result, Some, from_nullable
from backend.app.models.video_contracts import (
    VIDEO_ID_PATTERN,
    InvalidIdentifier,
    PipelineError,
    VideoReference,
)

SHORT_LINK_HOSTS: frozenset[str] = frozenset({"youtu.be", "www.youtu.be"})


def validate_video_id(candidate: str) -> Option[VideoReference]:
    if VIDEO_ID_PATTERN.fullmatch(candidate) is None:
        return NOTHING
    return Some(VideoReference(candidate))


def is_short_link_host(host: str) -> bool:
    return host.lower() in SHORT_LINK_HOSTS


def resolve_video_reference(raw_url: str) -> Result[VideoReference, PipelineError]:
    return (
        _candidate_video_id(raw_url)
        .and_then(validate_video_id)
        .ok_or(InvalidIdentifier())
    )


def _candidate_video_id(raw_url: str) -> Option[str]:
    try:
        parsed = urlparse(raw_url.strip())
        host = parsed.hostname or ""
    except ValueError:
        return NOTHING

    if is_short_link_host(host):
        first_segment = parsed.path.strip("/").split("/", maxsplit=1)[0]
        return Some(first_segment)

    # A repeated `v` is ambiguous and never a single id.
    values = parse_qs(parsed.query, keep_blank_values=True).get("v", [])
    return from_nullable(values[0] if len(values) == 1 else None)
