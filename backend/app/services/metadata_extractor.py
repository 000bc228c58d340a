from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from backend.app.models.result import NOTHING, Option, Result, Some
from backend.app.models.video_contracts import (
    ParseFailure,
    PipelineError,
    PlayerConfigPayload,
    RetrievedPage,
    VideoMetadata,
)

CONFIG_START_MARKER = "ytplayer.config = "
CONFIG_END_MARKER = "</script>"
CONFIG_LOAD_SUFFIX = ";ytplayer.load"

_JSON_DECODER = json.JSONDecoder()


def between(haystack: str, left: str, right: str) -> Option[str]:
    left_pos = haystack.find(left)
    if left_pos == -1:
        return NOTHING
    start = left_pos + len(left)
    right_pos = haystack.find(right, start)
    if right_pos == -1:
        return NOTHING
    return Some(haystack[start:right_pos])


def extract_video_metadata(page: RetrievedPage) -> Result[VideoMetadata, PipelineError]:
    return (
        between(page.markup, CONFIG_START_MARKER, CONFIG_END_MARKER)
        .map(_trim_to_json)
        .and_then(_decode_json_prefix)
        .and_then(_to_video_metadata)
        .ok_or(ParseFailure("metadata"))
    )


def _trim_to_json(script_text: str) -> str:
    load_pos = script_text.rfind(CONFIG_LOAD_SUFFIX)
    if load_pos != -1:
        script_text = script_text[:load_pos]
    return script_text.strip()


def _decode_json_prefix(text: str) -> Option[Any]:
    # raw_decode stops at the end of the first JSON value and ignores trailing script.
    try:
        value, _ = _JSON_DECODER.raw_decode(text)
    except ValueError:
        return NOTHING
    return Some(value)


def _to_video_metadata(payload: Any) -> Option[VideoMetadata]:
    try:
        config = PlayerConfigPayload.model_validate(payload)
    except ValidationError:
        return NOTHING
    return Some(VideoMetadata(sts=config.sts, video_id=config.args.video_id))
