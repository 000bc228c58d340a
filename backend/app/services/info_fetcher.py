from __future__ import annotations

from urllib.parse import parse_qsl

import httpx

from backend.app.models.result import Result
from backend.app.models.video_contracts import PipelineError, VideoInfo, VideoMetadata
from backend.app.services.upstream_http import fetch_text

INFO_URL = "https://www.youtube.com/get_video_info"
VIDEO_EURL = "https://youtube.googleapis.com/v/"

# Comma-joined upstream fields exposed as lists.
LIST_VALUED_FIELDS: tuple[str, ...] = ("keywords", "fmt_list", "fexp", "watermark")


def build_info_query(metadata: VideoMetadata) -> dict[str, str]:
    return {
        "video_id": metadata.video_id,
        "eurl": VIDEO_EURL + metadata.video_id,
        "ps": "default",
        "gl": "US",
        "hl": "en",
        "sts": str(metadata.sts),
    }


async def fetch_video_info(
    client: httpx.AsyncClient,
    metadata: VideoMetadata,
) -> Result[str, PipelineError]:
    return await fetch_text(client, INFO_URL, params=build_info_query(metadata))


def decode_info_payload(body: str) -> VideoInfo:
    decoded: VideoInfo = {}
    for key, value in parse_qsl(body, keep_blank_values=True):
        existing = decoded.get(key)
        if existing is None:
            decoded[key] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            decoded[key] = [existing, value]

    for key in LIST_VALUED_FIELDS:
        if key in decoded:
            decoded[key] = _split_list_field(decoded[key])
    return decoded


def _split_list_field(value: str | list[str]) -> list[str]:
    # Repeated keys are flattened; empty items are dropped.
    chunks = [value] if isinstance(value, str) else value
    return [item for chunk in chunks for item in chunk.split(",") if item]
