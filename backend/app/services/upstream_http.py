from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from backend.app.models.result import Err, Ok, Result
from backend.app.models.video_contracts import FetchFailure, PipelineError

LOGGER = logging.getLogger("video_info.upstream")

FAILURE_STATUS_THRESHOLD = 400


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Mapping[str, str] | None = None,
) -> Result[str, PipelineError]:
    try:
        response = await client.get(url, params=params)
    except httpx.HTTPError as exc:
        LOGGER.info(
            "upstream request failed url=%s error_type=%s",
            url,
            type(exc).__name__,
        )
        return Err(FetchFailure(_describe_transport_error(exc)))

    if response.status_code >= FAILURE_STATUS_THRESHOLD:
        LOGGER.info(
            "upstream rejected request url=%s status=%s",
            url,
            response.status_code,
        )
        return Err(
            FetchFailure(
                response.reason_phrase or f"HTTP {response.status_code}",
                status_code=response.status_code,
            )
        )

    return Ok(response.text)


def _describe_transport_error(exc: httpx.HTTPError) -> str:
    message = str(exc).strip()
    if message:
        return message
    return type(exc).__name__
