from __future__ import annotations

import logging
from typing import Literal

import httpx

from backend.app.models.result import Err, Ok, Result
from backend.app.models.video_contracts import ParseFailure, PipelineError, VideoInfo
from backend.app.services.availability_checker import check_availability
from backend.app.services.info_fetcher import decode_info_payload, fetch_video_info
from backend.app.services.metadata_extractor import extract_video_metadata
from backend.app.services.page_fetcher import fetch_watch_page
from backend.app.services.url_resolver import resolve_video_reference
from backend.app.telemetry import TelemetryClient

LOGGER = logging.getLogger("video_info.pipeline")

PipelineStage = Literal[
    "resolve",
    "fetch_page",
    "check_availability",
    "extract_metadata",
    "fetch_info",
]


class VideoInfoPipeline:
    """
    Resolve a user-supplied URL into the upstream video info record.

    Stages run strictly in order and the first failing stage ends the run:
    resolve -> fetch_page -> check_availability -> extract_metadata -> fetch_info.
    The only suspension points are the two upstream requests.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        telemetry: TelemetryClient | None = None,
    ) -> None:
        self._http_client = http_client
        self._telemetry = telemetry if telemetry is not None else TelemetryClient.disabled()

    async def run(self, raw_url: str) -> Result[VideoInfo, PipelineError]:
        reference = resolve_video_reference(raw_url)
        if isinstance(reference, Err):
            return self._stop("resolve", reference)
        telemetry = self._telemetry.bind(video_id=reference.value.video_id)
        telemetry.emit("pipeline.stage.ok", stage="resolve")

        page = await fetch_watch_page(self._http_client, reference.value)
        if isinstance(page, Err):
            return self._stop("fetch_page", page, telemetry=telemetry)
        telemetry.emit("pipeline.stage.ok", stage="fetch_page")

        available_page = check_availability(page.value)
        if isinstance(available_page, Err):
            return self._stop("check_availability", available_page, telemetry=telemetry)
        telemetry.emit("pipeline.stage.ok", stage="check_availability")

        metadata = extract_video_metadata(available_page.value)
        if isinstance(metadata, Err):
            return self._stop("extract_metadata", metadata, telemetry=telemetry)
        telemetry.emit("pipeline.stage.ok", stage="extract_metadata", sts=metadata.value.sts)

        info_text = await fetch_video_info(self._http_client, metadata.value)
        if isinstance(info_text, Err):
            return self._stop("fetch_info", info_text, telemetry=telemetry)
        telemetry.emit("pipeline.stage.ok", stage="fetch_info")

        return Ok(decode_info_payload(info_text.value))

    def _stop(
        self,
        stage: PipelineStage,
        failure: Err[PipelineError],
        *,
        telemetry: TelemetryClient | None = None,
    ) -> Err[PipelineError]:
        error = failure.error
        if isinstance(error, ParseFailure):
            LOGGER.warning(
                "upstream page format drift stage=%s parse_stage=%s",
                stage,
                error.stage,
            )
        else:
            LOGGER.info(
                "video info pipeline stopped stage=%s kind=%s message=%s",
                stage,
                error.kind,
                error.message,
            )
        (telemetry or self._telemetry).emit(
            "pipeline.stage.failed",
            stage=stage,
            error_kind=error.kind,
            error_message=error.message,
        )
        return failure
