from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from backend.app.models.result import Err, Ok, Result
from backend.app.models.video_contracts import (
    FetchFailure,
    InvalidIdentifier,
    ParseFailure,
    PipelineError,
    Unavailable,
    VideoInfo,
)
from backend.app.services.video_info_pipeline import VideoInfoPipeline
from backend.app.telemetry import TelemetryClient

if TYPE_CHECKING:
    from tests.conftest import FakeUpstream


class _CaptureSink:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, *, event_name: str, attributes: Mapping[str, Any]) -> None:
        self.events.append((event_name, dict(attributes)))


class _CaptureLogger:
    def __init__(self) -> None:
        self.records: list[tuple[str, str]] = []

    def _record(self, level: str, message: str, *args: object) -> None:
        self.records.append((level, message % args if args else message))

    def info(self, message: str, *args: object) -> None:
        self._record("info", message, *args)

    def warning(self, message: str, *args: object) -> None:
        self._record("warning", message, *args)


async def _run(
    upstream: FakeUpstream,
    url: str,
    telemetry: TelemetryClient | None = None,
) -> Result[VideoInfo, PipelineError]:
    async with httpx.AsyncClient(transport=upstream.transport()) as http_client:
        pipeline = VideoInfoPipeline(http_client=http_client, telemetry=telemetry)
        return await pipeline.run(url)


@pytest.mark.asyncio
async def test_pipeline_resolves_video_info(upstream: FakeUpstream) -> None:
    result = await _run(upstream, "https://www.youtube.com/watch?v=AbCdEfGhIjK")

    assert result == Ok({"title": "Test", "length_seconds": "10"})
    assert upstream.calls_to("/watch") == 1
    assert upstream.calls_to("/get_video_info") == 1
    info_request = upstream.requests[-1]
    assert info_request.url.params["video_id"] == "AbCdEfGhIjK"
    assert info_request.url.params["sts"] == "12345"
    assert info_request.url.params["eurl"] == "https://youtube.googleapis.com/v/AbCdEfGhIjK"


@pytest.mark.asyncio
async def test_invalid_url_makes_no_network_calls(upstream: FakeUpstream) -> None:
    result = await _run(upstream, "https://example.com/not-a-video")

    assert result == Err(InvalidIdentifier())
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_page_fetch_failure_stops_pipeline(upstream: FakeUpstream) -> None:
    upstream.watch_status = 404

    result = await _run(upstream, "https://youtu.be/AbCdEfGhIjK")

    assert result == Err(FetchFailure("Not Found", status_code=404))
    assert upstream.calls_to("/get_video_info") == 0


@pytest.mark.asyncio
async def test_unavailable_video_stops_pipeline(
    upstream: FakeUpstream,
    render_watch_page: Callable[..., str],
) -> None:
    upstream.watch_body = render_watch_page(
        unavailable_class="player-width",
        unavailable_message="This video has been removed by the user.",
    )

    result = await _run(upstream, "https://www.youtube.com/watch?v=AbCdEfGhIjK")

    assert result == Err(Unavailable("This video has been removed by the user."))
    assert upstream.calls_to("/get_video_info") == 0


@pytest.mark.asyncio
async def test_missing_closing_marker_never_reaches_info_endpoint(
    upstream: FakeUpstream,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    capture_logger = _CaptureLogger()
    monkeypatch.setattr("backend.app.services.video_info_pipeline.LOGGER", capture_logger)
    upstream.watch_body = (
        '<html><body><script>ytplayer.config = {"sts":12345,'
        '"args":{"video_id":"AbCdEfGhIjK"}};ytplayer.load();'
    )

    result = await _run(upstream, "https://www.youtube.com/watch?v=AbCdEfGhIjK")

    assert result == Err(ParseFailure("metadata"))
    assert upstream.calls_to("/watch") == 1
    assert upstream.calls_to("/get_video_info") == 0
    assert capture_logger.records == [
        (
            "warning",
            "upstream page format drift stage=extract_metadata parse_stage=metadata",
        )
    ]


@pytest.mark.asyncio
async def test_info_fetch_failure_is_reported(upstream: FakeUpstream) -> None:
    upstream.info_status = 500

    result = await _run(upstream, "https://www.youtube.com/watch?v=AbCdEfGhIjK")

    assert result == Err(FetchFailure("Internal Server Error", status_code=500))


@pytest.mark.asyncio
async def test_pipeline_emits_stage_telemetry(upstream: FakeUpstream) -> None:
    sink = _CaptureSink()
    upstream.info_status = 403

    await _run(
        upstream,
        "https://www.youtube.com/watch?v=AbCdEfGhIjK",
        telemetry=TelemetryClient(enabled=True, sink=sink),
    )

    stages = [(name, attributes["stage"]) for name, attributes in sink.events]
    assert stages == [
        ("pipeline.stage.ok", "resolve"),
        ("pipeline.stage.ok", "fetch_page"),
        ("pipeline.stage.ok", "check_availability"),
        ("pipeline.stage.ok", "extract_metadata"),
        ("pipeline.stage.failed", "fetch_info"),
    ]
    failed_attributes = sink.events[-1][1]
    assert failed_attributes["error_kind"] == "fetch_failure"
    assert failed_attributes["video_id"] == "AbCdEfGhIjK"
    assert failed_attributes["error_message"] == "Forbidden"
