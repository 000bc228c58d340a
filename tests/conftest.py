from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from backend.app.config import AppSettings
from backend.app.dependencies import reset_cached_dependencies
from backend.app.main import create_app

VALID_PLAYER_CONFIG = '{"sts":12345,"args":{"video_id":"AbCdEfGhIjK"}}'


def _render_watch_page(
    player_config: str | None = VALID_PLAYER_CONFIG,
    *,
    unavailable_class: str | None = None,
    unavailable_message: str | None = None,
    age_gated: bool = False,
) -> str:
    parts = ["<html><head><title>Test video - YouTube</title></head><body>"]
    if unavailable_class is not None:
        parts.append(f'<div id="player-unavailable" class="{unavailable_class}">')
        if unavailable_message is not None:
            parts.append(f'<h1 id="unavailable-message" class="message">{unavailable_message}</h1>')
        parts.append("</div>")
    if age_gated:
        parts.append('<div id="watch7-player-age-gate-content">Sign in to confirm your age</div>')
    if player_config is not None:
        parts.append(
            "<script>var ytplayer = ytplayer || {};"
            f"ytplayer.config = {player_config};ytplayer.load();</script>"
        )
    parts.append("</body></html>")
    return "".join(parts)


class FakeUpstream:
    def __init__(self) -> None:
        self.watch_status = 200
        self.watch_body = _render_watch_page()
        self.info_status = 200
        self.info_body = "title=Test&length_seconds=10"
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/watch":
            return httpx.Response(self.watch_status, text=self.watch_body)
        if request.url.path == "/get_video_info":
            return httpx.Response(self.info_status, text=self.info_body)
        return httpx.Response(404, text="not found")

    def calls_to(self, path: str) -> int:
        return sum(1 for request in self.requests if request.url.path == path)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture(autouse=True)
def _runtime_env(  # pyright: ignore[reportUnusedFunction]
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Iterator[None]:
    monkeypatch.setenv("VIDEO_INFO_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("VIDEO_INFO_ERROR_STATUS_MODE", raising=False)
    monkeypatch.delenv("VIDEO_INFO_ERROR_STATUS_CODE", raising=False)
    reset_cached_dependencies()
    yield
    reset_cached_dependencies()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def client(upstream: FakeUpstream, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    def _build_fake_http_client(settings: AppSettings) -> httpx.AsyncClient:
        _ = settings
        return httpx.AsyncClient(transport=upstream.transport())

    monkeypatch.setattr("backend.app.main.build_http_client", _build_fake_http_client)

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def render_watch_page() -> Callable[..., str]:
    return _render_watch_page
