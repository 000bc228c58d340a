from __future__ import annotations

from functools import lru_cache
from typing import Annotated

import httpx
from fastapi import Depends, Request

from backend.app.config import AppSettings, load_settings
from backend.app.services.video_info_pipeline import VideoInfoPipeline
from backend.app.telemetry import TelemetryClient, build_telemetry_client


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return load_settings()


@lru_cache(maxsize=1)
def get_telemetry() -> TelemetryClient:
    settings = get_settings()
    return build_telemetry_client(
        enabled=settings.telemetry_enabled,
        sink=settings.telemetry_sink,
    )


def build_http_client(settings: AppSettings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.http_timeout_seconds,
        follow_redirects=True,
        headers={
            "User-Agent": settings.user_agent,
            "Accept-Language": "en-US,en;q=0.8",
        },
    )


def get_http_client(request: Request) -> httpx.AsyncClient:
    client = getattr(request.app.state, "http_client", None)
    if not isinstance(client, httpx.AsyncClient):
        raise RuntimeError("HTTP client is not initialized; application lifespan did not run.")
    return client


def get_pipeline(
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> VideoInfoPipeline:
    return VideoInfoPipeline(http_client=http_client, telemetry=get_telemetry())


def reset_cached_dependencies() -> None:
    get_telemetry.cache_clear()
    get_settings.cache_clear()
