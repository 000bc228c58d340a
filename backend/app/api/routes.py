from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from backend.app.config import AppSettings
from backend.app.dependencies import get_pipeline, get_settings
from backend.app.models.result import Ok, Result
from backend.app.models.video_contracts import PipelineError, PipelineErrorKind, VideoInfo
from backend.app.services.video_info_pipeline import VideoInfoPipeline

router = APIRouter()

PER_KIND_ERROR_STATUS: dict[PipelineErrorKind, int] = {
    "invalid_identifier": 400,
    "unavailable": 404,
    "fetch_failure": 502,
    "parse_failure": 502,
}


def resolve_error_status(error: PipelineError, settings: AppSettings) -> int:
    if settings.error_status_mode == "per_kind":
        return PER_KIND_ERROR_STATUS[error.kind]
    return settings.error_status_code


def build_pipeline_response(
    result: Result[VideoInfo, PipelineError],
    settings: AppSettings,
) -> Response:
    if isinstance(result, Ok):
        return JSONResponse(status_code=200, content=result.value)
    error = result.error
    return PlainTextResponse(error.message, status_code=resolve_error_status(error, settings))


@router.get("/watch", tags=["video-info"], operation_id="resolve_watch_url")
async def resolve_watch_url(
    request: Request,
    pipeline: Annotated[VideoInfoPipeline, Depends(get_pipeline)],
    settings: Annotated[AppSettings, Depends(get_settings)],
) -> Response:
    result = await pipeline.run(str(request.url))
    return build_pipeline_response(result, settings)


@router.get("/video-info", tags=["video-info"], operation_id="resolve_video_info")
async def resolve_video_info(
    pipeline: Annotated[VideoInfoPipeline, Depends(get_pipeline)],
    settings: Annotated[AppSettings, Depends(get_settings)],
    url: str = "",
) -> Response:
    result = await pipeline.run(url)
    return build_pipeline_response(result, settings)
