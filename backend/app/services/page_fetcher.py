from __future__ import annotations

from urllib.parse import urlencode

import httpx
from bs4 import BeautifulSoup

from backend.app.models.result import Result
from backend.app.models.video_contracts import PipelineError, RetrievedPage, VideoReference
from backend.app.services.upstream_http import fetch_text

WATCH_PAGE_URL = "https://www.youtube.com/watch"


def build_watch_page_url(reference: VideoReference) -> str:
    return f"{WATCH_PAGE_URL}?{urlencode({'v': reference.video_id})}"


def parse_page(url: str, markup: str) -> RetrievedPage:
    return RetrievedPage(
        url=url,
        markup=markup,
        document=BeautifulSoup(markup, "html.parser"),
    )


async def fetch_watch_page(
    client: httpx.AsyncClient,
    reference: VideoReference,
) -> Result[RetrievedPage, PipelineError]:
    url = build_watch_page_url(reference)
    fetched = await fetch_text(client, url)
    return fetched.map(lambda markup: parse_page(url, markup))
