from __future__ import annotations

from bs4 import Tag

from backend.app.models.result import Err, Ok, Result
from backend.app.models.video_contracts import PipelineError, RetrievedPage, Unavailable

UNAVAILABLE_MARKER_ID = "player-unavailable"
AGE_GATE_MARKER_ID = "watch7-player-age-gate-content"
UNAVAILABLE_MESSAGE_ID = "unavailable-message"
HIDDEN_CLASS = "hid"
DEFAULT_UNAVAILABLE_REASON = "Unknown error"


def check_availability(page: RetrievedPage) -> Result[RetrievedPage, PipelineError]:
    document = page.document
    marker = document.find(id=UNAVAILABLE_MARKER_ID)
    if not isinstance(marker, Tag) or _is_hidden(marker):
        return Ok(page)
    if document.find(id=AGE_GATE_MARKER_ID) is not None:
        return Ok(page)
    return Err(Unavailable(_unavailable_reason(page)))


def _is_hidden(marker: Tag) -> bool:
    classes = marker.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return HIDDEN_CLASS in classes


def _unavailable_reason(page: RetrievedPage) -> str:
    message = page.document.find("h1", id=UNAVAILABLE_MESSAGE_ID)
    if isinstance(message, Tag):
        text = " ".join(message.get_text().split())
        if text:
            return text
    return DEFAULT_UNAVAILABLE_REASON
