from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import ClassVar, Literal, Union

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr

VIDEO_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{11}$")

PipelineErrorKind = Literal[
    "invalid_identifier",
    "fetch_failure",
    "unavailable",
    "parse_failure",
]

VideoInfo = dict[str, Union[str, list[str]]]


@dataclass(frozen=True)
class VideoReference:
    video_id: str

    def __post_init__(self) -> None:
        if VIDEO_ID_PATTERN.fullmatch(self.video_id) is None:
            raise ValueError(f"Not a valid video id: {self.video_id!r}")


@dataclass(frozen=True, eq=False)
class RetrievedPage:
    url: str
    markup: str
    document: BeautifulSoup = field(repr=False)


@dataclass(frozen=True)
class VideoMetadata:
    sts: int
    video_id: str


class PlayerArgsPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    video_id: StrictStr


class PlayerConfigPayload(BaseModel):
    """
    Embedded player configuration blob.

    The upstream schema is large and uncontrolled; only the signature token and
    the video id are required here.
    """

    model_config = ConfigDict(extra="ignore")

    sts: StrictInt
    args: PlayerArgsPayload


@dataclass(frozen=True)
class InvalidIdentifier:
    kind: ClassVar[PipelineErrorKind] = "invalid_identifier"

    @property
    def message(self) -> str:
        return "Invalid video id"


@dataclass(frozen=True)
class FetchFailure:
    kind: ClassVar[PipelineErrorKind] = "fetch_failure"

    reason: str
    status_code: int | None = None

    @property
    def message(self) -> str:
        return self.reason


@dataclass(frozen=True)
class Unavailable:
    kind: ClassVar[PipelineErrorKind] = "unavailable"

    reason: str

    @property
    def message(self) -> str:
        return self.reason


_PARSE_FAILURE_MESSAGES: dict[str, str] = {
    "metadata": "Failed to parse video data",
}


@dataclass(frozen=True)
class ParseFailure:
    kind: ClassVar[PipelineErrorKind] = "parse_failure"

    stage: str

    @property
    def message(self) -> str:
        return _PARSE_FAILURE_MESSAGES.get(self.stage, f"Failed to parse {self.stage}")


PipelineError = Union[InvalidIdentifier, FetchFailure, Unavailable, ParseFailure]
