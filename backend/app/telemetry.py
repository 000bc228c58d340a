from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

import structlog

# Attribute names that may carry raw upstream documents.
_REDACTED_ATTRIBUTE_TOKENS: tuple[str, ...] = ("body", "markup", "cookie")
# Error messages are copied from upstream pages and status lines.
_MAX_MESSAGE_LENGTH = 120

TelemetryValue = bool | int | float | str | None


class TelemetrySink(Protocol):
    def emit(self, *, event_name: str, attributes: Mapping[str, TelemetryValue]) -> None:
        ...


class NoOpTelemetrySink:
    def emit(self, *, event_name: str, attributes: Mapping[str, TelemetryValue]) -> None:
        _ = (event_name, attributes)


class StructuredLogTelemetrySink:
    def __init__(self) -> None:
        self._logger = structlog.get_logger("video_info.telemetry")

    def emit(self, *, event_name: str, attributes: Mapping[str, TelemetryValue]) -> None:
        self._logger.info("telemetry", telemetry_event=event_name, **attributes)


@dataclass(frozen=True)
class TelemetryClient:
    enabled: bool
    sink: TelemetrySink
    base_attributes: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def disabled(cls) -> TelemetryClient:
        return cls(enabled=False, sink=NoOpTelemetrySink())

    def bind(self, **attributes: Any) -> TelemetryClient:
        """Return a client that adds `attributes` to every emitted event."""
        merged = {**self.base_attributes, **attributes}
        return TelemetryClient(enabled=self.enabled, sink=self.sink, base_attributes=merged)

    def emit(self, event_name: str, **attributes: Any) -> None:
        if not self.enabled:
            return
        merged = {**self.base_attributes, **attributes}
        self.sink.emit(
            event_name=event_name,
            attributes={key: _telemetry_value(key, value) for key, value in merged.items()},
        )


def build_telemetry_client(*, enabled: bool, sink: Literal["none", "log"]) -> TelemetryClient:
    if not enabled or sink == "none":
        return TelemetryClient.disabled()
    return TelemetryClient(enabled=True, sink=StructuredLogTelemetrySink())


def _telemetry_value(key: str, value: Any) -> TelemetryValue:
    if any(token in key.lower() for token in _REDACTED_ATTRIBUTE_TOKENS):
        return "[redacted]"
    if value is None or isinstance(value, bool | int | float):
        return value
    if not isinstance(value, str):
        return type(value).__name__
    compact = " ".join(value.split())
    if len(compact) > _MAX_MESSAGE_LENGTH:
        return f"{compact[:_MAX_MESSAGE_LENGTH]}..."
    return compact
