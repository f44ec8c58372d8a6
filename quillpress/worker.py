"""
Message-driven conversion worker.

Hosts that run conversions off their main thread talk to the worker with
small dict messages::

    {"type": "init", "id": 1}
    {"type": "convert", "id": 2, "data": {"file": b"...", "name": "a.xlsx", "quality": "medium"}}

and receive ``status``, ``init-complete``, ``convert-complete`` and ``error``
messages back. ``status`` messages are advisory progress text.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Optional

from .api import convert, detect_format
from .config import normalize_format
from .engine.fonts import get_environment

logger = logging.getLogger(__name__)

JobMessage = Dict[str, Any]


def status(message: str) -> JobMessage:
    return {"type": "status", "message": message}


class ConversionWorker:
    """Handles init and convert jobs; the backend environment is set up once."""

    def __init__(self):
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    def _ensure_environment(self) -> Iterator[JobMessage]:
        if self._ready:
            return
        yield status("Loading fonts...")
        get_environment()
        self._ready = True

    def handle(self, message: JobMessage) -> Iterator[JobMessage]:
        """Process one inbound message, yielding the outbound messages in order."""
        job_id: Optional[Any] = message.get("id")
        kind = message.get("type")
        try:
            if kind == "init":
                yield from self._ensure_environment()
                yield {"id": job_id, "type": "init-complete"}
            elif kind == "convert":
                yield from self._ensure_environment()
                yield from self._convert(job_id, message.get("data") or {})
            else:
                raise ValueError(f"Unknown message type: {kind!r}")
        except Exception as exc:
            logger.error(f"Job {job_id} failed: {exc}")
            logger.debug("Job failure details", exc_info=True)
            yield {"id": job_id, "type": "error", "error": str(exc) or type(exc).__name__}

    def _convert(self, job_id: Any, data: Dict[str, Any]) -> Iterator[JobMessage]:
        file_data = data.get("file")
        if file_data is None:
            raise ValueError("Convert message carries no file")
        file_bytes = bytes(file_data)

        fmt = data.get("format")
        fmt = normalize_format(fmt) if fmt else detect_format(data.get("name"), file_bytes)
        yield status(f"Converting {fmt.upper()} to PDF...")

        result = convert(file_bytes, fmt, quality=data.get("quality") or "medium")
        yield {"id": job_id, "type": "convert-complete", "result": result}
