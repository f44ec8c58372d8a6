"""
Font selection for layout and rendering.

A conversion uses exactly one :class:`FontRef`: either a caller-supplied
TrueType file registered with reportlab, or the built-in Helvetica faces.
Registration is process-wide and memoized per file path.
"""

from __future__ import annotations

import hashlib
import logging
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Literal, Optional, Union

from reportlab.pdfbase import pdfmetrics  # type: ignore
from reportlab.pdfbase.ttfonts import TTFont  # type: ignore

from ..exceptions import FontUnavailable

logger = logging.getLogger(__name__)

FontKind = Literal["custom", "base"]

BASE_FONT_NAME = "Helvetica"
BASE_BOLD_FONT_NAME = "Helvetica-Bold"


@dataclass(frozen=True, slots=True)
class FontRef:
    """Handle to a registered font; every text draw command carries one."""

    name: str
    bold_name: str
    kind: FontKind = "base"
    path: Optional[Path] = None

    def face(self, bold: bool = False) -> str:
        return self.bold_name if bold else self.name


BASE_FONT = FontRef(name=BASE_FONT_NAME, bold_name=BASE_BOLD_FONT_NAME, kind="base")


class BackendEnvironment:
    """Process-wide reportlab font state."""

    def __init__(self):
        self._lock = threading.Lock()
        self._custom: Dict[str, FontRef] = {}
        # Loading the AFM metrics up front keeps the first conversion from paying for it.
        for name in (BASE_FONT_NAME, BASE_BOLD_FONT_NAME):
            pdfmetrics.getFont(name)
        logger.debug("Backend environment initialized")

    @property
    def registered_fonts(self) -> List[str]:
        return list(pdfmetrics.getRegisteredFontNames())

    def register_font(self, path: Union[str, Path]) -> FontRef:
        """Register a TrueType file once and return its :class:`FontRef`."""
        font_path = Path(path).expanduser()
        key = str(font_path.resolve()) if font_path.exists() else str(font_path)
        with self._lock:
            cached = self._custom.get(key)
            if cached is not None:
                return cached

            if not font_path.is_file():
                raise FontUnavailable("Font file not found", details=str(font_path))

            stem = re.sub(r"[^A-Za-z0-9]+", "", font_path.stem) or "Font"
            digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:8]
            font_name = f"Quillpress-{stem}-{digest}"
            try:
                pdfmetrics.registerFont(TTFont(font_name, str(font_path)))
            except Exception as exc:
                # reportlab reads TrueType outlines only; CFF-flavoured OTF files end up here.
                raise FontUnavailable("Font file cannot be loaded", details=f"{font_path}: {exc}") from exc

            ref = FontRef(name=font_name, bold_name=font_name, kind="custom", path=font_path)
            self._custom[key] = ref
            logger.info(f"Registered font {font_name} from {font_path}")
            return ref


_environment: Optional[BackendEnvironment] = None
_environment_lock = threading.Lock()


def get_environment() -> BackendEnvironment:
    """Return the shared backend environment, creating it on first use."""
    global _environment
    if _environment is None:
        with _environment_lock:
            if _environment is None:
                _environment = BackendEnvironment()
    return _environment


def resolve_font(path: Optional[Union[str, Path]] = None) -> FontRef:
    """
    Pick the font for one conversion.

    A missing or unloadable file is not fatal: the failure is logged and the
    built-in Helvetica faces are used.
    """
    if not path:
        return BASE_FONT
    try:
        return get_environment().register_font(path)
    except FontUnavailable as exc:
        logger.warning(f"{exc}; falling back to {BASE_FONT_NAME}")
        return BASE_FONT
