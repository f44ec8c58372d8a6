"""Custom exceptions for quillpress."""

from typing import Optional


class QuillpressError(Exception):
    """Base exception for quillpress errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class FatalConversionError(QuillpressError):
    """Marker base for errors that must fail the whole conversion."""

    pass


class CorruptArchiveError(FatalConversionError):
    """Exception raised when the input is not a readable zip container."""

    pass


class FormatError(FatalConversionError):
    """Exception raised when a valid container holds no units of the expected kind."""

    pass


class UnsupportedFormatError(FatalConversionError):
    """Exception raised when no builder exists for the requested format."""

    pass


class GeometryError(FatalConversionError):
    """Exception raised for page geometry that leaves no usable area."""

    pass


class EntryNotFoundError(QuillpressError, KeyError):
    """Exception raised when an archive entry is requested but absent."""

    def __str__(self) -> str:
        return QuillpressError.__str__(self)


class UnitParseError(QuillpressError):
    """Exception raised when one structural unit (sheet, slide, paragraph) fails to parse."""

    pass


class ResourceResolutionError(QuillpressError):
    """Exception raised when a relationship id or shared string cannot be resolved."""

    pass


class FontUnavailable(QuillpressError):
    """Exception raised when the fallback font file cannot be staged."""

    pass


class LayoutError(QuillpressError):
    """Exception raised during layout calculation."""

    pass


class RenderingError(QuillpressError):
    """Exception raised during PDF rendering."""

    pass
