"""Rendering package providing PDF export."""

from .pdf_renderer import PDFRenderer

__all__ = ["PDFRenderer"]
