"""Output surfaces: live overlay, reading view and export layout."""

from __future__ import annotations

from .export import ExportDocument, ExportParagraph, build_export, write_export
from .live import LiveOverlay, annotate_live
from .reading import ReadingView, reading_html, render_reading
from .runs import InlineRun, line_runs

__all__ = [
    "ExportDocument",
    "ExportParagraph",
    "InlineRun",
    "LiveOverlay",
    "ReadingView",
    "annotate_live",
    "build_export",
    "line_runs",
    "reading_html",
    "render_reading",
    "write_export",
]
