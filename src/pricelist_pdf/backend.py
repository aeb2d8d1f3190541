"""Render backends: the measurement/drawing capability set used by layout."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union
from xml.sax.saxutils import escape

from reportlab.lib.colors import Color
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph

from .errors import DocumentStateError, MissingMeasurementError
from .table_model import (
    CellAttributes, FontWeightClass, ImageCell, Rect, StyledText, TextAlignment
)

logger = logging.getLogger(__name__)

# Leading as a multiple of the largest font size in a paragraph
LINE_SPACING = 1.2

# Upper bound handed to Paragraph.wrap when only the width is constrained
MAX_MEASURE_HEIGHT = 10_000

ALIGNMENTS = {
    TextAlignment.LEFT: TA_LEFT,
    TextAlignment.CENTER: TA_CENTER,
    TextAlignment.RIGHT: TA_RIGHT,
    TextAlignment.JUSTIFY: TA_JUSTIFY,
}

BOLD_FONTS = {
    "Helvetica": "Helvetica-Bold",
    "Times-Roman": "Times-Bold",
    "Courier": "Courier-Bold",
}

ITALIC_FONTS = {
    "Helvetica": "Helvetica-Oblique",
    "Times-Roman": "Times-Italic",
    "Courier": "Courier-Oblique",
}


class RenderBackend(Protocol):
    """Measurement and mark-making primitives consumed by the layout core.

    Rectangles are in layout coordinates: origin at the top-left of the
    page, y growing downward.
    """

    # Smallest addressable vertical unit; measured heights are rounded up to it
    min_unit: float

    def begin_document(self, output_target: Any, metadata: Dict[str, str]) -> None: ...

    def begin_page(self, width: float, height: float) -> None: ...

    def measure_text(self, text: StyledText, max_width: float) -> float: ...

    def draw_frame(
        self,
        rect: Rect,
        line_width: Optional[float],
        line_color: Color,
        fill_color: Optional[Color] = None,
    ) -> None: ...

    def draw_text(self, text: StyledText, rect: Rect) -> None: ...

    def draw_image(self, image: Any, rect: Rect) -> None: ...

    def end_document(self) -> None: ...


def font_for_weight(font_family: str, weight: FontWeightClass) -> str:
    """Get the font name for a weight class of a base family."""
    if weight == FontWeightClass.BOLD:
        return BOLD_FONTS.get(font_family, f"{font_family}-Bold")
    if weight == FontWeightClass.ITALIC:
        return ITALIC_FONTS.get(font_family, f"{font_family}-Italic")
    return font_family


def truncate_text(text: str, max_width: float, font_name: str, font_size: float, canvas_obj: canvas.Canvas) -> str:
    """Truncate text to fit within max_width, adding '...' if needed."""
    if not text:
        return text

    text_width = canvas_obj.stringWidth(text, font_name, font_size)
    if text_width <= max_width:
        return text

    ellipsis = "..."
    ellipsis_width = canvas_obj.stringWidth(ellipsis, font_name, font_size)
    available_width = max_width - ellipsis_width

    if available_width <= 0:
        return ellipsis[:1]

    for i in range(len(text), 0, -1):
        truncated = text[:i]
        if canvas_obj.stringWidth(truncated, font_name, font_size) <= available_width:
            return truncated + ellipsis

    return ellipsis


def load_image_cell(path: Union[str, Path], attributes: Optional[CellAttributes] = None) -> ImageCell:
    """Build an ImageCell from an image file, reading its intrinsic size."""
    reader = ImageReader(str(path))
    width, height = reader.getSize()
    return ImageCell(
        image=reader,
        width=float(width),
        height=float(height),
        attributes=attributes or CellAttributes(),
    )


class ReportLabBackend:
    """RenderBackend drawing onto a ReportLab canvas."""

    min_unit = 1.0

    def __init__(self):
        self._canvas: Optional[canvas.Canvas] = None
        self._page_height = 0.0
        self._page_started = False

    @property
    def canvas(self) -> canvas.Canvas:
        if self._canvas is None:
            raise DocumentStateError("No document has been started")
        return self._canvas

    def begin_document(self, output_target: Any, metadata: Dict[str, str]) -> None:
        if isinstance(output_target, Path):
            output_target = str(output_target)
        self._canvas = canvas.Canvas(output_target)
        self._page_started = False

        if metadata.get("title"):
            self._canvas.setTitle(metadata["title"])
        if metadata.get("author"):
            self._canvas.setAuthor(metadata["author"])
        if metadata.get("subject"):
            self._canvas.setSubject(metadata["subject"])

    def begin_page(self, width: float, height: float) -> None:
        c = self.canvas
        # The first page is implicit on a fresh canvas
        if self._page_started:
            c.showPage()
        c.setPageSize((width, height))
        self._page_height = height
        self._page_started = True

    def end_document(self) -> None:
        self.canvas.save()
        self._canvas = None
        self._page_started = False

    def _to_pdf_y(self, rect: Rect) -> float:
        """Bottom edge of rect in PDF coordinates (origin bottom-left)."""
        return self._page_height - rect.y - rect.height

    def _check_font(self, font_name: str) -> None:
        try:
            pdfmetrics.getFont(font_name)
        except KeyError as e:
            raise MissingMeasurementError(f"Font not available: {font_name}") from e

    def _paragraph(self, text: StyledText) -> Paragraph:
        base_font = font_for_weight(text.font_family, FontWeightClass.NORMAL)
        self._check_font(base_font)
        base_size = max(run.size for run in text.runs)

        fragments = []
        for run in text.runs:
            font_name = font_for_weight(text.font_family, run.weight)
            self._check_font(font_name)
            body = escape(run.text).replace("\n", "<br/>")
            fragments.append(f'<font name="{font_name}" size="{run.size}">{body}</font>')

        style = ParagraphStyle(
            name="cell",
            fontName=base_font,
            fontSize=base_size,
            leading=base_size * LINE_SPACING,
            alignment=ALIGNMENTS[text.alignment],
        )
        return Paragraph("".join(fragments), style)

    def measure_text(self, text: StyledText, max_width: float) -> float:
        if text.is_empty:
            return 0.0
        if text.single_line:
            first = text.runs[0]
            self._check_font(font_for_weight(text.font_family, first.weight))
            return first.size * LINE_SPACING
        _, height = self._paragraph(text).wrap(max_width, MAX_MEASURE_HEIGHT)
        return height

    def draw_frame(
        self,
        rect: Rect,
        line_width: Optional[float],
        line_color: Color,
        fill_color: Optional[Color] = None,
    ) -> None:
        c = self.canvas
        y = self._to_pdf_y(rect)
        c.saveState()
        if fill_color is not None:
            c.setFillColor(fill_color)
            c.rect(rect.x, y, rect.width, rect.height, fill=True, stroke=False)
        if line_width is not None:
            c.setLineWidth(line_width)
            c.setStrokeColor(line_color)
            c.rect(rect.x, y, rect.width, rect.height, fill=False, stroke=True)
        c.restoreState()

    def draw_text(self, text: StyledText, rect: Rect) -> None:
        if text.is_empty:
            return
        c = self.canvas
        c.saveState()
        c.setFillColorRGB(0, 0, 0)
        if text.single_line:
            self._draw_single_line(text, rect)
        else:
            para = self._paragraph(text)
            _, height = para.wrap(rect.width, rect.height)
            para.drawOn(c, rect.x, self._page_height - rect.y - height)
        c.restoreState()

    def _draw_single_line(self, text: StyledText, rect: Rect) -> None:
        c = self.canvas
        first = text.runs[0]
        font_name = font_for_weight(text.font_family, first.weight)
        self._check_font(font_name)
        display_text = truncate_text(text.plain_text, rect.width, font_name, first.size, c)
        c.setFont(font_name, first.size)

        # Vertically centre using an approximate cap height
        baseline = self._to_pdf_y(rect) + (rect.height - first.size * 0.7) / 2
        if text.alignment == TextAlignment.CENTER:
            c.drawCentredString(rect.x + rect.width / 2, baseline, display_text)
        elif text.alignment == TextAlignment.RIGHT:
            c.drawRightString(rect.right, baseline, display_text)
        else:
            c.drawString(rect.x, baseline, display_text)

    def draw_image(self, image: Any, rect: Rect) -> None:
        self.canvas.drawImage(
            image,
            rect.x,
            self._to_pdf_y(rect),
            width=rect.width,
            height=rect.height,
            mask="auto",
        )
