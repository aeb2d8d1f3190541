"""Lays out whole tables: headers, section headers, rows and page breaks."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .backend import RenderBackend
from .cell_preparer import CellKind, CellPreparer, PreparedCell, PreparedRow
from .column_widths import ColumnWidthResolver, validate_columns
from .config import DocumentConfig
from .errors import MalformedRowError
from .layout_engine import PageFlowController
from .table_model import CellAttributes, Column, ImageCell, Rect, TableDataSource

logger = logging.getLogger(__name__)


@dataclass
class RowDiagnostic:
    """A row skipped because its cell count did not match the columns."""
    section: int
    row: int
    cell_count: int
    column_count: int

    @property
    def message(self) -> str:
        return (f"Row {self.row} of section {self.section} has {self.cell_count} "
                f"cells, expected {self.column_count}")


@dataclass
class RowPlacement:
    """Where a row was drawn."""
    section: int
    row: int
    page_index: int
    frame: Rect


@dataclass
class TableLayoutResult:
    """Outcome of one table layout pass."""
    column_widths: List[float]
    placements: List[RowPlacement] = field(default_factory=list)
    skipped_rows: List[RowDiagnostic] = field(default_factory=list)
    page_breaks: int = 0

    @property
    def pages(self) -> List[int]:
        return sorted({placement.page_index for placement in self.placements})


class TableLayoutEngine:
    """Draws one table end-to-end through a render backend.

    Each call to layout() is an independent pass with its own column width
    cache. Rows are prepared (measured) first and drawn second.
    """

    def __init__(self, backend: RenderBackend, config: DocumentConfig, flow: PageFlowController):
        self.backend = backend
        self.config = config
        self.flow = flow
        self.preparer = CellPreparer(backend, config)

    @property
    def line_width(self) -> float:
        return self.config.frame_line_width

    @property
    def padding(self) -> float:
        return self.config.cell_padding

    @property
    def left(self) -> float:
        return self.flow.layout.margin_left

    def layout(self, table: TableDataSource) -> TableLayoutResult:
        """Lay out a table: column header, then each section's header and rows.

        Rows whose cell count does not match the columns are skipped and
        reported in the result. Merge and measurement errors abort the pass.
        """
        columns = table.columns
        validate_columns(columns)
        widths = ColumnWidthResolver(self.config.table_width).widths(columns)
        result = TableLayoutResult(column_widths=widths)
        start_page = self.flow.page_index

        self.flow.ensure_space(self.config.header_height)
        self._draw_column_header(columns, widths)

        last_section = table.section_count - 1
        for section in range(table.section_count):
            title = table.section_title(section)
            if title:
                self._draw_section_header(title, columns, widths)

            row_count = table.row_count(section)
            for row_index in range(row_count):
                row = table.row_at(row_index, section)
                try:
                    prepared = self.preparer.prepare_row(row, columns, widths)
                except MalformedRowError as e:
                    diagnostic = RowDiagnostic(section, row_index, e.cell_count, e.column_count)
                    logger.warning("Skipping row: %s", diagnostic.message)
                    result.skipped_rows.append(diagnostic)
                    continue

                is_last_row = section == last_section and row_index == row_count - 1
                link_height = table.link_with_next_block_height if is_last_row else None
                frame = self._draw_row(prepared, columns, widths, link_height)
                result.placements.append(
                    RowPlacement(section, row_index, self.flow.page_index, frame)
                )
                self.flow.advance(prepared.height - self.line_width)

        result.page_breaks = self.flow.page_index - start_page
        return result

    def _draw_column_header(self, columns: List[Column], widths: List[float]):
        """Draw the header row with column titles at the cursor."""
        height = self.config.header_height
        x = self.left
        y = self.flow.y
        for column, width in zip(columns, widths):
            frame = Rect(x, y, width + self.line_width, height)
            self.draw_frame(frame)
            self.backend.draw_text(
                self.preparer.header_text(column.title),
                frame.inset(self.padding, self.padding),
            )
            x += width

        self.flow.advance(height - self.line_width)

    def _draw_section_header(self, title: str, columns: List[Column], widths: List[float]):
        """Draw a full-width section title row, breaking the page if needed."""
        width = self.config.table_width + self.line_width
        text = self.preparer.section_text(title)
        height = self.preparer.text_block_height(text, width)

        if self.flow.ensure_space(height):
            self._draw_column_header(columns, widths)

        frame = Rect(self.left, self.flow.y, width, height)
        self.draw_frame(frame)
        self.backend.draw_text(text, frame.inset(self.padding, self.padding))

        self.flow.advance(height - self.line_width)

    def _draw_row(
        self,
        prepared: PreparedRow,
        columns: List[Column],
        widths: List[float],
        link_height: Optional[float],
    ) -> Rect:
        """Draw a prepared row and return its frame. The cursor is not advanced.

        With link_height set, the row only stays on this page if the linked
        block below it fits too.
        """
        required = prepared.height + (link_height or 0)
        if self.flow.ensure_space(required):
            self._draw_column_header(columns, widths)

        y = self.flow.y
        x = self.left
        for cell in prepared.cells:
            frame = Rect(x, y, cell.frame_width(self.line_width), prepared.height)
            self.draw_cell(cell, frame)
            x += cell.width

        return Rect(self.left, y, sum(widths) + self.line_width, prepared.height)

    def draw_frame(self, rect: Rect, attributes: Optional[CellAttributes] = None):
        """Stroke and/or fill a frame according to cell attributes."""
        attributes = attributes or CellAttributes()
        if attributes.no_frame:
            line_width = None
        elif attributes.frame_width is not None:
            line_width = attributes.frame_width
        else:
            line_width = self.line_width
        self.backend.draw_frame(rect, line_width, attributes.frame_color, attributes.fill_color)

    def draw_cell(self, cell: PreparedCell, frame: Rect):
        """Draw a cell frame, then its content on top."""
        self.draw_frame(frame, cell.attributes)

        if cell.kind == CellKind.TEXT:
            self.backend.draw_text(cell.content, frame.inset(self.padding, self.padding))
        elif cell.kind == CellKind.IMAGE:
            self.backend.draw_image(cell.content.image, self._fit_image(cell.content, frame))
        elif cell.kind == CellKind.CUSTOM:
            cell.content(frame)

    def _fit_image(self, image: ImageCell, frame: Rect) -> Rect:
        """Aspect-fit an image inside the padded frame, centred."""
        inner = frame.inset(self.padding, self.padding)
        if image.width <= 0 or image.height <= 0:
            return inner
        scale = min(inner.width / image.width, inner.height / image.height)
        width = image.width * scale
        height = image.height * scale
        return Rect(
            inner.x + (inner.width - width) / 2,
            inner.y + (inner.height - height) / 2,
            width,
            height,
        )
