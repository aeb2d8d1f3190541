"""Turns raw row cells into sized, ready-to-draw prepared cells.

Preparation is side-effect free apart from text measurement: it resolves
merges, widths, styled text and the row height, and hands the result to
the table renderer, which performs every draw call.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from .backend import RenderBackend
from .config import DocumentConfig
from .errors import InvalidMergeError, MalformedRowError
from .table_model import (
    Alignment, Cell, CellAttributes, Column, CustomCell, EmptyCell,
    FontSizeAbsolute, FontSizeRelative, FontWeight, FontWeightClass,
    ImageCell, Row, StyledText, TextAlignment, TextAttribute, TextCell, TextRun,
)


class CellKind(Enum):
    EMPTY = "empty"
    TEXT = "text"
    IMAGE = "image"
    CUSTOM = "custom"


@dataclass
class PreparedCell:
    """A cell resolved to its final width and drawing payload."""
    width: float  # sum of the spanned column widths
    kind: CellKind
    content: Any  # None, StyledText, ImageCell or the custom draw callback
    attributes: CellAttributes
    column_index: int
    span: int = 1

    def frame_width(self, line_width: float) -> float:
        """Width of the drawn frame; the line overlap is added once per cell."""
        return self.width + line_width


@dataclass
class PreparedRow:
    cells: List[PreparedCell]
    height: float


def _clip_range(start: int, end: Optional[int], length: int) -> Tuple[int, int]:
    start = max(0, min(start, length))
    end = length if end is None else max(start, min(end, length))
    return start, end


def build_styled_text(
    text: str,
    column_attributes: Sequence[TextAttribute],
    cell_attributes: Optional[Sequence[TextAttribute]],
    font_family: str,
    base_size: float,
) -> StyledText:
    """Apply column attributes, then cell attributes, to text.

    Later attributes overwrite earlier ones on overlapping ranges, so cell
    attributes win over column attributes.
    """
    attributes = list(column_attributes)
    if cell_attributes:
        attributes.extend(cell_attributes)

    length = len(text)
    weights = [FontWeightClass.NORMAL] * length
    sizes = [base_size] * length
    alignment = TextAlignment.CENTER

    for attribute in attributes:
        if isinstance(attribute, Alignment):
            alignment = attribute.value
            continue
        start, end = _clip_range(attribute.start, attribute.end, length)
        if isinstance(attribute, FontWeight):
            weights[start:end] = [attribute.value] * (end - start)
        elif isinstance(attribute, FontSizeAbsolute):
            sizes[start:end] = [attribute.value] * (end - start)
        elif isinstance(attribute, FontSizeRelative):
            sizes[start:end] = [base_size * attribute.value] * (end - start)
        else:
            raise TypeError(f"Unsupported text attribute: {type(attribute).__name__}")

    runs: List[TextRun] = []
    run_start = 0
    for i in range(1, length + 1):
        if i == length or weights[i] != weights[run_start] or sizes[i] != sizes[run_start]:
            runs.append(TextRun(text[run_start:i], weights[run_start], sizes[run_start]))
            run_start = i
    if not runs:
        runs.append(TextRun("", FontWeightClass.NORMAL, base_size))

    return StyledText(tuple(runs), alignment, font_family)


class CellPreparer:
    """Builds PreparedRows for a table's rows."""

    def __init__(self, backend: RenderBackend, config: DocumentConfig):
        self.backend = backend
        self.config = config

    @property
    def padding(self) -> float:
        return self.config.cell_padding

    def header_text(self, title: str) -> StyledText:
        """Column header: bold, centred, one truncated line."""
        return StyledText(
            (TextRun(title, FontWeightClass.BOLD, self.config.base_font_size),),
            TextAlignment.CENTER,
            self.config.font_family,
            single_line=True,
        )

    def section_text(self, title: str) -> StyledText:
        return StyledText(
            (TextRun(title, FontWeightClass.NORMAL, self.config.base_font_size),),
            TextAlignment.CENTER,
            self.config.font_family,
        )

    def title_text(self, title: str) -> StyledText:
        return StyledText(
            (TextRun(title, FontWeightClass.NORMAL, self.config.title_font_size),),
            TextAlignment.CENTER,
            self.config.font_family,
            single_line=True,
        )

    def measure(self, text: StyledText, max_width: float) -> float:
        """Measured text height rounded up to the backend's unit."""
        height = self.backend.measure_text(text, max_width)
        unit = self.backend.min_unit
        if unit > 0:
            height = math.ceil(height / unit) * unit
        return height

    def text_block_height(self, text: StyledText, width: float) -> float:
        """Height of a padded cell holding text at the given cell width."""
        return self.measure(text, width - 2 * self.padding) + 2 * self.padding

    def image_height(self, image: ImageCell, width: float) -> float:
        """Height of a padded cell fitting the image to the cell width."""
        if image.width <= 0 or image.height <= 0:
            return 2 * self.padding
        return image.height * (width - 2 * self.padding) / image.width + 2 * self.padding

    def _span_for(self, cell: Cell, column_index: int, column_count: int) -> int:
        merged = cell.attributes.merged_columns
        if merged is None:
            return 1
        if merged <= 0 or column_index + merged > column_count:
            raise InvalidMergeError(merged, column_index, column_count)
        return merged

    def prepare_cell(
        self, cell: Cell, column: Column, width: float, column_index: int, span: int
    ) -> Tuple[PreparedCell, float]:
        """Resolve one cell. Returns the prepared cell and its height demand."""
        if isinstance(cell, TextCell):
            styled = build_styled_text(
                cell.text,
                column.text_attributes,
                cell.text_attributes,
                self.config.font_family,
                self.config.base_font_size,
            )
            kind, content = CellKind.TEXT, styled
            height = self.text_block_height(styled, width)
        elif isinstance(cell, ImageCell):
            kind, content = CellKind.IMAGE, cell
            height = self.image_height(cell, width)
        elif isinstance(cell, CustomCell):
            kind, content = CellKind.CUSTOM, cell.draw
            height = 0.0
        elif isinstance(cell, EmptyCell):
            kind, content = CellKind.EMPTY, None
            height = 0.0
        else:
            raise TypeError(f"Unsupported cell type: {type(cell).__name__}")

        prepared = PreparedCell(
            width=width,
            kind=kind,
            content=content,
            attributes=cell.attributes,
            column_index=column_index,
            span=span,
        )
        return prepared, height

    def prepare_row(self, row: Row, columns: List[Column], widths: List[float]) -> PreparedRow:
        """Walk columns and cells in lockstep, merging spans, and size the row."""
        column_count = len(columns)
        if len(row.cells) != column_count:
            raise MalformedRowError(len(row.cells), column_count)

        cells: List[PreparedCell] = []
        row_height = 0.0
        index = 0
        while index < column_count:
            cell = row.cells[index]
            if cell is None:
                cell = EmptyCell()
            span = self._span_for(cell, index, column_count)
            width = sum(widths[index:index + span])

            prepared, height = self.prepare_cell(cell, columns[index], width, index, span)
            cells.append(prepared)
            row_height = max(row_height, height)
            index += span

        return PreparedRow(cells=cells, height=row_height)
