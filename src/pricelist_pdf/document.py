"""Document lifecycle: begin, page title, tables, spacing, finish."""

import logging
from pathlib import Path
from typing import Any, Optional

from .backend import RenderBackend, ReportLabBackend
from .cell_preparer import CellPreparer
from .config import DocumentConfig
from .errors import DocumentStateError
from .layout_engine import PageFlowController, PageLayout
from .table_model import Rect, TableDataSource
from .table_renderer import TableLayoutEngine, TableLayoutResult

logger = logging.getLogger(__name__)


class TableDocument:
    """A paginated document made of tables and spacing blocks.

    Usage::

        with TableDocument(Path("out.pdf"), config) as doc:
            doc.draw_page_title()
            doc.draw_table(table)
    """

    def __init__(
        self,
        output_target: Any,
        config: Optional[DocumentConfig] = None,
        backend: Optional[RenderBackend] = None,
    ):
        self.output_target = output_target
        self.config = config or DocumentConfig()
        self.backend = backend or ReportLabBackend()
        self.layout = PageLayout.from_config(self.config)
        self.flow = PageFlowController(self.backend, self.layout)
        self.preparer = CellPreparer(self.backend, self.config)
        self._started = False
        self._finished = False

    @property
    def y(self) -> float:
        return self.flow.y

    @property
    def page_count(self) -> int:
        return self.flow.page_index + 1 if self._started else 0

    def _require_open(self):
        if not self._started:
            raise DocumentStateError("Document has not been started; call begin()")
        if self._finished:
            raise DocumentStateError("Document is already finished")

    def begin(self):
        """Open the output and start the first page."""
        if self._started:
            raise DocumentStateError("Document already started")
        self.backend.begin_document(self.output_target, dict(self.config.metadata))
        self.backend.begin_page(self.layout.page_width, self.layout.page_height)
        self.flow.begin()
        self._started = True
        logger.info(
            "Started document %s (%s %s, %.0fx%.0f pt)",
            self.output_target, self.config.page_size, self.config.orientation,
            self.layout.page_width, self.layout.page_height,
        )

    def finish(self):
        """Close the document and write it out."""
        self._require_open()
        self.backend.end_document()
        self._finished = True
        logger.info("Finished document %s: %d page(s)", self.output_target, self.page_count)

    def add_space(self, space: float) -> bool:
        """Add vertical space before the next block. Returns True on a page break."""
        self._require_open()
        return self.flow.reserve(space)

    def add_block_spacing(self) -> bool:
        return self.add_space(self.config.min_block_spacing)

    def draw_page_title(self, title: Optional[str] = None):
        """Draw a centred title across the content width, if one is set."""
        self._require_open()
        title = title or self.config.page_title
        if not title:
            return

        text = self.preparer.title_text(title)
        height = self.preparer.measure(text, self.layout.content_width)
        self.flow.ensure_space(height)

        rect = Rect(self.layout.margin_left, self.flow.y, self.layout.content_width, height)
        self.backend.draw_text(text, rect)

        self.flow.advance(height)
        self.add_block_spacing()

    def draw_table(self, table: TableDataSource) -> TableLayoutResult:
        """Lay out a table at the cursor with a fresh width cache."""
        self._require_open()
        engine = TableLayoutEngine(self.backend, self.config, self.flow)
        result = engine.layout(table)
        logger.debug(
            "Table laid out: %d rows placed, %d skipped, %d page break(s)",
            len(result.placements), len(result.skipped_rows), result.page_breaks,
        )
        return result

    def __enter__(self) -> "TableDocument":
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.finish()
        return False


def render_tables(
    output_path: Path,
    tables,
    config: Optional[DocumentConfig] = None,
    backend: Optional[RenderBackend] = None,
):
    """Render tables one after another into a single document.

    Returns the list of TableLayoutResults, one per table.
    """
    results = []
    with TableDocument(output_path, config, backend) as doc:
        doc.draw_page_title()
        for index, table in enumerate(tables):
            if index > 0:
                doc.add_block_spacing()
            results.append(doc.draw_table(table))
    return results
